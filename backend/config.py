"""config.py - process settings, loaded once at startup from the environment / .env."""
import os
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel

from errors import ConfigurationError

DEFAULT_SECRET = 'change_this'


class Settings(BaseModel):
    database_url: str = 'sqlite+aiosqlite:///./movieapp.db'
    tmdb_api_key: Optional[str] = None
    tmdb_base_url: str = 'https://api.themoviedb.org/3'
    jwt_secret: str = DEFAULT_SECRET
    jwt_algorithm: str = 'HS256'
    token_expire_days: int = 7
    bcrypt_rounds: int = 10
    port: int = 8000
    environment: str = 'development'
    allowed_origins: List[str] = ['http://localhost:3000', 'http://localhost:5173']
    log_level: str = 'INFO'
    admin_username: Optional[str] = None
    admin_email: Optional[str] = None
    admin_password: Optional[str] = None

    @property
    def is_production(self) -> bool:
        return self.environment == 'production'


def load_settings() -> Settings:
    load_dotenv()
    environment = os.getenv('APP_ENV') or os.getenv('NODE_ENV') or 'development'
    secret = os.getenv('JWT_SECRET')
    if not secret and environment == 'production':
        raise ConfigurationError('JWT_SECRET must be set in production')
    origins = os.getenv('ALLOWED_ORIGINS')
    values = {
        'database_url': os.getenv('DATABASE_URL', Settings.model_fields['database_url'].default),
        'tmdb_api_key': os.getenv('TMDB_API_KEY') or None,
        'tmdb_base_url': os.getenv('TMDB_BASE_URL', Settings.model_fields['tmdb_base_url'].default),
        'jwt_secret': secret or DEFAULT_SECRET,
        'token_expire_days': int(os.getenv('TOKEN_EXPIRE_DAYS', '7')),
        'bcrypt_rounds': int(os.getenv('BCRYPT_ROUNDS', '10')),
        'port': int(os.getenv('PORT', '8000')),
        'environment': environment,
        'log_level': os.getenv('LOG_LEVEL', 'INFO'),
        'admin_username': os.getenv('ADMIN_USERNAME', 'admin'),
        'admin_email': os.getenv('ADMIN_EMAIL') or None,
        'admin_password': os.getenv('ADMIN_PASSWORD') or None,
    }
    if origins:
        values['allowed_origins'] = [o.strip() for o in origins.split(',') if o.strip()]
    return Settings(**values)
