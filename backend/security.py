"""security.py - password hashing (passlib/bcrypt) and the bearer token service (python-jose)."""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from errors import InvalidTokenError


class PasswordHasher:
    def __init__(self, rounds: int = 10):
        self.pwd_context = CryptContext(schemes=['bcrypt'], deprecated='auto', bcrypt__rounds=rounds)

    def hash(self, password: str) -> str:
        return self.pwd_context.hash(password)

    def verify(self, plain_password: str, hashed_password: str) -> bool:
        return self.pwd_context.verify(plain_password, hashed_password)


@dataclass(frozen=True)
class TokenClaims:
    user_id: int
    email: str


class TokenService:
    """Issues and verifies signed, time-limited bearer tokens.

    Tokens are stateless: there is no revocation list, so a token stays valid
    for its whole lifetime even if the password changes or the account is
    deleted. ``verify`` does not check that the user still exists.
    """

    def __init__(self, secret: str, algorithm: str = 'HS256', expires: timedelta = timedelta(days=7)):
        self.secret = secret
        self.algorithm = algorithm
        self.expires = expires

    def issue(self, user_id: int, email: str, now: Optional[datetime] = None) -> str:
        issued = now or datetime.now(timezone.utc)
        to_encode = {
            'userId': user_id,
            'email': email,
            'iat': issued,
            'exp': issued + self.expires,
        }
        return jwt.encode(to_encode, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenClaims:
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except JWTError:
            raise InvalidTokenError('Invalid token')
        user_id = payload.get('userId')
        email = payload.get('email')
        if not isinstance(user_id, int) or email is None:
            raise InvalidTokenError('Invalid token')
        return TokenClaims(user_id=user_id, email=email)
