import logging
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn

from admin_storage import ActivityStore, SystemStatsStore
from catalog import CatalogClient
from config import Settings, load_settings
from database import create_tables, make_database
from errors import AppError, InternalError
from routers import accounts, admin, movies, profile, watchlists
from security import PasswordHasher, TokenService
from storage import MovieStore, UserStore

logger = logging.getLogger(__name__)


async def app_error_handler(request: Request, exc: AppError):
    body = {'message': exc.message}
    if exc.errors:
        body['errors'] = exc.errors
    return JSONResponse(status_code=exc.status_code, content=body)


async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = [
        {'path': '.'.join(str(p) for p in err['loc'] if p not in ('body', 'query', 'path')), 'message': err['msg']}
        for err in exc.errors()
    ]
    return JSONResponse(status_code=400, content={'message': 'Invalid request', 'errors': errors})


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception('unhandled error on %s %s', request.method, request.url.path)
    return await app_error_handler(request, InternalError('Internal server error'))


async def seed_admin(settings: Settings, users: UserStore, hasher: PasswordHasher):
    if not (settings.admin_email and settings.admin_password):
        return
    if await users.get_user_by_email(settings.admin_email):
        return
    await users.create_user(settings.admin_username or 'admin', settings.admin_email,
                            hasher.hash(settings.admin_password), role='admin')
    logger.warning("Created admin user '%s' from ADMIN_EMAIL/ADMIN_PASSWORD.", settings.admin_email)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or load_settings()
    logging.basicConfig(level=settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await create_tables(settings.database_url)
        await database.connect()
        await seed_admin(settings, app.state.users, app.state.hasher)
        if not settings.tmdb_api_key:
            logger.warning('TMDB_API_KEY is not set; catalog search will fail')
        yield
        await database.disconnect()

    app = FastAPI(title='Movie App Backend', lifespan=lifespan)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=['*'],
        allow_headers=['*'],
    )

    database = make_database(settings.database_url)
    activities = ActivityStore(database)
    app.state.settings = settings
    app.state.database = database
    app.state.activities = activities
    app.state.stats = SystemStatsStore(database)
    app.state.users = UserStore(database, activities=activities)
    app.state.movies = MovieStore(database)
    app.state.hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
    app.state.tokens = TokenService(settings.jwt_secret, algorithm=settings.jwt_algorithm,
                                    expires=timedelta(days=settings.token_expire_days))
    app.state.catalog = CatalogClient(settings.tmdb_api_key, base_url=settings.tmdb_base_url)

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    @app.get('/api/health')
    async def health():
        return {'status': 'ok'}

    app.include_router(accounts.router)
    app.include_router(movies.router)
    app.include_router(profile.router)
    app.include_router(watchlists.router)
    app.include_router(admin.router)
    return app


def main():
    settings = load_settings()
    uvicorn.run(create_app(settings), host='0.0.0.0', port=settings.port)


if __name__ == '__main__':
    main()
