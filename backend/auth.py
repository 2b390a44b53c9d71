"""auth.py - request authentication.

Every protected route depends on ``get_current_user``:

* no bearer token                     -> 401 "Access token required"
* token fails signature/expiry checks -> 403 "Invalid token"
* token valid, user id unknown        -> 401 "Invalid token"
* otherwise the user is attached to ``request.state.user``
"""
import logging
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from catalog import CatalogClient
from errors import AuthenticationError, AuthorizationError
from schemas import User
from security import PasswordHasher, TokenService
from storage import MovieStore, UserStore

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_users(request: Request) -> UserStore:
    return request.app.state.users


def get_movies(request: Request) -> MovieStore:
    return request.app.state.movies


def get_tokens(request: Request) -> TokenService:
    return request.app.state.tokens


def get_hasher(request: Request) -> PasswordHasher:
    return request.app.state.hasher


def get_catalog(request: Request) -> CatalogClient:
    return request.app.state.catalog


async def _resolve(request: Request, token: str) -> User:
    claims = request.app.state.tokens.verify(token)
    user = await request.app.state.users.get_user(claims.user_id)
    if user is None:
        logger.info('token for unknown user id %s rejected', claims.user_id)
        raise AuthenticationError('Invalid token')
    request.state.user = user
    return user


async def get_current_user(request: Request,
                           credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)) -> User:
    if credentials is None or not credentials.credentials:
        raise AuthenticationError('Access token required')
    return await _resolve(request, credentials.credentials)


async def get_optional_user(request: Request,
                            credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)) -> Optional[User]:
    """Like get_current_user, but anonymous requests get ``None`` instead of a 401."""
    if credentials is None or not credentials.credentials:
        return None
    return await _resolve(request, credentials.credentials)


async def require_admin(user: User = Depends(get_current_user)) -> User:
    if user.role != 'admin':
        raise AuthorizationError('Admin access required')
    return user
