import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, status

from auth import get_hasher, get_tokens, get_users
from errors import AuthenticationError, ConflictError
from schemas import AuthOut, LoginIn, RegisterIn, UserSummary, parse_body
from security import PasswordHasher, TokenService
from storage import UserStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix='/api/auth', tags=['auth'])


def _auth_response(tokens: TokenService, user) -> AuthOut:
    return AuthOut(
        token=tokens.issue(user.id, user.email),
        user=UserSummary(id=user.id, email=user.email, username=user.username),
    )


@router.post('/register', response_model=AuthOut, status_code=status.HTTP_201_CREATED)
async def register(payload: Any = Body(default=None),
                   users: UserStore = Depends(get_users),
                   tokens: TokenService = Depends(get_tokens),
                   hasher: PasswordHasher = Depends(get_hasher)):
    data = parse_body(RegisterIn, payload, 'Invalid registration data')
    if await users.get_user_by_email(data.email):
        raise ConflictError('User already exists with this email')
    if await users.get_user_by_username(data.username):
        raise ConflictError('Username already taken')
    user = await users.create_user(data.username, data.email, hasher.hash(data.password), name=data.name)
    logger.info('registered user %s (id=%s)', user.username, user.id)
    return _auth_response(tokens, user)


@router.post('/login', response_model=AuthOut)
async def login(payload: Any = Body(default=None),
                users: UserStore = Depends(get_users),
                tokens: TokenService = Depends(get_tokens),
                hasher: PasswordHasher = Depends(get_hasher)):
    data = parse_body(LoginIn, payload, 'Invalid login data')
    user = await users.get_user_by_email(data.email)
    if not user or not hasher.verify(data.password, user.password):
        logger.info('failed login for %s', data.email)
        raise AuthenticationError('Invalid email or password')
    return _auth_response(tokens, user)
