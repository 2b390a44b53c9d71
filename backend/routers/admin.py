"""Admin dashboard endpoints: user management, activity feed and (mock) system stats."""
import logging
from typing import Any, List, Optional

from fastapi import APIRouter, Body, Depends, Path, Query, Request, status

from auth import get_hasher, get_users, require_admin
from errors import ConflictError, NotFoundError
from models import MAX_ID
from schemas import Activity, CreateUserIn, MessageOut, SystemStats, UpdateUserIn, User, UserOut, parse_body
from security import PasswordHasher
from storage import UserStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix='/api', tags=['admin'], dependencies=[Depends(require_admin)])


@router.get('/users', response_model=List[UserOut])
async def list_users(page: int = Query(1, ge=1), limit: int = Query(10, ge=1, le=100),
                     search: Optional[str] = None, users: UserStore = Depends(get_users)):
    if search:
        return await users.search_users(search)
    return await users.list_users(limit=limit, offset=(page - 1) * limit)


@router.post('/users', response_model=UserOut, status_code=status.HTTP_201_CREATED)
async def create_user(payload: Any = Body(default=None),
                      users: UserStore = Depends(get_users),
                      hasher: PasswordHasher = Depends(get_hasher),
                      admin: User = Depends(require_admin)):
    data = parse_body(CreateUserIn, payload, 'Invalid user data')
    if await users.get_user_by_email(data.email):
        raise ConflictError('User already exists with this email')
    if await users.get_user_by_username(data.username):
        raise ConflictError('Username already taken')
    user = await users.create_user(data.username, data.email, hasher.hash(data.password),
                                   name=data.name, role=data.role, status=data.status)
    logger.info('admin %s created user %s', admin.username, user.username)
    return user


@router.get('/users/{user_id}', response_model=UserOut)
async def get_user(user_id: int = Path(ge=-MAX_ID, le=MAX_ID), users: UserStore = Depends(get_users)):
    user = await users.get_user(user_id)
    if user is None:
        raise NotFoundError('User not found')
    return user


# both verbs merge the given fields
@router.api_route('/users/{user_id}', methods=['PUT', 'PATCH'], response_model=UserOut)
async def update_user(user_id: int = Path(ge=-MAX_ID, le=MAX_ID), payload: Any = Body(default=None),
                      users: UserStore = Depends(get_users),
                      hasher: PasswordHasher = Depends(get_hasher)):
    data = parse_body(UpdateUserIn, payload, 'Invalid user data')
    changes = data.model_dump(exclude_unset=True)
    if changes.get('password'):
        changes['password'] = hasher.hash(changes['password'])
    user = await users.update_user(user_id, **changes)
    if user is None:
        raise NotFoundError('User not found')
    return user


@router.delete('/users/{user_id}', response_model=MessageOut)
async def delete_user(user_id: int = Path(ge=-MAX_ID, le=MAX_ID), users: UserStore = Depends(get_users),
                      admin: User = Depends(require_admin)):
    if not await users.delete_user(user_id):
        raise NotFoundError('User not found')
    logger.info('admin %s deleted user id=%s', admin.username, user_id)
    return {'message': 'User deleted successfully'}


@router.get('/activities', response_model=List[Activity])
async def recent_activities(request: Request, limit: int = Query(10, ge=1, le=100)):
    return await request.app.state.activities.recent(limit)


@router.get('/stats', response_model=SystemStats)
async def get_stats(request: Request):
    stats_store = request.app.state.stats
    stats = await stats_store.get_latest()
    if stats is None:
        stats = await stats_store.refresh()
    return stats


@router.post('/stats/refresh', response_model=SystemStats)
async def refresh_stats(request: Request):
    return await request.app.state.stats.refresh()
