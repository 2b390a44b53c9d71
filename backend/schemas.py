"""schemas.py - request and response contracts.

Field names are snake_case in Python and camelCase on the wire.
"""
from datetime import datetime
from typing import Any, List, Literal, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from errors import ValidationError

ListType = Literal['favorites', 'watchlist']
Role = Literal['admin', 'editor', 'user']
Status = Literal['active', 'pending', 'inactive']
ActivityType = Literal['user_created', 'user_updated', 'user_deleted']


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


def field_errors(exc: PydanticValidationError) -> List[dict]:
    return [
        {'path': '.'.join(str(p) for p in err['loc']), 'message': err['msg']}
        for err in exc.errors()
    ]


M = TypeVar('M', bound=BaseModel)


def parse_body(model: Type[M], payload: Any, message: str) -> M:
    """Validate a JSON body against *model*; raise ValidationError(message) with field errors."""
    try:
        return model.model_validate(payload)
    except PydanticValidationError as exc:
        raise ValidationError(message, errors=field_errors(exc))


# ---- requests ----

class RegisterIn(CamelModel):
    username: str = Field(min_length=3)
    email: EmailStr
    password: str = Field(min_length=6)
    name: Optional[str] = None


class LoginIn(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1)


class SaveMovieIn(CamelModel):
    movie_id: str = Field(min_length=1)
    title: str = Field(min_length=1)
    poster_path: Optional[str] = None
    release_date: Optional[str] = None
    overview: Optional[str] = None
    rating: Optional[int] = Field(default=None, ge=1, le=10)
    list_type: ListType = 'favorites'


class CreateWatchlistIn(CamelModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    is_public: bool = False


class AddToWatchlistIn(CamelModel):
    movie_id: str = Field(min_length=1)
    title: str = Field(min_length=1)
    poster_path: Optional[str] = None
    release_date: Optional[str] = None
    overview: Optional[str] = None


class CreateUserIn(RegisterIn):
    role: Role = 'user'
    status: Status = 'active'


class UpdateUserIn(CamelModel):
    username: Optional[str] = Field(default=None, min_length=3)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(default=None, min_length=6)
    name: Optional[str] = None
    role: Optional[Role] = None
    status: Optional[Status] = None


# ---- stored entities ----

class User(CamelModel):
    id: int
    username: str
    email: str
    password: str = Field(exclude=True, repr=False)
    name: Optional[str] = None
    role: str = 'user'
    status: str = 'active'
    created_at: datetime


class SavedMovie(CamelModel):
    id: int
    user_id: int
    movie_id: str
    title: str
    poster_path: Optional[str] = None
    release_date: Optional[str] = None
    overview: Optional[str] = None
    rating: Optional[int] = None
    list_type: str = 'favorites'
    created_at: datetime


class UserWatchlist(CamelModel):
    id: int
    user_id: int
    name: str
    description: Optional[str] = None
    is_public: bool = False
    created_at: datetime


class WatchlistMovie(CamelModel):
    id: int
    watchlist_id: int
    movie_id: str
    title: str
    poster_path: Optional[str] = None
    release_date: Optional[str] = None
    overview: Optional[str] = None
    added_at: datetime


class Activity(CamelModel):
    id: int
    message: str
    details: Optional[str] = None
    type: ActivityType
    user_id: Optional[int] = None
    created_at: datetime


class SystemStats(CamelModel):
    id: int
    total_users: int
    api_requests: int
    collections: int
    uptime: str
    cpu_usage: int
    memory_usage: int
    storage_usage: int
    updated_at: datetime


# ---- responses ----

class UserSummary(CamelModel):
    id: int
    email: str
    username: str


class AuthOut(CamelModel):
    token: str
    user: UserSummary


class UserOut(CamelModel):
    id: int
    username: str
    email: str
    name: Optional[str] = None
    role: str
    status: str
    created_at: datetime


class ProfileUser(CamelModel):
    id: int
    username: str
    email: str
    name: Optional[str] = None
    created_at: datetime


class WatchlistWithCount(UserWatchlist):
    movie_count: int


class WatchlistDetail(UserWatchlist):
    movies: List[WatchlistMovie]


class ProfileStats(CamelModel):
    favorite_count: int
    watchlist_count: int


class ProfileOut(CamelModel):
    user: ProfileUser
    favorites: List[SavedMovie]
    watchlists: List[WatchlistWithCount]
    stats: ProfileStats


class MessageOut(BaseModel):
    message: str
