"""storage.py - the credential store and the movie-ownership store.

Both stores are thin wrappers around ``databases.Database`` and the tables in
models.py. Ownership is expressed only through ``user_id`` / ``watchlist_id``
columns; there are no cascades (see models.py), so:

* ``MovieStore.delete_watchlist`` leaves the watchlist's movie rows behind,
  still readable through ``get_watchlist_movies(watchlist_id)``;
* ``UserStore.delete_user`` leaves the user's saved movies and watchlists.
"""
import logging
from typing import Any, Dict, List, Optional

from databases import Database
from sqlalchemy import func, or_, select

from database import is_unique_violation
from errors import ConflictError
from models import saved_movies, user_watchlists, users, utcnow, watchlist_movies
from schemas import SavedMovie, User, UserWatchlist, WatchlistMovie

logger = logging.getLogger(__name__)


def _row(row) -> Dict[str, Any]:
    return dict(row._mapping)


class UserStore:
    """Persists user records; usernames and emails are unique."""

    USER_FIELDS = ('username', 'email', 'password', 'name', 'role', 'status')

    def __init__(self, database: Database, activities=None):
        self.database = database
        self.activities = activities

    async def get_user(self, user_id: int) -> Optional[User]:
        row = await self.database.fetch_one(users.select().where(users.c.id == user_id))
        return User.model_validate(_row(row)) if row else None

    async def get_user_by_email(self, email: str) -> Optional[User]:
        row = await self.database.fetch_one(users.select().where(users.c.email == email))
        return User.model_validate(_row(row)) if row else None

    async def get_user_by_username(self, username: str) -> Optional[User]:
        row = await self.database.fetch_one(users.select().where(users.c.username == username))
        return User.model_validate(_row(row)) if row else None

    async def create_user(self, username: str, email: str, password_hash: str,
                          name: Optional[str] = None, role: str = 'user', status: str = 'active') -> User:
        query = users.insert().values(
            username=username, email=email, password=password_hash, name=name,
            role=role, status=status, created_at=utcnow(),
        )
        try:
            user_id = await self.database.execute(query)
        except Exception as exc:
            if is_unique_violation(exc):
                raise ConflictError('User already exists') from exc
            raise
        user = await self.get_user(user_id)
        if self.activities is not None:
            await self.activities.create('New user registered', 'user_created', details=email, user_id=user.id)
        return user

    async def update_user(self, user_id: int, **fields) -> Optional[User]:
        """Merge the given fields into the user; ``None`` values are ignored."""
        current = await self.get_user(user_id)
        if current is None:
            return None
        changes = {k: v for k, v in fields.items() if k in self.USER_FIELDS and v is not None}
        if 'username' in changes and changes['username'] != current.username:
            if await self.get_user_by_username(changes['username']):
                raise ConflictError('Username already taken')
        if 'email' in changes and changes['email'] != current.email:
            if await self.get_user_by_email(changes['email']):
                raise ConflictError('User already exists with this email')
        if changes:
            try:
                await self.database.execute(users.update().where(users.c.id == user_id).values(**changes))
            except Exception as exc:
                if is_unique_violation(exc):
                    raise ConflictError('User already exists') from exc
                raise
        user = await self.get_user(user_id)
        if self.activities is not None:
            await self.activities.create('User updated', 'user_updated',
                                         details=f'User {user.username} was modified', user_id=user.id)
        return user

    async def delete_user(self, user_id: int) -> bool:
        """Hard delete. Saved movies and watchlists of the user are not removed."""
        user = await self.get_user(user_id)
        if user is None:
            return False
        await self.database.execute(users.delete().where(users.c.id == user_id))
        if self.activities is not None:
            await self.activities.create('User deleted', 'user_deleted',
                                         details=f'User {user.username} was deleted')
        return True

    async def list_users(self, limit: int = 50, offset: int = 0) -> List[User]:
        query = users.select().order_by(users.c.created_at.desc(), users.c.id.desc()).limit(limit).offset(offset)
        return [User.model_validate(_row(r)) for r in await self.database.fetch_all(query)]

    async def search_users(self, term: str) -> List[User]:
        pattern = f'%{term}%'
        query = (
            users.select()
            .where(or_(users.c.username.ilike(pattern), users.c.email.ilike(pattern)))
            .order_by(users.c.created_at.desc(), users.c.id.desc())
        )
        return [User.model_validate(_row(r)) for r in await self.database.fetch_all(query)]

    async def count_users(self) -> int:
        return await self.database.fetch_val(select(func.count()).select_from(users))


class MovieStore:
    """Saved movies (favorites / informal watchlist entries) and named watchlists."""

    def __init__(self, database: Database):
        self.database = database

    # ---- saved movies ----

    async def is_movie_saved(self, user_id: int, movie_id: str, list_type: str = 'favorites') -> bool:
        query = select(saved_movies.c.id).where(
            saved_movies.c.user_id == user_id,
            saved_movies.c.movie_id == movie_id,
            saved_movies.c.list_type == list_type,
        )
        return await self.database.fetch_one(query) is not None

    async def save_movie(self, user_id: int, movie_id: str, title: str, poster_path: Optional[str] = None,
                         release_date: Optional[str] = None, overview: Optional[str] = None,
                         rating: Optional[int] = None, list_type: str = 'favorites') -> SavedMovie:
        query = saved_movies.insert().values(
            user_id=user_id, movie_id=movie_id, title=title, poster_path=poster_path,
            release_date=release_date, overview=overview, rating=rating, list_type=list_type,
            created_at=utcnow(),
        )
        try:
            saved_id = await self.database.execute(query)
        except Exception as exc:
            # the unique constraint settles concurrent saves of the same movie
            if is_unique_violation(exc):
                raise ConflictError('Movie already saved') from exc
            raise
        row = await self.database.fetch_one(saved_movies.select().where(saved_movies.c.id == saved_id))
        return SavedMovie.model_validate(_row(row))

    async def get_saved_movies(self, user_id: int, list_type: str = 'favorites') -> List[SavedMovie]:
        query = (
            saved_movies.select()
            .where(saved_movies.c.user_id == user_id, saved_movies.c.list_type == list_type)
            .order_by(saved_movies.c.created_at.desc(), saved_movies.c.id.desc())
        )
        return [SavedMovie.model_validate(_row(r)) for r in await self.database.fetch_all(query)]

    async def remove_saved_movie(self, user_id: int, movie_id: str, list_type: str = 'favorites') -> bool:
        query = select(saved_movies.c.id).where(
            saved_movies.c.user_id == user_id,
            saved_movies.c.movie_id == movie_id,
            saved_movies.c.list_type == list_type,
        )
        row = await self.database.fetch_one(query)
        if row is None:
            return False
        await self.database.execute(saved_movies.delete().where(saved_movies.c.id == row['id']))
        return True

    # ---- watchlists ----

    async def create_watchlist(self, user_id: int, name: str, description: Optional[str] = None,
                               is_public: bool = False) -> UserWatchlist:
        query = user_watchlists.insert().values(
            user_id=user_id, name=name, description=description, is_public=is_public, created_at=utcnow(),
        )
        watchlist_id = await self.database.execute(query)
        return await self.get_watchlist(watchlist_id)

    async def get_user_watchlists(self, user_id: int) -> List[UserWatchlist]:
        query = (
            user_watchlists.select()
            .where(user_watchlists.c.user_id == user_id)
            .order_by(user_watchlists.c.created_at.desc(), user_watchlists.c.id.desc())
        )
        return [UserWatchlist.model_validate(_row(r)) for r in await self.database.fetch_all(query)]

    async def get_watchlist(self, watchlist_id: int) -> Optional[UserWatchlist]:
        row = await self.database.fetch_one(user_watchlists.select().where(user_watchlists.c.id == watchlist_id))
        return UserWatchlist.model_validate(_row(row)) if row else None

    async def delete_watchlist(self, watchlist_id: int, user_id: int) -> bool:
        """Delete a watchlist owned by *user_id*. Its movie rows are kept."""
        query = select(user_watchlists.c.id).where(
            user_watchlists.c.id == watchlist_id, user_watchlists.c.user_id == user_id,
        )
        if await self.database.fetch_one(query) is None:
            return False
        await self.database.execute(
            user_watchlists.delete().where(
                user_watchlists.c.id == watchlist_id, user_watchlists.c.user_id == user_id,
            )
        )
        return True

    async def add_movie_to_watchlist(self, watchlist_id: int, movie_id: str, title: str,
                                     poster_path: Optional[str] = None, release_date: Optional[str] = None,
                                     overview: Optional[str] = None) -> WatchlistMovie:
        """Add a movie to a watchlist. Callers check ownership of the watchlist first."""
        query = watchlist_movies.insert().values(
            watchlist_id=watchlist_id, movie_id=movie_id, title=title, poster_path=poster_path,
            release_date=release_date, overview=overview, added_at=utcnow(),
        )
        try:
            member_id = await self.database.execute(query)
        except Exception as exc:
            if is_unique_violation(exc):
                raise ConflictError('Movie already in watchlist') from exc
            raise
        row = await self.database.fetch_one(watchlist_movies.select().where(watchlist_movies.c.id == member_id))
        return WatchlistMovie.model_validate(_row(row))

    async def remove_movie_from_watchlist(self, watchlist_id: int, movie_id: str) -> bool:
        query = select(watchlist_movies.c.id).where(
            watchlist_movies.c.watchlist_id == watchlist_id, watchlist_movies.c.movie_id == movie_id,
        )
        row = await self.database.fetch_one(query)
        if row is None:
            return False
        await self.database.execute(watchlist_movies.delete().where(watchlist_movies.c.id == row['id']))
        return True

    async def get_watchlist_movies(self, watchlist_id: int) -> List[WatchlistMovie]:
        query = (
            watchlist_movies.select()
            .where(watchlist_movies.c.watchlist_id == watchlist_id)
            .order_by(watchlist_movies.c.added_at.desc(), watchlist_movies.c.id.desc())
        )
        return [WatchlistMovie.model_validate(_row(r)) for r in await self.database.fetch_all(query)]

    async def count_watchlist_movies(self, watchlist_id: int) -> int:
        query = select(func.count()).select_from(watchlist_movies).where(
            watchlist_movies.c.watchlist_id == watchlist_id
        )
        return await self.database.fetch_val(query)
