"""models.py - SQLAlchemy table definitions.

There are deliberately no foreign keys and no cascades: deleting a watchlist
leaves its ``watchlist_movies`` rows behind, and deleting a user leaves that
user's saved movies, watchlists and activities. Duplicate saves and duplicate
watchlist membership are rejected by unique constraints.
"""
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Integer, String, Table, Text, UniqueConstraint

from database import metadata


def utcnow():
    # naive UTC, the columns are `timestamp without time zone`
    return datetime.now(timezone.utc).replace(tzinfo=None)


# largest value a 64-bit INTEGER / BIGINT id column holds
MAX_ID = 2 ** 63 - 1

LIST_TYPES = ('favorites', 'watchlist')
ROLES = ('admin', 'editor', 'user')
STATUSES = ('active', 'pending', 'inactive')
ACTIVITY_TYPES = ('user_created', 'user_updated', 'user_deleted')

users = Table(
    'users', metadata,
    Column('id', Integer, primary_key=True),
    Column('username', String, unique=True, index=True, nullable=False),
    Column('email', String, unique=True, index=True, nullable=False),
    Column('password', String, nullable=False),
    Column('name', String, nullable=True),
    Column('role', String, nullable=False, default='user'),
    Column('status', String, nullable=False, default='active'),
    Column('created_at', DateTime, nullable=False, default=utcnow),
)

saved_movies = Table(
    'saved_movies', metadata,
    Column('id', Integer, primary_key=True),
    Column('user_id', Integer, index=True, nullable=False),
    Column('movie_id', String, nullable=False),  # TMDB id
    Column('title', String, nullable=False),
    Column('poster_path', String, nullable=True),
    Column('release_date', String, nullable=True),
    Column('overview', Text, nullable=True),
    Column('rating', Integer, nullable=True),  # personal rating 1-10
    Column('list_type', String, nullable=False, default='favorites'),
    Column('created_at', DateTime, nullable=False, default=utcnow),
    UniqueConstraint('user_id', 'movie_id', 'list_type', name='uq_saved_movies_user_movie_list'),
)

user_watchlists = Table(
    'user_watchlists', metadata,
    Column('id', Integer, primary_key=True),
    Column('user_id', Integer, index=True, nullable=False),
    Column('name', String, nullable=False),
    Column('description', Text, nullable=True),
    Column('is_public', Boolean, nullable=False, default=False),
    Column('created_at', DateTime, nullable=False, default=utcnow),
)

watchlist_movies = Table(
    'watchlist_movies', metadata,
    Column('id', Integer, primary_key=True),
    Column('watchlist_id', Integer, index=True, nullable=False),
    Column('movie_id', String, nullable=False),
    Column('title', String, nullable=False),
    Column('poster_path', String, nullable=True),
    Column('release_date', String, nullable=True),
    Column('overview', Text, nullable=True),
    Column('added_at', DateTime, nullable=False, default=utcnow),
    UniqueConstraint('watchlist_id', 'movie_id', name='uq_watchlist_movies_watchlist_movie'),
)

activities = Table(
    'activities', metadata,
    Column('id', Integer, primary_key=True),
    Column('message', String, nullable=False),
    Column('details', Text, nullable=True),
    Column('type', String, nullable=False),
    Column('user_id', Integer, nullable=True),
    Column('created_at', DateTime, nullable=False, default=utcnow),
)

# synthetic dashboard numbers, see admin_storage.SystemStatsStore
system_stats = Table(
    'system_stats', metadata,
    Column('id', Integer, primary_key=True),
    Column('total_users', Integer, nullable=False),
    Column('api_requests', Integer, nullable=False),
    Column('collections', Integer, nullable=False),
    Column('uptime', String, nullable=False),
    Column('cpu_usage', Integer, nullable=False),
    Column('memory_usage', Integer, nullable=False),
    Column('storage_usage', Integer, nullable=False),
    Column('updated_at', DateTime, nullable=False, default=utcnow),
)
