"""admin_storage.py - activity log and dashboard stats for the admin surface.

``SystemStatsStore`` is mock data: apart from the user count, every number it
writes is random and measures nothing.
"""
import random
from typing import List, Optional

from databases import Database
from sqlalchemy import func, select

from models import activities, system_stats, users, utcnow
from schemas import Activity, SystemStats


class ActivityStore:
    """Append-only log of user-management events."""

    def __init__(self, database: Database):
        self.database = database

    async def create(self, message: str, type: str, details: Optional[str] = None,
                     user_id: Optional[int] = None) -> Activity:
        query = activities.insert().values(
            message=message, details=details, type=type, user_id=user_id, created_at=utcnow(),
        )
        activity_id = await self.database.execute(query)
        row = await self.database.fetch_one(activities.select().where(activities.c.id == activity_id))
        return Activity.model_validate(dict(row._mapping))

    async def recent(self, limit: int = 10) -> List[Activity]:
        query = activities.select().order_by(activities.c.created_at.desc(), activities.c.id.desc()).limit(limit)
        return [Activity.model_validate(dict(r._mapping)) for r in await self.database.fetch_all(query)]


class SystemStatsStore:
    COLLECTIONS = 24
    UPTIME = '99.9%'

    def __init__(self, database: Database, rng: Optional[random.Random] = None):
        self.database = database
        self.rng = rng or random.Random()

    async def get_latest(self) -> Optional[SystemStats]:
        query = system_stats.select().order_by(system_stats.c.updated_at.desc(), system_stats.c.id.desc()).limit(1)
        row = await self.database.fetch_one(query)
        return SystemStats.model_validate(dict(row._mapping)) if row else None

    async def refresh(self) -> SystemStats:
        """Insert and return a new snapshot."""
        total_users = await self.database.fetch_val(select(func.count()).select_from(users))
        values = {
            'total_users': total_users,
            'api_requests': self.rng.randrange(40000, 90000),
            'collections': self.COLLECTIONS,
            'uptime': self.UPTIME,
            'cpu_usage': self.rng.randrange(10, 40),
            'memory_usage': self.rng.randrange(50, 90),
            'storage_usage': self.rng.randrange(30, 60),
            'updated_at': utcnow(),
        }
        stats_id = await self.database.execute(system_stats.insert().values(**values))
        row = await self.database.fetch_one(system_stats.select().where(system_stats.c.id == stats_id))
        return SystemStats.model_validate(dict(row._mapping))
