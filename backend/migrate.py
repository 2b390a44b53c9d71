import asyncio

from config import load_settings
from database import create_tables


async def main():
    settings = load_settings()
    await create_tables(settings.database_url)
    print("Tables created successfully!")

if __name__ == "__main__":
    asyncio.run(main())
