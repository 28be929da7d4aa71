import argparse
import asyncio
from stringdesk.database import engine, Base

# Import all models to ensure they are registered in Base.metadata
from stringdesk.auth.models import User
from stringdesk.catalog.models import StringBrand, StringModel, RacquetBrand, RacquetModel
from stringdesk.clients.models import Client
from stringdesk.racquets.models import Racquet
from stringdesk.jobs.models import Job, JobStringingDetail
from stringdesk.inventory.models import StringInventoryItem

async def init_models(reset: bool = False):
    async with engine.begin() as conn:
        if reset:
            await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    print(f"Database tables created: {', '.join(sorted(Base.metadata.tables))}")
    await engine.dispose()

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create the StringDesk tables without running migrations.")
    parser.add_argument("--reset", action="store_true", help="drop every table first")
    args = parser.parse_args()
    asyncio.run(init_models(reset=args.reset))
