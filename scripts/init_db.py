"""Create all pubwon tables in the configured database.

Reads PUBWON_DATABASE_URL from the environment (or ``.env`` at the repo
root). Intended for local development; existing tables are left alone.
"""

import asyncio
import os
import sys
from pathlib import Path

# Add project root to path
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from dotenv import load_dotenv

load_dotenv(ROOT / ".env")

from sqlalchemy import text
from sqlalchemy.ext.asyncio import create_async_engine

import pubwon.models  # noqa: F401  registers every table on Base.metadata
from pubwon.core.database import Base


async def main() -> None:
    url = os.environ.get("PUBWON_DATABASE_URL", "postgresql+asyncpg://localhost/pubwon")
    engine = create_async_engine(url)
    async with engine.begin() as conn:
        # gen_random_uuid() is built in from PostgreSQL 13; older servers need pgcrypto
        await conn.execute(text("CREATE EXTENSION IF NOT EXISTS pgcrypto"))
        await conn.run_sync(Base.metadata.create_all)
    await engine.dispose()
    print(f"created {len(Base.metadata.tables)} tables")


if __name__ == "__main__":
    asyncio.run(main())
