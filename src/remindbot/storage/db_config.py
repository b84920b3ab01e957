import os

import aiosqlite

from remindbot.logger import logger

_SCHEMA_V1 = """
CREATE TABLE IF NOT EXISTS reminders (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    chat_id TEXT,
    message TEXT,
    day_of_week TEXT,
    time TEXT,
    recurring TEXT
);
"""

_SCHEMA_V2 = """
CREATE INDEX IF NOT EXISTS idx_reminders_due ON reminders (day_of_week, time);
CREATE INDEX IF NOT EXISTS idx_reminders_chat ON reminders (chat_id);
"""

SCHEMA_VERSION = 2


async def init_db(db_path: str) -> aiosqlite.Connection:
    """Open the database at `db_path` and bring its schema up to date."""
    db_dir = os.path.dirname(db_path)
    if db_dir and not os.path.exists(db_dir):
        os.makedirs(db_dir, exist_ok=True)
    conn = await aiosqlite.connect(db_path)

    async with conn.execute("PRAGMA user_version") as cursor:
        row = await cursor.fetchone()
        user_version = row[0]

    if user_version < 1:
        await conn.executescript(_SCHEMA_V1)
        await conn.execute("PRAGMA user_version = 1")

    if user_version < 2:
        await conn.executescript(_SCHEMA_V2)
        await conn.execute("PRAGMA user_version = 2")

    # Further migrations go here
    await conn.commit()
    if user_version < SCHEMA_VERSION:
        logger.info(f"Database schema upgraded: v{user_version} -> v{SCHEMA_VERSION} ({db_path})")
    return conn


__all__ = ["init_db", "SCHEMA_VERSION"]
