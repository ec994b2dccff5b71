#!/usr/bin/env python3
"""
Covenant Bot Entry Point
========================

Loads the environment, validates configuration, takes the single
instance lock and runs the bot until interrupted.
"""

import asyncio
import fcntl
import os
import sys
from pathlib import Path
from typing import IO, Optional

import discord
from dotenv import load_dotenv

from src.core.logger import logger
from src.core.config import ConfigValidationError, get_config, validate_and_log_config
from src.utils.error_handler import ErrorHandler


_lock_handle: Optional[IO[str]] = None


def acquire_instance_lock(data_dir: Path) -> bool:
    """
    Take an exclusive lock so only one bot runs against a data directory.

    Returns:
        True if the lock was acquired, False if another instance holds it.
    """
    global _lock_handle

    data_dir.mkdir(parents=True, exist_ok=True)
    lock_path = data_dir / "covenant.pid"

    handle = open(lock_path, "a+")
    try:
        fcntl.flock(handle.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
    except OSError:
        handle.seek(0)
        holder = handle.read().strip() or "unknown"
        handle.close()
        logger.error("Another Instance Is Running", [
            ("Lock File", str(lock_path)),
            ("Holder PID", holder),
        ])
        return False

    handle.seek(0)
    handle.truncate()
    handle.write(str(os.getpid()))
    handle.flush()
    _lock_handle = handle

    logger.tree("Instance Lock Acquired", [
        ("PID", str(os.getpid())),
        ("Lock File", str(lock_path)),
    ], emoji="🔒")
    return True


async def main() -> None:
    """Create the bot and run it until it disconnects."""
    from src.bot import CovenantBot

    config = get_config()
    bot = CovenantBot()

    try:
        async with bot:
            await bot.start(config.bot_token)
    except (discord.LoginFailure, discord.PrivilegedIntentsRequired) as e:
        ErrorHandler.handle(e, location="main.main", critical=True)
        sys.exit(1)


if __name__ == "__main__":
    load_dotenv()

    try:
        validate_and_log_config()
    except ConfigValidationError as e:
        logger.error("Configuration Invalid", [("Error", str(e))])
        sys.exit(1)

    if not acquire_instance_lock(get_config().data_dir):
        logger.error("Startup Aborted", [("Reason", "Another instance is already running")])
        sys.exit(1)

    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Bot Stopped by User (Ctrl+C)")
    except Exception as e:
        ErrorHandler.handle(e, location="main.__main__", critical=True)
        sys.exit(1)
