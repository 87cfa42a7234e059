"""Reading and writing config files, blocking and asynchronous."""

import asyncio
import functools
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

ENCODING = "utf-8"


def read_text(path: str | Path) -> str:
    """Read a whole config file.

    Raises:
        FileNotFoundError: If ``path`` is not an existing file.

    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"No file at: {path}")
    logger.debug("Reading config file %s", path)
    return path.read_text(encoding=ENCODING)


def write_text(path: str | Path, text: str) -> None:
    """Write a config file, replacing any existing content.

    The file is overwritten in place, an interrupted write can leave it
    truncated.
    """
    path = Path(path)
    logger.debug("Writing config file %s", path)
    path.write_text(text, encoding=ENCODING)


async def aread_text(path: str | Path) -> str:
    """Asynchronous `read_text`, the read runs in the default executor."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, functools.partial(read_text, path))


async def awrite_text(path: str | Path, text: str) -> None:
    """Asynchronous `write_text`, the write runs in the default executor."""
    loop = asyncio.get_running_loop()
    await loop.run_in_executor(None, functools.partial(write_text, path, text))
