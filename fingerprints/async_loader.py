"""
Asynchronous fingerprint database loading

Parsing is CPU-bound, so it runs in the default executor; the event loop
only waits. Each coroutine hands back a fully materialised database.
"""
import asyncio
from functools import partial
from pathlib import Path
from typing import List, Optional, Sequence

from .fingerprint import FingerprintDatabase
from .loader import PathLike, load_fingerprints_from_file, load_fingerprints_from_xml
from config import settings
from logger import get_logger

logger = get_logger(__name__)


async def load_fingerprints_from_xml_async(
    xml_content: str,
    base_dir: Optional[PathLike] = None
) -> FingerprintDatabase:
    """Parse XML text into a database without blocking the event loop"""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(
        None, partial(load_fingerprints_from_xml, xml_content, base_dir)
    )


async def load_fingerprints_from_file_async(path: PathLike) -> FingerprintDatabase:
    """Read and parse an XML file without blocking the event loop"""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, load_fingerprints_from_file, Path(path))


async def load_multiple_databases_async(paths: Sequence[PathLike]) -> List[FingerprintDatabase]:
    """
    Load several databases concurrently

    At most settings.loader_max_workers files are parsed at once (0 means
    no limit).

    Returns:
        Databases in the same order as paths

    Raises:
        The first loading error encountered
    """
    max_workers = settings.loader_max_workers
    semaphore = asyncio.Semaphore(max_workers) if max_workers else None

    async def load(path: PathLike) -> FingerprintDatabase:
        if semaphore is None:
            return await load_fingerprints_from_file_async(path)
        async with semaphore:
            return await load_fingerprints_from_file_async(path)

    databases = await asyncio.gather(*(load(p) for p in paths))
    logger.info(f"Loaded {len(databases)} fingerprint databases")
    return list(databases)


def merge_databases(databases: Sequence[FingerprintDatabase]) -> FingerprintDatabase:
    """Concatenate databases into one, keeping each database's order"""
    merged = FingerprintDatabase()
    for database in databases:
        for fingerprint in database:
            merged.add(fingerprint)
    return merged
