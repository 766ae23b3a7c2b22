"""Local cache directory helpers.

The cache is a flat directory of files named after the remote documents
they mirror. The index maps those names to paths and is rebuilt from disk
on every reconciliation pass.
"""

import logging
import os
import shutil
from pathlib import Path
from typing import Dict, List, Union


logger = logging.getLogger(__name__)

CacheIndex = Dict[str, Path]


def build_index(cache_dir: Union[str, Path]) -> CacheIndex:
    """Map filenames to paths for the files directly inside ``cache_dir``.

    Subdirectories are ignored and nothing below them is read. A missing
    cache directory yields an empty index.

    Args:
        cache_dir: Directory to scan

    Returns:
        Dict of filename to absolute path
    """
    cache_dir = Path(cache_dir)
    index: CacheIndex = {}
    try:
        with os.scandir(cache_dir) as entries:
            for entry in entries:
                if entry.is_file():
                    index[entry.name] = Path(entry.path).absolute()
    except FileNotFoundError:
        logger.debug("Cache directory %s does not exist yet", cache_dir)
    return index


def cached_file_paths(cache_dir: Union[str, Path]) -> List[Path]:
    """Every path below ``cache_dir``, including the directory itself.

    Returns:
        Sorted list of paths, empty when the directory doesn't exist
    """
    cache_dir = Path(cache_dir)
    if not cache_dir.is_dir():
        return []
    return [cache_dir] + sorted(cache_dir.rglob("*"))


def clear_cached_files(cache_dir: Union[str, Path]) -> bool:
    """Remove the cache directory and everything in it.

    Returns:
        True if the directory existed and was removed
    """
    cache_dir = Path(cache_dir)
    if not cache_dir.is_dir():
        return False
    try:
        shutil.rmtree(cache_dir)
    except OSError as e:
        logger.warning("Could not clear cache directory %s: %s", cache_dir, e)
        return False
    return True
