# typescan/core/directory_scanner.py

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Union

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


@dataclass(frozen=True)
class RawEntry:
    """One entry of a directory listing, before any classification."""
    name: str
    is_directory: bool
    size: int


def clean_name(name: str) -> str:
    """Reduces a listed name to its normalized base component."""
    return os.path.normpath(os.path.basename(name) or name)


def is_hidden(name: str) -> bool:
    return clean_name(name).startswith('.')


def list_directory(path: PathLike) -> List[RawEntry]:
    """
    Reads a directory listing in a single pass, sorted by name.

    Symlinks are not followed, so a link to a directory is reported as a
    plain entry. Any OSError (missing path, permission denied, not a
    directory) propagates unchanged, and nothing is returned until the
    whole listing has been read.
    """
    logger.info(f"Listing directory: {path}")
    entries = []
    try:
        with os.scandir(path) as it:
            for dir_entry in it:
                stat = dir_entry.stat(follow_symlinks=False)
                entries.append(RawEntry(
                    name=dir_entry.name,
                    is_directory=dir_entry.is_dir(follow_symlinks=False),
                    size=stat.st_size,
                ))
    except OSError as e:
        logger.error(f"Could not list directory '{path}': {e}")
        raise

    entries.sort(key=lambda entry: entry.name)
    logger.debug(f"Listed {len(entries)} raw entries in '{path}'.")
    return entries


def scan(path: PathLike) -> List[RawEntry]:
    """Lists a directory and drops hidden entries (names starting with '.')."""
    visible = []
    for entry in list_directory(path):
        if is_hidden(entry.name):
            logger.debug(f"Skipping hidden entry: {clean_name(entry.name)}")
            continue
        visible.append(entry)
    return visible


def count_files_in_dir(path: PathLike) -> int:
    """Counts visible entries, files and directories alike, without classifying them."""
    count = len(scan(path))
    logger.info(f"Counted {count} visible entries in '{path}'.")
    return count
