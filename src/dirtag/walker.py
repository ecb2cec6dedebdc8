"""
Recursive discovery of audio files.
"""

import os
import logging
from typing import Callable, Generator, Optional, Tuple

from .core import PathNotFound, DirectoryListFailed
from .utils import Config

logger = logging.getLogger(__name__)

VisitType = Callable[[str, str], None]

def iter_audio_files(root: str,
                     extension: Optional[str] = None,
                     log: Optional[logging.Logger] = None) -> Generator[Tuple[str, str], None, None]:
    """
    Yield ``(file_path, containing_dir)`` for every audio file under ``root``.

    The walk is depth-first and follows the order the directory listing
    returns. Files match on a case-sensitive suffix of their name.

    Raises:
        PathNotFound: ``root`` does not exist (checked before anything is yielded)
        DirectoryListFailed: a directory could not be listed; nothing after it is yielded
    """
    log = log or logger
    ext = extension if extension is not None else Config.AUDIO_EXTENSION
    if not os.path.exists(root):
        raise PathNotFound(root)
    return _walk_dir(root, ext, log)

def _walk_dir(dir_path: str, ext: str, log: logging.Logger) -> Generator[Tuple[str, str], None, None]:
    try:
        with os.scandir(dir_path) as it:
            entries = list(it)
    except OSError as e:
        log.error(f"Failed to list dir {dir_path}, the error is {e}")
        raise DirectoryListFailed(dir_path, e) from e

    for entry in entries:
        item_path = os.path.normpath(os.path.join(dir_path, entry.name))
        log.debug(f"Found item {entry.name}")
        if entry.is_dir(follow_symlinks=False):
            yield from _walk_dir(item_path, ext, log)
        elif entry.is_file() and entry.name.endswith(ext):
            yield item_path, dir_path

def walk(root: str,
         visit_file: VisitType,
         extension: Optional[str] = None,
         log: Optional[logging.Logger] = None) -> int:
    """Call ``visit_file(file_path, containing_dir)`` for each audio file. Returns the visit count."""
    count = 0
    for file_path, dir_path in iter_audio_files(root, extension=extension, log=log):
        visit_file(file_path, dir_path)
        count += 1
    return count
