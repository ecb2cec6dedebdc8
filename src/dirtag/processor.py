"""
Per-file list/set processing for dirtag.
"""

import os
import sys
import signal
import logging
from typing import Any, Dict, List, Optional, TextIO

from .core import TagStore, TagSaveFailed
from .models import TagOptions, TagSet
from .resolver import resolve
from .utils import EXIT_CODE_INTERRUPTED, display_value
from .walker import iter_audio_files

logger = logging.getLogger(__name__)

ProcessResultType = Dict[str, Any]

LIST_RECORD_FORMAT = "item: {item}\nalbum: {album}\nyear: {year}\nartist: {artist}\ntitle: {title}\n"

# ---------- Signal Handlers ----------
def register_signal_handlers():
    """Register signal handlers for graceful shutdown on Ctrl+C/SIGTERM."""
    def signal_handler(sig, frame):
        logger.info(f"Received signal {sig}, shutting down...")
        sys.exit(EXIT_CODE_INTERRUPTED)

    # Only register on platforms that support it (Windows has limited signal support)
    if sys.platform != "win32":
        try:
            signal.signal(signal.SIGINT, signal_handler)
            signal.signal(signal.SIGTERM, signal_handler)
        except ValueError:
            # Signals can only be set from the main thread
            pass

def unregister_signal_handlers():
    """Unregister signal handlers (restore defaults)."""
    if sys.platform != "win32":
        try:
            signal.signal(signal.SIGINT, signal.default_int_handler)
            signal.signal(signal.SIGTERM, signal.SIG_DFL)
        except ValueError:
            pass

# ---------- List Mode ----------
def format_list_record(item: str, store: TagStore) -> str:
    """Render the fixed human-readable record for one file."""
    return LIST_RECORD_FORMAT.format(
        item=item,
        album=store.album,
        year=store.year,
        artist=store.artist,
        title=store.title,
    )

def list_file(path: str, dir_path: str = "", out: Optional[TextIO] = None) -> ProcessResultType:
    """Print the current tags of one file. TagOpenFailed propagates."""
    out = out or sys.stdout
    with TagStore.managed(path) as store:
        print(format_list_record(os.path.basename(path), store), end='', file=out)
        return {
            'path': str(path),
            'dir': dir_path,
            'title': store.title,
            'album': store.album,
            'artist': store.artist,
            'year': store.year,
            'error': None,
        }

def list_tags_at(root: str,
                 *,
                 extension: Optional[str] = None,
                 out: Optional[TextIO] = None,
                 log: Optional[logging.Logger] = None) -> List[ProcessResultType]:
    """
    Print the tags of every audio file under ``root``.

    Any failure (missing root, unlistable directory, unreadable tag) aborts
    the whole run by propagating its DirtagError.
    """
    log = log or logger
    results = []
    for file_path, dir_path in iter_audio_files(root, extension=extension, log=log):
        results.append(list_file(file_path, dir_path, out=out))
    log.debug(f"Listed tags of {len(results)} file(s) under {root}")
    return results

# ---------- Set Mode ----------
def apply_tags(store: TagStore, tag_set: TagSet) -> None:
    """Write the title, and album/artist/year where they resolved to a value."""
    store.title = tag_set.title
    if tag_set.album:
        store.album = tag_set.album
    if tag_set.artist:
        store.artist = tag_set.artist
    if tag_set.year:
        store.year = tag_set.year

def set_file(path: str,
             dir_path: str,
             options: TagOptions,
             *,
             extension: Optional[str] = None,
             dry_run: bool = False,
             log: Optional[logging.Logger] = None) -> ProcessResultType:
    """
    Resolve and write the tags of one file.

    TagOpenFailed propagates to the caller. A failed save is logged and
    recorded in the result instead.
    """
    log = log or logger
    with TagStore.managed(path) as store:
        tag_set = resolve(dir_path, os.path.basename(path), options, extension=extension)
        record = {
            'path': str(path),
            'dir': dir_path,
            'title': tag_set.title,
            'album': tag_set.album,
            'artist': tag_set.artist,
            'year': tag_set.year,
            'saved': False,
            'error': None,
            'exception': None,
        }

        if dry_run:
            log.info(f"Dry-run: {path} -> title: {tag_set.title}, album: {display_value(tag_set.album)}, "
                     f"artist: {display_value(tag_set.artist)}, year: {display_value(tag_set.year)}")
            return {**record, 'note': 'dry-run'}

        apply_tags(store, tag_set)
        try:
            store.save()
        except TagSaveFailed as e:
            log.error(f"Failed to save tag (title: {tag_set.title}, album: {tag_set.album}, "
                      f"artist: {tag_set.artist}, year: {tag_set.year}) on item {path}, the error is {e.cause}")
            return {**record, 'error': str(e), 'exception': e}

        log.debug(f"Saved tags of {path}")
        return {**record, 'saved': True}

def set_tags_at(options: TagOptions,
                *,
                extension: Optional[str] = None,
                dry_run: bool = False,
                log: Optional[logging.Logger] = None) -> List[ProcessResultType]:
    """
    Resolve and write tags for every audio file under ``options.path``.

    Files are handled strictly one after another. Save failures are
    reported per file and the walk continues; a missing root, an unlistable
    directory or an unopenable tag aborts the batch.
    """
    log = log or logger
    results = []
    for file_path, dir_path in iter_audio_files(options.path, extension=extension, log=log):
        results.append(set_file(file_path, dir_path, options, extension=extension, dry_run=dry_run, log=log))
    return results

def summarize(results: List[ProcessResultType]) -> Dict[str, int]:
    """Count processed, saved and failed files of a set-tags run."""
    return {
        'processed': len(results),
        'saved': sum(1 for r in results if r.get('saved')),
        'failed': sum(1 for r in results if r.get('error')),
    }
