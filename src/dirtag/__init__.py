"""dirtag – audio tags from directory names."""

__version__ = "0.1.0"

from .core import (
    TagStore,
    DirtagError,
    PathNotFound,
    DirectoryListFailed,
    TagOpenFailed,
    TagSaveFailed
)
from .models import TagOptions, TagSet
from .utils import Config
from .resolver import resolve, derive_title, path_item, split_path
from .walker import walk, iter_audio_files
from .processor import list_tags_at, set_tags_at, list_file, set_file, summarize

__all__ = [
    "TagStore",
    "DirtagError",
    "PathNotFound",
    "DirectoryListFailed",
    "TagOpenFailed",
    "TagSaveFailed",
    "TagOptions",
    "TagSet",
    "Config",
    "resolve",
    "derive_title",
    "path_item",
    "split_path",
    "walk",
    "iter_audio_files",
    "list_tags_at",
    "set_tags_at",
    "list_file",
    "set_file",
    "summarize"
]
