"""
Path-derived tag resolution.

Music libraries are usually laid out as ``.../Artist/Year/Album/track.mp3``.
Pointing a field at a negative path index lets one invocation tag a whole
tree consistently, while an explicit override pins the field globally.
"""

import os
from typing import List, Optional

from .models import TagOptions, TagSet
from .utils import Config


def split_path(dir_path: str, sep: Optional[str] = None) -> List[str]:
    """
    Split a directory path into its components.

    Leading and trailing separators produce empty components, so
    ``/music/Beatles`` gives ``['', 'music', 'Beatles']``.
    """
    return dir_path.split(sep or os.sep)


def path_item(components: List[str], index: int, override: str = "") -> str:
    """
    Pick the value for one field.

    Args:
        components: Directory path components
        index: Negative index counted from the end of ``components``
        override: Explicit value; wins whenever it is non-empty

    Returns:
        The override, the selected component, or '' when nothing applies.
        Zero and positive indices always give ''.

    Examples:
        >>> path_item(['', 'music', 'Beatles'], -1)
        'Beatles'
        >>> path_item(['', 'music', 'Beatles'], 1)
        ''
        >>> path_item(['', 'music', 'Beatles'], -9)
        ''
        >>> path_item(['', 'music', 'Beatles'], -1, 'Abbey Road')
        'Abbey Road'
    """
    if override:
        return override
    if index < 0:
        effective = len(components) + index
        if effective >= 0:
            return components[effective]
    return ""


def derive_title(file_name: str, extension: Optional[str] = None) -> str:
    """Base name of ``file_name`` with the audio extension suffix stripped."""
    ext = extension if extension is not None else Config.AUDIO_EXTENSION
    base = os.path.basename(file_name)
    if ext and base.endswith(ext):
        return base[:-len(ext)]
    return base


def resolve(dir_path: str, file_name: str, options: TagOptions, extension: Optional[str] = None) -> TagSet:
    """Compute the tags to write for ``file_name`` found in ``dir_path``."""
    components = split_path(dir_path)
    return TagSet(
        title=derive_title(file_name, extension),
        album=path_item(components, options.album_index, options.album),
        artist=path_item(components, options.artist_index, options.artist),
        year=path_item(components, options.year_index, options.year),
    )
