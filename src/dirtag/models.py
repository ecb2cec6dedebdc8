"""Record types shared by the resolver, processor and CLI."""

from dataclasses import dataclass


@dataclass(frozen=True)
class TagOptions:
    """
    Options for one set-tags invocation.

    An override, when non-empty, wins over the matching index. Indices count
    path components from the end: -1 is the directory holding the file, -2 its
    parent, and so on. Zero and positive indices never select a component.
    """
    path: str = "."
    album: str = ""
    artist: str = ""
    year: str = ""
    album_index: int = 0
    artist_index: int = 0
    year_index: int = 0


@dataclass(frozen=True)
class TagSet:
    """Resolved values for one file. Empty album/artist/year means keep the stored value."""
    title: str
    album: str = ""
    artist: str = ""
    year: str = ""
