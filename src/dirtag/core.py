"""
TagStore - scoped read/write access to the ID3 tag of a single audio file.
"""

import mutagen
import mutagen.id3 as id3
from pathlib import Path
from typing import Any, Generator, Optional, Union
from contextlib import contextmanager
import logging
from .utils import Config

logger = logging.getLogger(__name__)

# ID3 frame ids for the four fields this tool manages
FRAMES = {
    "title": "TIT2",
    "album": "TALB",
    "artist": "TPE1",
    # TYER is a plain text frame, so the year is stored exactly as given.
    # TDRC is a timestamp and mutagen drops any text that is not a date.
    "year": "TYER",
}

# Frames read when the primary frame is absent, e.g. files tagged by other tools
FALLBACK_FRAMES = {
    "year": "TDRC",
}

class DirtagError(Exception):
    """Base exception for dirtag errors."""

    def __init__(self, path: Union[str, Path], cause: Optional[BaseException] = None):
        self.path = str(path)
        self.cause = cause
        super().__init__(self._message())

    def _message(self) -> str:
        return f"{self.path}: {self.cause}" if self.cause else self.path

class PathNotFound(DirtagError):
    """Raised when the root path of a walk does not exist."""

    def _message(self) -> str:
        return f"The path {self.path} does not exist"

class DirectoryListFailed(DirtagError):
    """Raised when a directory cannot be listed during a walk."""

    def _message(self) -> str:
        return f"Failed to list directory {self.path}: {self.cause}"

class TagOpenFailed(DirtagError):
    """Raised when a file's tag container cannot be opened or parsed."""

    def _message(self) -> str:
        return f"Failed to open tags of {self.path}: {self.cause}"

class TagSaveFailed(DirtagError):
    """Raised when writing a tag container back to disk fails."""

    def _message(self) -> str:
        return f"Failed to save tags of {self.path}: {self.cause}"

class TagStore:
    """
    Handle on one file's ID3 tag.

    The parsed frames are buffered in memory; changes only reach the disk on
    save(). A file without an ID3 header opens as an empty tag and gets one
    inserted when saved.

    Frames are loaded without mutagen's v2.4 translation, which would turn a
    TYER year into a TDRC timestamp and lose any text that is not a date.
    ID3v2.2 tags are upgraded to v2.3, since their three-letter frames cannot
    be written back.
    """

    def __init__(self, path: Union[str, Path]):
        """Open the tag of the given audio file."""
        self.path = Path(path)
        self.tags: Optional[id3.ID3] = None
        self.load_file()

    def load_file(self) -> None:
        """Parse the ID3 tag with mutagen."""
        try:
            self.tags = id3.ID3(self.path, translate=False)
            if self.tags.version < (2, 3, 0):
                # v2.3 keeps TYER; update_to_v24 would fold it into TDRC
                self.tags.update_to_v23()
        except id3.ID3NoHeaderError:
            logger.debug(f"No ID3 header in {self.path}, starting with an empty tag")
            self.tags = id3.ID3()
        except (mutagen.MutagenError, OSError) as e:
            raise TagOpenFailed(self.path, e) from e

    @property
    def closed(self) -> bool:
        return self.tags is None

    def _require_open(self) -> id3.ID3:
        if self.tags is None:
            raise ValueError(f"Tag store for {self.path} is closed")
        return self.tags

    def get(self, field: str) -> str:
        """Return the first text value of a field, or '' when no frame holds one."""
        tags = self._require_open()
        for frame_id in (FRAMES[field], FALLBACK_FRAMES.get(field)):
            frame = tags.get(frame_id) if frame_id else None
            if frame is not None and frame.text:
                return str(frame.text[0])
        return ""

    def set(self, field: str, value: str) -> None:
        """Replace a field with a single UTF-8 text value."""
        tags = self._require_open()
        frame_id = FRAMES[field]
        frame_cls = getattr(id3, frame_id)
        tags.setall(frame_id, [frame_cls(encoding=3, text=[value])])
        # one year per file: drop a TDRC left by other tools
        if field in FALLBACK_FRAMES:
            tags.delall(FALLBACK_FRAMES[field])

    @property
    def title(self) -> str:
        return self.get("title")

    @title.setter
    def title(self, value: str) -> None:
        self.set("title", value)

    @property
    def album(self) -> str:
        return self.get("album")

    @album.setter
    def album(self, value: str) -> None:
        self.set("album", value)

    @property
    def artist(self) -> str:
        return self.get("artist")

    @artist.setter
    def artist(self, value: str) -> None:
        self.set("artist", value)

    @property
    def year(self) -> str:
        return self.get("year")

    @year.setter
    def year(self, value: str) -> None:
        self.set("year", value)

    def save(self) -> None:
        """Write the buffered tag back into the file."""
        tags = self._require_open()
        if Config.ID3_VERSION == 3:
            # drops v2.4-only frames; TYER is kept as written
            tags.update_to_v23()
        try:
            tags.save(self.path, v2_version=Config.ID3_VERSION)
        except (mutagen.MutagenError, OSError) as e:
            raise TagSaveFailed(self.path, e) from e

    def close(self) -> None:
        """Drop the buffered tag. Safe to call more than once."""
        self.tags = None

    def __enter__(self) -> 'TagStore':
        """Enter the context manager."""
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Exit the context manager and close the store."""
        self.close()

    @staticmethod
    @contextmanager
    def managed(path: Union[str, Path]) -> Generator['TagStore', None, None]:
        """Context manager that opens a TagStore and always closes it."""
        try:
            store = TagStore(path)
        except TagOpenFailed as e:
            logger.error(f"Error while opening audio file {path}: {e.cause}")
            raise
        try:
            yield store
        finally:
            store.close()
