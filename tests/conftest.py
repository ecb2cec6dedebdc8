"""
Pytest configuration and shared fixtures.
"""

import os
import pytest
from contextlib import contextmanager
from pathlib import Path
from mutagen.id3 import ID3, TIT2, TPE1, TALB, TDRC

from dirtag.utils import Config

# ---------- Constants ----------

# A few bytes shaped like MPEG audio frames; enough for ID3 to attach to
FAKE_AUDIO = (b'\xFF\xFB\x90\x00' + b'\x00' * 413) * 4

FRAME_CLASSES = {
    "title": TIT2,
    "artist": TPE1,
    "album": TALB,
    "year": TDRC,
}

READ_FRAMES = {
    "title": ("TIT2",),
    "artist": ("TPE1",),
    "album": ("TALB",),
    "year": ("TYER", "TDRC"),
}

# ---------- Helper Functions ----------

def make_mp3(path: Path, **tags) -> Path:
    """Create a fake MP3 file, with an ID3 tag holding ``tags`` when any are given."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(FAKE_AUDIO)
    if tags:
        id3_tag = ID3()
        for field, value in tags.items():
            id3_tag.add(FRAME_CLASSES[field](encoding=3, text=[value]))
        id3_tag.save(path)
    return path

def read_tags(path: Path) -> dict:
    """Read the four managed fields straight from the file with mutagen.

    Frames are read untranslated; the year comes from TYER, else TDRC.
    """
    id3_tag = ID3(path, translate=False)
    out = {}
    for field, frame_ids in READ_FRAMES.items():
        out[field] = ""
        for frame_id in frame_ids:
            frame = id3_tag.get(frame_id)
            if frame is not None and frame.text:
                out[field] = str(frame.text[0])
                break
    return out

# ---------- Fixtures ----------

@pytest.fixture(autouse=True)
def restore_config(monkeypatch):
    """Undo class-level Config changes made by a test (e.g. via the CLI)."""
    for name in ("AUDIO_EXTENSION", "ID3_VERSION", "LOG_DIR"):
        monkeypatch.setattr(Config, name, getattr(Config, name))
    for var in ("DIRTAG_EXTENSION", "DIRTAG_ID3_VERSION", "DIRTAG_LOG_DIR", "DIRTAG_VERBOSE"):
        monkeypatch.delenv(var, raising=False)

@pytest.fixture
def sorted_listing(monkeypatch):
    """
    Make directory listings come back sorted by name.

    Returns a set; listing any directory whose name is in it fails with
    PermissionError.
    """
    real_scandir = os.scandir
    locked = set()

    @contextmanager
    def fake_scandir(path):
        if os.path.basename(os.fspath(path)) in locked:
            raise PermissionError(13, "Permission denied", os.fspath(path))
        with real_scandir(path) as it:
            yield iter(sorted(it, key=lambda e: e.name))

    monkeypatch.setattr(os, "scandir", fake_scandir)
    return locked

@pytest.fixture
def music_tree(tmp_path):
    """
    A small library laid out as Artist/Year/Album/track.mp3::

        music/
          Beatles/1969/Abbey Road/Come Together.mp3
          Beatles/1969/Abbey Road/Something.mp3
          Beatles/1969/Abbey Road/cover.jpg
          Beatles/1969/Abbey Road/NOTES.MP3
          Queen/1975/A Night at the Opera/Bohemian Rhapsody.mp3
          loose.mp3
    """
    root = tmp_path / "music"
    abbey = root / "Beatles" / "1969" / "Abbey Road"
    make_mp3(abbey / "Come Together.mp3", album="Old Album", artist="Old Artist", title="Old Title")
    make_mp3(abbey / "Something.mp3")
    (abbey / "cover.jpg").write_bytes(b"\xFF\xD8\xFF\xE0")
    (abbey / "NOTES.MP3").write_bytes(FAKE_AUDIO)
    make_mp3(root / "Queen" / "1975" / "A Night at the Opera" / "Bohemian Rhapsody.mp3", year="1975")
    make_mp3(root / "loose.mp3", title="Loose")
    return root
