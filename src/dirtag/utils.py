"""
Utility functions and configuration for dirtag.
"""

import os
import sys
import logging
from pathlib import Path
from typing import Optional, Union
from logging.handlers import RotatingFileHandler

# ---------- Constants ----------
EXIT_CODE_SUCCESS = 0
EXIT_CODE_ERROR = 1
EXIT_CODE_USAGE = 2
EXIT_CODE_INTERRUPTED = 130

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# ---------- Configuration ----------
class Config:
    """Process-wide settings with validation."""
    AUDIO_EXTENSION = '.mp3'
    ID3_VERSION = 4
    LOG_DIR: Optional[str] = None
    DEFAULT_ENCODING = 'utf-8'

    @classmethod
    def validate(cls) -> None:
        """Validate configuration values."""
        if not cls.AUDIO_EXTENSION:
            raise ValueError("AUDIO_EXTENSION cannot be empty")
        if cls.ID3_VERSION not in (3, 4):
            raise ValueError(f"Invalid ID3_VERSION: {cls.ID3_VERSION} (must be 3 or 4)")

    @classmethod
    def load_from_env(cls) -> None:
        """Load configuration from environment variables, updating class attributes."""
        if os.getenv('DIRTAG_EXTENSION'):
            cls.AUDIO_EXTENSION = os.getenv('DIRTAG_EXTENSION')
        if os.getenv('DIRTAG_ID3_VERSION'):
            try:
                cls.ID3_VERSION = int(os.getenv('DIRTAG_ID3_VERSION'))
            except ValueError:
                raise ValueError(f"DIRTAG_ID3_VERSION must be an integer, got {os.getenv('DIRTAG_ID3_VERSION')!r}")
        if os.getenv('DIRTAG_LOG_DIR'):
            cls.LOG_DIR = os.getenv('DIRTAG_LOG_DIR')
        cls.validate()

def verbose_from_env() -> bool:
    """True when DIRTAG_VERBOSE asks for debug logging."""
    return os.getenv('DIRTAG_VERBOSE', '').lower() in ('1', 'true', 'yes')

# ---------- Logging Setup ----------
def setup_logging(verbose: bool = False, log_dir: Optional[Union[str, Path]] = None) -> None:
    """Configure logging to stdout and, optionally, a rotating log file."""
    log_level = logging.DEBUG if verbose else logging.INFO

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_dir:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        handlers.append(RotatingFileHandler(
            log_path / 'dirtag.log',
            maxBytes=10*1024*1024,  # 10MB
            backupCount=5,
            encoding=Config.DEFAULT_ENCODING
        ))

    logging.basicConfig(
        level=log_level,
        format=LOG_FORMAT,
        handlers=handlers
    )

# ---------- Small Helpers ----------
def display_value(value: str) -> str:
    """Show '(none)' for empty tag values."""
    return value if value else '(none)'
