# This file makes safaridriver.utils a Python package and exposes key utilities.

from .file_handler import FileHandler
from .logger import setup_logger

__all__ = [
    "FileHandler",
    "setup_logger",
]
