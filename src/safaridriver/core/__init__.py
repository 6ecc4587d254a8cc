# This file makes safaridriver.core a Python package and exposes key classes.

from .config_loader import ConfigLoader, load_json_resource
from .safari import SafariManager

__all__ = [
    "ConfigLoader",
    "load_json_resource",
    "SafariManager",
]
