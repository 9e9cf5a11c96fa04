"""
Settings files and their mapping onto the configuration dataclasses.

Typical use::

    adapter = ConfigAdapter(load_config())
    client = SourceClient(adapter.get_client_config())
"""

__all__ = [
    "ConfigAdapter",
    "copy_default_config",
    "find_config_file",
    "load_config",
]

from .adapter import ConfigAdapter
from .file_io import copy_default_config, find_config_file, load_config
