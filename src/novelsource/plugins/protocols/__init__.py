"""
Protocol exports for plugin components.
"""

__all__ = [
    "PageableSourceProtocol",
    "SourceProtocol",
]

from .source import PageableSourceProtocol, SourceProtocol
