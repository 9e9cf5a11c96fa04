from .version import __version__ as __version__

__title__ = "NovelSource"
__description__ = "Normalized source adapters for novel aggregator sites."
__license__ = "Apache-2.0"
