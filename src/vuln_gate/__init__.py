from ._version import __version__
from .app.main import report, collect_commits

__all__ = [
    "__version__",
    "report",
    "collect_commits",
]

# stdlib logging defaults: attach NullHandler to prevent 'No handler' warnings
import logging
_logger = logging.getLogger(__name__)
_logger.addHandler(logging.NullHandler())
