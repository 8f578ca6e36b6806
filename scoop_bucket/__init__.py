"""WhisperJAV Scoop bucket - manifest and bucket validation tools"""

from scoop_bucket.__version__ import __version__, __version_info__

from scoop_bucket.validation import run_all_validations, load_config
from scoop_bucket.utils.logger import setup_logger


__all__ = [
    "__version__",
    "__version_info__",
    "run_all_validations",
    "load_config",
    "setup_logger",
]
