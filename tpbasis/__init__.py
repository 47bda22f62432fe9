import logging
from importlib.metadata import PackageNotFoundError, version
from .dtype_config import (
    set_default_dtype_mode,
    get_default_dtype_mode,
    get_numeric_dtype,
)
from .tools import ArityError, RangeError, SizeError
from .modeling import *
from . import modeling

try:
    __version__ = version("tpbasis")
except PackageNotFoundError:
    # Source tree usage without installed package metadata.
    __version__ = "0.0.0+local"

# Configure the root logger
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

__all__ = [
    "__version__",
    "set_default_dtype_mode",
    "get_default_dtype_mode",
    "get_numeric_dtype",
    "ArityError",
    "RangeError",
    "SizeError",
]
__all__ += modeling.__all__.copy()
