from . import checks, numba_functions

from .checks import *
from .numba_functions import *

# All modules have an __all__ defined
__all__ = checks.__all__.copy()
__all__ += numba_functions.__all__.copy()
