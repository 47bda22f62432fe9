from . import (
    index_codec,
    basis,
    vectors,
    matching,
    embedding,
)

from .index_codec import *
from .basis import *
from .vectors import *
from .matching import *
from .embedding import *

# All modules have an __all__ defined
__all__ = index_codec.__all__.copy()
__all__ += basis.__all__.copy()
__all__ += vectors.__all__.copy()
__all__ += matching.__all__.copy()
__all__ += embedding.__all__.copy()
