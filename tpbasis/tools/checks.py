"""
This module provides the error kinds of the library, the type validation of the
parameters shared by its public functions, and a timing decorator.
"""

import numpy as np
from functools import wraps
from numbers import Integral
from scipy.sparse import issparse
from time import perf_counter
import logging

logger = logging.getLogger(__name__)

__all__ = [
    "ArityError",
    "RangeError",
    "SizeError",
    "validate_parameters",
    "get_time",
]


class ArityError(ValueError):
    """The length of an excitation tuple does not match the number of subsystems."""


class RangeError(ValueError):
    """An index or an excitation value falls outside its valid domain."""


class SizeError(ValueError):
    """A size precondition on vectors or matrices is violated."""


def get_time(func):
    """Times any function"""

    @wraps(func)
    def wrapper(*args, **kwargs):
        start_time = perf_counter()
        result = func(*args, **kwargs)
        end_time = perf_counter()
        tot_time = end_time - start_time
        logger.info(f"TIME {func.__name__} {round(tot_time, 5)}")
        return result

    return wrapper


def _is_int_sequence(seq):
    if isinstance(seq, np.ndarray):
        return seq.ndim == 1 and np.issubdtype(seq.dtype, np.integer)
    return isinstance(seq, (list, tuple)) and all(isinstance(x, Integral) for x in seq)


def validate_parameters(
    dims=None,
    excitations=None,
    acting_on=None,
    sites=None,
    index=None,
    max_rounds=None,
    operator=None,
    matrix=None,
    array=None,
):
    """
    This is a function for type validation of parameters widely used in the library
    """
    # -----------------------------------------------------------------------------
    if dims is not None and not _is_int_sequence(dims):
        raise TypeError(f"dims should be a TUPLE/LIST/ndarray of INTs, not {dims!r}")
    if excitations is not None and not _is_int_sequence(excitations):
        raise TypeError(
            f"excitations should be a TUPLE/LIST/ndarray of INTs, not {excitations!r}"
        )
    if acting_on is not None and not _is_int_sequence(acting_on):
        raise TypeError(
            f"acting_on should be a TUPLE/LIST/ndarray of INTs, not {acting_on!r}"
        )
    if sites is not None and not _is_int_sequence(sites):
        raise TypeError(f"sites should be a TUPLE/LIST/ndarray of INTs, not {sites!r}")
    # -----------------------------------------------------------------------------
    if index is not None and (
        not isinstance(index, Integral) or isinstance(index, bool)
    ):
        raise TypeError(f"index should be a SCALAR INT, not {type(index)}")
    if max_rounds is not None:
        if not isinstance(max_rounds, Integral) or isinstance(max_rounds, bool):
            raise TypeError(
                f"max_rounds should be a SCALAR INT, not {type(max_rounds)}"
            )
        if max_rounds < 0:
            raise RangeError(f"max_rounds must be non-negative, not {max_rounds}")
    # -----------------------------------------------------------------------------
    if operator is not None and not (
        isinstance(operator, np.ndarray) or issparse(operator)
    ):
        raise TypeError(
            f"operator must be a Numpy array or a SPARSE matrix, not {type(operator)}"
        )
    if matrix is not None and not (isinstance(matrix, np.ndarray) or issparse(matrix)):
        raise TypeError(
            f"matrix must be a Numpy array or a SPARSE matrix, not {type(matrix)}"
        )
    if array is not None and not isinstance(array, np.ndarray):
        raise TypeError(f"array must be np.array, not {type(array)}")
    # -----------------------------------------------------------------------------
