import numpy as np

__all__ = [
    "set_default_dtype_mode",
    "get_default_dtype_mode",
    "get_numeric_dtype",
    "resolve_dtype",
]


_DEFAULT_IS_COMPLEX = True


def set_default_dtype_mode(mode: str) -> None:
    """Select the scalar type used when a vector is built with ``dtype=None``."""
    global _DEFAULT_IS_COMPLEX
    if mode not in ("real", "complex"):
        raise ValueError(f"mode must be 'real' or 'complex', got {mode!r}")
    _DEFAULT_IS_COMPLEX = mode == "complex"


def get_default_dtype_mode() -> str:
    return "complex" if _DEFAULT_IS_COMPLEX else "real"


def get_numeric_dtype() -> np.dtype:
    return np.dtype(np.complex128 if _DEFAULT_IS_COMPLEX else np.float64)


def resolve_dtype(dtype=None) -> np.dtype:
    if dtype is None:
        return get_numeric_dtype()
    return np.dtype(dtype)
