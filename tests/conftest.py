import numpy as np
import pytest

from tpbasis import set_default_dtype_mode, clear_embed_map_cache


@pytest.fixture(autouse=True)
def reset_global_state():
    set_default_dtype_mode("complex")
    clear_embed_map_cache()
    yield
    set_default_dtype_mode("complex")


@pytest.fixture
def rng():
    return np.random.default_rng(42)
