"""Numba-accelerated kernels for mixed-radix encoding of many configurations.

The kernels work on 0-based configurations and 0-based keys, with the last
subsystem as the fastest digit. They assume inputs are already validated and
shaped consistently: range checks live in :mod:`tpbasis.modeling.index_codec`.
"""

import numpy as np
from numba import njit, prange
import logging

logger = logging.getLogger(__name__)

__all__ = [
    "compute_strides",
    "encode_all_configs",
    "get_state_configs",
    "subsystem_global_indices",
]


@njit(cache=True)
def compute_strides(loc_dims: np.ndarray) -> np.ndarray:
    """Compute mixed-radix strides for encoding configurations into int64 keys.

    ``key = sum_{k} config[k] * strides[k]`` with ``strides[N-1] = 1`` and
    ``strides[k] = loc_dims[k+1] * ... * loc_dims[N-1]``.

    Parameters
    ----------
    loc_dims : numpy.ndarray
        Array of shape (n_sites,) containing local dimensions per subsystem.

    Returns
    -------
    numpy.ndarray
        int64 array of shape (n_sites,).
    """
    n_sites = loc_dims.shape[0]
    strides = np.empty(n_sites, dtype=np.int64)
    running_stride = np.int64(1)
    for kk in range(n_sites - 1, -1, -1):
        strides[kk] = running_stride
        running_stride *= np.int64(loc_dims[kk])
    return strides


@njit(parallel=True, cache=True)
def encode_all_configs(configs: np.ndarray, strides: np.ndarray) -> np.ndarray:
    """Encode many configurations into 0-based int64 keys.

    Parameters
    ----------
    configs : numpy.ndarray
        Array of shape (n_configs, n_sites) with local basis indices.
    strides : numpy.ndarray
        Array of shape (n_sites,) produced by :func:`compute_strides`.

    Returns
    -------
    numpy.ndarray
        int64 array of shape (n_configs,).
    """
    n_configs, n_sites = configs.shape
    keys = np.empty(n_configs, dtype=np.int64)
    for ii in prange(n_configs):
        s = np.int64(0)
        for kk in range(n_sites):
            s += np.int64(configs[ii, kk]) * strides[kk]
        keys[ii] = s
    return keys


@njit(parallel=True, cache=True)
def get_state_configs(loc_dims):
    """Enumerate all product-basis configurations for a set of local dimensions.

    Parameters
    ----------
    loc_dims : numpy.ndarray
        One-dimensional array of local dimensions.

    Returns
    -------
    numpy.ndarray
        int64 array of shape ``(prod(loc_dims), len(loc_dims))``. Row ``ii`` is
        the configuration with 0-based key ``ii``.
    """
    num_dims = loc_dims.shape[0]
    strides = compute_strides(loc_dims)
    total_configs = np.int64(1)
    for dim in loc_dims:
        total_configs *= np.int64(dim)
    configs = np.zeros((total_configs, num_dims), dtype=np.int64)
    for ii in prange(total_configs):
        key = np.int64(ii)
        for kk in range(num_dims):
            configs[ii, kk] = (key // strides[kk]) % loc_dims[kk]
    return configs


@njit(parallel=True, cache=True)
def subsystem_global_indices(local_configs, env_configs, acting, env, strides):
    """Global 0-based keys of a local configuration combined with each environment.

    Parameters
    ----------
    local_configs : numpy.ndarray
        Shape (d, len(acting)): configurations of the acted-on subsystems.
    env_configs : numpy.ndarray
        Shape (n_env, len(env)): configurations of the remaining subsystems,
        in canonical order.
    acting, env : numpy.ndarray
        0-based positions of the acted-on and remaining subsystems.
    strides : numpy.ndarray
        Full-system strides from :func:`compute_strides`.

    Returns
    -------
    numpy.ndarray
        int64 array of shape (d, n_env) with
        ``keys[a, e] = encode(local a on acting, environment e on env)``.
    """
    n_local = local_configs.shape[0]
    n_env = env_configs.shape[0]
    keys = np.empty((n_local, n_env), dtype=np.int64)
    for aa in prange(n_local):
        base = np.int64(0)
        for kk in range(acting.shape[0]):
            base += np.int64(local_configs[aa, kk]) * strides[acting[kk]]
        for ee in range(n_env):
            offset = np.int64(0)
            for kk in range(env.shape[0]):
                offset += np.int64(env_configs[ee, kk]) * strides[env[kk]]
            keys[aa, ee] = base + offset
    return keys
