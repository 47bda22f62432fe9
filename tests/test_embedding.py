from functools import reduce

import numpy as np
import pytest
from scipy.sparse import csr_matrix

from tpbasis import RangeError, SizeError
from tpbasis.modeling import (
    EmbedMap,
    compute_embed_map,
    embed,
    embed_into,
    embed_add,
    global_indices,
    iter_embed_positions,
)

SX = np.array([[0, 1], [1, 0]], dtype=complex)
SY = np.array([[0, -1j], [1j, 0]])
SZ = np.array([[1, 0], [0, -1]], dtype=complex)


def kron_all(*ops):
    return reduce(np.kron, ops)


def test_single_site_operator_is_kronecker_with_identity():
    np.testing.assert_array_equal(embed(SX, [1], [2, 2]), np.kron(SX, np.eye(2)))
    np.testing.assert_array_equal(embed(SX, [2], [2, 2]), np.kron(np.eye(2), SX))


def test_middle_subsystem_of_mixed_dims(rng):
    op = rng.normal(size=(3, 3))
    expected = kron_all(np.eye(2), op, np.eye(4))
    np.testing.assert_allclose(embed(op, [2], [2, 3, 4]), expected)


def test_two_site_operator_on_neighbouring_subsystems():
    op = np.kron(SX, SY)
    expected = kron_all(np.eye(3), SX, SY)
    np.testing.assert_allclose(embed(op, [2, 3], [3, 2, 2]), expected)


def test_two_site_operator_on_separated_subsystems():
    op = np.kron(SZ, SX)
    expected = kron_all(SZ, np.eye(3), SX)
    np.testing.assert_allclose(embed(op, [1, 3], [2, 3, 2]), expected)


def test_acting_on_order_follows_operator_factors():
    op = np.kron(SZ, SX)
    expected = kron_all(SX, np.eye(3), SZ)
    np.testing.assert_allclose(embed(op, [3, 1], [2, 3, 2]), expected)


def test_operator_on_all_subsystems_is_unchanged(rng):
    op = rng.normal(size=(6, 6))
    np.testing.assert_allclose(embed(op, [1, 2], [2, 3]), op)


def test_embed_keeps_operator_dtype():
    assert embed(SX, [1], [2, 2]).dtype == np.complex128
    assert embed(np.eye(2, dtype=np.int64), [1], [2, 3]).dtype == np.int64


def test_sparse_operator():
    result = embed(csr_matrix(SX), [1], [2, 2])
    assert isinstance(result, np.ndarray)
    np.testing.assert_array_equal(result, np.kron(SX, np.eye(2)))


def test_embed_map_matches_one_shot_embed(rng):
    dims = [2, 3, 2]
    op = rng.normal(size=(4, 4)) + 1j * rng.normal(size=(4, 4))
    embed_map = compute_embed_map([1, 3], dims)
    M = np.zeros((12, 12), dtype=complex)
    embed_into(M, op, [1, 3], dims, embed_map=embed_map)
    np.testing.assert_array_equal(M, embed(op, [1, 3], dims))


def test_embed_map_structure():
    embed_map = compute_embed_map([1], [2, 2])
    assert isinstance(embed_map, EmbedMap)
    assert embed_map.local_dim == 2
    assert embed_map.global_dim == 4
    # m[0, 0] lands on M[0, 0] and M[1, 1] of the 4x4 target
    np.testing.assert_array_equal(embed_map.firstcol, [[0, 2], [8, 10]])
    np.testing.assert_array_equal(embed_map.strides, [0, 5])


def test_embed_map_agrees_with_explicit_positions():
    acting_on, dims = [2, 3], [2, 2, 3]
    embed_map = compute_embed_map(acting_on, dims)
    positions = dict(iter_embed_positions(acting_on, dims))
    assert len(positions) == 36
    for (row, col), expected in positions.items():
        np.testing.assert_array_equal(embed_map.positions(row, col), expected)
        np.testing.assert_array_equal(
            global_indices(row, col, acting_on, dims), expected
        )


def test_embed_map_is_cached_and_read_only():
    embed_map = compute_embed_map([1], [2, 2])
    assert compute_embed_map((1,), (2, 2)) is embed_map
    with pytest.raises(ValueError):
        embed_map.strides[0] = 1


def test_embed_into_overwrites_only_mapped_entries():
    M = np.full((4, 4), 7.0)
    embed_into(M, np.array([[1.0, 2.0], [3.0, 4.0]]), [2], [2, 2])
    expected = np.full((4, 4), 7.0)
    expected[:2, :2] = [[1, 2], [3, 4]]
    expected[2:, 2:] = [[1, 2], [3, 4]]
    np.testing.assert_array_equal(M, expected)


def test_embed_add_builds_a_hamiltonian():
    dims = [2, 2, 2]
    H = np.zeros((8, 8), dtype=complex)
    zz = np.kron(SZ, SZ)
    for site in (1, 2):
        embed_add(H, zz, [site, site + 1], dims)
    for site in (1, 2, 3):
        embed_add(H, 0.5 * SX, [site], dims)
    expected = kron_all(SZ, SZ, np.eye(2)) + kron_all(np.eye(2), SZ, SZ)
    expected += 0.5 * (
        kron_all(SX, np.eye(4)) + kron_all(np.eye(2), SX, np.eye(2)) + kron_all(np.eye(4), SX)
    )
    np.testing.assert_allclose(H, expected)


def test_embed_add_with_precomputed_map():
    dims = [3, 2]
    embed_map = compute_embed_map([2], dims)
    H = np.zeros((6, 6), dtype=complex)
    for coupling in (0.1, 0.2, 0.3):
        embed_add(H, coupling * SZ, embed_map=embed_map)
    np.testing.assert_allclose(H, 0.6 * np.kron(np.eye(3), SZ))


def test_operator_larger_than_subsystem():
    with pytest.raises(SizeError):
        embed(np.eye(3), [1], [2, 2])


def test_non_square_operator():
    with pytest.raises(SizeError):
        embed(np.ones((2, 1)), [1], [2, 2])


def test_target_of_wrong_shape():
    with pytest.raises(SizeError):
        embed_into(np.zeros((3, 3)), SX, [1], [2, 2])


def test_embed_add_skips_size_checks():
    # a non-square block that fits is written as is
    H = np.zeros((4, 4))
    embed_add(H, np.ones((2, 1)), [1], [2, 2])
    expected = np.zeros((4, 4))
    expected[[0, 1, 2, 3], [0, 1, 0, 1]] = 1
    np.testing.assert_array_equal(H, expected)
    # a prebuilt map is enough, acting_on and dims are not needed
    H = np.zeros((4, 4), dtype=complex)
    embed_add(H, SZ, embed_map=compute_embed_map([1], [2, 2]))
    np.testing.assert_array_equal(H, np.kron(SZ, np.eye(2)))


def test_smaller_operator_fills_leading_block():
    op = np.array([[5.0]])
    result = embed(op, [1], [2, 2])
    np.testing.assert_array_equal(result, np.diag([5.0, 5.0, 0.0, 0.0]))


@pytest.mark.parametrize("acting_on", [[0], [3]])
def test_acting_on_out_of_range(acting_on):
    with pytest.raises(RangeError):
        compute_embed_map(acting_on, [2, 2])


def test_repeated_subsystem():
    with pytest.raises(ValueError):
        compute_embed_map([1, 1], [2, 2])
