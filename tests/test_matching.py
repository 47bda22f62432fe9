import logging

import numpy as np
import pytest
from scipy.sparse import csc_matrix

from tpbasis import RangeError, SizeError
from tpbasis.modeling import match_vectors, group_indices, basis_vector


def test_permutation_is_recovered():
    Y = list(np.eye(4))
    order = [2, 0, 3, 1]
    X = [Y[ii] for ii in order]
    mapping, is_injective = match_vectors(X, Y)
    assert is_injective
    assert mapping.tolist() == order


def test_dressed_states_match_bare_states(rng):
    # small rotation of the bare basis, as for weakly perturbed eigenvectors
    bare = np.eye(6)
    noise = 0.05 * rng.normal(size=(6, 6))
    dressed, _ = np.linalg.qr(bare + noise)
    dressed *= np.sign(np.diag(dressed))
    result = match_vectors(dressed[:, [3, 1, 5]], bare)
    assert result.is_injective
    assert result.mapping.tolist() == [3, 1, 5]


def test_matrix_and_sequence_inputs_agree(rng):
    X = rng.normal(size=(5, 3))
    Y = rng.normal(size=(5, 4))
    from_matrix = match_vectors(X, Y)
    from_lists = match_vectors(list(X.T), list(Y.T))
    assert from_matrix.mapping.tolist() == from_lists.mapping.tolist()


def test_sparse_vectors():
    dims = (2, 2)
    Y = [basis_vector([e0, e1], None, dims) for e0 in range(2) for e1 in range(2)]
    X = [Y[3], Y[0]]
    assert match_vectors(X, Y).mapping.tolist() == [3, 0]


def test_sparse_matrix_columns():
    Y = csc_matrix(np.eye(3))
    X = csc_matrix(np.eye(3)[:, [1, 2]])
    assert match_vectors(X, Y).mapping.tolist() == [1, 2]


def test_tie_is_broken_in_favour_of_largest_overlap():
    Y = [np.array([1.0, 0.0]), np.array([0.0, 1.0])]
    X = [np.array([0.8, 0.6]), np.array([0.9, 0.4])]
    # both prefer Y[0]; X[1] has the larger overlap and keeps it
    mapping, is_injective = match_vectors(X, Y)
    assert is_injective
    assert mapping.tolist() == [1, 0]


def test_equal_overlaps_keep_first_candidate():
    Y = [np.array([1.0, 0.0]), np.array([0.0, 1.0])]
    X = [np.array([1.0, 1.0]) / np.sqrt(2)]
    assert match_vectors(X, Y).mapping.tolist() == [0]


def test_identical_vectors_are_separated():
    Y = [np.array([1.0, 0.0, 0.0]), np.array([0.0, 1.0, 0.0]), np.array([0.0, 0.0, 1.0])]
    X = [Y[0], Y[0]]
    mapping, is_injective = match_vectors(X, Y)
    assert is_injective
    assert mapping.tolist() == [0, 1]


def test_more_vectors_than_targets():
    with pytest.raises(SizeError):
        match_vectors([np.ones(2)] * 3, [np.ones(2)] * 2)


def test_empty_source():
    result = match_vectors([], [np.ones(2)])
    assert result.is_injective
    assert result.mapping.size == 0


def test_degenerate_overlaps_report_non_injective_mapping(caplog):
    # second choices keep colliding, the tie-break oscillates
    Y = list(np.eye(3))
    X = [
        np.array([0.9, 0.1, 0.0]),
        np.array([0.8, 0.5, 0.0]),
        np.array([0.7, 0.6, 0.0]),
    ]
    with caplog.at_level(logging.WARNING, logger="tpbasis.modeling.matching"):
        mapping, is_injective = match_vectors(X, Y)
    assert not is_injective
    assert len(set(mapping.tolist())) < 3
    assert "tie-break rounds" in caplog.text


def test_zero_rounds_skip_the_tie_break(caplog):
    Y = list(np.eye(2))
    X = [Y[0], Y[0]]
    with caplog.at_level(logging.WARNING):
        result = match_vectors(X, Y, max_rounds=0)
    assert result.mapping.tolist() == [0, 0]
    assert not result.is_injective


def test_group_indices():
    assert group_indices([2, 0, 2, 1, 0]) == {2: [0, 2], 0: [1, 4], 1: [3]}


def test_last_round_can_still_resolve_the_mapping(caplog):
    Y = list(np.eye(2))
    X = [np.array([1.0, 0.0]), np.array([0.8, 0.6])]
    with caplog.at_level(logging.WARNING, logger="tpbasis.modeling.matching"):
        mapping, is_injective = match_vectors(X, Y, max_rounds=1)
    assert is_injective
    assert mapping.tolist() == [0, 1]
    assert "tie-break rounds" not in caplog.text


def test_negative_rounds():
    Y = list(np.eye(2))
    with pytest.raises(RangeError):
        match_vectors(Y, Y, max_rounds=-1)
    with pytest.raises(TypeError):
        match_vectors(Y, Y, max_rounds=1.5)
