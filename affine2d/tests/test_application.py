'''Unit tests for applying planar affine transformations to points and directions'''

__author__ = 'The affine2d developers'
__email__ = ''

import pytest
from typing import Any

import numpy as np

from affine2d.transform import Transform


SQUARE = [(0, 0), (1, 0), (1, 1), (0, 1)]
rng = np.random.default_rng(seed=1729)
points = rng.uniform(-10.0, 10.0, size=(25, 2))
TRANSFORMS = [
    Transform.rotation(1.1),
    Transform.scaling(-2.0, 0.5),
    Transform.shearing(0.25, 1.5),
    Transform.translation(3.0, -8.0),
    Transform.from_coefficients(rng.uniform(-5.0, 5.0, size=6)),
]


# POINT APPLICATION
def test_rotation_half_turn() -> None:
    assert np.allclose(Transform.rotation(np.pi).apply((1, 0)), (-1, 0))

@pytest.mark.parametrize('point', [(0.0, 0.0), (1.0, -2.0), (-1e300, 3.5e-300), (np.pi, -np.e)])
def test_identity_leaves_points_unchanged(point : tuple[float, float]) -> None:
    '''Test that the identity reproduces points exactly, not merely approximately'''
    assert np.array_equal(Transform.identity().apply(point), point)

@pytest.mark.parametrize('transform', TRANSFORMS)
def test_inverse_undoes_application(transform : Transform) -> None:
    '''Test that applying a transformation and then its inverse recovers the original points'''
    assert np.allclose(transform.inverse().apply(transform.apply(points)), points)

def test_apply_returns_new_array() -> None:
    '''Test that application does not modify the points supplied'''
    original = points.copy()
    transformed = Transform.translation(1.0, 1.0).apply(points)
    assert np.array_equal(points, original)
    assert not np.shares_memory(transformed, points)

def test_apply_nested_shape() -> None:
    '''Test that arbitrarily-nested arrays of points keep their shape'''
    block = rng.random((4, 3, 2))
    transformed = TRANSFORMS[-1].apply(block)
    assert transformed.shape == block.shape
    assert np.array_equal(transformed[2, 1], TRANSFORMS[-1].apply(block[2, 1]))

@pytest.mark.parametrize('bad_input', [5.0, (1, 2, 3), np.zeros((4, 3))])
def test_apply_rejects_non_planar(bad_input : Any) -> None:
    with pytest.raises(ValueError):
        Transform.identity().apply(bad_input)

@pytest.mark.parametrize('transform', TRANSFORMS)
def test_apply_xy_matches_apply(transform : Transform) -> None:
    '''Test that the scalar coordinate form agrees exactly with array application'''
    (x, y) = points[0]
    assert transform.apply_xy(x, y) == tuple(transform.apply(points[0]).tolist())


# IN-PLACE APPLICATION
@pytest.mark.parametrize('transform', TRANSFORMS)
def test_apply_in_place_list(transform : Transform) -> None:
    '''Test that in-place application into a list matches out-of-place application and returns the same object'''
    point = [2.5, -7.0]
    expected = transform.apply(point)
    result = transform.apply_in_place(point)
    assert result is point
    assert np.array_equal(point, expected)

@pytest.mark.parametrize('transform', TRANSFORMS)
def test_apply_in_place_array(transform : Transform) -> None:
    point = np.array([2.5, -7.0])
    expected = transform.apply(point)
    result = transform.apply_in_place(point)
    assert result is point
    assert np.array_equal(point, expected)

@pytest.mark.parametrize('dtype', [int, np.int32, np.uint8, bool])
def test_apply_in_place_rejects_non_float_array(dtype : type) -> None:
    '''Test that in-place application refuses arrays which would truncate the transformed coordinates'''
    point = np.array([1, 3], dtype=dtype)
    with pytest.raises(TypeError):
        Transform.translation(0.25, 0.25).apply_in_place(point)
    assert np.array_equal(point, np.array([1, 3], dtype=dtype)) # left untouched


# DIRECTION APPLICATION
def test_direction_ignores_translation() -> None:
    '''Test that changing only the translation of a transformation has no effect on directions'''
    (a, b, c, d, e, f) = TRANSFORMS[-1].as_tuple()
    moved = Transform.from_coefficients((a, b, c + 100.0, d, e, f - 42.0))
    assert np.array_equal(TRANSFORMS[-1].apply_direction(points), moved.apply_direction(points))

@pytest.mark.parametrize('transform', TRANSFORMS)
def test_direction_is_difference_of_points(transform : Transform) -> None:
    '''Test that a direction transforms like the difference between two transformed points'''
    (p, q) = points[:2]
    assert np.allclose(transform.apply_direction(q - p), transform.apply(q) - transform.apply(p))


# SEQUENCE APPLICATION
def test_scale_square() -> None:
    transformed = Transform.scaling(2, 3).apply_to_sequence(SQUARE)
    assert np.array_equal(transformed, [(0, 0), (2, 0), (2, 3), (0, 3)])

@pytest.mark.parametrize('transform', TRANSFORMS)
def test_sequence_matches_pointwise(transform : Transform) -> None:
    '''Test that transforming a whole sequence is bit-identical to transforming each point in order'''
    expected = np.array([transform.apply(point) for point in points])
    assert np.array_equal(transform.apply_to_sequence(points), expected)

def test_empty_sequence() -> None:
    assert Transform.rotation(0.3).apply_to_sequence([]).shape == (0, 2)

@pytest.mark.parametrize('transform', TRANSFORMS)
def test_sequence_in_place_array(transform : Transform) -> None:
    '''Test that in-place transformation of an array overwrites every row with its pointwise image'''
    expected = np.array([transform.apply(point) for point in points])
    buffer = points.copy()
    result = transform.apply_to_sequence_in_place(buffer)
    assert result is buffer
    assert np.array_equal(buffer, expected)

def test_sequence_in_place_list() -> None:
    '''Test that in-place transformation of a list of pairs mutates each pair, preserving order'''
    square = [list(point) for point in SQUARE]
    first_vertex = square[0]
    Transform.scaling(2, 3).apply_to_sequence_in_place(square)
    assert square == [[0, 0], [2, 0], [2, 3], [0, 3]]
    assert square[0] is first_vertex

@pytest.mark.parametrize('dtype', [int, np.int64, np.uint16])
def test_sequence_in_place_rejects_non_float_array(dtype : type) -> None:
    '''Test that in-place transformation of an integer array raises instead of silently truncating'''
    buffer = np.array([[1, 3], [5, 7]], dtype=dtype)
    with pytest.raises(TypeError):
        Transform.scaling(0.5, 0.5).apply_to_sequence_in_place(buffer)
    assert np.array_equal(buffer, [[1, 3], [5, 7]])

def test_sequence_in_place_list_of_integer_arrays() -> None:
    '''Test that integer rows inside a list are also refused rather than truncated'''
    rows = [np.array([1, 3]), np.array([5, 7])]
    with pytest.raises(TypeError):
        Transform.scaling(0.5, 0.5).apply_to_sequence_in_place(rows)
