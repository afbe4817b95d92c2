'''Immutable 2D affine transformations, stored as the top two rows of a homogeneous 3x3 matrix'''

__author__ = 'The affine2d developers'
__email__ = ''

import logging
LOGGER = logging.getLogger(__name__)

from typing import Any, Iterable, Self, Union

import numpy as np

from .arraytypes import (
    Shape,
    Array2x2,
    ArrayNx2,
    Vector2,
    Vector6,
    PointLike,
    PointsLike,
)


DTYPE = np.float64
IDENTITY_COEFFICIENTS : tuple[float, ...] = (
    1.0, 0.0, 0.0,
    0.0, 1.0, 0.0,
)

def _as_planar_array(positions : Union[PointLike, PointsLike]) -> np.ndarray[Shape[Any, 2], float]:
    '''Read any array-like whose last axis holds (x, y) pairs as a float64 array'''
    positions = np.asarray(positions, dtype=DTYPE)
    if (positions.ndim == 0) or (positions.shape[-1] != 2):
        raise ValueError(f'Planar points must have a final axis of length 2, not array of shape {positions.shape}')

    return positions

def _check_writable_floats(buffer : np.ndarray) -> None:
    '''Ensure an in-place target can hold transformed coordinates without truncation'''
    if not np.issubdtype(buffer.dtype, np.floating):
        raise TypeError(f'In-place transformation requires a floating-point array, not one of dtype "{buffer.dtype}"')


class Transform:
    '''
    A 2D affine transformation, represented by the six coefficients (a, b, c, d, e, f) of the matrix

        | a  b  c |
        | d  e  f |
        | 0  0  1 |

    which maps the point (x, y) to (a*x + b*y + c, d*x + e*y + f)
    The third row is implicit and never stored

    Transforms are immutable values; every operation which "modifies" a
    transform returns a new instance and leaves the receiver unchanged
    '''
    # DEV: verbiage follows matrix multiplication, i.e. "t.compose(u)" is t @ u and applies u FIRST,
    # while "t.then(u)" applies t first; keep these two straight when adding any new chaining methods
    __slots__ = ('_coefficients',)

    def __init__(self, coefficients : Iterable[float]=IDENTITY_COEFFICIENTS) -> None:
        coefficients = np.array(coefficients, dtype=DTYPE) # always copies, so caller storage is never aliased
        if coefficients.shape != (6,):
            raise ValueError(f'Planar affine transformation requires exactly 6 coefficients in row-major order, not array of shape {coefficients.shape}')
        coefficients.flags.writeable = False

        self._coefficients = coefficients

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}(coefficients={self.as_tuple()})'

    def __eq__(self, other : Any) -> bool:
        if not isinstance(other, Transform):
            return NotImplemented
        return bool(np.array_equal(self._coefficients, other._coefficients))

    def __hash__(self) -> int:
        return hash(self.as_tuple())

    def __matmul__(self, other : 'Transform') -> 'Transform':
        if not isinstance(other, Transform):
            return NotImplemented
        return self.compose(other)

    def __reduce__(self) -> tuple:
        return (self.__class__, (self.as_tuple(),))

    def isclose(self, other : 'Transform', rtol : float=1e-05, atol : float=1e-08) -> bool:
        '''Whether all coefficients of two transforms agree to within the given tolerances'''
        if not isinstance(other, Transform):
            raise TypeError(f'Can only compare {self.__class__.__name__} to another Transform, not to {type(other)}')
        return bool(np.allclose(self._coefficients, other._coefficients, rtol=rtol, atol=atol))

    # CONSTRUCTION
    @classmethod
    def identity(cls) -> Self:
        '''The transformation which leaves all points in place'''
        return cls(IDENTITY_COEFFICIENTS)

    @classmethod
    def rotation(cls, angle_rad : float=0.0) -> Self:
        '''
        Generates a transformation which rotates about the origin by "angle_rad" radians,
        counter-clockwise for positive angles in a right-handed coordinate system

        Parameters
        ----------
        angle_rad : float, default 0.0
            The angle of rotation, in radians

        Returns
        -------
        rotation : Transform
            The transformation representing the rotation
            With no arguments, returns the identity
        '''
        s = np.sin(angle_rad)
        c = np.cos(angle_rad)

        return cls((
            c, -s, 0.0,
            s,  c, 0.0,
        ))

    @classmethod
    def scaling(cls, sx : float=1.0, sy : float=1.0) -> Self:
        '''
        Generates a transformation which scales the basis by factors
        of (sx, sy) along the x and y axes, respectively

        Negative factors produce reflections, and zero factors collapse an
        axis (yielding a valid, but non-invertible, transformation)
        '''
        return cls((
            sx, 0.0, 0.0,
            0.0, sy, 0.0,
        ))

    @classmethod
    def shearing(cls, sx : float=0.0, sy : float=0.0) -> Self:
        '''Generates a transformation which shears x by sx*y and y by sy*x'''
        return cls((
            1.0, sx, 0.0,
            sy, 1.0, 0.0,
        ))

    @classmethod
    def translation(cls, tx : float=0.0, ty : float=0.0) -> Self:
        '''Generates a transformation which moves the origin (and all points in the plane along with it) to (tx, ty)'''
        return cls((
            1.0, 0.0, tx,
            0.0, 1.0, ty,
        ))

    @classmethod
    def from_coefficients(cls, coefficients : Iterable[float]) -> Self:
        '''Wrap six coefficients (a, b, c, d, e, f), given in row-major order, without validating their values'''
        return cls(coefficients)

    @classmethod
    def from_basis_change(cls, origin : PointLike, unit_x : PointLike) -> Self:
        '''
        Generates the transformation which maps the origin to "origin" and the point (1, 0) to "unit_x"

        The local y-axis is taken perpendicular to, and of the same length as, the local x-axis,
        so the result is always a similarity transformation (rotation + uniform scaling + translation)

        Parameters
        ----------
        origin : Array[[2,], float]
            The point in the plane which becomes the new local origin
        unit_x : Array[[2,], float]
            The point in the plane which the local unit x-vector should land on

        Returns
        -------
        frame : Transform
            The local-to-global transformation of the new coordinate frame
            Coincident "origin" and "unit_x" produce a degenerate (all-zero) linear part
        '''
        (ox, oy) = _as_planar_array(origin)
        (ux, uy) = _as_planar_array(unit_x)
        dx = ux - ox
        dy = uy - oy
        if (dx == 0.0) and (dy == 0.0):
            LOGGER.warning(f'Basis change from origin ({ox}, {oy}) has a zero-length x-axis; resulting transformation collapses the plane to a point')

        return cls((
            dx, -dy, ox,
            dy,  dx, oy,
        ))

    # ACCESSORS
    @property
    def coefficients(self) -> Vector6:
        '''Read-only view of the coefficients (a, b, c, d, e, f) in row-major order; writing to it raises ValueError'''
        return self._coefficients.view()

    def to_array(self) -> Vector6:
        '''An owned copy of the coefficients (a, b, c, d, e, f) in row-major order'''
        return self._coefficients.copy()

    def as_tuple(self) -> tuple[float, float, float, float, float, float]:
        return tuple(self._coefficients.tolist())

    @property
    def linear_part(self) -> Array2x2:
        '''The 2x2 submatrix (a, b; d, e) which acts on directions'''
        return self._coefficients.reshape(2, 3)[:, :2].copy()

    @property
    def offset(self) -> Vector2:
        '''The translation (c, f), i.e. the image of the origin'''
        return self._coefficients.reshape(2, 3)[:, 2].copy()

    @property
    def determinant(self) -> float:
        '''Determinant of the linear part; zero iff the transformation is not invertible'''
        (a, b, _, d, e, _) = self._coefficients
        return float(a*e - b*d)

    # COMPOSITION
    def compose(self, other : 'Transform') -> 'Transform':
        '''
        The matrix product (self @ other), i.e. the transformation which
        applies "other" FIRST and then applies "self"
        '''
        (ta, tb, tc, td, te, tf) = self._coefficients
        (ua, ub, uc, ud, ue, uf) = other._coefficients

        return Transform((
            ta*ua + tb*ud, ta*ub + tb*ue, ta*uc + tb*uf + tc,
            td*ua + te*ud, td*ub + te*ue, td*uc + te*uf + tf,
        ))

    def then(self, other : 'Transform') -> 'Transform':
        '''The transformation which applies "self" FIRST and then applies "other"; exactly other.compose(self)'''
        return other.compose(self)

    def rotate_then(self, angle_rad : float) -> 'Transform':
        '''This transformation followed by a rotation about the origin'''
        return self.then(Transform.rotation(angle_rad))

    def scale_then(self, sx : float, sy : float) -> 'Transform':
        '''This transformation followed by an axis-aligned scaling'''
        return self.then(Transform.scaling(sx, sy))

    def shear_then(self, sx : float, sy : float) -> 'Transform':
        return self.then(Transform.shearing(sx, sy))

    def translate_then(self, tx : float, ty : float) -> 'Transform':
        '''This transformation followed by a translation'''
        return self.then(Transform.translation(tx, ty))

    # INVERSION
    def inverse(self) -> 'Transform':
        '''
        The transformation which undoes this one, computed in closed form from the
        determinant of the linear part

        Singular transformations (zero determinant) are NOT rejected; the division by
        zero follows IEEE-754 semantics and yields infinite and/or NaN coefficients,
        so callers needing a hard failure should check the determinant first
        '''
        (a, b, c, d, e, f) = self._coefficients
        det = a*e - b*d
        if det == 0.0:
            LOGGER.warning(f'Inverting singular transformation {self.as_tuple()}; inverse coefficients will be non-finite')

        with np.errstate(divide='ignore', invalid='ignore'): # division by zero is the documented outcome here
            return Transform((
                e / det, -b / det, (b*f - c*e) / det,
                -d / det, a / det, (c*d - a*f) / det,
            ))

    # APPLICATION
    def apply(self, points : Union[PointLike, PointsLike]) -> np.ndarray[Shape[Any, 2], float]:
        '''
        Transform a point (or arbitrarily-nested array of points) into a new array

        Parameters
        ----------
        points : Array[[..., 2], float]
            Coordinates to transform; only the last axis must have length 2

        Returns
        -------
        Array[[..., 2], float]
            The transformed coordinates, with the same shape as the input
        '''
        positions = _as_planar_array(points)
        (a, b, c, d, e, f) = self._coefficients
        x = positions[..., 0]
        y = positions[..., 1]

        return np.stack([a*x + b*y + c, d*x + e*y + f], axis=-1)

    def apply_xy(self, x : float, y : float) -> tuple[float, float]:
        '''Transform a single pair of coordinates, given and returned as plain floats'''
        (a, b, c, d, e, f) = self._coefficients
        return float(a*x + b*y + c), float(d*x + e*y + f)

    def apply_in_place(self, point : Union[list[float], Vector2]) -> Union[list[float], Vector2]:
        '''Overwrite a caller-owned mutable point (list or float array) with its image; returns that same object'''
        if isinstance(point, np.ndarray):
            _check_writable_floats(point)
            point[...] = self.apply(point)
        else:
            point[0], point[1] = self.apply_xy(point[0], point[1])

        return point

    def apply_direction(self, vectors : Union[PointLike, PointsLike]) -> np.ndarray[Shape[Any, 2], float]:
        '''Transform a direction (or array of directions) by the linear part only, ignoring translation'''
        directions = _as_planar_array(vectors)
        (a, b, _, d, e, _) = self._coefficients
        x = directions[..., 0]
        y = directions[..., 1]

        return np.stack([a*x + b*y, d*x + e*y], axis=-1)

    def apply_to_sequence(self, points : PointsLike) -> ArrayNx2:
        '''Transform an ordered sequence of N points into a new (N, 2) array, preserving order'''
        positions = np.asarray(points, dtype=DTYPE)
        if positions.size == 0:
            return np.empty((0, 2), dtype=DTYPE)
        if positions.ndim != 2:
            raise ValueError(f'Sequence of planar points must have shape (N, 2), not {positions.shape}')

        return self.apply(positions)

    def apply_to_sequence_in_place(self, points : Union[list[list[float]], ArrayNx2]) -> Union[list[list[float]], ArrayNx2]:
        '''
        Overwrite each point of a caller-owned sequence with its image, in order; returns that same container
        Accepts either a float array of shape (N, 2) or a list of mutable (x, y) pairs
        '''
        if isinstance(points, np.ndarray):
            _check_writable_floats(points)
            if points.size != 0:
                points[...] = self.apply_to_sequence(points)
        else:
            for point in points:
                self.apply_in_place(point)

        return points


# FUNCTIONAL COMPOSITION
def compose(t : Transform, u : Transform) -> Transform:
    '''Matrix-order composition t @ u: applies u first, then t'''
    return t.compose(u)

def then(t : Transform, u : Transform) -> Transform:
    '''Pipeline-order composition: applies t first, then u'''
    return t.then(u)
