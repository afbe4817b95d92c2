'''Typehints specific to numpy and planar coordinate arrays'''

__author__ = 'The affine2d developers'
__email__ = ''

from typing import Annotated, Sequence, TypeVar, Union

import numpy as np
import numpy.typing as npt
from numbers import Number


# Numeric typehints
Numeric = TypeVar('Numeric', bound=Number) # typehint a number-like generic type

# Numpy array type annotations
Shape = tuple # the shape field of a numpy array
DType = TypeVar('DType', bound=np.generic) # the data type of a numpy array

N = TypeVar('N', bound=int) # typehint the size of a given dimension

# Fixed-size vector and array type annotations
Vector2  = Annotated[npt.NDArray[DType], Shape[2]]
Vector6  = Annotated[npt.NDArray[DType], Shape[6]]
Array2x2 = Annotated[npt.NDArray[DType], Shape[2, 2]]
ArrayNx2 = Annotated[npt.NDArray[DType], Shape[N, 2]]

# caller-owned planar operands; anything numpy can read as (..., 2)
PointLike = Union[Sequence[float], Vector2]
PointsLike = Union[Sequence[Sequence[float]], ArrayNx2]
