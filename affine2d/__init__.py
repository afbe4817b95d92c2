'''
Representation, composition, and application of 2D affine transformations,
i.e. linear maps of the plane plus a translation, stored as 2x3 matrices
'''

__author__ = 'The affine2d developers'
__email__ = ''
__version__ = '0.1.0'

from .transform import (
    Transform,
    compose,
    then,
    IDENTITY_COEFFICIENTS,
)
