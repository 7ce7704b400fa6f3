"""
Term-structure curves.
"""

from aad_pricing.curves.base import Curve1D
from aad_pricing.curves.interpolation import LinearInterpolation

__all__ = [
    "Curve1D",
    "LinearInterpolation",
]
