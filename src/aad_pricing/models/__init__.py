"""
Stochastic models.
"""

from aad_pricing.models.base import Model
from aad_pricing.models.lognormal import LogNormalProcess

__all__ = [
    "LogNormalProcess",
    "Model",
]
