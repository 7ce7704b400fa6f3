"""
Reverse-mode differentiation substrate (PyTorch autograd adapter).
"""

from aad_pricing.aad import ops
from aad_pricing.aad.tape import DTYPE, Recording, Tape

__all__ = [
    "DTYPE",
    "Recording",
    "Tape",
    "ops",
]
