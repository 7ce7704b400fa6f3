"""
Elementary operations that work on both active and passive numbers.

Model and payoff code is written once and runs either under a live
recording (torch tensors with gradient tracking) or on plain floats.
These helpers dispatch to ``torch`` for tensors and to ``math`` otherwise.
"""

import math
from typing import Union

import torch

Scalar = Union[float, torch.Tensor]


def exp(x: Scalar) -> Scalar:
    """Exponential."""
    if isinstance(x, torch.Tensor):
        return torch.exp(x)
    return math.exp(x)


def sqrt(x: Scalar) -> Scalar:
    """Square root."""
    if isinstance(x, torch.Tensor):
        return torch.sqrt(x)
    return math.sqrt(x)


def maximum(x: Scalar, floor: float) -> Scalar:
    """
    Elementwise max(x, floor) with a constant floor.

    [T1] Call payoff: max(A - K, 0). The adjoint is 1 above the floor
    and 0 below it (pathwise derivative of the hockey stick).
    """
    if isinstance(x, torch.Tensor):
        return torch.clamp(x, min=floor)
    return max(x, floor)


def value(x: Scalar) -> float:
    """Numeric value of an active or passive number, detached from any recording."""
    if isinstance(x, torch.Tensor):
        return float(x.detach().item())
    return float(x)
