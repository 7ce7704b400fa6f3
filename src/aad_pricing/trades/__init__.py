"""
Path-dependent trades.
"""

from aad_pricing.trades.asian import AsianOption
from aad_pricing.trades.base import Trade

__all__ = [
    "AsianOption",
    "Trade",
]
