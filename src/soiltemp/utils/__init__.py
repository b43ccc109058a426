"""Utility modules for soiltemp."""

from soiltemp.utils.layers import remap_amount, remap_concentration

__all__ = [
    "remap_amount",
    "remap_concentration",
]
