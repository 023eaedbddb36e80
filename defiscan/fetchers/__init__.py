"""
External data fetchers.

Available fetchers:
- defillama: protocol listing, historical chain TVL, single protocol TVL
"""

from .defillama import DefiLlamaService

__all__ = [
    "DefiLlamaService",
]
