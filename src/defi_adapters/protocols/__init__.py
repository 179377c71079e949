"""Clients for third-party DeFi protocol APIs."""

from defi_adapters.protocols.beefy_api import (
    BeefyAPIClient,
    BeefyAPIError,
    UnsupportedNetworkError,
    merge_prices,
)

__all__ = [
    "BeefyAPIClient",
    "BeefyAPIError",
    "UnsupportedNetworkError",
    "merge_prices",
]
