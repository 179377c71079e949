"""Core models shared by the protocol adapters."""

from defi_adapters.core.models import (
    BaseBeefyVault,
    BeefyApyBreakdown,
    BeefyPrices,
    BeefyToken,
    BeefyTvls,
    BeefyVault,
    BeefyVaults,
    GovVault,
    NetworkId,
    VaultZap,
)

__all__ = [
    "BaseBeefyVault",
    "BeefyApyBreakdown",
    "BeefyPrices",
    "BeefyToken",
    "BeefyTvls",
    "BeefyVault",
    "BeefyVaults",
    "GovVault",
    "NetworkId",
    "VaultZap",
]
