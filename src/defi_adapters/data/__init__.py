"""Static network configuration."""

from defi_adapters.data.loader import (
    get_all_network_ids,
    get_beefy_chain,
    get_chain_id,
    get_network_config,
    get_supported_network_ids,
    load_networks,
)

__all__ = [
    "get_all_network_ids",
    "get_beefy_chain",
    "get_chain_id",
    "get_network_config",
    "get_supported_network_ids",
    "load_networks",
]
