"""Static network table loader."""

from functools import cache
from pathlib import Path
from typing import Any

import yaml

from defi_adapters.core.models import NetworkId


@cache
def load_networks() -> dict[str, Any]:
    """
    Load the network table from networks.yaml.

    The table ships with the package and is read once per process.

    Returns
    -------
    dict[str, Any]
        Network configuration keyed by network identifier

    """
    path = Path(__file__).parent / "networks.yaml"
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f)["networks"]


def get_network_config(network_id: NetworkId | str) -> dict[str, Any]:
    """
    Get configuration for a specific network.

    Parameters
    ----------
    network_id : NetworkId | str
        Network identifier (e.g., 'ethereum-mainnet')

    Returns
    -------
    dict[str, Any]
        Network configuration with 'beefy_chain' and 'chain_id'

    Raises
    ------
    KeyError
        If network is not found in configuration

    """
    return load_networks()[str(network_id)]


def get_beefy_chain(network_id: NetworkId | str) -> str | None:
    """
    Get the Beefy chain name for a network.

    Parameters
    ----------
    network_id : NetworkId | str
        Network identifier

    Returns
    -------
    str | None
        Chain name used in Beefy API paths, None if Beefy doesn't support the network

    """
    return get_network_config(network_id)["beefy_chain"]


def get_chain_id(network_id: NetworkId | str) -> int:
    """
    Get numeric chain ID.

    Parameters
    ----------
    network_id : NetworkId | str
        Network identifier

    Returns
    -------
    int
        Chain ID

    """
    return get_network_config(network_id)["chain_id"]


def get_all_network_ids() -> list[NetworkId]:
    """
    Get list of all configured network identifiers.

    Returns
    -------
    list[NetworkId]
        Network identifiers in table order

    """
    return [NetworkId(network_id) for network_id in load_networks()]


def get_supported_network_ids() -> list[NetworkId]:
    """
    Get networks that Beefy supports.

    Returns
    -------
    list[NetworkId]
        Network identifiers with a Beefy chain

    """
    return [network_id for network_id in get_all_network_ids() if get_beefy_chain(network_id) is not None]
