"""Beefy Finance REST API client."""

import asyncio
import logging
from decimal import Decimal
from typing import Any

import httpx
from pydantic import TypeAdapter, ValidationError

from defi_adapters.cache import CacheConfig, FetchCache
from defi_adapters.core.models import (
    BaseBeefyVault,
    BeefyApyBreakdown,
    BeefyPrices,
    BeefyToken,
    BeefyTvls,
    BeefyVaults,
    GovVault,
    NetworkId,
)
from defi_adapters.data import get_beefy_chain, get_chain_id

logger = logging.getLogger(__name__)

_BASE_VAULTS = TypeAdapter(list[BaseBeefyVault])
_GOV_VAULTS = TypeAdapter(list[GovVault])
_TOKENS = TypeAdapter(dict[str, BeefyToken])


class BeefyAPIError(Exception):
    """Exception raised for Beefy API errors."""


class UnsupportedNetworkError(BeefyAPIError):
    """Exception raised for networks Beefy doesn't support."""


def _to_decimal(value: Any) -> Decimal | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int | float):
        msg = f"Expected a number, got {value!r}"
        raise BeefyAPIError(msg)
    return Decimal(str(value))


def _to_decimal_map(data: dict[str, Any]) -> dict[str, Decimal | None]:
    return {key: _to_decimal(value) for key, value in data.items()}


def merge_prices(
    lp_prices: dict[str, Any],
    token_prices: dict[str, Any],
    tokens: dict[str, BeefyToken],
) -> BeefyPrices:
    """
    Combine LP prices with token prices keyed by token address.

    Parameters
    ----------
    lp_prices : dict[str, Any]
        LP oracle id to USD price
    token_prices : dict[str, Any]
        Token oracle id to USD price
    tokens : dict[str, BeefyToken]
        Token metadata for one chain

    Returns
    -------
    BeefyPrices
        LP prices plus lower-cased token addresses mapped to their price

    """
    prices = _to_decimal_map(lp_prices)
    for token in tokens.values():
        # LP oracles are already covered by lp_prices
        if token.oracle != "tokens":
            continue
        prices[token.address.lower()] = _to_decimal(token_prices.get(token.oracle_id))
    return prices


class BeefyAPIClient:
    """
    Client for Beefy Finance REST API.

    Fetches vault listings, prices, TVL and APY data. Each dataset is served
    through its own short-lived fetch cache, so bursts of concurrent requests
    for the same data result in a single outbound call.

    Parameters
    ----------
    base_url : str
        API base URL
    timeout : float
        Request timeout in seconds
    cache_config : CacheConfig | None
        Configuration shared by the dataset caches
    client : httpx.AsyncClient | None
        HTTP client to use. A client is created (and owned) if None.

    """

    BASE_URL = "https://api.beefy.finance"

    def __init__(
        self,
        base_url: str = BASE_URL,
        timeout: float = 30.0,
        cache_config: CacheConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=timeout)

        cache_config = cache_config or CacheConfig()
        self.apy_cache: FetchCache[str, BeefyApyBreakdown] = FetchCache(
            self._fetch_apy_breakdown, cache_config, name="apy"
        )
        self.tvl_cache: FetchCache[str, dict[str, BeefyTvls]] = FetchCache(
            self._fetch_tvls, cache_config, name="tvl"
        )
        self.vaults_cache: FetchCache[NetworkId, BeefyVaults] = FetchCache(
            self._fetch_vaults, cache_config, name="vaults"
        )
        self.prices_cache: FetchCache[NetworkId, BeefyPrices] = FetchCache(
            self._fetch_prices, cache_config, name="prices"
        )

    async def get_apy_breakdown(self) -> BeefyApyBreakdown:
        """
        Fetch APY breakdown for all vaults.

        Returns
        -------
        BeefyApyBreakdown
            Mapping of vault IDs to APY components. The mapping is a copy and
            can be modified by the caller.

        Raises
        ------
        BeefyAPIError
            If the data can't be fetched

        """
        data = await self._fetch_cached(self.apy_cache, f"{self.base_url}/apy/breakdown/", "APY breakdown")
        return {
            vault_id: dict(breakdown) if breakdown is not None else None
            for vault_id, breakdown in data.items()
        }

    async def get_tvls(self, network_id: NetworkId) -> BeefyTvls:
        """
        Fetch TVL by vault for a network.

        Parameters
        ----------
        network_id : NetworkId
            Network identifier

        Returns
        -------
        BeefyTvls
            Mapping of vault IDs to TVL in USD, empty if the network has no TVL data

        Raises
        ------
        BeefyAPIError
            If the data can't be fetched

        """
        data = await self._fetch_cached(self.tvl_cache, f"{self.base_url}/tvl/", "TVL")
        # TVL response is keyed by chain ID, and JSON object keys are strings
        return dict(data.get(str(get_chain_id(network_id))) or {})

    async def get_beefy_vaults(self, network_id: NetworkId) -> BeefyVaults:
        """
        Fetch standard and governance vaults for a network.

        Parameters
        ----------
        network_id : NetworkId
            Network identifier

        Returns
        -------
        BeefyVaults
            Both vault listings, in API order

        Raises
        ------
        UnsupportedNetworkError
            If Beefy doesn't support the network
        BeefyAPIError
            If the data can't be fetched

        """
        self._require_beefy_chain(network_id)
        return await self._fetch_cached(self.vaults_cache, network_id, "vaults")

    async def get_beefy_prices(self, network_id: NetworkId) -> BeefyPrices:
        """
        Fetch USD prices for LPs and tokens on a network.

        Parameters
        ----------
        network_id : NetworkId
            Network identifier

        Returns
        -------
        BeefyPrices
            Mapping of LP oracle IDs and lower-cased token addresses to USD prices. The mapping
            is a copy and can be modified by the caller.

        Raises
        ------
        UnsupportedNetworkError
            If Beefy doesn't support the network
        BeefyAPIError
            If the data can't be fetched

        """
        self._require_beefy_chain(network_id)
        return dict(await self._fetch_cached(self.prices_cache, network_id, "prices"))

    async def _fetch_cached(self, cache: FetchCache, key: Any, label: str) -> Any:
        try:
            result = await cache.fetch(key)
        except BeefyAPIError as e:
            msg = f"Failed to fetch {label} data"
            raise BeefyAPIError(msg) from e

        if result is None:
            msg = f"Failed to fetch {label} data"
            raise BeefyAPIError(msg)

        return result

    def _require_beefy_chain(self, network_id: NetworkId) -> str:
        beefy_chain = get_beefy_chain(network_id)
        if not beefy_chain:
            msg = f"Unsupported network: {network_id}"
            raise UnsupportedNetworkError(msg)
        return beefy_chain

    async def _fetch_json(self, url: str) -> Any:
        """
        GET a URL and decode its JSON body.

        Parameters
        ----------
        url : str
            Absolute URL

        Returns
        -------
        Any
            Decoded JSON

        Raises
        ------
        BeefyAPIError
            If the API request fails

        """
        logger.debug("GET %s", url)
        try:
            response = await self.client.get(url)
            response.raise_for_status()
            return response.json()

        except httpx.TimeoutException as e:
            msg = f"Request timeout: {e}"
            raise BeefyAPIError(msg) from e
        except httpx.HTTPStatusError as e:
            msg = f"HTTP error {e.response.status_code}: {e}"
            raise BeefyAPIError(msg) from e
        except httpx.HTTPError as e:
            msg = f"HTTP request failed: {e}"
            raise BeefyAPIError(msg) from e
        except ValueError as e:
            msg = f"Invalid JSON from {url}: {e}"
            raise BeefyAPIError(msg) from e

    async def _fetch_apy_breakdown(self, url: str) -> BeefyApyBreakdown | None:
        data = await self._fetch_json(url)
        if data is None:
            return None

        try:
            return {
                vault_id: _to_decimal_map(breakdown) if breakdown is not None else None
                for vault_id, breakdown in data.items()
            }
        except AttributeError as e:
            msg = f"Unexpected APY breakdown payload: {e}"
            raise BeefyAPIError(msg) from e

    async def _fetch_tvls(self, url: str) -> dict[str, BeefyTvls] | None:
        data = await self._fetch_json(url)
        if data is None:
            return None

        try:
            return {chain_id: _to_decimal_map(tvls or {}) for chain_id, tvls in data.items()}
        except AttributeError as e:
            msg = f"Unexpected TVL payload: {e}"
            raise BeefyAPIError(msg) from e

    async def _fetch_vaults(self, network_id: NetworkId) -> BeefyVaults:
        beefy_chain = self._require_beefy_chain(network_id)

        vaults_raw, gov_vaults_raw = await asyncio.gather(
            self._fetch_json(f"{self.base_url}/harvestable-vaults/{beefy_chain}"),
            self._fetch_json(f"{self.base_url}/gov-vaults/{beefy_chain}"),
        )

        try:
            return BeefyVaults(
                vaults=_BASE_VAULTS.validate_python(vaults_raw),
                gov_vaults=_GOV_VAULTS.validate_python(gov_vaults_raw),
            )
        except ValidationError as e:
            msg = f"Unexpected vaults payload for {beefy_chain}: {e}"
            raise BeefyAPIError(msg) from e

    async def _fetch_prices(self, network_id: NetworkId) -> BeefyPrices:
        beefy_chain = self._require_beefy_chain(network_id)

        lp_prices, token_prices, tokens_raw = await asyncio.gather(
            self._fetch_json(f"{self.base_url}/lps"),
            self._fetch_json(f"{self.base_url}/prices"),
            self._fetch_json(f"{self.base_url}/tokens/{beefy_chain}"),
        )

        try:
            tokens = _TOKENS.validate_python(tokens_raw)
            return merge_prices(lp_prices, token_prices, tokens)
        except (ValidationError, AttributeError) as e:
            msg = f"Unexpected prices payload for {beefy_chain}: {e}"
            raise BeefyAPIError(msg) from e

    async def aclose(self) -> None:
        """Close the HTTP client, if owned by this instance."""
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self) -> "BeefyAPIClient":
        """Async context manager entry."""
        return self

    async def __aexit__(
        self,
        exc_type: type | None,
        exc_val: Exception | None,
        exc_tb: object | None,
    ) -> None:
        """Async context manager exit."""
        await self.aclose()
