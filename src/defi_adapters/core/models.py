"""Data models for networks, Beefy vaults, tokens and price payloads."""

from decimal import Decimal
from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class NetworkId(StrEnum):
    """Internal network identifier."""

    CELO_MAINNET = "celo-mainnet"
    ETHEREUM_MAINNET = "ethereum-mainnet"
    ARBITRUM_ONE = "arbitrum-one"
    OP_MAINNET = "op-mainnet"
    POLYGON_POS_MAINNET = "polygon-pos-mainnet"
    BASE_MAINNET = "base-mainnet"
    CELO_ALFAJORES = "celo-alfajores"
    ETHEREUM_SEPOLIA = "ethereum-sepolia"
    ARBITRUM_SEPOLIA = "arbitrum-sepolia"
    OP_SEPOLIA = "op-sepolia"
    POLYGON_POS_AMOY = "polygon-pos-amoy"
    BASE_SEPOLIA = "base-sepolia"


# Flat maps keyed by oracle id, token address or asset id
BeefyPrices = dict[str, Decimal | None]
BeefyTvls = dict[str, Decimal | None]

# Vault id to APY components (e.g. vaultApr, totalApy)
BeefyApyBreakdown = dict[str, dict[str, Decimal] | None]


class _BeefyPayload(BaseModel):
    """Base for models parsed from Beefy API JSON."""

    model_config = ConfigDict(populate_by_name=True, extra="allow", frozen=True)


class VaultZap(_BeefyPayload):
    """
    Zap route supported by a vault.

    Attributes
    ----------
    strategy_id : str
        Zap strategy (e.g., 'single', 'uniswap-v2')
    amm_id : str | None
        AMM used by the zap, for AMM based strategies

    """

    strategy_id: str = Field(alias="strategyId")
    amm_id: str | None = Field(default=None, alias="ammId")


class BeefyVault(_BeefyPayload):
    """
    Beefy vault descriptor shared by standard and governance vaults.

    Attributes
    ----------
    id : str
        Beefy vault identifier
    name : str
        Display name
    type : str
        Vault category ('standard', 'cowcentrated', 'gov')
    token : str
        Deposit token symbol
    token_address : str | None
        Deposit token address, None for native deposits
    earn_contract_address : str
        Vault contract address
    risks : tuple[str, ...] | None
        Risk tags, None when the API has none
    zaps : tuple[VaultZap, ...]
        Zap routes, empty when the API has none

    """

    id: str
    name: str
    type: str = "standard"
    sub_type: str | None = Field(default=None, alias="subType")
    token: str = ""
    token_address: str | None = Field(default=None, alias="tokenAddress")
    token_decimals: int = Field(default=18, alias="tokenDecimals")
    token_provider_id: str | None = Field(default=None, alias="tokenProviderId")
    earned_token: str = Field(default="", alias="earnedToken")
    earn_contract_address: str = Field(alias="earnContractAddress")
    status: str = "active"
    platform_id: str | None = Field(default=None, alias="platformId")
    assets: tuple[str, ...] = ()
    risks: tuple[str, ...] | None = None
    strategy_type_id: str | None = Field(default=None, alias="strategyTypeId")
    network: str | None = None
    chain: str
    zaps: tuple[VaultZap, ...] = ()
    is_gov_vault: bool = Field(default=False, alias="isGovVault")
    oracle: str | None = None
    oracle_id: str | None = Field(default=None, alias="oracleId")
    created_at: int | None = Field(default=None, alias="createdAt")

    @field_validator("zaps", mode="before")
    @classmethod
    def _null_zaps(cls, value: object) -> object:
        return () if value is None else value


class BaseBeefyVault(BeefyVault):
    """
    Standard (harvestable) Beefy vault.

    Attributes
    ----------
    earned_token_address : str
        Vault share token address
    deposit_token_addresses : tuple[str, ...]
        Addresses accepted for deposit
    strategy : str
        Strategy contract address
    price_per_full_share : str
        Share price as an 18-decimal integer string

    """

    earned_token_address: str = Field(alias="earnedTokenAddress")
    deposit_token_addresses: tuple[str, ...] = Field(default=(), alias="depositTokenAddresses")
    strategy: str
    price_per_full_share: str = Field(alias="pricePerFullShare")


class GovVault(BeefyVault):
    """Governance vault, rewarding in one or more earned tokens."""

    type: Literal["gov"] = "gov"
    is_gov_vault: Literal[True] = Field(default=True, alias="isGovVault")
    earned_token_address: tuple[str, ...] = Field(alias="earnedTokenAddress")


class BeefyVaults(BaseModel):
    """
    Vault listings for one network.

    Instances are shared between callers through the cache, so the listings
    are immutable tuples.

    Attributes
    ----------
    vaults : tuple[BaseBeefyVault, ...]
        Harvestable vaults, in API order
    gov_vaults : tuple[GovVault, ...]
        Governance vaults, in API order

    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    vaults: tuple[BaseBeefyVault, ...] = ()
    gov_vaults: tuple[GovVault, ...] = Field(default=(), alias="govVaults")


class BeefyToken(_BeefyPayload):
    """
    Token metadata from the Beefy tokens endpoint.

    Attributes
    ----------
    address : str
        Token contract address
    oracle : str
        Price source type ('tokens', 'lps')
    oracle_id : str
        Key into the matching price map

    """

    address: str
    oracle: str
    oracle_id: str = Field(alias="oracleId")
