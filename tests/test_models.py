"""Tests for Pydantic data models."""

import pytest
from pydantic import ValidationError

from defi_adapters.core.models import (
    BaseBeefyVault,
    BeefyToken,
    BeefyVaults,
    GovVault,
    NetworkId,
    VaultZap,
)


def test_base_vault_model():
    """Test BaseBeefyVault parses camelCase API fields."""
    vault = BaseBeefyVault.model_validate(
        {
            "id": "curve-eth-usdc",
            "name": "USDC/WETH",
            "earnContractAddress": "0x1111111111111111111111111111111111111111",
            "earnedTokenAddress": "0x1111111111111111111111111111111111111111",
            "strategy": "0x2222222222222222222222222222222222222222",
            "pricePerFullShare": "1000000000000000000",
            "chain": "ethereum",
        }
    )

    assert vault.id == "curve-eth-usdc"
    assert vault.type == "standard"
    assert vault.token_address is None
    assert vault.token_decimals == 18
    assert vault.deposit_token_addresses == ()
    assert vault.risks is None
    assert vault.zaps == ()
    assert vault.is_gov_vault is False


def test_base_vault_requires_strategy():
    """Test standard vaults need their strategy fields."""
    with pytest.raises(ValidationError):
        BaseBeefyVault.model_validate(
            {"id": "x", "name": "x", "earnContractAddress": "0x1", "chain": "base"},
        )


def test_gov_vault_model():
    """Test GovVault has a tuple of earned token addresses."""
    vault = GovVault.model_validate(
        {
            "id": "celo-rewardpool",
            "name": "CELO Pool",
            "type": "gov",
            "isGovVault": True,
            "earnContractAddress": "0x3333333333333333333333333333333333333333",
            "earnedTokenAddress": ["0x4444444444444444444444444444444444444444"],
            "chain": "celo",
        }
    )

    assert vault.type == "gov"
    assert vault.is_gov_vault is True
    assert vault.earned_token_address == ("0x4444444444444444444444444444444444444444",)


def test_gov_vault_rejects_standard_type():
    """Test governance vaults must be tagged 'gov'."""
    with pytest.raises(ValidationError):
        GovVault.model_validate(
            {
                "id": "x",
                "name": "x",
                "type": "standard",
                "earnContractAddress": "0x1",
                "earnedTokenAddress": [],
                "chain": "base",
            }
        )


def test_vault_models_are_frozen():
    """Test vault snapshots can't be mutated."""
    zap = VaultZap(strategy_id="single")

    with pytest.raises(ValidationError):
        zap.strategy_id = "other"


def test_zap_model():
    """Test VaultZap optional AMM."""
    zap = VaultZap.model_validate({"strategyId": "uniswap-v2", "ammId": "ethereum-uniswap"})

    assert zap.strategy_id == "uniswap-v2"
    assert zap.amm_id == "ethereum-uniswap"
    assert VaultZap(strategy_id="single").amm_id is None


def test_beefy_vaults_defaults():
    """Test empty vault listings."""
    listing = BeefyVaults()

    assert listing.vaults == ()
    assert listing.gov_vaults == ()


def test_beefy_token_model():
    """Test BeefyToken keeps extra metadata."""
    token = BeefyToken.model_validate(
        {"address": "0xABC", "oracle": "tokens", "oracleId": "USDC", "decimals": 6, "symbol": "USDC"}
    )

    assert token.oracle_id == "USDC"
    assert token.model_extra == {"decimals": 6, "symbol": "USDC"}


def test_network_id_enum():
    """Test NetworkId enum values."""
    assert NetworkId.ETHEREUM_MAINNET.value == "ethereum-mainnet"
    assert NetworkId.OP_MAINNET.value == "op-mainnet"
    assert NetworkId("base-sepolia") is NetworkId.BASE_SEPOLIA
    assert len(NetworkId) == 12
