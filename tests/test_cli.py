"""Tests for the command line interface."""

import json

import pytest
from typer.testing import CliRunner

from defi_adapters.cli import main as cli_main

runner = CliRunner()


@pytest.fixture
def cli_api(fake_api, make_client, monkeypatch):
    """Route CLI clients to the fake Beefy API."""
    monkeypatch.setattr(cli_main, "_make_client", lambda settings: make_client())
    return fake_api


def test_networks_command():
    """Test listing networks needs no HTTP access."""
    result = runner.invoke(cli_main.app, ["networks"])

    assert result.exit_code == 0
    assert "arbitrum-one" in result.output
    assert "optimism" in result.output
    assert "Unsupported" in result.output


def test_prices_json(cli_api):
    """Test prices are printed as JSON with string decimals."""
    cli_api.routes["/lps"] = {"beefy-lp": 1.5}
    cli_api.routes["/prices"] = {"USDC": 1}
    cli_api.routes["/tokens/base"] = {"USDC": {"address": "0xABC", "oracle": "tokens", "oracleId": "USDC"}}

    result = runner.invoke(cli_main.app, ["prices", "base-mainnet", "--format", "json"])

    assert result.exit_code == 0
    assert json.loads(result.stdout) == {"beefy-lp": "1.5", "0xabc": "1"}


def test_prices_limit(cli_api):
    """Test --limit truncates the price map."""
    cli_api.routes["/lps"] = {"a": 1, "b": 2, "c": 3}
    cli_api.routes["/prices"] = {}
    cli_api.routes["/tokens/base"] = {}

    result = runner.invoke(cli_main.app, ["prices", "base-mainnet", "--limit", "2", "-f", "json"])

    assert result.exit_code == 0
    assert json.loads(result.stdout) == {"a": "1", "b": "2"}


def test_tvls_json(cli_api):
    """Test TVLs for a network are printed as JSON."""
    cli_api.routes["/tvl/"] = {"10": {"velodrome-usdc-weth": 1234.5}}

    result = runner.invoke(cli_main.app, ["tvls", "op-mainnet", "-f", "json"])

    assert result.exit_code == 0
    assert json.loads(result.stdout) == {"velodrome-usdc-weth": "1234.5"}


def test_tvls_table_without_data(cli_api):
    """Test a network without TVL data prints a notice."""
    cli_api.routes["/tvl/"] = {}

    result = runner.invoke(cli_main.app, ["tvls", "celo-mainnet"])

    assert result.exit_code == 0
    assert "No data found" in result.output


def test_vaults_json(cli_api):
    """Test vault listings keep API field names in JSON output."""
    cli_api.routes["/harvestable-vaults/polygon"] = [
        {
            "id": "quick-usdc-weth",
            "name": "USDC-WETH",
            "earnContractAddress": "0x1111111111111111111111111111111111111111",
            "earnedTokenAddress": "0x1111111111111111111111111111111111111111",
            "strategy": "0x2222222222222222222222222222222222222222",
            "pricePerFullShare": "1000000000000000000",
            "chain": "polygon",
        }
    ]
    cli_api.routes["/gov-vaults/polygon"] = []

    result = runner.invoke(cli_main.app, ["vaults", "polygon-pos-mainnet", "-f", "json"])

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["govVaults"] == []
    assert data["vaults"][0]["id"] == "quick-usdc-weth"
    assert data["vaults"][0]["earnContractAddress"] == "0x1111111111111111111111111111111111111111"


def test_apy_single_vault(cli_api):
    """Test --vault filters the APY breakdown."""
    cli_api.routes["/apy/breakdown/"] = {"a": {"totalApy": 0.2}, "b": {"totalApy": 0.3}}

    result = runner.invoke(cli_main.app, ["apy", "--vault", "b", "-f", "json"])

    assert result.exit_code == 0
    assert json.loads(result.stdout) == {"b": {"totalApy": "0.3"}}


def test_upstream_failure_exits_with_error(cli_api):
    """Test upstream errors exit with code 1."""
    result = runner.invoke(cli_main.app, ["apy"])

    assert result.exit_code == 1
    assert "Failed to fetch APY breakdown data" in result.output


def test_unsupported_network_exits_with_error(cli_api):
    """Test unsupported networks exit with code 1 without requests."""
    result = runner.invoke(cli_main.app, ["vaults", "base-sepolia"])

    assert result.exit_code == 1
    assert "Unsupported network" in result.output
    assert cli_api.calls == []
