"""Data-fetching adapters for third-party DeFi protocol APIs."""

__version__ = "0.1.0"
