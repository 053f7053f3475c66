"""Olando issuance engine — emission cap, AMM sizing and response cache."""

__version__ = "0.4.0"
