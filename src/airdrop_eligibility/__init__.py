"""Airdrop eligibility scoring from multi-chain wallet activity."""

__version__ = "0.1.0"
