"""Local implementations of the chain data and catalog interfaces."""

from airdrop_eligibility.sources.json_files import JsonChainDataSource, JsonProjectCatalog

__all__ = [
    "JsonChainDataSource",
    "JsonProjectCatalog",
]
