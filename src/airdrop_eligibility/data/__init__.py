"""Configuration loading."""

from airdrop_eligibility.data.loader import (
    CONFIG_ENV_VAR,
    get_cache_ttl,
    get_chain_name,
    get_chain_names,
    get_config_path,
    get_known_protocols,
    get_status_weights,
    load_defaults,
)

__all__ = [
    "CONFIG_ENV_VAR",
    "get_cache_ttl",
    "get_chain_name",
    "get_chain_names",
    "get_config_path",
    "get_known_protocols",
    "get_status_weights",
    "load_defaults",
]
