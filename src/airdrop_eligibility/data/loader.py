"""Loader for packaged configuration defaults."""

import os
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

from airdrop_eligibility.errors import ConfigurationError

CONFIG_ENV_VAR = "AIRDROP_ELIGIBILITY_CONFIG"
DEFAULTS_PATH = Path(__file__).parent / "defaults.yaml"

REQUIRED_SECTIONS = ("chains", "protocols", "status_weights")


def get_config_path() -> Path:
    """
    Resolve the configuration file in use.

    Returns
    -------
    Path
        Path from ``AIRDROP_ELIGIBILITY_CONFIG`` if set, packaged defaults otherwise

    """
    override = os.environ.get(CONFIG_ENV_VAR)
    return Path(override) if override else DEFAULTS_PATH


@lru_cache(maxsize=8)
def _read_config(path: Path) -> dict[str, Any]:
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        msg = f"Cannot read configuration file {path}: {e}"
        raise ConfigurationError(msg) from e

    if not isinstance(data, dict):
        msg = f"Configuration file {path} must contain a mapping"
        raise ConfigurationError(msg)

    missing = [section for section in REQUIRED_SECTIONS if section not in data]
    if missing:
        msg = f"Configuration file {path} is missing sections: {', '.join(missing)}"
        raise ConfigurationError(msg)

    return data


def load_defaults() -> dict[str, Any]:
    """
    Load configuration defaults (chains, protocols, status weights, cache).

    Returns
    -------
    dict[str, Any]
        Parsed configuration mapping

    Raises
    ------
    ConfigurationError
        If the file cannot be read or lacks a required section

    """
    return _read_config(get_config_path())


def get_chain_names() -> dict[int, str]:
    """
    Get the chain id to display name table.

    Returns
    -------
    dict[int, str]
        Mapping of numeric chain ids to chain names

    """
    return {int(chain_id): str(name) for chain_id, name in load_defaults()["chains"].items()}


def get_chain_name(chain_id: int) -> str:
    """Get display name for a chain id, ``"Chain <id>"`` when unknown."""
    return get_chain_names().get(chain_id, f"Chain {chain_id}")


def get_known_protocols() -> dict[str, dict[str, str]]:
    """
    Get known protocol contracts.

    Returns
    -------
    dict[str, dict[str, str]]
        Mapping of lowercase contract address to ``{"name", "category"}``

    """
    return {str(address).lower(): dict(info) for address, info in load_defaults()["protocols"].items()}


def get_status_weights() -> dict[str, float]:
    """Get the project status to overall-score weight table."""
    return {str(status): float(weight) for status, weight in load_defaults()["status_weights"].items()}


def get_cache_ttl() -> float:
    """Get default result cache TTL in seconds."""
    return float(load_defaults().get("cache", {}).get("ttl_seconds", 300))
