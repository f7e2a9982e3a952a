"""Tests for configuration loading."""

import pytest

from airdrop_eligibility.core.weights import StatusWeights
from airdrop_eligibility.data import (
    CONFIG_ENV_VAR,
    get_cache_ttl,
    get_chain_name,
    get_chain_names,
    get_known_protocols,
    get_status_weights,
)
from airdrop_eligibility.errors import ConfigurationError


def test_get_chain_names():
    """Chain table maps integer ids to names."""
    chains = get_chain_names()

    assert chains[1] == "Ethereum"
    assert chains[8453] == "Base"
    assert all(isinstance(chain_id, int) for chain_id in chains)


def test_get_chain_name_unknown():
    """Unknown chains get a generic name."""
    assert get_chain_name(999999) == "Chain 999999"


def test_known_protocols_are_lowercase():
    """Protocol keys are lowercase addresses with name and category."""
    protocols = get_known_protocols()

    assert len(protocols) > 0
    for address, info in protocols.items():
        assert address == address.lower()
        assert address.startswith("0x")
        assert {"name", "category"} <= set(info)


def test_status_weights_match_model_defaults():
    """Configured weights equal the StatusWeights defaults."""
    assert StatusWeights.from_config() == StatusWeights()
    assert get_status_weights()["confirmed"] > get_status_weights()["speculative"]


def test_cache_ttl():
    """Default cache TTL is configured in seconds."""
    assert get_cache_ttl() == 300


def test_config_override(tmp_path, monkeypatch):
    """An alternative file replaces the packaged defaults."""
    path = tmp_path / "config.yaml"
    path.write_text(
        "chains:\n  1: Mainnet\n"
        "protocols: {}\n"
        "status_weights:\n  confirmed: 2\n  rumored: 1\n  speculative: 1\n  expired: 0\n"
    )
    monkeypatch.setenv(CONFIG_ENV_VAR, str(path))

    assert get_chain_name(1) == "Mainnet"
    assert get_known_protocols() == {}
    assert StatusWeights.from_config().confirmed == 2
    assert get_cache_ttl() == 300


def test_config_missing_sections(tmp_path, monkeypatch):
    """A file without required sections is a configuration error."""
    path = tmp_path / "partial.yaml"
    path.write_text("chains:\n  1: Ethereum\n")
    monkeypatch.setenv(CONFIG_ENV_VAR, str(path))

    with pytest.raises(ConfigurationError, match="protocols"):
        get_chain_names()


def test_config_unreadable(tmp_path, monkeypatch):
    """A missing file is a configuration error."""
    monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "missing.yaml"))

    with pytest.raises(ConfigurationError):
        get_chain_names()
