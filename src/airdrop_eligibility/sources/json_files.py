"""JSON-file implementations of the data source and catalog interfaces."""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter, ValidationError

from airdrop_eligibility.core.models import ChainNFTRecord, ChainTransaction, Project
from airdrop_eligibility.errors import ConfigurationError

logger = logging.getLogger(__name__)

_TRANSACTIONS = TypeAdapter(dict[int, list[ChainTransaction]])
_NFTS = TypeAdapter(dict[int, list[ChainNFTRecord]])
_PROJECTS = TypeAdapter(list[Project])


def _read_json(path: Path) -> Any:
    with open(path, encoding="utf-8") as f:
        return json.load(f)


class JsonChainDataSource:
    """
    Chain data for one wallet read from exported JSON files.

    Files map chain id to a list of records. A missing file or an
    unreadable chain entry behaves like a failed fetch: the affected
    chains are simply absent.

    Parameters
    ----------
    transactions_path : Path | None
        File of transactions keyed by chain id
    nfts_path : Path | None
        File of NFT records keyed by chain id

    """

    def __init__(self, transactions_path: Path | None = None, nfts_path: Path | None = None) -> None:
        self.transactions_path = transactions_path
        self.nfts_path = nfts_path

    def _load(self, path: Path | None, adapter: TypeAdapter) -> dict[int, list[Any]]:
        if path is None:
            return {}
        try:
            raw = _read_json(path)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Skipping %s: %s", path, e)
            return {}
        if not isinstance(raw, dict):
            logger.warning("Skipping %s: expected an object keyed by chain id", path)
            return {}

        chains: dict[int, list[Any]] = {}
        for chain_id, records in raw.items():
            try:
                chains.update(adapter.validate_python({chain_id: records}))
            except ValidationError as e:
                logger.warning("Skipping chain %s in %s: %d invalid records", chain_id, path, e.error_count())
        return chains

    def fetch_all_chain_transactions(self, address: str) -> dict[int, list[ChainTransaction]]:
        """Transactions keyed by chain id; ``address`` is not used for lookup."""
        return self._load(self.transactions_path, _TRANSACTIONS)

    def fetch_all_chain_nfts(self, address: str) -> dict[int, list[ChainNFTRecord]]:
        """NFT records keyed by chain id; ``address`` is not used for lookup."""
        return self._load(self.nfts_path, _NFTS)


class JsonProjectCatalog:
    """
    Project catalog read from a JSON list.

    Parameters
    ----------
    path : Path
        File holding a list of project objects

    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def find_all_projects(self) -> list[Project]:
        """
        Read every project from the file.

        Returns
        -------
        list[Project]
            Catalog snapshot

        Raises
        ------
        ConfigurationError
            If the file cannot be read or does not hold valid projects

        """
        try:
            return _PROJECTS.validate_python(_read_json(self.path))
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            msg = f"Cannot load project catalog {self.path}: {e}"
            raise ConfigurationError(msg) from e
