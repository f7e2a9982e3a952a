"""Known protocol contract registry."""

from collections.abc import Iterator, Mapping

from pydantic import BaseModel

from airdrop_eligibility.core.models import ProtocolCategory
from airdrop_eligibility.data import get_known_protocols


class ProtocolInfo(BaseModel):
    """
    Registry entry for a known contract.

    Attributes
    ----------
    name : str
        Protocol name (several contracts may share one name)
    category : ProtocolCategory
        Protocol category (e.g., 'dex', 'bridge')

    """

    name: str
    category: ProtocolCategory


class ProtocolRegistry:
    """
    Lookup table from lowercase contract address to protocol info.

    Registries are plain instances passed to the aggregator, so tests and
    environments can build their own tables. Keys are stored lowercase;
    :meth:`lookup` expects an already-lowercased address.

    Parameters
    ----------
    table : Mapping[str, ProtocolInfo | Mapping[str, str]] | None
        Address to protocol mapping. Empty registry if None.

    """

    def __init__(self, table: Mapping[str, ProtocolInfo | Mapping[str, str]] | None = None) -> None:
        self._protocols: dict[str, ProtocolInfo] = {}
        for address, info in (table or {}).items():
            self.register(address, info)

    @classmethod
    def from_config(cls) -> "ProtocolRegistry":
        """
        Build a registry from the ``protocols`` configuration section.

        Returns
        -------
        ProtocolRegistry
            Registry holding every configured contract

        """
        return cls(get_known_protocols())

    def register(self, address: str, info: ProtocolInfo | Mapping[str, str]) -> None:
        """
        Add or replace a contract entry.

        Parameters
        ----------
        address : str
            Contract address, any case
        info : ProtocolInfo | Mapping[str, str]
            Protocol info or a mapping with ``name`` and ``category``

        """
        if not isinstance(info, ProtocolInfo):
            info = ProtocolInfo.model_validate(info)
        self._protocols[address.lower()] = info

    def lookup(self, address: str) -> ProtocolInfo | None:
        """
        Find protocol info for a lowercase contract address.

        Parameters
        ----------
        address : str
            Lowercase contract address

        Returns
        -------
        ProtocolInfo | None
            Entry if the address is known, None otherwise

        """
        return self._protocols.get(address)

    def addresses_for(self, category: ProtocolCategory) -> list[str]:
        """Get all registered addresses of a category."""
        return [address for address, info in self._protocols.items() if info.category == category]

    def list_protocols(self) -> list[str]:
        """
        Get distinct protocol names in registration order.

        Returns
        -------
        list[str]
            Protocol names

        """
        return list(dict.fromkeys(info.name for info in self._protocols.values()))

    def items(self) -> Iterator[tuple[str, ProtocolInfo]]:
        """Iterate over (address, info) pairs."""
        return iter(self._protocols.items())

    def __contains__(self, address: object) -> bool:
        return address in self._protocols

    def __len__(self) -> int:
        return len(self._protocols)
