"""Presentation value pairing an address with its best-known name."""

from typing import Optional

from pydantic import BaseModel, computed_field

from hostwatch.engine.dns import Address, format_address, is_loopback

#: Display name used for loopback addresses.
LOCALHOST_NAME = "localhost"

#: Display name used while a lookup is still outstanding.
RESOLVING_PLACEHOLDER = "resolving ..."


class Host(BaseModel):
    """An address and its resolved name, if any.

    Attributes:
        address: Literal address string.
        name: Resolved hostname, or ``None`` while unresolved.
    """

    model_config = {"frozen": True}

    address: str
    name: Optional[str] = None

    @classmethod
    def from_address(cls, address: Address, name: Optional[str] = None) -> "Host":
        """Build a host from any supported address value."""
        return cls(address=format_address(address), name=name)

    @computed_field  # type: ignore[misc]
    @property
    def resolved(self) -> bool:
        return self.name is not None

    @computed_field  # type: ignore[misc]
    @property
    def display_name(self) -> str:
        """Name segment shown next to the address.

        Loopback always reads ``localhost``; an unresolved host shows the
        placeholder; a name identical to the address is suppressed.
        """
        if is_loopback(self.address):
            return LOCALHOST_NAME
        if self.name is None:
            return RESOLVING_PLACEHOLDER
        if self.name == self.address:
            return ""
        return self.name

    def __str__(self) -> str:
        display = self.display_name
        if not display:
            return self.address
        return f"{self.address} ( {display} )"
