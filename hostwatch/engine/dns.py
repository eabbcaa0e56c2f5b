"""Reverse-DNS lookup and address helpers.

:func:`reverse_dns` is the blocking lookup used by the resolver worker.
It deliberately keeps no cache of its own: the resolver caches successes
and a failed lookup must be retried on the next cache miss.
"""

import ipaddress
import logging
import socket
from typing import Optional, Union

logger = logging.getLogger(__name__)

Address = Union[str, ipaddress.IPv4Address, ipaddress.IPv6Address]


def format_address(address: Address) -> str:
    """Return the literal string form of *address*.

    ``ipaddress`` objects are rendered with :func:`str`.  Strings are
    stripped of whitespace and of a leading ``/`` as printed by Java's
    ``InetAddress.toString()`` for unnamed addresses.
    """
    text = str(address).strip()
    if text.startswith("/"):
        text = text[1:]
    return text


def is_loopback(address: Address) -> bool:
    """Return ``True`` if *address* is an IPv4 or IPv6 loopback address."""
    try:
        return ipaddress.ip_address(format_address(address)).is_loopback
    except ValueError:
        return False


def reverse_dns(address: str) -> Optional[str]:
    """Look up the PTR record for *address* and return the hostname.

    Args:
        address: IPv4 or IPv6 address literal.

    Returns:
        Reverse-DNS hostname, or ``None`` if the lookup fails.
    """
    if not address:
        return None
    try:
        hostname, _aliases, _addrs = socket.gethostbyaddr(address)
    except (socket.herror, socket.gaierror, OSError):
        logger.debug("PTR lookup failed for %s", address)
        return None
    return hostname or None
