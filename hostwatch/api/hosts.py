"""API router for host-name resolution.

Endpoints
---------
* ``GET    /api/hosts``            — resolver counters.
* ``GET    /api/hosts/{address}``  — best-known host for an address.
* ``DELETE /api/hosts/pending``    — cancel queued lookups.
"""

import ipaddress

from fastapi import APIRouter, Depends, HTTPException
from fastapi.requests import HTTPConnection

from hostwatch.engine.host import Host
from hostwatch.engine.resolver import AsyncHostResolver, ResolverInfo

router = APIRouter(prefix="/api/hosts", tags=["hosts"])


def get_resolver(conn: HTTPConnection) -> AsyncHostResolver:
    """FastAPI dependency returning the application's resolver."""
    return conn.app.state.resolver


@router.get("", response_model=ResolverInfo)
def resolver_info(resolver: AsyncHostResolver = Depends(get_resolver)):
    """Return cache, queue and subscriber counters."""
    return resolver.info()


@router.delete("/pending")
def cancel_pending(resolver: AsyncHostResolver = Depends(get_resolver)):
    """Cancel lookups that have not started yet.

    Returns:
        ``{"cancelled": <count>}``.
    """
    return {"cancelled": resolver.cancel_all_pending_requests()}


@router.get("/{address}", response_model=Host)
def resolve_host(address: str, resolver: AsyncHostResolver = Depends(get_resolver)):
    """Return the host for *address*, queueing a lookup if needed.

    Raises:
        HTTPException: 400 if *address* is not an IP address.
    """
    try:
        ip = ipaddress.ip_address(address)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid IP address: {address}")
    return resolver.resolve(ip)
