"""Resolver engine — host values, lookups, and the background worker."""

from hostwatch.engine.host import Host
from hostwatch.engine.resolver import AsyncHostResolver, ResolvedHostSubscriber

__all__ = ["AsyncHostResolver", "Host", "ResolvedHostSubscriber"]
