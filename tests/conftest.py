"""Shared pytest fixtures for the hostwatch test suite.

The service tests never touch real DNS: ``reverse_dns`` is replaced by a
table-driven fake before the application lifespan builds its resolver.
"""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from hostwatch.main import app

#: PTR records served by the fake lookup.
FAKE_PTR = {
    "10.0.0.1": "db1.internal",
    "8.8.8.8": "dns.google",
}


def _fake_reverse_dns(address):
    return FAKE_PTR.get(address)


@pytest.fixture()
def client():
    """Return a FastAPI :class:`TestClient` whose resolver uses fake PTR data.

    Yields:
        A :class:`httpx.Client`-like test client with the lifespan running.
    """
    with patch("hostwatch.main.reverse_dns", new=_fake_reverse_dns):
        with TestClient(app) as c:
            yield c


@pytest.fixture()
def resolver(client):
    """The resolver owned by the running test application."""
    return app.state.resolver
