"""Tests for :mod:`hostwatch.engine.host`."""

import ipaddress

import pytest
from pydantic import ValidationError

from hostwatch.engine.host import LOCALHOST_NAME, RESOLVING_PLACEHOLDER, Host


class TestDisplayName:
    """Verify the display-name rules."""

    def test_unresolved_shows_placeholder(self):
        host = Host(address="10.0.0.1")
        assert host.resolved is False
        assert host.display_name == RESOLVING_PLACEHOLDER

    def test_resolved_name(self):
        host = Host(address="10.0.0.1", name="db1.internal")
        assert host.resolved is True
        assert host.display_name == "db1.internal"

    def test_loopback_always_localhost(self):
        """Loopback reads localhost whatever the lookup said."""
        assert Host(address="127.0.0.1", name="box.example").display_name == LOCALHOST_NAME
        assert Host(address="127.0.0.1").display_name == LOCALHOST_NAME

    def test_name_equal_to_address_is_hidden(self):
        host = Host(address="192.0.2.7", name="192.0.2.7")
        assert host.display_name == ""


class TestStr:
    """Verify the presentation string."""

    def test_with_name(self):
        assert str(Host(address="10.0.0.1", name="db1.internal")) == "10.0.0.1 ( db1.internal )"

    def test_placeholder(self):
        assert str(Host(address="10.0.0.1")) == "10.0.0.1 ( resolving ... )"

    def test_address_only(self):
        assert str(Host(address="192.0.2.7", name="192.0.2.7")) == "192.0.2.7"

    def test_localhost(self):
        assert str(Host(address="127.0.0.1")) == "127.0.0.1 ( localhost )"


class TestModel:
    """Verify construction and serialisation."""

    def test_from_ip_object(self):
        host = Host.from_address(ipaddress.ip_address("10.0.0.1"), "db1.internal")
        assert host == Host(address="10.0.0.1", name="db1.internal")

    def test_frozen(self):
        host = Host(address="10.0.0.1")
        with pytest.raises(ValidationError):
            host.name = "db1.internal"

    def test_dump_includes_computed_fields(self):
        data = Host(address="10.0.0.1", name="db1.internal").model_dump()
        assert data == {
            "address": "10.0.0.1",
            "name": "db1.internal",
            "resolved": True,
            "display_name": "db1.internal",
        }
