"""Unit tests for address and range types."""

import ipaddress

import pytest

from ipprops.core.errors import AddressParseError
from ipprops.core.types import IPRange, address_from_text, range_from_text


def test_range_from_cidr():
    """Test parsing a CIDR block."""
    rng = range_from_text("192.168.28.0/25")

    assert rng.first == ipaddress.ip_address("192.168.28.0")
    assert rng.last == ipaddress.ip_address("192.168.28.127")
    assert rng.version == 4


def test_range_from_cidr_with_host_bits():
    """Test that host bits in a CIDR block are tolerated."""
    rng = range_from_text("10.1.1.77/24")

    assert str(rng) == "10.1.1.0/24"


def test_range_from_single_address():
    """Test that a bare address is a one-address range."""
    rng = range_from_text(" 10.0.0.1 ")

    assert rng.first == rng.last == ipaddress.ip_address("10.0.0.1")
    assert str(rng) == "10.0.0.1"


def test_range_from_explicit_pair():
    """Test parsing a first-last pair."""
    rng = range_from_text("10.0.0.5-10.0.0.9")

    assert "10.0.0.7" in rng
    assert "10.0.0.10" not in rng
    assert str(rng) == "10.0.0.5-10.0.0.9"


def test_range_ipv6():
    """Test IPv6 CIDR parsing."""
    rng = range_from_text("2001:db8::/64")

    assert rng.version == 6
    assert "2001:db8::1" in rng
    assert "10.0.0.1" not in rng


@pytest.mark.parametrize(
    "text",
    ["", "   ", "not-an-ip", "10.0.0.300", "10.0.0.9-10.0.0.1", "10.0.0.1-::1", "10.0.0.0/33"],
)
def test_range_from_text_rejects_invalid(text):
    """Test that malformed ranges return None."""
    assert range_from_text(text) is None


def test_iprange_rejects_reversed_bounds():
    """Test the range invariant in the constructor."""
    with pytest.raises(ValueError):
        IPRange(ipaddress.ip_address("10.0.0.2"), ipaddress.ip_address("10.0.0.1"))


def test_address_from_text_raises():
    """Test that a bad address raises AddressParseError."""
    with pytest.raises(AddressParseError):
        address_from_text("10.1.1")
