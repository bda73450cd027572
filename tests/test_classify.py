import pytest

from whatsmyip.classify import is_private_ip


class TestIPv4:
    """Test the IPv4 private ranges."""

    @pytest.mark.parametrize(
        "address",
        [
            "10.0.0.0",
            "10.255.255.255",
            "172.16.0.1",
            "172.31.255.254",
            "192.168.0.1",
            "192.168.255.255",
            "127.0.0.1",
            "127.8.9.10",
            "169.254.0.1",
            "169.254.169.254",
            "0.0.0.0",
        ],
    )
    def test_private(self, address):
        assert is_private_ip(address) is True

    @pytest.mark.parametrize(
        "address",
        [
            "8.8.8.8",
            "1.1.1.1",
            "172.15.255.255",
            "172.32.0.0",
            "192.169.0.1",
            "169.253.0.1",
            "0.0.0.1",
            "100.64.0.1",
            "203.0.113.9",
        ],
    )
    def test_public(self, address):
        assert is_private_ip(address) is False

    def test_ipv4_mapped_ipv6_uses_ipv4_rules(self):
        assert is_private_ip("::ffff:192.168.1.1") is True
        assert is_private_ip("::ffff:8.8.8.8") is False


class TestIPv6:
    """Test the IPv6 private ranges."""

    @pytest.mark.parametrize(
        "address", ["::1", "fe80::1", "febf::ffff", "fc00::1", "fd12:3456:789a::1"]
    )
    def test_private(self, address):
        assert is_private_ip(address) is True

    @pytest.mark.parametrize(
        "address", ["2001:4860:4860::8888", "2001:db8::1", "fec0::1", "::"]
    )
    def test_public(self, address):
        assert is_private_ip(address) is False


class TestUnparseable:
    """Anything that is not an IP literal counts as public."""

    @pytest.mark.parametrize(
        "address",
        [
            "not-an-ip",
            "",
            "192.168.1.1:8080",
            "8.8.8.8, 10.0.0.1",
            "256.1.1.1",
            "[::1]",
            "fe80::1%eth0",
            "fd00::1%1",
        ],
    )
    def test_not_private(self, address):
        assert is_private_ip(address) is False
