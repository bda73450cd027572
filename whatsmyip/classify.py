import ipaddress

_IPV6_LINK_LOCAL = ipaddress.IPv6Network("fe80::/10")
_IPV6_UNIQUE_LOCAL = ipaddress.IPv6Network("fc00::/7")


def is_private_ip(address: str) -> bool:
    """
    Report whether ``address`` sits in a well-known private range.

    IPv4: 10/8, 172.16/12, 192.168/16, 127/8, 169.254/16 and 0.0.0.0.
    IPv6: ::1, fe80::/10 and fc00::/7. IPv4-mapped IPv6 addresses are
    judged by their IPv4 part.

    Anything that does not parse as an IP literal is treated as public,
    including zone-scoped IPv6 addresses ("fe80::1%eth0").
    """
    if "%" in address:
        return False
    try:
        ip = ipaddress.ip_address(address)
    except ValueError:
        return False

    if isinstance(ip, ipaddress.IPv6Address) and ip.ipv4_mapped is not None:
        ip = ip.ipv4_mapped

    if isinstance(ip, ipaddress.IPv4Address):
        first, second = ip.packed[0], ip.packed[1]
        if first == 10:
            return True
        if first == 172 and 16 <= second <= 31:
            return True
        if first == 192 and second == 168:
            return True
        if first == 127:
            return True
        if first == 169 and second == 254:
            return True
        return int(ip) == 0

    return ip.is_loopback or ip in _IPV6_LINK_LOCAL or ip in _IPV6_UNIQUE_LOCAL


__all__ = ["is_private_ip"]
