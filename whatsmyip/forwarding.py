import ipaddress
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple, Union

from python_ipware.python_ipware import IpWare  # type: ignore[import-not-found]
from starlette.datastructures import Headers

IpAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]

DEFAULT_PRECEDENCE: Tuple[str, ...] = (
    "X-Forwarded-For",
    "X-Real-IP",
    "CF-Connecting-IP",
    "True-Client-IP",
    "Fastly-Client-IP",
    "X-Client-IP",
    "X-Cluster-Client-IP",
    "Forwarded-For",
    "Forwarded",
    "Client-IP",
)


@dataclass(frozen=True)
class ForwardedChain:
    """
    What the proxy headers of a request say about where it came from.

    ``hops`` is the raw ``X-Forwarded-For`` list, client first.
    ``best_guess`` is the address python-ipware settles on for the
    configured proxy layout and ``trusted_route`` tells whether the
    request matched that layout.
    """

    hops: List[str] = field(default_factory=list)
    best_guess: Optional[str] = None
    trusted_route: bool = False


def _wsgi_key(header: str) -> str:
    return f"HTTP_{header.upper().replace('-', '_')}"


class ForwardedChainInspector(IpWare):
    """
    python-ipware configured with plain header names, reading Starlette
    headers directly.

    Example:
        >>> inspector = ForwardedChainInspector(proxy_count=1)
        >>> chain = inspector.inspect(request.headers)
        >>> chain.best_guess, chain.trusted_route
        ('203.0.113.9', True)
    """

    def __init__(
        self,
        precedence: Optional[Sequence[str]] = None,
        leftmost: bool = True,
        proxy_count: Optional[int] = None,
        proxy_list: Optional[List[str]] = None,
    ):
        """
        Args:
            precedence: Header names to consult in order, written as they
                        appear on the wire ("X-Real-IP").
            leftmost: Take the leftmost address of a comma-separated list.
            proxy_count: Number of proxies expected in front of the service.
            proxy_list: Address prefixes of trusted proxies ("10.0.").
        """
        self.precedence = tuple(precedence or DEFAULT_PRECEDENCE)
        super().__init__(
            tuple(_wsgi_key(header) for header in self.precedence),
            leftmost,
            proxy_count,
            proxy_list or None,
        )

    def client_ip(
        self, headers: Headers, strict: bool = False
    ) -> Tuple[Optional[IpAddress], bool]:
        meta = {_wsgi_key(name): value for name, value in headers.items()}
        return self.get_client_ip(meta, strict=strict)

    def inspect(self, headers: Headers) -> ForwardedChain:
        forwarded_for = headers.get("x-forwarded-for", "")
        hops = [hop.strip() for hop in forwarded_for.split(",") if hop.strip()]
        ip, trusted = self.client_ip(headers)
        return ForwardedChain(
            hops=hops,
            best_guess=str(ip) if ip is not None else None,
            trusted_route=trusted,
        )


__all__ = ["DEFAULT_PRECEDENCE", "ForwardedChain", "ForwardedChainInspector"]
