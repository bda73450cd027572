import logging
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, List, Optional

from starlette.datastructures import Headers

from .classify import is_private_ip
from .forwarding import ForwardedChain, ForwardedChainInspector
from .headers import HeaderEntry, filter_headers, header_multimap
from .whois import LookupService, OwnershipInfo, WhoisLookupError

logger = logging.getLogger(__name__)


@dataclass
class PresentationRecord:
    """Everything the page shows for one request."""

    client_ip: str
    authenticated: bool
    headers: List[HeaderEntry] = field(default_factory=list)
    ownership: Optional[OwnershipInfo] = None
    forwarding: Optional[ForwardedChain] = None


def strip_port(address: str) -> str:
    """
    Drop a trailing ``:port`` from ``host:port`` or ``[v6]:port``. A value
    that is not in either form (a bare IPv6 address, a hostname) is
    returned as given.
    """
    host, sep, _ = address.rpartition(":")
    if not sep:
        return address
    if host.startswith("[") and host.endswith("]"):
        return host[1:-1]
    if ":" in host or "[" in host or "]" in host:
        return address
    return host


def derive_client_ip(remote_addr: str, forwarded_for: Optional[str]) -> str:
    """
    The peer address without its port, unless ``X-Forwarded-For`` is set,
    in which case its raw value wins as a whole.
    """
    if forwarded_for:
        return forwarded_for
    return strip_port(remote_addr)


class RequestHandler:
    """
    Turns request metadata into a :class:`PresentationRecord`.

    A request is authenticated when it comes from a private address or
    carries a non-empty ``Remote-User`` header. Only authenticated
    requests get the header table, the whois record and the proxy chain;
    everyone else sees just their address.
    """

    def __init__(
        self,
        lookup: Optional[LookupService],
        include: Iterable[str] = (),
        exclude: Iterable[str] = (),
        inspector: Optional[ForwardedChainInspector] = None,
    ):
        self.lookup = lookup
        self.include: FrozenSet[str] = frozenset(include)
        self.exclude: FrozenSet[str] = frozenset(exclude)
        self.inspector = inspector

    def handle(self, remote_addr: str, headers: Headers) -> PresentationRecord:
        client_ip = derive_client_ip(remote_addr, headers.get("x-forwarded-for"))
        authenticated = is_private_ip(client_ip) or bool(headers.get("remote-user"))

        if not authenticated:
            logger.info(
                "Unauthenticated access from non-private IP %s: Missing Remote-User header",
                client_ip,
            )
            return PresentationRecord(client_ip=client_ip, authenticated=False)

        return PresentationRecord(
            client_ip=client_ip,
            authenticated=True,
            ownership=self._resolve(client_ip),
            headers=filter_headers(header_multimap(headers), self.include, self.exclude),
            forwarding=self.inspector.inspect(headers) if self.inspector else None,
        )

    def _resolve(self, client_ip: str) -> Optional[OwnershipInfo]:
        if self.lookup is None:
            return None
        try:
            return self.lookup.lookup(client_ip)
        except WhoisLookupError as exc:
            logger.warning("Error getting whois info: %s", exc)
            return None


__all__ = ["PresentationRecord", "RequestHandler", "derive_client_ip", "strip_port"]
