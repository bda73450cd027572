"""
WhatsMyIP: echo a client's address, headers and whois record.

Example:
    >>> from whatsmyip import Settings, create_app
    >>> app = create_app(Settings(include_headers="user-agent, x-forwarded-for"))

    Run with: uvicorn --factory whatsmyip:create_app
"""

from .app import create_app
from .cache import LookupCache
from .classify import is_private_ip
from .forwarding import ForwardedChain, ForwardedChainInspector
from .handler import PresentationRecord, RequestHandler, derive_client_ip
from .headers import HeaderEntry, filter_headers, parse_header_list
from .settings import Settings
from .whois import (
    PRIVATE_OWNERSHIP,
    HttpWhoisProvider,
    OwnershipInfo,
    WhoisLookupError,
    WhoisResolver,
)

__all__ = [
    "ForwardedChain",
    "ForwardedChainInspector",
    "HeaderEntry",
    "HttpWhoisProvider",
    "LookupCache",
    "OwnershipInfo",
    "PRIVATE_OWNERSHIP",
    "PresentationRecord",
    "RequestHandler",
    "Settings",
    "WhoisLookupError",
    "WhoisResolver",
    "create_app",
    "derive_client_ip",
    "filter_headers",
    "is_private_ip",
    "parse_header_list",
]
