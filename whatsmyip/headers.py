from typing import Dict, FrozenSet, Iterable, List, Mapping, NamedTuple, Optional, Sequence

from starlette.datastructures import Headers

_TOKEN_CHARS = frozenset(
    "!#$%&'*+-.^_`|~0123456789"
    "abcdefghijklmnopqrstuvwxyz"
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
)


class HeaderEntry(NamedTuple):
    """A single header value under its display name."""

    name: str
    value: str


def parse_header_list(raw: Optional[str]) -> FrozenSet[str]:
    """
    Turn a comma-separated list of header names into a lookup set.

    Entries are trimmed and lower-cased; empty entries are dropped, so
    ``""`` and ``" , "`` both give an empty set.
    """
    if not raw:
        return frozenset()
    return frozenset(
        name.strip().lower() for name in raw.split(",") if name.strip()
    )


def canonical_header_name(name: str) -> str:
    """
    Return the canonical MIME form of a header name (``x-real-ip`` ->
    ``X-Real-Ip``). Names with characters outside the HTTP token set are
    returned unchanged.
    """
    if not name or any(char not in _TOKEN_CHARS for char in name):
        return name
    return "-".join(part[:1].upper() + part[1:].lower() for part in name.split("-"))


def header_multimap(headers: Headers) -> Dict[str, List[str]]:
    """
    Group a Starlette header collection by canonical name, keeping every
    value of a repeated header in arrival order.

    ASGI servers hand over lower-cased names; the canonical form is what
    callers expect to read back.
    """
    grouped: Dict[str, List[str]] = {}
    for raw_name, raw_value in headers.raw:
        name = canonical_header_name(raw_name.decode("latin-1"))
        grouped.setdefault(name, []).append(raw_value.decode("latin-1"))
    return grouped


def filter_headers(
    headers: Mapping[str, Sequence[str]],
    include: Iterable[str] = (),
    exclude: Iterable[str] = (),
) -> List[HeaderEntry]:
    """
    Apply an include/exclude policy to a header multimap.

    Names are matched case-insensitively against the lower-cased sets.
    An empty ``include`` lets every name through; ``exclude`` always wins.
    The result holds one entry per value, sorted by name; values of a
    repeated header keep their original order.
    """
    include = frozenset(include)
    exclude = frozenset(exclude)

    entries: List[HeaderEntry] = []
    for name, values in headers.items():
        lowered = name.lower()
        if include and lowered not in include:
            continue
        if lowered in exclude:
            continue
        entries.extend(HeaderEntry(name, value) for value in values)

    entries.sort(key=lambda entry: entry.name)
    return entries


__all__ = [
    "HeaderEntry",
    "canonical_header_name",
    "filter_headers",
    "header_multimap",
    "parse_header_list",
]
