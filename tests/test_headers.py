from starlette.datastructures import Headers

from whatsmyip.headers import (
    HeaderEntry,
    canonical_header_name,
    filter_headers,
    header_multimap,
    parse_header_list,
)

from conftest import header_dict

SAMPLE = header_dict([("A", "1"), ("b", "2"), ("A", "3")])


class TestFilterHeaders:
    """Test ordering and include/exclude policy."""

    def test_no_policy_sorts_by_name_and_keeps_value_order(self):
        entries = filter_headers(SAMPLE)

        assert entries == [
            HeaderEntry("A", "1"),
            HeaderEntry("A", "3"),
            HeaderEntry("b", "2"),
        ]

    def test_include_matches_case_insensitively(self):
        entries = filter_headers(SAMPLE, include={"a"})

        assert entries == [HeaderEntry("A", "1"), HeaderEntry("A", "3")]

    def test_exclude_wins_over_include(self):
        assert filter_headers(SAMPLE, include={"a"}, exclude={"a"}) == []

    def test_exclude_only(self):
        entries = filter_headers(SAMPLE, exclude={"a"})

        assert entries == [HeaderEntry("b", "2")]

    def test_include_unknown_name_gives_nothing(self):
        assert filter_headers(SAMPLE, include={"x-missing"}) == []

    def test_empty_name_passes_through(self):
        entries = filter_headers({"": ["odd"], "X-Test": ["v1"]})

        assert entries == [HeaderEntry("", "odd"), HeaderEntry("X-Test", "v1")]

    def test_same_input_same_output(self):
        headers = header_dict(
            [("X-B", "2"), ("X-A", "1"), ("User-Agent", "pytest"), ("X-A", "0")]
        )

        assert filter_headers(headers) == filter_headers(headers)
        assert [entry.value for entry in filter_headers(headers)] == ["pytest", "1", "0", "2"]


class TestParseHeaderList:
    """Test the comma-separated configuration format."""

    def test_trims_and_lowercases(self):
        assert parse_header_list(" X-Real-IP , Cookie") == {"x-real-ip", "cookie"}

    def test_drops_empty_entries(self):
        assert parse_header_list("a,,b, ,") == {"a", "b"}

    def test_empty(self):
        assert parse_header_list("") == frozenset()
        assert parse_header_list(" , ") == frozenset()
        assert parse_header_list(None) == frozenset()


class TestCanonicalNames:
    """Test restoring canonical casing of ASGI header names."""

    def test_canonical_form(self):
        assert canonical_header_name("x-forwarded-for") == "X-Forwarded-For"
        assert canonical_header_name("USER-AGENT") == "User-Agent"
        assert canonical_header_name("remote-user") == "Remote-User"

    def test_invalid_token_left_alone(self):
        assert canonical_header_name("bad header") == "bad header"
        assert canonical_header_name("") == ""

    def test_multimap_groups_repeated_headers(self):
        headers = Headers(
            raw=[
                (b"x-test", b"one"),
                (b"accept", b"*/*"),
                (b"x-test", b"two"),
            ]
        )

        assert header_multimap(headers) == {
            "X-Test": ["one", "two"],
            "Accept": ["*/*"],
        }
