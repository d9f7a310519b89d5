"""Classify link targets as absolute URIs or local relative paths."""

from __future__ import annotations

import re

from mdbinder.core.models import UriKind

# RFC 3986 character classes
_UNRESERVED = r"A-Za-z0-9\-._~"
_SUB_DELIMS = r"!$&'()*+,;="
_PCT = r"%[0-9A-Fa-f]{2}"
_PCHAR = rf"(?:[{_UNRESERVED}{_SUB_DELIMS}:@]|{_PCT})"

_SCHEME = r"[A-Za-z][A-Za-z0-9+\-.]*"
_USERINFO = rf"(?:[{_UNRESERVED}{_SUB_DELIMS}:]|{_PCT})*"
_HOST = rf"(?:\[[0-9A-Fa-f:.vV]+\]|(?:[{_UNRESERVED}{_SUB_DELIMS}]|{_PCT})*)"
_AUTHORITY = rf"(?:{_USERINFO}@)?{_HOST}(?::[0-9]*)?"
_PATH = rf"(?:{_PCHAR}|/)*"
_QUERY = rf"(?:{_PCHAR}|[/?])*"

ABSOLUTE_URI_RE = re.compile(
    rf"(?P<scheme>{_SCHEME}):"
    rf"(?://(?P<authority>{_AUTHORITY}))?"
    rf"(?P<path>{_PATH})"
    rf"(?:\?(?P<query>{_QUERY}))?"
    rf"(?:#(?P<fragment>{_QUERY}))?"
)


def classify(target: str) -> UriKind:
    """Classify a link target.

    A target is absolute only when the entire string is a scheme-qualified
    URI. Everything else, including the empty string and fragment-only
    targets, is relative.
    """
    if ABSOLUTE_URI_RE.fullmatch(target):
        return UriKind.ABSOLUTE
    return UriKind.RELATIVE


def is_relative(target: str) -> bool:
    """True if the target refers to the local filesystem."""
    return classify(target) is UriKind.RELATIVE
