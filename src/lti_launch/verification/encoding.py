"""RFC 5849 §3.6 percent-encoding.

OAuth 1.0 leaves only the RFC 3986 *unreserved* set untouched::

    ALPHA / DIGIT / "-" / "." / "_" / "~"

Generic form encoding also leaves ``!*'()`` alone and turns spaces into ``+``;
both would change the signature base string, so neither is acceptable here.
"""

from __future__ import annotations

from urllib.parse import quote


def percent_encode(value: str) -> str:
    """Percent-encode *value* for use in an OAuth signature base string.

    Parameters
    ----------
    value:
        Arbitrary text; it is encoded as UTF-8 before escaping.

    Returns
    -------
    str
        ``value`` with every byte outside the unreserved set written as
        ``%XX`` (uppercase hex).
    """
    # quote() always keeps alphanumerics and "_.-~"; safe="" drops "/" too.
    return quote(value, safe="", encoding="utf-8", errors="strict")
