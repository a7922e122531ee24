"""Query-string encoding shared by the signer and the HTTP transport."""

from typing import Any, Mapping
from urllib.parse import quote, urlencode


def _encode_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def encode_params(params: Mapping[str, Any]) -> str:
    """
    Encode params as ``key=value&...`` in the mapping's iteration order.

    Percent-encoding follows RFC 3986: only ``A-Z a-z 0-9 - . _ ~`` are left
    as is and a space becomes ``%20``. No canonical sort is applied: the
    signature is computed over exactly the string the transport sends.
    """
    return urlencode(
        [(key, _encode_value(value)) for key, value in params.items()],
        quote_via=quote,
    )
