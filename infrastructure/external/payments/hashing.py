"""
Request signing and response verification for the Paynow interface.

Outbound requests are signed over the field values in sorted-name order,
which is the order ``encode_form`` serializes them in. Inbound responses are
verified over the values in the order they appear on the wire, so callers
must pass the raw response text rather than a parsed mapping.

Both directions exclude the ``hash`` field (matched case-insensitively) and
append the integration key before taking an upper-case hex SHA-512.
"""
from __future__ import annotations

import hashlib
import hmac
import re
from decimal import Decimal
from typing import Iterator, Mapping, Union
from urllib.parse import quote_plus, unquote_to_bytes

from infrastructure.external.payments.exceptions import DecodeError, SignatureMismatch


HASH_FIELD = "hash"

# Unordered: the signer imposes its own order.
FieldSet = Mapping[str, str]
# Ordered: the verifier must follow the wire.
WirePairs = list[tuple[str, str]]

_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def is_hash_field(name: str) -> bool:
    return name.lower() == HASH_FIELD


def digest(payload: bytes) -> str:
    return hashlib.sha512(payload).hexdigest().upper()


def format_amount(amount: Union[Decimal, float, int, str]) -> str:
    """Render an amount with exactly two decimals, e.g. ``10`` -> ``"10.00"``."""
    if isinstance(amount, str):
        amount = Decimal(amount)
    return f"{amount:.2f}"


def encode_form(fields: FieldSet) -> str:
    """Form-encode ``fields`` in the same sorted order the signature covers."""
    return "&".join(
        f"{quote_plus(name)}={quote_plus(value)}" for name, value in sorted(fields.items())
    )


def iter_wire_pairs(raw_body: str) -> Iterator[tuple[str, str]]:
    """Yield ``(name, raw_value)`` in wire order.

    Segments without an ``=`` (including empty ones from a trailing ``&``)
    are skipped rather than rejected.
    """
    for token in raw_body.split("&"):
        name, sep, value = token.partition("=")
        if not sep:
            continue
        yield name, value


def unescape(name: str, value: str) -> bytes:
    """Strictly reverse form encoding (``+`` and ``%XX``) into raw bytes."""
    if _BAD_ESCAPE.search(value):
        raise DecodeError(name, value)
    return unquote_to_bytes(value.replace("+", " "))


def generate_hash(fields: FieldSet, integration_key: str) -> str:
    """Sign an outbound field set."""
    names = sorted(name for name in fields if not is_hash_field(name))
    payload = "".join(fields[name] for name in names) + integration_key
    return digest(payload.encode("utf-8"))


def compute_wire_hash(pairs: WirePairs, integration_key: str) -> tuple[str, str]:
    """Return ``(expected, received)`` signatures for already-split wire pairs."""
    received = ""
    chunks: list[bytes] = []
    for name, value in pairs:
        if is_hash_field(name):
            received = value
            continue
        chunks.append(unescape(name, value))
    chunks.append(integration_key.encode("utf-8"))
    return digest(b"".join(chunks)), received


def validate_hash(raw_body: str, integration_key: str) -> None:
    """Verify the signature carried by a raw response body.

    Raises:
        DecodeError: a value is not valid form encoding.
        SignatureMismatch: the carried hash is missing or wrong.
    """
    expected, received = compute_wire_hash(list(iter_wire_pairs(raw_body)), integration_key)
    if not hmac.compare_digest(expected.encode("utf-8"), received.encode("utf-8")):
        raise SignatureMismatch(received, expected)
