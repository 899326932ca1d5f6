"""Render typed values as display text.

Decoding never fails: a variant the client does not know how to render
comes out as a visible ``[oops - <kind>]`` placeholder so the rest of the
response still prints.
"""
from ..messages import Decimal64, TypedValue, Update, ValueKind


def str_decimal64(d: Decimal64) -> str:
    """Render a Decimal64 as ``<integer>.<fraction>``.

    The fraction is the plain remainder, not zero-padded to `precision`
    digits: digits=5, precision=2 renders "0.5".
    """
    if d.precision > 0:
        div = 10 ** d.precision
        integer, frac = divmod(d.digits, div)
    else:
        integer, frac = d.digits, 0
    return f"{integer}.{frac}"


def _text(data) -> str:
    if isinstance(data, (bytes, bytearray)):
        return bytes(data).decode("utf-8", errors="replace")
    return str(data)


def str_typed_value(tv: TypedValue) -> str:
    """Render the populated variant of a TypedValue."""
    kind = tv.kind
    if kind in (ValueKind.STRING, ValueKind.JSON_IETF, ValueKind.BYTES):
        return _text(tv.value)
    if kind in (ValueKind.INT, ValueKind.UINT):
        return str(tv.value)
    if kind == ValueKind.BOOL:
        # Lowercase to match the protocol's JSON rendering
        return "true" if tv.value else "false"
    if kind == ValueKind.DECIMAL and isinstance(tv.value, Decimal64):
        return str_decimal64(tv.value)
    return f"[oops - {tv.variant or kind.value}]"


def str_val(update: Update) -> str:
    """Text for the value carried by an update.

    The deprecated raw-bytes field wins when present, for targets still
    speaking gNMI older than 0.4.
    """
    if update.value is not None:
        return _text(update.value.value)
    if update.val is None:
        return f"[oops - {ValueKind.UNSET.value}]"
    return str_typed_value(update.val)
