"""Money encoding: amounts are integer cents."""

import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP


class InvalidAmountError(ValueError):
    """Raised when free-form input cannot be read as an amount."""


_STRIP = re.compile(r"[^0-9.,\-]")


def parse_cents(text: str) -> int:
    """Parse free-form decimal input into integer cents.

    Currency symbols, spaces and other decoration are ignored. When both
    "," and "." appear, the right-most one is the decimal separator and the
    other groups thousands. A lone "," is read as the decimal separator.

    Examples:
        "1234.5"      -> 123450
        "$ 1.234,50"  -> 123450
        "12,5"        -> 1250
        "1,234.56"    -> 123456

    Args:
        text: User input, e.g. "50000" or "$ 1.234,50".

    Returns:
        Amount in cents, rounded half-up.

    Raises:
        InvalidAmountError: If no number can be read from the input.
    """
    if text is None:
        raise InvalidAmountError("Amount is required")

    cleaned = _STRIP.sub("", str(text))
    if "," in cleaned and "." in cleaned:
        if cleaned.rfind(",") > cleaned.rfind("."):
            cleaned = cleaned.replace(".", "").replace(",", ".")
        else:
            cleaned = cleaned.replace(",", "")
    else:
        cleaned = cleaned.replace(",", ".")

    try:
        value = Decimal(cleaned)
    except InvalidOperation:
        raise InvalidAmountError(f"Invalid amount: {text!r}")
    if not value.is_finite():
        raise InvalidAmountError(f"Invalid amount: {text!r}")

    return int((value * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def format_cents(cents: int) -> str:
    """Render cents as a signed amount with thousands separators.

    >>> format_cents(-123456)
    '-1,234.56'
    """
    sign = "-" if cents < 0 else ""
    units, rest = divmod(abs(cents), 100)
    return f"{sign}{units:,}.{rest:02d}"
