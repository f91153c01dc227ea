"""Brazilian-locale currency parsing and formatting.

Amounts travel as display strings such as ``"1.234,56"`` ('.' groups
thousands, ',' separates decimals). Every computation in the project works
on the :class:`~decimal.Decimal` returned by :func:`parse_brl`, never on the
string itself.
"""
from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext

from django.conf import settings

CENT = Decimal("0.01")

_GROUPED_RE = re.compile(r"^(?P<sign>-?)(?P<int>\d{1,3}(?:\.\d{3})+|\d+)(?:,(?P<frac>\d+))?$")


class InvalidFormat(ValueError):
    """Raised when a currency string cannot be interpreted."""

    def __init__(self, text):
        self.text = text
        super().__init__(f"Valor monetario invalido: {text!r}.")


def parse_brl(text) -> Decimal | None:
    """Parse a Brazilian-formatted amount.

    Returns ``None`` for an empty (or blank) string, which callers must keep
    distinct from zero. An optional ``R$`` prefix is accepted.

    Raises
    ------
    InvalidFormat
        If ``text`` holds anything other than a well-formed amount.
    """
    if text is None:
        return None
    if not isinstance(text, str):
        raise InvalidFormat(text)

    cleaned = text.strip()
    if cleaned.startswith("R$"):
        cleaned = cleaned[2:].strip()
    elif cleaned.startswith("-R$"):
        cleaned = "-" + cleaned[3:].strip()
    if not cleaned:
        return None

    match = _GROUPED_RE.match(cleaned)
    if match is None:
        raise InvalidFormat(text)

    integer_part = match.group("int").replace(".", "")
    fraction = match.group("frac")
    literal = integer_part if fraction is None else f"{integer_part}.{fraction}"
    try:
        value = Decimal(literal)
    except InvalidOperation as exc:
        raise InvalidFormat(text) from exc
    return -value if match.group("sign") else value


def format_brl(value) -> str:
    """Render ``value`` as ``"1.234,56"`` (always two decimals, half-up)."""
    amount = Decimal(value)
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, amount.adjusted() + 3)
        amount = amount.quantize(CENT, rounding=ROUND_HALF_UP)
        sign = "-" if amount < 0 else ""
        # "{:,.2f}" gives "1,234.56"; swap the separators afterwards.
        us_style = f"{abs(amount):,.2f}"
    return sign + us_style.replace(",", "_").replace(".", ",").replace("_", ".")


def format_brl_display(value) -> str:
    """Render ``value`` with the currency symbol, e.g. ``"R$ 1.234,56"``."""
    symbol = getattr(settings, "CURRENCY_SYMBOL", "R$")
    formatted = format_brl(value)
    if formatted.startswith("-"):
        return f"-{symbol} {formatted[1:]}"
    return f"{symbol} {formatted}"
