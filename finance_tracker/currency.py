"""Currency helpers. The tracker only deals in Pakistani Rupees."""
from __future__ import annotations

import math
import numbers
import re
from typing import Any

CURRENCY_SYMBOLS = {"PKR": "₨"}
CURRENCY_NAMES = {"PKR": "Pakistani Rupee"}

_NON_NUMERIC = re.compile(r"[^\d.-]")


def safe_amount(value: Any) -> float:
    """Return ``value`` as a float, or ``0`` for anything that is not a finite number.

    Numeric strings count as junk too; parse them with
    :func:`parse_currency_string` first.
    """

    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return 0.0
    number = float(value)
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


def format_currency(
    amount: Any,
    currency: str = "PKR",
    *,
    fraction_digits: int = 2,
    show_symbol: bool = True,
) -> str:
    """Format ``amount`` as ``"₨ 1,234.50"``.

    Grouping follows the ``en-PK`` locale (thousands separated by commas).
    """

    formatted = f"{safe_amount(amount):,.{fraction_digits}f}"
    if not show_symbol:
        return formatted
    return f"{get_currency_symbol(currency)} {formatted}"


def get_currency_symbol(currency: str = "PKR") -> str:
    return CURRENCY_SYMBOLS.get(currency, currency)


def parse_currency_string(text: str) -> float:
    """Return the numeric value of a formatted amount, or ``0`` if there is none."""

    numeric = _NON_NUMERIC.sub("", text or "")
    try:
        return safe_amount(float(numeric))
    except ValueError:
        return 0.0


def is_valid_currency(currency: str) -> bool:
    return currency in CURRENCY_SYMBOLS


def get_supported_currencies() -> list[str]:
    return list(CURRENCY_SYMBOLS)
