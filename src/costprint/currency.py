"""Currency display helpers.

Three pieces:

- CURRENCY_INFO: symbol and name for each supported code.
- format_currency(): locale-aware display string for an amount. Babel does the
  locale work; FCFA is quoted without minor units as "1,235 FCFA".
- get_default_currency() / set_default_currency(): the user's preferred
  display currency in an injected key/value store. Neither ever raises.

Codes coming from outside (API responses, stored preferences) are untrusted.
Anything not in the closed set is shown as USD rather than failing the page.

Rounding: FCFA rounds half away from zero to a whole number, so -2.5 gives
-3 (JavaScript's Math.round would give -2 for negative halves). Other codes
use Babel's currency formatting, which rounds half to even at two decimals.

Amounts must be finite; infinities and NaN are rejected before they get here
(see models._to_float and the CLI's amount parser).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Union

from babel.numbers import format_currency as babel_format_currency
from babel.numbers import format_decimal

from .models import Currency, parse_currency
from .storage import KeyValueStore

logger = logging.getLogger(__name__)

DEFAULT_CURRENCY = Currency.USD
DEFAULT_LOCALE = "en_US"
PREFERENCE_KEY = "preferredCurrency"

Amount = Union[int, float, Decimal]


@dataclass(frozen=True)
class CurrencyInfo:
    code: Currency
    symbol: str
    name: str


CURRENCY_INFO: dict[Currency, CurrencyInfo] = {
    Currency.USD: CurrencyInfo(Currency.USD, "$", "US Dollar"),
    Currency.FCFA: CurrencyInfo(Currency.FCFA, "FCFA", "Central African CFA Franc"),
    Currency.EUR: CurrencyInfo(Currency.EUR, "€", "Euro"),
    Currency.GBP: CurrencyInfo(Currency.GBP, "£", "British Pound"),
    Currency.CAD: CurrencyInfo(Currency.CAD, "C$", "Canadian Dollar"),
}


def info_of(code: Currency | str | None) -> CurrencyInfo:
    """Metadata for ``code``; unknown codes get the USD record."""
    return CURRENCY_INFO[parse_currency(code, DEFAULT_CURRENCY)]


def symbol_of(code: Currency | str | None) -> str:
    return info_of(code).symbol


def name_of(code: Currency | str | None) -> str:
    return info_of(code).name


def _to_decimal(amount: Amount) -> Decimal:
    # str() first so 0.1 stays 0.1 rather than its binary expansion
    if isinstance(amount, Decimal):
        return amount
    return Decimal(str(amount))


def format_currency(
    amount: Amount,
    currency: Currency | str | None = DEFAULT_CURRENCY,
    locale: str = DEFAULT_LOCALE,
) -> str:
    """
    Format ``amount`` for display in ``currency``.

    >>> format_currency(1234.9, "USD")
    '$1,234.90'
    >>> format_currency(1234.9, "FCFA")
    '1,235 FCFA'
    """
    code = parse_currency(currency, DEFAULT_CURRENCY)
    value = _to_decimal(amount)

    if code is Currency.FCFA:
        whole = value.quantize(Decimal("1"), rounding=ROUND_HALF_UP)
        number = format_decimal(whole, format="#,##0", locale=locale)
        return f"{number} {CURRENCY_INFO[code].symbol}"

    return babel_format_currency(value, code.value, locale=locale)


def currency_options() -> list[Currency]:
    """All supported codes in display order."""
    return list(CURRENCY_INFO)


def currency_label(code: Currency | str | None) -> str:
    """Select-box label, e.g. 'EUR - Euro (€)'."""
    info = info_of(code)
    return f"{info.code.value} - {info.name} ({info.symbol})"


# =============================================================================
# PREFERENCE
# =============================================================================


def get_default_currency(store: KeyValueStore | None) -> Currency:
    """Preferred display currency, USD when unset, invalid or unreadable."""
    if store is None:
        return DEFAULT_CURRENCY
    try:
        stored = store.get(PREFERENCE_KEY)
    except Exception:
        logger.warning("failed to read currency preference", exc_info=True)
        return DEFAULT_CURRENCY
    return parse_currency(stored, DEFAULT_CURRENCY)


def set_default_currency(store: KeyValueStore | None, currency: Currency) -> None:
    """Persist the preferred display currency; failures are logged, not raised."""
    if store is None:
        return
    value = currency.value if isinstance(currency, Currency) else str(currency)
    try:
        store.set(PREFERENCE_KEY, value)
    except Exception:
        logger.warning("failed to save currency preference", exc_info=True)
