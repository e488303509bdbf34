"""Command-line entrypoint for CostPrint."""

import argparse
import json
import logging
from decimal import Decimal, InvalidOperation
from pathlib import Path

from . import __version__
from .api import TOKEN_KEY, ApiClient
from .config import Settings, get_settings
from .currency import DEFAULT_CURRENCY, format_currency, get_default_currency, name_of
from .errors import ApiError
from .log import init_logging
from .models import CostCalculationRequest, JobSpecifications, JobType, parse_currency
from .storage import MappingStore, open_preference_store

logger = logging.getLogger(__name__)


def _amount(value: str) -> Decimal:
    try:
        amount = Decimal(value.replace(",", ""))
    except InvalidOperation:
        raise argparse.ArgumentTypeError(f"invalid amount: {value!r}")
    if not amount.is_finite():
        raise argparse.ArgumentTypeError(f"amount must be finite: {value!r}")
    return amount


def _build_client(settings: Settings) -> ApiClient:
    tokens = MappingStore()
    if settings.api_token:
        tokens.set(TOKEN_KEY, settings.api_token)
    return ApiClient(settings.api_base_url, token_store=tokens)


def _load_request(path: Path) -> CostCalculationRequest:
    data = json.loads(path.read_text())
    return CostCalculationRequest(
        job_type=JobType(data.get("jobType", "Custom")),
        quantity=int(data.get("quantity", 0)),
        specifications=JobSpecifications.from_dict(data.get("specifications") or {}),
        currency=parse_currency(data["currency"]) if data.get("currency") else None,
    )


def print_quote(path: Path, settings: Settings) -> None:
    """Request a quick estimate for the job described in ``path`` and print it."""
    try:
        request = _load_request(path)
    except (ValueError, TypeError, AttributeError) as exc:
        print(f"Error: Invalid job file {path}: {exc}")
        return

    with _build_client(settings) as client:
        try:
            quote = client.costing.quick(request)
        except ApiError as exc:
            print(f"Error: {exc.message}")
            return

    currency = quote.currency or request.currency or DEFAULT_CURRENCY
    print(f"{request.job_type.label} x {request.quantity} ({name_of(currency)})")
    for label, amount in quote.cost_breakdown.items():
        print(f"  {label:<16}{format_currency(amount, currency, settings.display_locale):>16}")
    print(f"  {'Total':<16}{format_currency(quote.total_cost, currency, settings.display_locale):>16}")
    print(f"  {'Unit':<16}{format_currency(quote.unit_cost, currency, settings.display_locale):>16}")
    if quote.estimated_delivery_days:
        print(f"Estimated delivery: {quote.estimated_delivery_days} days")


def main() -> None:
    """Run the application."""
    parser = argparse.ArgumentParser(description="CostPrint")
    parser.add_argument("--amount", "-a", type=_amount, help="Amount to format")
    parser.add_argument("--currency", "-c", help="Currency code (default: preferred)")
    parser.add_argument("--input", "-i", type=Path, help="Job JSON file to quote")
    args = parser.parse_args()

    settings = get_settings()
    init_logging(settings.debug)

    if args.amount is not None:
        if args.currency:
            currency = parse_currency(args.currency.upper())
        else:
            currency = get_default_currency(open_preference_store(settings))
        print(format_currency(args.amount, currency, settings.display_locale))
    elif args.input:
        if not args.input.exists():
            print(f"Error: File not found: {args.input}")
            return
        print_quote(args.input, settings)
    else:
        print(f"{settings.app_name} v{__version__}")


if __name__ == "__main__":
    main()
