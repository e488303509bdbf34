"""
Data models for the CostPrint dashboard.

Every record mirrors a JSON shape exchanged with the backend API. Wire keys
are camelCase; attributes are snake_case. Parsing is lenient: the backend
serializes decimals as strings, and optional fields may be missing.

Entities:
- User / LoginResponse: authentication
- Job: a print order with specifications and a cost breakdown
- CostCalculationRequest / CostCalculationResponse: pricing service calls
- CostParameters / BrandingSettings: shop settings
- ExchangeRates / CurrencyConversion / CurrencySettings: currency service
"""

import math
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# =============================================================================
# ENUMS
# =============================================================================


class _LenientEnum(str, Enum):
    """String enum that also accepts snake_case or differently cased values."""

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            key = value.replace("_", "").replace(" ", "").lower()
            for member in cls:
                if member.value.lower() == key:
                    return member
        return None

    @property
    def label(self) -> str:
        """Human readable label, e.g. 'BusinessCard' -> 'Business Card'."""
        return re.sub(r"(?<!^)(?=[A-Z])", " ", self.value)


class Currency(str, Enum):
    """Closed set of display currencies."""

    USD = "USD"
    FCFA = "FCFA"
    EUR = "EUR"
    GBP = "GBP"
    CAD = "CAD"


class UserRole(_LenientEnum):
    ADMIN = "Admin"
    MANAGER = "Manager"
    USER = "User"


class JobType(_LenientEnum):
    """Kinds of print jobs the pricing service understands."""

    FLYER = "Flyer"
    BROCHURE = "Brochure"
    BUSINESS_CARD = "BusinessCard"
    BOOK = "Book"
    POSTER = "Poster"
    BANNER = "Banner"
    STICKER = "Sticker"
    CUSTOM = "Custom"


class JobStatus(_LenientEnum):
    """Workflow status for a job."""

    DRAFT = "Draft"
    QUOTED = "Quoted"
    APPROVED = "Approved"
    IN_PRODUCTION = "InProduction"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


# Form choices used by the New Job and Job Detail pages
PAPER_TYPES = ["80gsm_offset", "120gsm_coated", "160gsm_coated", "250gsm_card"]
PAPER_SIZES = ["A4", "A3", "A2", "A1", "Letter", "Legal", "Tabloid"]
BINDING_OPTIONS = ["", "saddle_stitch", "perfect_bind", "spiral_bind", "wire_bind"]
LAMINATION_OPTIONS = ["", "gloss", "matte", "soft_touch"]
FINISHING_OPTIONS = ["cutting", "folding", "scoring", "perforation", "embossing"]


# =============================================================================
# PARSING HELPERS
# =============================================================================


def parse_currency(value: Any, default: Currency | None = Currency.USD) -> Currency | None:
    """Parse an external currency code, falling back to ``default``."""
    try:
        return Currency(value)
    except ValueError:
        return default


def _to_float(value: Any, default: float = 0.0) -> float:
    """Numeric field from the wire; non-numeric and non-finite values give ``default``."""
    if value is None or value == "":
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return number if math.isfinite(number) else default


def _to_int(value: Any, default: int = 0) -> int:
    if value is None or value == "":
        return default
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return default


def _opt_float(value: Any) -> float | None:
    return None if value is None else _to_float(value)


def _opt_str(value: Any) -> str | None:
    """Empty strings from form widgets are sent as null."""
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _parse_enum(enum_cls, value: Any, default):
    try:
        return enum_cls(value)
    except ValueError:
        return default


# =============================================================================
# USER / AUTH
# =============================================================================


@dataclass
class User:
    id: str = ""
    email: str = ""
    name: str = ""
    role: UserRole = UserRole.USER

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "role": self.role.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "User":
        return cls(
            id=str(data.get("id", "")),
            email=data.get("email", ""),
            name=data.get("name", ""),
            role=_parse_enum(UserRole, data.get("role"), UserRole.USER),
        )

    @property
    def display_name(self) -> str:
        return self.name or self.email or "Unknown User"


@dataclass
class LoginResponse:
    token: str
    user: User

    @classmethod
    def from_dict(cls, data: dict) -> "LoginResponse":
        return cls(token=data["token"], user=User.from_dict(data.get("user") or {}))


# =============================================================================
# JOB SPECIFICATIONS
# =============================================================================


@dataclass
class ColorSpecification:
    front_colors: int = 4
    back_colors: int = 0
    spot_colors: list[str] = field(default_factory=list)
    is_full_color: bool = True

    def to_dict(self) -> dict:
        return {
            "frontColors": self.front_colors,
            "backColors": self.back_colors,
            "spotColors": list(self.spot_colors),
            "isFullColor": self.is_full_color,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ColorSpecification":
        return cls(
            front_colors=_to_int(data.get("frontColors"), 4),
            back_colors=_to_int(data.get("backColors"), 0),
            spot_colors=list(data.get("spotColors") or []),
            is_full_color=bool(data.get("isFullColor", True)),
        )


@dataclass
class JobSpecifications:
    """Paper, color, binding and finishing options for a print job."""

    paper_type: str = "80gsm_offset"
    paper_size: str = "A4"
    paper_weight: str | None = "80gsm"
    colors: ColorSpecification = field(default_factory=ColorSpecification)
    pages: int | None = 1
    binding: str | None = None
    lamination: str | None = None
    finishing: list[str] = field(default_factory=list)
    special_requirements: str | None = None

    def to_dict(self) -> dict:
        return {
            "paperType": self.paper_type,
            "paperSize": self.paper_size,
            "paperWeight": _opt_str(self.paper_weight),
            "colors": self.colors.to_dict(),
            "pages": self.pages,
            "binding": _opt_str(self.binding),
            "lamination": _opt_str(self.lamination),
            "finishing": list(self.finishing),
            "specialRequirements": _opt_str(self.special_requirements),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "JobSpecifications":
        pages = data.get("pages")
        return cls(
            paper_type=data.get("paperType", ""),
            paper_size=data.get("paperSize", ""),
            paper_weight=data.get("paperWeight"),
            colors=ColorSpecification.from_dict(data.get("colors") or {}),
            pages=_to_int(pages) if pages is not None else None,
            binding=data.get("binding"),
            lamination=data.get("lamination"),
            finishing=list(data.get("finishing") or []),
            special_requirements=data.get("specialRequirements"),
        )


# =============================================================================
# COSTS
# =============================================================================


@dataclass
class CostBreakdown:
    """Decomposition of a job's price, as computed by the pricing service."""

    paper_cost: float = 0.0
    plate_cost: float = 0.0
    labor_cost: float = 0.0
    binding_cost: float = 0.0
    finishing_cost: float = 0.0
    overhead: float = 0.0

    def to_dict(self) -> dict:
        return {
            "paperCost": self.paper_cost,
            "plateCost": self.plate_cost,
            "laborCost": self.labor_cost,
            "bindingCost": self.binding_cost,
            "finishingCost": self.finishing_cost,
            "overhead": self.overhead,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CostBreakdown":
        return cls(
            paper_cost=_to_float(data.get("paperCost")),
            plate_cost=_to_float(data.get("plateCost")),
            labor_cost=_to_float(data.get("laborCost")),
            binding_cost=_to_float(data.get("bindingCost")),
            finishing_cost=_to_float(data.get("finishingCost")),
            overhead=_to_float(data.get("overhead")),
        )

    def items(self) -> list[tuple[str, float]]:
        """(label, amount) pairs in display order."""
        return [
            ("Paper Cost", self.paper_cost),
            ("Plate Cost", self.plate_cost),
            ("Labor Cost", self.labor_cost),
            ("Binding Cost", self.binding_cost),
            ("Finishing Cost", self.finishing_cost),
            ("Overhead", self.overhead),
        ]

    @property
    def subtotal(self) -> float:
        return sum(amount for _, amount in self.items())


@dataclass
class CostCalculationRequest:
    job_type: JobType
    quantity: int
    specifications: JobSpecifications
    currency: Currency | None = None

    def to_dict(self) -> dict:
        d = {
            "jobType": self.job_type.value,
            "quantity": self.quantity,
            "specifications": self.specifications.to_dict(),
        }
        if self.currency is not None:
            d["currency"] = self.currency.value
        return d


@dataclass
class CostCalculationResponse:
    cost_breakdown: CostBreakdown
    total_cost: float = 0.0
    unit_cost: float = 0.0
    estimated_delivery_days: int = 0
    currency: Currency | None = None
    exchange_rate: float | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "CostCalculationResponse":
        currency = data.get("currency")
        return cls(
            cost_breakdown=CostBreakdown.from_dict(data.get("costBreakdown") or {}),
            total_cost=_to_float(data.get("totalCost")),
            unit_cost=_to_float(data.get("unitCost")),
            estimated_delivery_days=_to_int(data.get("estimatedDeliveryDays")),
            currency=parse_currency(currency) if currency is not None else None,
            exchange_rate=_opt_float(data.get("exchangeRate")),
        )


# =============================================================================
# JOB
# =============================================================================


@dataclass
class Job:
    """
    A print order record.

    Totals are expressed in the backend's base currency (USD).
    Timestamps are kept as the ISO strings the backend sends.
    """

    id: str = ""
    user_id: str = ""
    title: str = ""
    job_type: JobType = JobType.FLYER
    quantity: int = 0
    specifications: JobSpecifications = field(default_factory=JobSpecifications)
    cost_breakdown: CostBreakdown = field(default_factory=CostBreakdown)
    total_cost: float = 0.0
    unit_cost: float = 0.0
    status: JobStatus = JobStatus.DRAFT
    created_at: str | None = None
    updated_at: str | None = None

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dictionary."""
        return {
            "id": self.id,
            "userId": self.user_id,
            "title": self.title,
            "jobType": self.job_type.value,
            "quantity": self.quantity,
            "specifications": self.specifications.to_dict(),
            "costBreakdown": self.cost_breakdown.to_dict(),
            "totalCost": self.total_cost,
            "unitCost": self.unit_cost,
            "status": self.status.value,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Job":
        return cls(
            id=str(data.get("id", "")),
            user_id=str(data.get("userId", "")),
            title=data.get("title", ""),
            job_type=_parse_enum(JobType, data.get("jobType"), JobType.CUSTOM),
            quantity=_to_int(data.get("quantity")),
            specifications=JobSpecifications.from_dict(data.get("specifications") or {}),
            cost_breakdown=CostBreakdown.from_dict(data.get("costBreakdown") or {}),
            total_cost=_to_float(data.get("totalCost")),
            unit_cost=_to_float(data.get("unitCost")),
            status=_parse_enum(JobStatus, data.get("status"), JobStatus.DRAFT),
            created_at=data.get("createdAt"),
            updated_at=data.get("updatedAt"),
        )

    @property
    def display_title(self) -> str:
        return self.title or "Untitled Job"


@dataclass
class CreateJobRequest:
    title: str
    job_type: JobType
    quantity: int
    specifications: JobSpecifications = field(default_factory=JobSpecifications)

    def to_dict(self) -> dict:
        return {
            "title": self.title.strip(),
            "jobType": self.job_type.value,
            "quantity": self.quantity,
            "specifications": self.specifications.to_dict(),
        }

    def validate(self) -> list[str]:
        """Return user-facing validation errors (empty when valid)."""
        errors = []
        if not self.title or not self.title.strip():
            errors.append("Please enter a job title")
        if self.quantity is None or self.quantity <= 0:
            errors.append("Please enter a valid quantity greater than 0")
        return errors

    def to_calculation_request(
        self, currency: Currency | None = None
    ) -> CostCalculationRequest:
        return CostCalculationRequest(
            job_type=self.job_type,
            quantity=self.quantity,
            specifications=self.specifications,
            currency=currency,
        )


@dataclass
class JobUpdate:
    """Partial update; unset fields are left untouched by the backend."""

    title: str | None = None
    quantity: int | None = None
    specifications: JobSpecifications | None = None
    status: JobStatus | None = None

    def to_dict(self) -> dict:
        d: dict = {}
        if self.title is not None:
            d["title"] = self.title
        if self.quantity is not None:
            d["quantity"] = self.quantity
        if self.specifications is not None:
            d["specifications"] = self.specifications.to_dict()
        if self.status is not None:
            d["status"] = self.status.value
        return d


@dataclass
class JobListQuery:
    page: int | None = None
    limit: int | None = None
    job_type: JobType | None = None
    status: JobStatus | None = None
    search: str | None = None
    sort_by: str | None = None
    sort_order: str | None = None  # "asc" | "desc"

    def to_params(self) -> dict:
        """Query string parameters, unset fields dropped."""
        params = {
            "page": self.page,
            "limit": self.limit,
            "jobType": self.job_type.value if self.job_type else None,
            "status": self.status.value if self.status else None,
            "search": _opt_str(self.search),
            "sortBy": self.sort_by,
            "sortOrder": self.sort_order,
        }
        return {k: v for k, v in params.items() if v is not None}


@dataclass
class JobListResponse:
    jobs: list[Job] = field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 0
    total_pages: int = 1

    @classmethod
    def from_dict(cls, data: dict | None) -> "JobListResponse":
        data = data or {}
        jobs = [Job.from_dict(j) for j in data.get("jobs") or []]
        return cls(
            jobs=jobs,
            total=_to_int(data.get("total"), len(jobs)),
            page=_to_int(data.get("page"), 1),
            limit=_to_int(data.get("limit"), len(jobs)),
            total_pages=max(1, _to_int(data.get("totalPages"), 1)),
        )


# =============================================================================
# SETTINGS
# =============================================================================


@dataclass
class CostParameters:
    """Rates the pricing service applies. Percentages are fractions (0.15 = 15%)."""

    id: str = ""
    paper_cost_per_sheet: float = 0.10
    plate_cost_per_job: float = 25.00
    labor_cost_per_hour: float = 15.00
    binding_cost_per_unit: float = 0.50
    overhead_percentage: float = 0.15
    profit_margin_percentage: float = 0.20
    created_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "CostParameters":
        defaults = cls()
        return cls(
            id=str(data.get("id", "")),
            paper_cost_per_sheet=_to_float(
                data.get("paperCostPerSheet"), defaults.paper_cost_per_sheet
            ),
            plate_cost_per_job=_to_float(
                data.get("plateCostPerJob"), defaults.plate_cost_per_job
            ),
            labor_cost_per_hour=_to_float(
                data.get("laborCostPerHour"), defaults.labor_cost_per_hour
            ),
            binding_cost_per_unit=_to_float(
                data.get("bindingCostPerUnit"), defaults.binding_cost_per_unit
            ),
            overhead_percentage=_to_float(
                data.get("overheadPercentage"), defaults.overhead_percentage
            ),
            profit_margin_percentage=_to_float(
                data.get("profitMarginPercentage"), defaults.profit_margin_percentage
            ),
            created_at=data.get("createdAt"),
            updated_at=data.get("updatedAt"),
        )

    def to_update_dict(self) -> dict:
        """Editable fields only, as accepted by PUT /api/settings/cost-parameters."""
        return {
            "paperCostPerSheet": self.paper_cost_per_sheet,
            "plateCostPerJob": self.plate_cost_per_job,
            "laborCostPerHour": self.labor_cost_per_hour,
            "bindingCostPerUnit": self.binding_cost_per_unit,
            "overheadPercentage": self.overhead_percentage,
            "profitMarginPercentage": self.profit_margin_percentage,
        }


@dataclass
class BrandingSettings:
    id: str = ""
    company_name: str = "CostPrint Pro"
    company_logo_url: str | None = None
    primary_color: str = "#3B82F6"
    secondary_color: str = "#1F2937"
    created_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "BrandingSettings":
        defaults = cls()
        return cls(
            id=str(data.get("id", "")),
            company_name=data.get("companyName") or defaults.company_name,
            company_logo_url=data.get("companyLogoUrl"),
            primary_color=data.get("primaryColor") or defaults.primary_color,
            secondary_color=data.get("secondaryColor") or defaults.secondary_color,
            created_at=data.get("createdAt"),
            updated_at=data.get("updatedAt"),
        )

    def to_update_dict(self) -> dict:
        return {
            "companyName": self.company_name,
            "companyLogoUrl": _opt_str(self.company_logo_url),
            "primaryColor": self.primary_color,
            "secondaryColor": self.secondary_color,
        }


# =============================================================================
# CURRENCY SERVICE
# =============================================================================


@dataclass
class ExchangeRates:
    base: Currency = Currency.USD
    rates: dict[str, float] = field(default_factory=dict)
    last_updated: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "ExchangeRates":
        return cls(
            base=parse_currency(data.get("base")),
            rates={str(k): _to_float(v) for k, v in (data.get("rates") or {}).items()},
            last_updated=data.get("lastUpdated"),
        )


@dataclass
class CurrencyConversion:
    original_amount: float
    converted_amount: float
    from_currency: Currency
    to_currency: Currency
    exchange_rate: float

    @classmethod
    def from_dict(cls, data: dict) -> "CurrencyConversion":
        return cls(
            original_amount=_to_float(data.get("originalAmount")),
            converted_amount=_to_float(data.get("convertedAmount")),
            from_currency=parse_currency(data.get("fromCurrency")),
            to_currency=parse_currency(data.get("toCurrency")),
            exchange_rate=_to_float(data.get("exchangeRate"), 1.0),
        )


@dataclass
class CurrencySettings:
    default_currency: Currency = Currency.USD
    supported_currencies: list[Currency] = field(default_factory=lambda: list(Currency))

    @classmethod
    def from_dict(cls, data: dict) -> "CurrencySettings":
        codes = (parse_currency(c, None) for c in data.get("supportedCurrencies") or [])
        supported = [code for code in codes if code is not None]
        return cls(
            default_currency=parse_currency(data.get("defaultCurrency")),
            supported_currencies=supported or list(Currency),
        )


# =============================================================================
# DASHBOARD
# =============================================================================


@dataclass
class DashboardStats:
    """Container for dashboard KPI metrics."""

    total_jobs: int = 0
    total_value: float = 0.0
    avg_job_value: float = 0.0
    recent_jobs: int = 0

    @classmethod
    def from_job_list(cls, response: JobListResponse | None) -> "DashboardStats":
        if response is None:
            return cls()
        jobs = response.jobs
        total_value = sum(job.total_cost for job in jobs)
        return cls(
            total_jobs=response.total,
            total_value=total_value,
            avg_job_value=total_value / len(jobs) if jobs else 0.0,
            recent_jobs=len(jobs),
        )
