"""
Typed client for the CostPrint backend API.

One ApiClient wraps an httpx.Client; endpoint groups hang off it:

    client = ApiClient(token_store=MappingStore(st.session_state))
    jobs = client.jobs.list(JobListQuery(limit=10))
    quote = client.costing.calculate(request)

The bearer token is read from the token store on every request. A 401 clears
the stored token and user, fires ``on_unauthorized`` and raises
AuthenticationError.
"""

import logging
from typing import Any, Callable

import httpx

from .config import get_settings
from .errors import (
    ApiError,
    AuthenticationError,
    NetworkError,
    error_for_response,
)
from .models import (
    BrandingSettings,
    CostCalculationRequest,
    CostCalculationResponse,
    CostParameters,
    CreateJobRequest,
    Currency,
    CurrencyConversion,
    CurrencySettings,
    ExchangeRates,
    Job,
    JobListQuery,
    JobListResponse,
    JobUpdate,
    LoginResponse,
    User,
    parse_currency,
)
from .storage import KeyValueStore

logger = logging.getLogger(__name__)

TOKEN_KEY = "auth_token"
USER_KEY = "user"


class ApiClient:
    def __init__(
        self,
        base_url: str | None = None,
        token_store: KeyValueStore | None = None,
        *,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
        on_unauthorized: Callable[[], None] | None = None,
    ):
        settings = get_settings()
        self.base_url = base_url or settings.api_base_url
        self.token_store = token_store
        self.on_unauthorized = on_unauthorized
        self._http = httpx.Client(
            base_url=self.base_url,
            timeout=timeout if timeout is not None else settings.http_timeout_seconds,
            headers={"Content-Type": "application/json"},
            transport=transport or httpx.HTTPTransport(retries=settings.http_retries),
            event_hooks={"request": [self._attach_token]},
        )

        self.auth = AuthApi(self)
        self.jobs = JobsApi(self)
        self.costing = CostingApi(self)
        self.settings = SettingsApi(self)
        self.currency = CurrencyApi(self)
        self.export = ExportApi(self)

    # ------------------------------------------------------------------ plumbing

    def _attach_token(self, request: httpx.Request) -> None:
        if self.token_store is None:
            return
        token = self.token_store.get(TOKEN_KEY)
        if token:
            request.headers["Authorization"] = f"Bearer {token}"

    def clear_credentials(self) -> None:
        if self.token_store is None:
            return
        self.token_store.delete(TOKEN_KEY)
        self.token_store.delete(USER_KEY)

    def request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response = self._http.request(method, path, **kwargs)
        except httpx.TimeoutException as exc:
            logger.warning("%s %s timed out", method, path)
            raise NetworkError(f"Request to {path} timed out") from exc
        except httpx.TransportError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise NetworkError(f"Could not reach {self.base_url}") from exc

        if response.status_code == 401:
            logger.info("%s %s unauthorized; clearing credentials", method, path)
            self.clear_credentials()
            if self.on_unauthorized is not None:
                self.on_unauthorized()
            raise error_for_response(response)

        if response.is_error:
            error = error_for_response(response)
            logger.warning(
                "%s %s -> %s: %s", method, path, response.status_code, error.message
            )
            raise error
        return response

    def request_json(self, method: str, path: str, **kwargs: Any) -> Any:
        response = self.request(method, path, **kwargs)
        try:
            return response.json()
        except ValueError as exc:
            raise ApiError(
                f"Invalid JSON from {path}", status_code=response.status_code
            ) from exc

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "ApiClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class _Endpoint:
    def __init__(self, client: ApiClient):
        self._client = client


# =============================================================================
# AUTH
# =============================================================================


class AuthApi(_Endpoint):
    def login(self, email: str, password: str) -> LoginResponse:
        data = self._client.request_json(
            "POST", "/api/auth/login", json={"email": email, "password": password}
        )
        try:
            return LoginResponse.from_dict(data)
        except (KeyError, TypeError) as exc:
            raise ApiError("Malformed login response") from exc

    def logout(self) -> None:
        try:
            self._client.request("POST", "/api/auth/logout")
        finally:
            self._client.clear_credentials()

    def me(self) -> User:
        return User.from_dict(self._client.request_json("GET", "/api/auth/me"))


# =============================================================================
# JOBS
# =============================================================================


class JobsApi(_Endpoint):
    def list(self, query: JobListQuery | None = None) -> JobListResponse:
        params = (query or JobListQuery()).to_params()
        return JobListResponse.from_dict(
            self._client.request_json("GET", "/api/jobs", params=params)
        )

    def create(self, job: CreateJobRequest) -> Job:
        return Job.from_dict(
            self._client.request_json("POST", "/api/jobs", json=job.to_dict())
        )

    def get(self, job_id: str) -> Job:
        return Job.from_dict(self._client.request_json("GET", f"/api/jobs/{job_id}"))

    def update(self, job_id: str, update: JobUpdate) -> Job:
        return Job.from_dict(
            self._client.request_json(
                "PUT", f"/api/jobs/{job_id}", json=update.to_dict()
            )
        )

    def delete(self, job_id: str) -> None:
        self._client.request("DELETE", f"/api/jobs/{job_id}")


# =============================================================================
# COSTING
# =============================================================================


class CostingApi(_Endpoint):
    def _post(self, path: str, request: CostCalculationRequest) -> CostCalculationResponse:
        return CostCalculationResponse.from_dict(
            self._client.request_json("POST", path, json=request.to_dict())
        )

    def calculate(self, request: CostCalculationRequest) -> CostCalculationResponse:
        return self._post("/api/cost/calculate", request)

    def preview(self, request: CostCalculationRequest) -> CostCalculationResponse:
        return self._post("/api/cost/preview", request)

    def quick(self, request: CostCalculationRequest) -> CostCalculationResponse:
        return self._post("/api/cost/quick", request)


# =============================================================================
# SETTINGS
# =============================================================================


class SettingsApi(_Endpoint):
    def get_cost_parameters(self) -> CostParameters:
        return CostParameters.from_dict(
            self._client.request_json("GET", "/api/settings/cost-parameters")
        )

    def update_cost_parameters(self, params: CostParameters) -> CostParameters:
        return CostParameters.from_dict(
            self._client.request_json(
                "PUT", "/api/settings/cost-parameters", json=params.to_update_dict()
            )
        )

    def get_branding(self) -> BrandingSettings:
        return BrandingSettings.from_dict(
            self._client.request_json("GET", "/api/settings/branding")
        )

    def update_branding(self, branding: BrandingSettings) -> BrandingSettings:
        return BrandingSettings.from_dict(
            self._client.request_json(
                "PUT", "/api/settings/branding", json=branding.to_update_dict()
            )
        )


# =============================================================================
# CURRENCY
# =============================================================================


class CurrencyApi(_Endpoint):
    def supported(self) -> list[Currency]:
        """Supported codes; codes this client cannot display are dropped."""
        codes = self._client.request_json("GET", "/api/currency/supported") or []
        supported = []
        for raw in codes:
            code = parse_currency(raw, None)
            if code is None:
                logger.debug("ignoring unsupported currency %r", raw)
            else:
                supported.append(code)
        return supported

    def rates(self) -> ExchangeRates:
        return ExchangeRates.from_dict(
            self._client.request_json("GET", "/api/currency/rates")
        )

    def convert(
        self, amount: float, from_currency: Currency, to_currency: Currency
    ) -> CurrencyConversion:
        params = {
            "amount": amount,
            "from": from_currency.value,
            "to": to_currency.value,
        }
        return CurrencyConversion.from_dict(
            self._client.request_json("GET", "/api/currency/convert", params=params)
        )

    def settings(self) -> CurrencySettings:
        return CurrencySettings.from_dict(
            self._client.request_json("GET", "/api/currency/settings")
        )


# =============================================================================
# EXPORT
# =============================================================================


class ExportApi(_Endpoint):
    def pdf(self, job_id: str) -> bytes:
        return self._client.request("POST", f"/api/export/pdf/{job_id}", json={}).content

    def excel(self, job_id: str) -> bytes:
        return self._client.request(
            "POST", f"/api/export/excel/{job_id}", json={}
        ).content
