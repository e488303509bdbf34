"""
Tests for the typed API client.

Requests go through httpx.MockTransport; nothing touches the network.
"""

import json

import httpx
import pytest

from costprint.api import TOKEN_KEY, USER_KEY, ApiClient
from costprint.errors import (
    ApiError,
    AuthenticationError,
    ForbiddenError,
    NetworkError,
    NotFoundError,
    ServerError,
    ValidationError,
)
from costprint.models import (
    CostCalculationRequest,
    CreateJobRequest,
    Currency,
    JobListQuery,
    JobSpecifications,
    JobStatus,
    JobType,
    JobUpdate,
)
from costprint.storage import MappingStore

from test_models import JOB_PAYLOAD


def make_client(handler, store=None, **kwargs) -> ApiClient:
    return ApiClient(
        "http://api.test",
        token_store=store,
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


class Recorder:
    """Handler that records requests and replies with a fixed response."""

    def __init__(self, status_code=200, json_body=None, content=None):
        self.requests: list[httpx.Request] = []
        self.status_code = status_code
        self.json_body = json_body
        self.content = content

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.content is not None:
            return httpx.Response(self.status_code, content=self.content)
        return httpx.Response(self.status_code, json=self.json_body)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self):
        return json.loads(self.last.content)


class TestAuthHeader:
    def test_bearer_token_attached(self):
        recorder = Recorder(json_body={"id": "u1", "email": "a@b.c"})
        store = MappingStore({TOKEN_KEY: "secret"})

        make_client(recorder, store).auth.me()

        assert recorder.last.headers["Authorization"] == "Bearer secret"

    def test_no_token_no_header(self):
        recorder = Recorder(json_body={"id": "u1"})
        make_client(recorder, MappingStore()).auth.me()
        assert "Authorization" not in recorder.last.headers

    def test_token_read_on_every_request(self):
        recorder = Recorder(json_body={"id": "u1"})
        store = MappingStore()
        client = make_client(recorder, store)

        client.auth.me()
        store.set(TOKEN_KEY, "later")
        client.auth.me()

        assert "Authorization" not in recorder.requests[0].headers
        assert recorder.requests[1].headers["Authorization"] == "Bearer later"


class TestUnauthorized:
    def test_401_clears_credentials_and_notifies(self):
        calls = []
        store = MappingStore({TOKEN_KEY: "expired", USER_KEY: "{}", "other": "kept"})
        client = make_client(
            Recorder(401, {"error": "Token expired", "status": 401}),
            store,
            on_unauthorized=lambda: calls.append("redirect"),
        )

        with pytest.raises(AuthenticationError) as exc_info:
            client.jobs.list()

        assert exc_info.value.status_code == 401
        assert exc_info.value.message == "Token expired"
        assert store.get(TOKEN_KEY) is None
        assert store.get(USER_KEY) is None
        assert store.get("other") == "kept"
        assert calls == ["redirect"]

    def test_401_without_store(self):
        client = make_client(Recorder(401, {"error": "nope"}))
        with pytest.raises(AuthenticationError):
            client.auth.me()


class TestErrorMapping:
    @pytest.mark.parametrize(
        "status,body,error_cls,message",
        [
            (400, {"error": "Bad quantity"}, ValidationError, "Bad quantity"),
            (403, {"error": "Admins only"}, ForbiddenError, "Admins only"),
            (404, {"error": "Job not found"}, NotFoundError, "Job not found"),
            (422, {"detail": "title missing"}, ValidationError, "title missing"),
            (500, {"error": "Database error"}, ServerError, "Database error"),
            (503, None, ServerError, "HTTP 503"),
        ],
    )
    def test_status_maps_to_error(self, status, body, error_cls, message):
        client = make_client(Recorder(status, body))

        with pytest.raises(error_cls) as exc_info:
            client.jobs.get("job-1")

        assert exc_info.value.message == message
        assert exc_info.value.status_code == status

    def test_plain_text_error_body(self):
        client = make_client(Recorder(502, content=b"upstream down"))
        with pytest.raises(ServerError, match="upstream down"):
            client.jobs.get("job-1")

    def test_unmapped_status_is_base_error(self):
        client = make_client(Recorder(409, {"error": "Conflict"}))
        with pytest.raises(ApiError) as exc_info:
            client.jobs.delete("job-1")
        assert type(exc_info.value) is ApiError

    def test_invalid_json_success(self):
        client = make_client(Recorder(200, content=b"<html>"))
        with pytest.raises(ApiError, match="Invalid JSON"):
            client.jobs.get("job-1")

    def test_connection_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(NetworkError):
            make_client(handler).jobs.list()

    def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        with pytest.raises(NetworkError, match="timed out"):
            make_client(handler).jobs.list()


class TestAuthApi:
    def test_login(self):
        recorder = Recorder(
            json_body={"token": "jwt", "user": {"id": "u1", "name": "Ann", "role": "Manager"}}
        )
        response = make_client(recorder).auth.login("ann@shop.test", "pw")

        assert recorder.last.method == "POST"
        assert recorder.last.url.path == "/api/auth/login"
        assert recorder.last_json() == {"email": "ann@shop.test", "password": "pw"}
        assert response.token == "jwt"
        assert response.user.name == "Ann"

    def test_login_malformed(self):
        with pytest.raises(ApiError, match="Malformed"):
            make_client(Recorder(json_body={"user": {}})).auth.login("a", "b")

    def test_logout_clears_credentials_even_on_failure(self):
        store = MappingStore({TOKEN_KEY: "t", USER_KEY: "{}"})
        client = make_client(Recorder(500, {"error": "boom"}), store)

        with pytest.raises(ServerError):
            client.auth.logout()

        assert store.get(TOKEN_KEY) is None


class TestJobsApi:
    def test_list_sends_query(self):
        recorder = Recorder(json_body={"jobs": [JOB_PAYLOAD], "total": 1})
        result = make_client(recorder).jobs.list(
            JobListQuery(limit=10, job_type=JobType.BUSINESS_CARD, status=JobStatus.QUOTED)
        )

        params = recorder.last.url.params
        assert recorder.last.url.path == "/api/jobs"
        assert params["limit"] == "10"
        assert params["jobType"] == "BusinessCard"
        assert params["status"] == "Quoted"
        assert "search" not in params
        assert result.jobs[0].title == "Spring Catalogue"

    def test_create(self):
        recorder = Recorder(json_body=JOB_PAYLOAD)
        job = make_client(recorder).jobs.create(
            CreateJobRequest(title="Spring Catalogue", job_type=JobType.BOOK, quantity=500)
        )

        assert recorder.last.method == "POST"
        assert recorder.last_json()["jobType"] == "Book"
        assert job.id == "job-1"

    def test_get_update_delete_paths(self):
        recorder = Recorder(json_body=JOB_PAYLOAD)
        client = make_client(recorder)

        client.jobs.get("job-1")
        assert (recorder.last.method, recorder.last.url.path) == ("GET", "/api/jobs/job-1")

        client.jobs.update("job-1", JobUpdate(status=JobStatus.APPROVED))
        assert recorder.last.method == "PUT"
        assert recorder.last_json() == {"status": "Approved"}

        client.jobs.delete("job-1")
        assert (recorder.last.method, recorder.last.url.path) == ("DELETE", "/api/jobs/job-1")


class TestCostingApi:
    REQUEST = CostCalculationRequest(
        job_type=JobType.FLYER,
        quantity=1000,
        specifications=JobSpecifications(),
        currency=Currency.EUR,
    )

    @pytest.mark.parametrize(
        "method,path",
        [
            ("calculate", "/api/cost/calculate"),
            ("preview", "/api/cost/preview"),
            ("quick", "/api/cost/quick"),
        ],
    )
    def test_endpoints(self, method, path):
        recorder = Recorder(
            json_body={
                "costBreakdown": {"paperCost": "40.00"},
                "totalCost": "92.00",
                "unitCost": "0.092",
                "estimatedDeliveryDays": 3,
                "currency": "EUR",
                "exchangeRate": "0.92",
            }
        )
        quote = getattr(make_client(recorder).costing, method)(self.REQUEST)

        assert recorder.last.url.path == path
        assert recorder.last_json()["currency"] == "EUR"
        assert quote.currency == Currency.EUR
        assert quote.total_cost == pytest.approx(92.0)


class TestCurrencyApi:
    def test_supported_drops_unknown(self):
        client = make_client(Recorder(json_body=["USD", "XAF", "FCFA", "EUR"]))
        assert client.currency.supported() == [Currency.USD, Currency.FCFA, Currency.EUR]

    def test_convert_params(self):
        recorder = Recorder(
            json_body={
                "originalAmount": 100,
                "convertedAmount": "60500",
                "fromCurrency": "USD",
                "toCurrency": "FCFA",
                "exchangeRate": "605",
            }
        )
        conversion = make_client(recorder).currency.convert(100, Currency.USD, Currency.FCFA)

        params = recorder.last.url.params
        assert params["from"] == "USD"
        assert params["to"] == "FCFA"
        assert conversion.converted_amount == pytest.approx(60500)
        assert conversion.to_currency == Currency.FCFA

    def test_rates_and_settings(self):
        client = make_client(Recorder(json_body={"base": "USD", "rates": {"EUR": 0.9}}))
        assert client.currency.rates().rates == {"EUR": 0.9}

        client = make_client(Recorder(json_body={"defaultCurrency": "GBP"}))
        assert client.currency.settings().default_currency == Currency.GBP


class TestSettingsAndExport:
    def test_cost_parameters_roundtrip(self):
        recorder = Recorder(json_body={"id": "p1", "laborCostPerHour": "18"})
        client = make_client(recorder)

        params = client.settings.get_cost_parameters()
        client.settings.update_cost_parameters(params)

        assert recorder.last.method == "PUT"
        assert recorder.last.url.path == "/api/settings/cost-parameters"
        assert recorder.last_json()["laborCostPerHour"] == pytest.approx(18.0)

    def test_branding_update(self):
        recorder = Recorder(json_body={"companyName": "Inkwell"})
        client = make_client(recorder)

        branding = client.settings.get_branding()
        client.settings.update_branding(branding)

        assert recorder.last_json()["companyName"] == "Inkwell"

    def test_export_returns_bytes(self):
        recorder = Recorder(content=b"%PDF-1.7")
        assert make_client(recorder).export.pdf("job-1") == b"%PDF-1.7"
        assert recorder.last.url.path == "/api/export/pdf/job-1"

        make_client(recorder).export.excel("job-1")
        assert recorder.last.url.path == "/api/export/excel/job-1"
