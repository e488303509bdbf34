"""Tests for the display helpers and router callbacks used by the pages."""

from datetime import datetime

import pytest

from costprint.models import CostBreakdown, Currency, JobStatus
from costprint.ui import components, router
from costprint.ui.components import (
    cost_breakdown,
    format_date,
    format_number,
    format_option,
    get_status_class,
    kpi_card,
    page_header,
)
from costprint.ui.router import clamp_page, reset_page


@pytest.mark.parametrize(
    "status,css",
    [
        (JobStatus.DRAFT, "status-draft"),
        (JobStatus.IN_PRODUCTION, "status-in-production"),
        ("Cancelled", "status-cancelled"),
        ("in_production", "status-in-production"),
        ("Shipped", "status-draft"),
    ],
)
def test_status_class(status, css):
    assert get_status_class(status) == css


def test_format_date():
    assert format_date("2026-01-15T10:00:00Z") == "Jan 15, 2026"
    assert format_date(datetime(2026, 3, 2)) == "Mar 02, 2026"
    assert format_date(None) == "—"
    assert format_date("yesterday") == "yesterday"


def test_format_option():
    assert format_option("perfect_bind") == "Perfect Bind"
    assert format_option("120gsm_coated") == "120Gsm Coated"
    assert format_option("") == "None"
    assert format_option(None) == "None"


def test_format_number():
    assert format_number(12500) == "12,500"
    assert format_number(None) == "0"


class FakeStreamlit:
    """Records markdown/caption output instead of rendering it."""

    def __init__(self):
        self.markdown_calls: list[str] = []
        self.captions: list[str] = []
        self.session_state: dict = {}

    def markdown(self, body, unsafe_allow_html=False):
        self.markdown_calls.append(body)

    def caption(self, body):
        self.captions.append(body)


@pytest.fixture
def fake_st(monkeypatch):
    fake = FakeStreamlit()
    monkeypatch.setattr(components, "st", fake)
    monkeypatch.setattr(router, "st", fake)
    return fake


def test_page_header_escapes_html(fake_st):
    page_header("<img src=x onerror=alert(1)>", "Welcome back, <b>Ann</b>")

    html = "".join(fake_st.markdown_calls)
    assert "<img" not in html
    assert "&lt;img src=x onerror=alert(1)&gt;" in html
    assert "&lt;b&gt;Ann&lt;/b&gt;" in html


def test_kpi_card_escapes_html(fake_st):
    kpi_card("<script>x</script>", "Total <i>Jobs</i>")

    html = fake_st.markdown_calls[0]
    assert "<script>" not in html
    assert "&lt;i&gt;Jobs&lt;/i&gt;" in html


def test_cost_breakdown_uses_locale(fake_st):
    cost_breakdown(
        CostBreakdown(paper_cost=1234.5),
        1234.5,
        Currency.EUR,
        unit_cost=1.5,
        locale="de_DE",
    )

    html = fake_st.markdown_calls[0]
    assert "1.234,50" in html
    assert "Paper Cost" in html
    assert fake_st.captions[0].startswith("Unit cost: 1,50")


def test_cost_breakdown_defaults_to_en_us(fake_st):
    cost_breakdown(CostBreakdown(paper_cost=1234.5), 1234.5)
    assert "$1,234.50" in fake_st.markdown_calls[0]


def test_reset_page(fake_st):
    fake_st.session_state["jobs_page"] = 3
    reset_page("jobs_page")
    assert fake_st.session_state["jobs_page"] == 1


@pytest.mark.parametrize(
    "page,total_pages,expected",
    [(3, 1, 1), (2, 5, 2), (0, 5, 1), (4, 0, 1), (9, 4, 4)],
)
def test_clamp_page(page, total_pages, expected):
    assert clamp_page(page, total_pages) == expected
