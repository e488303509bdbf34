"""
Reusable UI components for CostPrint.
"""

from datetime import datetime
from html import escape

import streamlit as st

from costprint.currency import (
    DEFAULT_LOCALE,
    currency_label,
    format_currency,
)
from costprint.models import (
    BINDING_OPTIONS,
    FINISHING_OPTIONS,
    LAMINATION_OPTIONS,
    PAPER_SIZES,
    PAPER_TYPES,
    ColorSpecification,
    CostBreakdown,
    Currency,
    JobSpecifications,
    JobStatus,
)


def format_number(value: float | int | None) -> str:
    """Format number with commas."""
    if value is None:
        return "0"
    return f"{value:,.0f}"


def format_date(date_val: datetime | str | None) -> str:
    """Format date for display."""
    if not date_val:
        return "—"
    if isinstance(date_val, str):
        try:
            date_val = datetime.fromisoformat(date_val.replace("Z", "+00:00"))
        except ValueError:
            return date_val
    return date_val.strftime("%b %d, %Y")


def format_option(value: str | None) -> str:
    """'perfect_bind' -> 'Perfect Bind'; empty -> 'None'."""
    if not value:
        return "None"
    return value.replace("_", " ").title()


def get_status_class(status: JobStatus | str) -> str:
    """Get CSS class for status badge."""
    if isinstance(status, str):
        try:
            status = JobStatus(status)
        except ValueError:
            return "status-draft"
    return "status-" + status.label.lower().replace(" ", "-")


def kpi_card(value: str, label: str, color_class: str = "") -> None:
    """Render a KPI card. Text is HTML-escaped."""
    st.markdown(
        f"""
        <div class="kpi-card">
            <div class="kpi-value {color_class}">{escape(str(value))}</div>
            <div class="kpi-label">{escape(label)}</div>
        </div>
        """,
        unsafe_allow_html=True,
    )


def status_badge(status: JobStatus) -> None:
    """Render a status badge."""
    st.markdown(
        f'<span class="status-badge {get_status_class(status)}">{status.label}</span>',
        unsafe_allow_html=True,
    )


def page_header(title: str, subtitle: str | None = None) -> None:
    """Render a page header with optional subtitle. Titles may be user data."""
    st.markdown(
        f'<h1 class="page-header">{escape(title)}</h1>', unsafe_allow_html=True
    )
    if subtitle:
        st.markdown(
            f'<p class="page-subtitle">{escape(subtitle)}</p>', unsafe_allow_html=True
        )


def cost_breakdown(
    breakdown: CostBreakdown,
    total: float,
    currency: Currency | str = Currency.USD,
    unit_cost: float | None = None,
    locale: str = DEFAULT_LOCALE,
) -> None:
    """Render a cost breakdown with its total in ``currency``."""

    def money(amount: float) -> str:
        return escape(format_currency(amount, currency, locale))

    rows = "".join(
        f'<div class="cost-row"><span>{label}</span>'
        f"<span>{money(amount)}</span></div>"
        for label, amount in breakdown.items()
    )
    st.markdown(
        f"""
        {rows}
        <div class="cost-total"><span>Total</span>
        <span>{money(total)}</span></div>
        """,
        unsafe_allow_html=True,
    )
    if unit_cost is not None:
        st.caption(f"Unit cost: {format_currency(unit_cost, currency, locale)}")


def currency_select(
    label: str,
    options: list[Currency],
    default: Currency,
    key: str | None = None,
) -> Currency:
    """Select box over ``options`` preselecting ``default``."""
    if default not in options:
        options = [default] + list(options)
    return st.selectbox(
        label,
        options,
        index=options.index(default),
        format_func=currency_label,
        key=key,
    )


def render_specification_fields(specs: JobSpecifications | None = None) -> JobSpecifications:
    """
    Render job specification inputs and return the edited specifications.

    Shared by the New Job and Job Detail edit forms.
    """
    specs = specs or JobSpecifications()

    col1, col2 = st.columns(2)
    with col1:
        paper_type = st.selectbox(
            "Paper Type",
            PAPER_TYPES,
            index=_index_of(PAPER_TYPES, specs.paper_type),
            format_func=format_option,
        )
        paper_size = st.selectbox(
            "Paper Size", PAPER_SIZES, index=_index_of(PAPER_SIZES, specs.paper_size)
        )
        paper_weight = st.text_input("Paper Weight", value=specs.paper_weight or "")
        pages = st.number_input("Pages", min_value=1, value=specs.pages or 1, step=1)

    with col2:
        front_colors = st.number_input(
            "Front Colors", min_value=0, max_value=8, value=specs.colors.front_colors
        )
        back_colors = st.number_input(
            "Back Colors", min_value=0, max_value=8, value=specs.colors.back_colors
        )
        binding = st.selectbox(
            "Binding",
            BINDING_OPTIONS,
            index=_index_of(BINDING_OPTIONS, specs.binding or ""),
            format_func=format_option,
        )
        lamination = st.selectbox(
            "Lamination",
            LAMINATION_OPTIONS,
            index=_index_of(LAMINATION_OPTIONS, specs.lamination or ""),
            format_func=format_option,
        )

    finishing = st.multiselect(
        "Finishing",
        FINISHING_OPTIONS,
        default=[f for f in specs.finishing if f in FINISHING_OPTIONS],
        format_func=format_option,
    )
    special_requirements = st.text_area(
        "Special Requirements", value=specs.special_requirements or ""
    )

    return JobSpecifications(
        paper_type=paper_type,
        paper_size=paper_size,
        paper_weight=paper_weight,
        colors=ColorSpecification(
            front_colors=int(front_colors),
            back_colors=int(back_colors),
            spot_colors=list(specs.colors.spot_colors),
            is_full_color=front_colors >= 4,
        ),
        pages=int(pages),
        binding=binding,
        lamination=lamination,
        finishing=finishing,
        special_requirements=special_requirements,
    )


def _index_of(options: list[str], value: str | None) -> int:
    return options.index(value) if value in options else 0


def confirm_dialog(
    key: str,
    message: str = "Are you sure?",
    confirm_label: str = "Yes, Delete",
    cancel_label: str = "Cancel",
) -> bool | None:
    """
    Render a confirmation dialog.

    Returns:
        True if confirmed, None if not yet answered. Cancelling reruns the page.
    """
    if not st.session_state.get(key):
        return None

    st.warning(message)
    col1, col2 = st.columns(2)

    with col1:
        if st.button(confirm_label, use_container_width=True):
            st.session_state[key] = False
            return True

    with col2:
        if st.button(cancel_label, use_container_width=True):
            st.session_state[key] = False
            st.rerun()

    return None
