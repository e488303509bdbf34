"""
CostPrint Pro - Print Shop Job Costing Dashboard
Quote, save and track print jobs with Streamlit.
"""

import json
import logging
import sys
from html import escape
from pathlib import Path

import pandas as pd
import streamlit as st

# Add src/ to path for package imports
sys.path.insert(0, str(Path(__file__).parent / "src"))

from costprint import __version__
from costprint.api import ApiClient
from costprint.config import get_settings
from costprint.currency import (
    DEFAULT_CURRENCY,
    format_currency,
    get_default_currency,
    name_of,
    set_default_currency,
)
from costprint.errors import ApiError, AuthenticationError, NotFoundError, describe_error
from costprint.log import init_logging
from costprint.models import (
    BrandingSettings,
    CostParameters,
    CreateJobRequest,
    Currency,
    DashboardStats,
    Job,
    JobListQuery,
    JobStatus,
    JobType,
    JobUpdate,
)
from costprint.session import AuthSession
from costprint.storage import MappingStore, open_preference_store
from costprint.ui import (
    clamp_page,
    clear_page_state,
    confirm_dialog,
    cost_breakdown,
    currency_select,
    format_date,
    format_number,
    format_option,
    get_current_page,
    go,
    init_edit_mode,
    inject_styles,
    kpi_card,
    page_header,
    render_specification_fields,
    reset_page,
    send_to_login,
    status_badge,
    toggle_edit_mode,
)
from costprint.ui.router import LOGIN_PAGE

settings = get_settings()

# --- PAGE CONFIG ---
st.set_page_config(
    page_title=settings.app_name,
    page_icon="🖨️",
    layout="wide",
    initial_sidebar_state="expanded",
)

init_logging(settings.debug)
logger = logging.getLogger("costprint.app")

JOBS_PER_PAGE = 20

SORT_OPTIONS = {
    "Newest": ("createdAt", "desc"),
    "Oldest": ("createdAt", "asc"),
    "Highest Total": ("totalCost", "desc"),
    "Title": ("title", "asc"),
}

JOB_VALIDATION_MESSAGE = "Invalid job data. Please check all required fields."
SPEC_VALIDATION_MESSAGE = "Invalid job specifications. Please check your inputs."


# =============================================================================
# SESSION HELPERS
# =============================================================================


def get_client() -> ApiClient:
    """One API client per browser session; tokens live in st.session_state."""
    if "api_client" not in st.session_state:
        st.session_state.api_client = ApiClient(
            settings.api_base_url,
            token_store=MappingStore(st.session_state),
            on_unauthorized=send_to_login,
        )
    return st.session_state.api_client


def get_auth() -> AuthSession:
    return AuthSession(get_client(), MappingStore(st.session_state))


@st.cache_resource
def get_preference_store():
    return open_preference_store(settings)


def show_error(exc: Exception, fallback: str, validation_message: str | None = None) -> None:
    """Log a failed call and show the user-facing message."""
    logger.warning("%s: %s", fallback, exc)
    if isinstance(exc, AuthenticationError):
        # token already cleared; the next render shows the login page
        st.rerun()
    st.error(describe_error(exc, fallback, validation_message=validation_message))


def supported_currencies() -> list[Currency]:
    """Currencies offered by the backend, falling back to every known code."""
    if "supported_currencies" not in st.session_state:
        try:
            codes = get_client().currency.supported()
        except ApiError as exc:
            logger.warning("Failed to load supported currencies: %s", exc)
            codes = []
        st.session_state.supported_currencies = codes or list(Currency)
    return st.session_state.supported_currencies


def money(amount: float, currency: Currency = DEFAULT_CURRENCY) -> str:
    """Format an amount in the configured display locale."""
    return format_currency(amount, currency, settings.display_locale)


# =============================================================================
# LOGIN PAGE
# =============================================================================


def page_login():
    page_header(settings.app_name, "Sign in to manage your print jobs")

    _, center, _ = st.columns([1, 2, 1])
    with center:
        with st.form("login_form"):
            email = st.text_input("Email")
            password = st.text_input("Password", type="password")
            submitted = st.form_submit_button("Sign In", use_container_width=True)

        if not submitted:
            return
        if not email or not password:
            st.error("Please enter your email and password")
            return

        try:
            get_auth().login(email, password)
        except AuthenticationError:
            st.error("Invalid email or password")
            return
        except ApiError as exc:
            show_error(exc, "Login failed. Please try again.")
            return

        go("Dashboard")


# =============================================================================
# DASHBOARD PAGE
# =============================================================================


def page_dashboard():
    user = get_auth().user
    page_header(
        "Dashboard",
        f"Welcome back, {user.display_name}" if user else "Overview of your print jobs",
    )

    try:
        recent = get_client().jobs.list(
            JobListQuery(limit=10, sort_by="createdAt", sort_order="desc")
        )
    except ApiError as exc:
        show_error(exc, "Failed to load jobs")
        recent = None

    stats = DashboardStats.from_job_list(recent)

    st.markdown("### Key Metrics")
    k1, k2, k3, k4 = st.columns(4)
    with k1:
        kpi_card(format_number(stats.total_jobs), "Total Jobs", "kpi-primary")
    with k2:
        kpi_card(money(stats.total_value), "Total Value", "kpi-success")
    with k3:
        kpi_card(money(stats.avg_job_value), "Avg Job Value", "kpi-accent")
    with k4:
        kpi_card(format_number(stats.recent_jobs), "Recent Jobs")

    st.markdown("### Quick Actions")
    a1, a2, a3, _ = st.columns([1, 1, 1, 3])
    with a1:
        if st.button("+ New Job", use_container_width=True):
            go("New Job")
    with a2:
        if st.button("All Jobs", use_container_width=True):
            go("Jobs")
    with a3:
        if st.button("Settings", key="dash_settings", use_container_width=True):
            go("Settings")

    st.markdown("### Recent Jobs")
    if recent is None or not recent.jobs:
        st.info("No jobs yet. Create your first quote to see it here.")
        return

    _render_jobs_table(recent.jobs, key_prefix="dash")


def _render_jobs_table(jobs: list[Job], key_prefix: str) -> None:
    widths = [3, 1.5, 1, 1.5, 1.5, 1.5, 1]
    headers = ["Title", "Type", "Quantity", "Total", "Status", "Created", "Action"]
    for col, header in zip(st.columns(widths), headers):
        with col:
            st.markdown(f"**{header}**")

    for job in jobs:
        cols = st.columns(widths)
        with cols[0]:
            st.write(job.display_title)
        with cols[1]:
            st.write(job.job_type.label)
        with cols[2]:
            st.write(format_number(job.quantity))
        with cols[3]:
            st.write(money(job.total_cost))
        with cols[4]:
            status_badge(job.status)
        with cols[5]:
            st.write(format_date(job.created_at))
        with cols[6]:
            if st.button("View", key=f"{key_prefix}_job_{job.id}"):
                go("Job Detail", current_job_id=job.id)


# =============================================================================
# JOBS PAGE
# =============================================================================


def page_jobs():
    page_header("Jobs", "Browse, filter and export print jobs")

    col1, _ = st.columns([1, 5])
    with col1:
        if st.button("+ New Job", use_container_width=True):
            go("New Job")

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        search = st.text_input(
            "Search",
            placeholder="Job title...",
            key="jobs_search",
            on_change=reset_page,
            args=("jobs_page",),
        )
    with col2:
        job_type = st.selectbox(
            "Type",
            [None] + list(JobType),
            format_func=lambda t: "All" if t is None else t.label,
            key="jobs_type",
            on_change=reset_page,
            args=("jobs_page",),
        )
    with col3:
        status = st.selectbox(
            "Status",
            [None] + list(JobStatus),
            format_func=lambda s: "All" if s is None else s.label,
            key="jobs_status",
            on_change=reset_page,
            args=("jobs_page",),
        )
    with col4:
        sort = st.selectbox(
            "Sort",
            list(SORT_OPTIONS),
            key="jobs_sort",
            on_change=reset_page,
            args=("jobs_page",),
        )

    sort_by, sort_order = SORT_OPTIONS[sort]
    page = st.session_state.get("jobs_page", 1)

    try:
        result = get_client().jobs.list(
            JobListQuery(
                page=page,
                limit=JOBS_PER_PAGE,
                job_type=job_type,
                status=status,
                search=search,
                sort_by=sort_by,
                sort_order=sort_order,
            )
        )
    except ApiError as exc:
        show_error(exc, "Failed to load jobs")
        return

    if not result.jobs:
        last_page = clamp_page(page, result.total_pages if result.total else 1)
        if last_page != page:
            st.session_state.jobs_page = last_page
            st.rerun()
        st.info("No jobs found")
        if page > 1 and st.button("Back to first page"):
            reset_page("jobs_page")
            st.rerun()
        return

    _render_jobs_table(result.jobs, key_prefix="jobs")

    st.markdown("---")
    pcol1, pcol2, pcol3, pcol4 = st.columns([1, 2, 1, 2])
    with pcol1:
        if st.button("Previous", disabled=result.page <= 1, use_container_width=True):
            st.session_state.jobs_page = result.page - 1
            st.rerun()
    with pcol2:
        st.write(f"Page {result.page} of {result.total_pages} ({result.total} jobs)")
    with pcol3:
        if st.button(
            "Next", disabled=result.page >= result.total_pages, use_container_width=True
        ):
            st.session_state.jobs_page = result.page + 1
            st.rerun()
    with pcol4:
        st.download_button(
            "Export CSV",
            data=_jobs_dataframe(result.jobs).to_csv(index=False),
            file_name="jobs.csv",
            mime="text/csv",
            use_container_width=True,
        )


def _jobs_dataframe(jobs: list[Job]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "ID": job.id,
                "Title": job.title,
                "Type": job.job_type.label,
                "Quantity": job.quantity,
                "Status": job.status.label,
                "Total Cost": job.total_cost,
                "Unit Cost": job.unit_cost,
                "Created": job.created_at,
            }
            for job in jobs
        ]
    )


# =============================================================================
# NEW JOB PAGE
# =============================================================================


def page_new_job():
    page_header("New Job", "Describe the print order and calculate its cost")
    client = get_client()

    col1, col2, col3 = st.columns([2, 1, 1])
    with col1:
        title = st.text_input("Job Title *", key="new_job_title")
    with col2:
        job_type = st.selectbox(
            "Job Type", list(JobType), format_func=lambda t: t.label, key="new_job_type"
        )
    with col3:
        quantity = st.number_input(
            "Quantity *", min_value=0, value=100, step=50, key="new_job_quantity"
        )

    st.markdown("### Specifications")
    specs = render_specification_fields()

    currency = currency_select(
        "Quote Currency",
        supported_currencies(),
        get_default_currency(get_preference_store()),
        key="new_job_currency",
    )

    request = CreateJobRequest(
        title=title, job_type=job_type, quantity=int(quantity), specifications=specs
    )
    calc_request = request.to_calculation_request(currency)
    signature = json.dumps(calc_request.to_dict(), sort_keys=True)

    b1, b2, b3, b4 = st.columns(4)
    with b1:
        calculate = st.button("Calculate Cost", use_container_width=True)
    with b2:
        quick = st.button("Quick Estimate", use_container_width=True)
    with b3:
        save = st.button("Save Job", use_container_width=True)
    with b4:
        if st.button("Cancel", use_container_width=True):
            clear_page_state("new_job_quote")
            go("Jobs")

    if calculate or quick:
        if request.quantity <= 0:
            st.error("Please enter a valid quantity greater than 0")
        else:
            costing = client.costing.calculate if calculate else client.costing.quick
            try:
                quote = costing(calc_request)
            except ApiError as exc:
                show_error(
                    exc,
                    "Failed to calculate cost",
                    validation_message=SPEC_VALIDATION_MESSAGE,
                )
            else:
                st.session_state.new_job_quote = (signature, quote)

    if save:
        errors = request.validate()
        for error in errors:
            st.error(error)
        if not errors:
            try:
                job = client.jobs.create(request)
            except ApiError as exc:
                show_error(
                    exc, "Failed to create job", validation_message=JOB_VALIDATION_MESSAGE
                )
            else:
                logger.info("created job %s", job.id)
                clear_page_state("new_job_quote", "new_job_title")
                go("Job Detail", current_job_id=job.id)

    st.markdown("### Cost Breakdown")
    saved = st.session_state.get("new_job_quote")
    if not saved or saved[0] != signature:
        st.info("Calculate the cost to see a breakdown for these specifications")
        return

    quote = saved[1]
    quote_currency = quote.currency or currency
    cost_breakdown(
        quote.cost_breakdown,
        quote.total_cost,
        quote_currency,
        unit_cost=quote.unit_cost,
        locale=settings.display_locale,
    )
    if quote.exchange_rate and quote_currency != DEFAULT_CURRENCY:
        st.caption(f"Exchange rate: 1 USD = {quote.exchange_rate:,.4f} {quote_currency.value}")
    if quote.estimated_delivery_days:
        st.caption(f"Estimated delivery: {quote.estimated_delivery_days} days")


# =============================================================================
# JOB DETAIL PAGE
# =============================================================================


def page_job_detail():
    """Job detail page."""
    job_id = st.session_state.get("current_job_id")
    if not job_id:
        st.warning("No job selected")
        return

    try:
        job = get_client().jobs.get(job_id)
    except NotFoundError:
        st.error("Job not found")
        return
    except ApiError as exc:
        show_error(exc, "Failed to load job")
        return

    col1, col2 = st.columns([4, 1])
    with col1:
        page_header(job.display_title)
        status_badge(job.status)
    with col2:
        if st.button("Back to Jobs"):
            clear_page_state("job_export")
            go("Jobs")

    edit_mode = init_edit_mode("job")
    if st.button("Cancel" if edit_mode else "Edit"):
        toggle_edit_mode("job")

    if edit_mode:
        _render_job_edit_form(job)
    else:
        _render_job_view(job)


def _render_job_view(job: Job):
    """Render job view."""
    specs = job.specifications
    col1, col2 = st.columns(2)

    with col1:
        st.markdown("**Specifications**")
        st.write(f"Type: {job.job_type.label}")
        st.write(f"Quantity: {format_number(job.quantity)}")
        st.write(f"Paper: {format_option(specs.paper_type)} ({specs.paper_size})")
        st.write(f"Paper Weight: {specs.paper_weight or '—'}")
        st.write(f"Colors: {specs.colors.front_colors}/{specs.colors.back_colors}")
        st.write(f"Pages: {specs.pages or '—'}")
        st.write(f"Binding: {format_option(specs.binding)}")
        st.write(f"Lamination: {format_option(specs.lamination)}")
        finishing = ", ".join(format_option(f) for f in specs.finishing)
        st.write(f"Finishing: {finishing or 'None'}")
        if specs.special_requirements:
            st.markdown("**Special Requirements**")
            st.write(specs.special_requirements)

    with col2:
        st.markdown("**Cost Breakdown**")
        cost_breakdown(
            job.cost_breakdown,
            job.total_cost,
            DEFAULT_CURRENCY,
            unit_cost=job.unit_cost,
            locale=settings.display_locale,
        )
        _render_converted_total(job)

    st.markdown("**Timeline**")
    st.write(f"Created: {format_date(job.created_at)}")
    st.write(f"Last Updated: {format_date(job.updated_at)}")

    st.markdown("---")
    _render_job_actions(job)


def _render_converted_total(job: Job) -> None:
    preferred = get_default_currency(get_preference_store())
    if preferred == DEFAULT_CURRENCY or not job.total_cost:
        return
    try:
        conversion = get_client().currency.convert(
            job.total_cost, DEFAULT_CURRENCY, preferred
        )
    except ApiError as exc:
        logger.warning("Failed to convert total to %s: %s", preferred.value, exc)
        return
    st.metric(
        f"Total in {name_of(preferred)}",
        money(conversion.converted_amount, preferred),
    )
    st.caption(f"1 USD = {conversion.exchange_rate:,.4f} {preferred.value}")


def _render_job_actions(job: Job) -> None:
    client = get_client()
    col1, col2, col3, col4 = st.columns(4)

    with col1:
        if st.button("Export PDF", use_container_width=True):
            try:
                st.session_state.job_export = ("pdf", job.id, client.export.pdf(job.id))
            except ApiError as exc:
                show_error(exc, "Failed to export PDF")

    with col2:
        if st.button("Export Excel", use_container_width=True):
            try:
                st.session_state.job_export = ("xlsx", job.id, client.export.excel(job.id))
            except ApiError as exc:
                show_error(exc, "Failed to export Excel")

    with col3:
        st.download_button(
            "Export JSON",
            data=json.dumps(job.to_dict(), indent=2),
            file_name=f"job_{job.id}.json",
            mime="application/json",
            use_container_width=True,
        )

    with col4:
        if st.button("Delete Job", use_container_width=True):
            st.session_state.confirm_delete = True

    export = st.session_state.get("job_export")
    if export and export[1] == job.id:
        kind, _, content = export
        mime = (
            "application/pdf"
            if kind == "pdf"
            else "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
        )
        st.download_button(
            f"Download {kind.upper()}",
            data=content,
            file_name=f"job_{job.id}.{kind}",
            mime=mime,
        )

    if confirm_dialog(
        "confirm_delete", f"Delete '{job.display_title}'? This cannot be undone."
    ):
        try:
            client.jobs.delete(job.id)
        except ApiError as exc:
            show_error(exc, "Failed to delete job")
            return
        logger.info("deleted job %s", job.id)
        go("Jobs")


def _render_job_edit_form(job: Job):
    """Render job edit form."""
    with st.form("edit_job_form"):
        title = st.text_input("Job Title *", value=job.title)
        quantity = st.number_input("Quantity *", min_value=0, value=job.quantity, step=1)

        status_options = list(JobStatus)
        status = st.selectbox(
            "Status",
            status_options,
            index=status_options.index(job.status),
            format_func=lambda s: s.label,
        )

        submitted = st.form_submit_button("Save Changes", use_container_width=True)

    if not submitted:
        return

    update = JobUpdate(title=title.strip(), quantity=int(quantity), status=status)
    errors = CreateJobRequest(
        title=update.title, job_type=job.job_type, quantity=update.quantity
    ).validate()
    for error in errors:
        st.error(error)
    if errors:
        return

    try:
        get_client().jobs.update(job.id, update)
    except ApiError as exc:
        show_error(exc, "Failed to update job", validation_message=JOB_VALIDATION_MESSAGE)
        return

    st.success("Job updated!")
    st.session_state.job_edit_mode = False
    st.rerun()


# =============================================================================
# SETTINGS PAGE
# =============================================================================


def page_settings():
    page_header("Settings", "Pricing parameters, branding and display preferences")

    tab_costs, tab_branding, tab_currency = st.tabs(
        ["Cost Parameters", "Branding", "Currency"]
    )
    with tab_costs:
        _render_cost_parameters()
    with tab_branding:
        _render_branding()
    with tab_currency:
        _render_currency_settings()

    st.markdown("---")
    st.markdown("### About")
    st.write(f"{settings.app_name} v{__version__}")
    st.write(f"API: {settings.api_base_url}")


def _render_cost_parameters():
    try:
        params = get_client().settings.get_cost_parameters()
    except ApiError as exc:
        show_error(exc, "Failed to load cost parameters")
        return

    with st.form("cost_parameters_form"):
        col1, col2 = st.columns(2)
        with col1:
            paper = st.number_input(
                "Paper Cost per Sheet ($)",
                min_value=0.0,
                value=params.paper_cost_per_sheet,
                step=0.01,
                format="%.4f",
            )
            plate = st.number_input(
                "Plate Cost per Job ($)", min_value=0.0, value=params.plate_cost_per_job
            )
            labor = st.number_input(
                "Labor Cost per Hour ($)", min_value=0.0, value=params.labor_cost_per_hour
            )
        with col2:
            binding = st.number_input(
                "Binding Cost per Unit ($)",
                min_value=0.0,
                value=params.binding_cost_per_unit,
            )
            overhead = st.number_input(
                "Overhead (%)",
                min_value=0.0,
                max_value=100.0,
                value=params.overhead_percentage * 100,
            )
            margin = st.number_input(
                "Profit Margin (%)",
                min_value=0.0,
                max_value=100.0,
                value=params.profit_margin_percentage * 100,
            )
        submitted = st.form_submit_button("Save Cost Parameters")

    if not submitted:
        return

    updated = CostParameters(
        id=params.id,
        paper_cost_per_sheet=paper,
        plate_cost_per_job=plate,
        labor_cost_per_hour=labor,
        binding_cost_per_unit=binding,
        overhead_percentage=overhead / 100,
        profit_margin_percentage=margin / 100,
    )
    try:
        get_client().settings.update_cost_parameters(updated)
    except ApiError as exc:
        show_error(exc, "Failed to update cost parameters")
        return
    st.success("Cost parameters updated")


def _render_branding():
    try:
        branding = get_client().settings.get_branding()
    except ApiError as exc:
        show_error(exc, "Failed to load branding settings")
        return

    with st.form("branding_form"):
        company_name = st.text_input("Company Name", value=branding.company_name)
        logo_url = st.text_input("Logo URL", value=branding.company_logo_url or "")
        col1, col2 = st.columns(2)
        with col1:
            primary = st.color_picker("Primary Color", value=branding.primary_color)
        with col2:
            secondary = st.color_picker("Secondary Color", value=branding.secondary_color)
        submitted = st.form_submit_button("Save Branding")

    if not submitted:
        return
    if not company_name.strip():
        st.error("Please enter a company name")
        return

    updated = BrandingSettings(
        id=branding.id,
        company_name=company_name.strip(),
        company_logo_url=logo_url,
        primary_color=primary,
        secondary_color=secondary,
    )
    try:
        get_client().settings.update_branding(updated)
    except ApiError as exc:
        show_error(exc, "Failed to update branding")
        return
    st.success("Branding updated")


def _render_currency_settings():
    store = get_preference_store()
    st.markdown("### Display Currency")
    if store is None:
        st.caption("Preferences are not saved in this environment.")

    preferred = get_default_currency(store)
    choice = currency_select(
        "Preferred Display Currency", list(Currency), preferred, key="settings_currency"
    )
    if st.button("Save Preference"):
        set_default_currency(store, choice)
        st.success(f"Display currency set to {name_of(choice)}")

    st.markdown("### Exchange Rates")
    try:
        rates = get_client().currency.rates()
    except ApiError as exc:
        show_error(exc, "Failed to load exchange rates")
        return

    if not rates.rates:
        st.info("No exchange rates available")
        return

    known = {c.value for c in Currency}
    df = pd.DataFrame(
        [
            {
                "Currency": code,
                "Name": name_of(code) if code in known else code,
                "Rate": rate,
            }
            for code, rate in sorted(rates.rates.items())
        ]
    )
    st.dataframe(df, hide_index=True, use_container_width=True)
    st.caption(
        f"Base: {rates.base.value} · Last updated: {format_date(rates.last_updated)}"
    )


# =============================================================================
# MAIN APP
# =============================================================================


def main():
    inject_styles()

    auth = get_auth()
    if not auth.is_authenticated:
        st.session_state.current_page = LOGIN_PAGE
        page_login()
        return

    if get_current_page() == LOGIN_PAGE:
        st.session_state.current_page = "Dashboard"

    user = auth.user
    with st.sidebar:
        st.markdown(
            f'<div class="nav-logo">{escape(settings.app_name)}</div>', unsafe_allow_html=True
        )
        st.markdown(
            f'<div class="nav-user">{escape(user.display_name)} · {user.role.value}</div>',
            unsafe_allow_html=True,
        )

        for nav in ["Dashboard", "Jobs", "New Job", "Settings"]:
            if st.button(nav, key=f"nav_{nav}", use_container_width=True):
                go(nav)

        st.markdown("---")
        if st.button("Logout", key="nav_logout", use_container_width=True):
            auth.logout()
            clear_page_state("supported_currencies", "new_job_quote", "job_export")
            go(LOGIN_PAGE)

        st.markdown(
            f'<div style="text-align: center; color: #9ca3af; font-size: 0.75rem;">v{__version__}</div>',
            unsafe_allow_html=True,
        )

    pages = {
        "Dashboard": page_dashboard,
        "Jobs": page_jobs,
        "New Job": page_new_job,
        "Job Detail": page_job_detail,
        "Settings": page_settings,
    }

    current = get_current_page()
    if current in pages:
        pages[current]()
    else:
        page_dashboard()


if __name__ == "__main__":
    main()
