"""
CostPrint UI module.

Provides page components, styles, and routing.
"""

from .components import (
    confirm_dialog,
    cost_breakdown,
    currency_select,
    format_date,
    format_number,
    format_option,
    kpi_card,
    page_header,
    render_specification_fields,
    status_badge,
)
from .router import (
    clamp_page,
    clear_page_state,
    get_current_page,
    go,
    init_edit_mode,
    reset_page,
    send_to_login,
    toggle_edit_mode,
)
from .styles import inject_styles

__all__ = [
    "go",
    "get_current_page",
    "send_to_login",
    "clear_page_state",
    "init_edit_mode",
    "toggle_edit_mode",
    "reset_page",
    "clamp_page",
    "inject_styles",
    "kpi_card",
    "status_badge",
    "page_header",
    "cost_breakdown",
    "currency_select",
    "render_specification_fields",
    "confirm_dialog",
    "format_date",
    "format_number",
    "format_option",
]
