"""
Navigation router for CostPrint.

Provides page navigation with session state management.
"""

import streamlit as st

DEFAULT_PAGE = "Dashboard"
LOGIN_PAGE = "Login"

CONFIRMATION_KEYS = [
    "confirm_delete",
    "confirm_delete_job_id",
]


def go(page: str, **kwargs) -> None:
    """
    Navigate to a page with optional state variables.

    Usage:
        go("Job Detail", current_job_id=job.id)
    """
    clear_confirmations()

    st.session_state.current_page = page
    for key, value in kwargs.items():
        st.session_state[key] = value
    st.rerun()


def get_current_page() -> str:
    """Get the current page, defaulting to Dashboard."""
    if "current_page" not in st.session_state:
        st.session_state.current_page = DEFAULT_PAGE
    return st.session_state.current_page


def send_to_login() -> None:
    """Route the next render to the login page (used on HTTP 401)."""
    clear_confirmations()
    st.session_state.current_page = LOGIN_PAGE


def clear_page_state(*keys: str) -> None:
    """Clear specific session state keys."""
    for key in keys:
        if key in st.session_state:
            del st.session_state[key]


def clear_confirmations() -> None:
    """Clear all confirmation dialogs on page change."""
    clear_page_state(*CONFIRMATION_KEYS)


def init_edit_mode(entity: str) -> bool:
    """Initialize and return edit mode state for an entity."""
    key = f"{entity}_edit_mode"
    if key not in st.session_state:
        st.session_state[key] = False
    return st.session_state[key]


def toggle_edit_mode(entity: str) -> None:
    """Toggle edit mode for an entity."""
    key = f"{entity}_edit_mode"
    st.session_state[key] = not st.session_state.get(key, False)
    st.rerun()


def reset_page(key: str) -> None:
    """Widget callback: go back to the first page of a paginated list."""
    st.session_state[key] = 1


def clamp_page(page: int, total_pages: int) -> int:
    """Keep ``page`` within 1..total_pages."""
    return max(1, min(page, max(total_pages, 1)))
