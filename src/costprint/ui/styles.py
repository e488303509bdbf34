"""
CSS styles for CostPrint.
"""

import streamlit as st

STYLES = """
<style>
    @import url('https://fonts.googleapis.com/css2?family=Inter:wght@300;400;500;600;700;800&display=swap');

    :root {
        --primary: #3b82f6;
        --secondary: #1f2937;
        --accent: #06b6d4;
        --success: #10b981;
        --warning: #f59e0b;
        --danger: #ef4444;
        --bg-card: rgba(31, 41, 55, 0.85);
        --text-primary: #f9fafb;
        --text-secondary: #9ca3af;
        --border: rgba(156, 163, 175, 0.2);
    }

    .stApp { font-family: 'Inter', sans-serif; }

    #MainMenu, footer { visibility: hidden; }
    .stDeployButton { display: none; }

    [data-testid="stSidebar"] {
        background: linear-gradient(180deg, #111827 0%, #1f2937 100%);
        border-right: 1px solid var(--border);
    }

    .nav-logo {
        font-size: 1.6rem;
        font-weight: 800;
        color: var(--primary);
        text-align: center;
        margin-bottom: 0.25rem;
    }

    .nav-user {
        color: var(--text-secondary);
        font-size: 0.8rem;
        text-align: center;
        margin-bottom: 1rem;
    }

    .page-header {
        font-size: 2rem;
        font-weight: 700;
        color: var(--text-primary);
        margin-bottom: 0.5rem;
    }

    .page-subtitle {
        color: var(--text-secondary);
        margin-bottom: 1.5rem;
    }

    .kpi-card {
        background: var(--bg-card);
        border: 1px solid var(--border);
        border-radius: 12px;
        padding: 1.25rem;
        text-align: center;
    }

    .kpi-value {
        font-size: 1.75rem;
        font-weight: 700;
        color: var(--text-primary);
    }

    .kpi-label {
        font-size: 0.75rem;
        color: var(--text-secondary);
        text-transform: uppercase;
        letter-spacing: 0.05em;
    }

    .kpi-success { color: var(--success); }
    .kpi-warning { color: var(--warning); }
    .kpi-primary { color: var(--primary); }
    .kpi-accent { color: var(--accent); }

    .status-badge {
        display: inline-block;
        padding: 0.25rem 0.75rem;
        border-radius: 9999px;
        font-size: 0.75rem;
        font-weight: 600;
        text-transform: uppercase;
    }

    .status-draft { background: rgba(156, 163, 175, 0.2); color: #9ca3af; }
    .status-quoted { background: rgba(59, 130, 246, 0.2); color: #3b82f6; }
    .status-approved { background: rgba(16, 185, 129, 0.2); color: #10b981; }
    .status-in-production { background: rgba(245, 158, 11, 0.2); color: #f59e0b; }
    .status-completed { background: rgba(168, 85, 247, 0.2); color: #a855f7; }
    .status-cancelled { background: rgba(239, 68, 68, 0.2); color: #ef4444; }

    .cost-row {
        display: flex;
        justify-content: space-between;
        padding: 0.35rem 0;
        border-bottom: 1px solid var(--border);
    }

    .cost-total {
        display: flex;
        justify-content: space-between;
        padding-top: 0.6rem;
        font-size: 1.2rem;
        font-weight: 700;
        color: var(--primary);
    }

    .stButton > button {
        background: linear-gradient(135deg, var(--primary) 0%, #2563eb 100%);
        color: white;
        border: none;
        font-weight: 600;
        border-radius: 8px;
    }
</style>
"""


def inject_styles() -> None:
    """Inject CSS styles into the Streamlit app."""
    st.markdown(STYLES, unsafe_allow_html=True)
