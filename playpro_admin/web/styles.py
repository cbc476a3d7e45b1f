import streamlit as st


def load_academy_style():
    """Inject the Playpro navy/white theme."""
    st.markdown("""
        <style>
        .stApp {
            font-family: 'Inter', 'ui-sans-serif', 'system-ui', -apple-system, 'Segoe UI', Roboto, sans-serif;
        }

        section[data-testid="stSidebar"] {
            background-color: #f7f9fb;
            border-right: 1px solid #e5e7eb;
        }

        section[data-testid="stSidebar"] .block-container {
            padding-top: 1.5rem;
        }

        h1, h2, h3 {
            letter-spacing: -0.01em;
            color: #1f3d56;
        }

        .stButton > button {
            border-radius: 6px;
            font-weight: 500;
        }

        .stButton > button[kind="primary"] {
            background-color: #1f3d56;
            color: white;
            border: none;
        }
        .stButton > button[kind="primary"]:hover {
            background-color: #2b5577;
        }

        /* metric cards */
        div[data-testid="stMetric"] {
            background-color: #ffffff;
            border: 1px solid #e5e7eb;
            border-radius: 10px;
            padding: 1rem;
            box-shadow: 0 1px 2px rgba(0,0,0,0.05);
        }
        div[data-testid="stMetricLabel"] {
            font-size: 0.875rem;
            color: #6b7280;
        }
        div[data-testid="stMetricValue"] {
            font-size: 1.75rem;
            font-weight: 600;
            color: #1f3d56;
        }
        </style>
    """, unsafe_allow_html=True)


def render_sidebar_header():
    """Logo block at the top of the sidebar."""
    st.sidebar.markdown("""
        <div style="padding-bottom: 1rem; padding-left: 0.5rem;">
            <div style="display: flex; align-items: center; gap: 0.75rem;">
                <div style="width: 32px; height: 32px; background-color: #1f3d56; border-radius: 6px; display: flex; align-items: center; justify-content: center;">
                    <span style="color: white; font-weight: bold; font-size: 16px;">PP</span>
                </div>
                <div>
                    <div style="font-weight: 600; font-size: 1rem; color: #1f3d56;">Playpro Academy</div>
                    <div style="font-size: 0.75rem; color: #6b7280;">Admin</div>
                </div>
            </div>
        </div>
    """, unsafe_allow_html=True)
