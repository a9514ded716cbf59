"""
Main Streamlit application for the form code builder.
Build a form field by field and generate a zod schema with a matching
react-hook-form component.
"""

import streamlit as st
import logging

from formgen.config_loader import (
    load_config,
    validate_config,
    configure_logging,
    get_config_summary,
    get_config_value
)
from formgen.error_handler import ErrorHandler, ErrorType
from formgen.session_manager import SessionManager

# Load configuration early so logging uses the configured level
config = load_config()
try:
    configure_logging(config)
except (ValueError, TypeError) as e:
    logging.basicConfig(level=logging.INFO)
    logging.getLogger(__name__).error(f"Failed to configure logging from config: {e}, using INFO level")

logger = logging.getLogger(__name__)
logger.info(f"Starting app version: {get_config_value(config, 'app', 'version', 'Unknown')}")

st.set_page_config(
    page_title=get_config_value(config, 'ui', 'page_title', 'Form Code Builder'),
    page_icon="🧩",
    layout=get_config_value(config, 'ui', 'layout', 'wide'),
    initial_sidebar_state="expanded"
)


def render_sidebar():
    """Render configuration summary and session controls."""
    with st.sidebar:
        st.title("🧩 Form Code Builder")

        summary = get_config_summary(config)
        st.caption(f"Version {summary['app_version']}")

        if not validate_config(config):
            st.warning("⚠️ config.yaml has invalid values; defaults are used where needed")

        with st.expander("⚙️ Configuration", expanded=False):
            st.write(f"**Success route:** `{summary['success_route']}`")
            st.write(f"**Earliest date:** `{summary['min_date']}`")
            st.write(f"**Logging level:** {summary['logging_level']}")

        st.divider()
        if st.button("🔄 Restart Session", key="restart_session_btn", help="Clear all fields and settings"):
            SessionManager.reset_session(config)
            st.rerun()


def main():
    """Main application entry point."""
    from formgen.form_builder_view import FormBuilderView

    try:
        SessionManager.initialize(config)
        render_sidebar()

        st.title(get_config_value(config, 'app', 'name', 'Form Code Builder'))
        FormBuilderView.render(config)

    except Exception as e:
        ErrorHandler.handle_error(e, "application startup", ErrorType.SYSTEM)


if __name__ == "__main__":
    main()
