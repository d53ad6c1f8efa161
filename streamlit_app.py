import logging
import os
from typing import Any

import streamlit as st

from utils import (
    FilterCascadeController,
    RefreshScheduler,
    build_client,
    format_interval_ms,
    init_session_state,
    maybe_load_dotenv,
    resolve_dashboard_config,
)
from tabs import (
    render_filter_panel,
    render_evaluation_overview,
)

logger = logging.getLogger(__name__)


def _configure_logging() -> None:
    level_name = os.getenv("RRE_LOG_LEVEL", "INFO").strip().upper() or "INFO"
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )


def _secrets() -> dict[str, Any]:
    try:
        return dict(st.secrets)
    except Exception:
        return {}


def record_refresh_outcome(outcome: bool | None) -> None:
    """Store a scheduled refresh result; ``None`` means nothing ran."""
    if outcome is not None:
        st.session_state.rre_last_apply_ok = bool(outcome)


def render_refresh_status() -> None:
    if not st.session_state.get("rre_last_apply_ok", True):
        st.warning("The last filter request failed; showing the previous results.")


def _start_session(config: dict[str, Any]) -> None:
    """Build the controller and scheduler once per browser session."""
    controller = FilterCascadeController(build_client(config))
    with st.spinner("Loading evaluation and filters…"):
        controller.activate()
    st.session_state.rre_controller = controller
    st.session_state.rre_scheduler = RefreshScheduler(
        controller.apply_filter,
        interval_ms=config["request_interval_ms"],
    )
    st.session_state.rre_config = config


def main() -> None:
    st.set_page_config(page_title="RRE Dashboard", page_icon="📈", layout="wide")

    maybe_load_dotenv()
    _configure_logging()

    init_session_state(
        {
            "rre_controller": None,
            "rre_scheduler": None,
            "rre_config": None,
            "rre_last_apply_ok": True,
        }
    )

    if st.session_state.rre_controller is None:
        config = resolve_dashboard_config(st.session_state, _secrets(), os.environ)
        logger.info("Dashboard using %s (sources: %s)", config["base_url"] or "<relative>", config["sources"])
        _start_session(config)

    controller: FilterCascadeController = st.session_state.rre_controller
    scheduler: RefreshScheduler = st.session_state.rre_scheduler
    config: dict[str, Any] = st.session_state.rre_config

    with st.sidebar:
        st.title("📈 RRE Dashboard")
        st.caption(f"Auto-refresh every {format_interval_ms(scheduler.interval_ms)}.")

        c_apply, c_reload = st.columns(2)
        with c_apply:
            if st.button("🔄 Apply filter", type="primary", use_container_width=True):
                st.session_state.rre_last_apply_ok = controller.apply_filter()
        with c_reload:
            if st.button("📥 Reload filters", use_container_width=True):
                with st.spinner("Reloading filters…"):
                    controller.refresh_catalog()

        with st.expander("🔧 Endpoints", expanded=False):
            st.json(config["endpoints"])

        st.markdown("---")

    render_filter_panel(controller)

    @st.fragment(run_every=max(1.0, min(10.0, scheduler.interval_s / 6)))
    def _evaluation_fragment() -> None:
        outcome = scheduler.run_pending()
        if outcome is not None:
            logger.debug("Scheduled filter refresh fired (%d, ok=%s)", scheduler.fire_count, outcome)
        record_refresh_outcome(outcome)
        render_refresh_status()
        render_evaluation_overview(controller.dataset)

    _evaluation_fragment()


if __name__ == "__main__":
    main()
