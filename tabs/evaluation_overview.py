"""Evaluation overview tab."""

import json

import streamlit as st

from utils import EvaluationDataset, frame_csv_bytes, metric_version_chart


def render(dataset: EvaluationDataset) -> None:
    """Render the current evaluation dataset."""
    st.subheader("Evaluation")

    if dataset.data is None:
        st.info(
            "No evaluation data yet. The dashboard loads the full evaluation on startup and then re-queries the "
            "server whenever a filter in the sidebar changes."
        )
        return

    c1, c2 = st.columns(2)
    c1.metric("Metrics", dataset.metrics_count())
    if dataset.updated_at is not None:
        c2.caption(f"Last updated {dataset.updated_at:%Y-%m-%d %H:%M:%S} UTC")

    df = dataset.metrics_frame()
    if df.empty:
        st.warning("The current filter returned no metric values.")
    else:
        st.altair_chart(metric_version_chart(df), use_container_width=False)
        st.dataframe(df, hide_index=True, use_container_width=True)
        st.download_button(
            label="Download CSV",
            data=frame_csv_bytes(df),
            file_name="rre_metrics.csv",
            mime="text/csv",
            key="rre_metrics_csv",
        )

    with st.expander("Raw evaluation JSON", expanded=False):
        st.code(json.dumps(dataset.data, indent=2, default=str)[:200_000], language="json")
