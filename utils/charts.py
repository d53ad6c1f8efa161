"""Chart utilities for the Streamlit app."""

import altair as alt
import pandas as pd


def metric_version_chart(metrics_df: pd.DataFrame) -> alt.Chart:
    """Create grouped bar chart of metric values per version."""
    df = metrics_df.dropna(subset=["value"]).copy()
    df["version"] = df["version"].fillna("(none)").astype(str)
    return (
        alt.Chart(df)
        .mark_bar()
        .encode(
            x=alt.X("version:N", title="Version"),
            y=alt.Y("value:Q", title="Value"),
            color=alt.Color("version:N", title="Version", legend=None),
            column=alt.Column("metric:N", title="Metric"),
            tooltip=[
                alt.Tooltip("metric:N", title="Metric"),
                alt.Tooltip("version:N", title="Version"),
                alt.Tooltip("value:Q", title="Value", format=".4f"),
            ],
        )
        .properties(title="Metrics by version", width=120)
    )
