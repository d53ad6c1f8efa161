"""Tests for the evaluation dataset view-model and its display helpers."""

from __future__ import annotations

import altair as alt

from utils.charts import metric_version_chart
from utils.data_helpers import format_interval_ms, frame_csv_bytes
from utils.evaluation_dataset import METRIC_FRAME_COLUMNS, EvaluationDataset


RRE_STYLE = {
    "name": "evaluation",
    "metrics": {
        "P@10": {"name": "P@10", "versions": {"v1.0": {"value": 0.5}, "v1.1": {"value": "0.75"}}},
        "NDCG@10": {"name": "NDCG@10", "versions": {"v1.0": {"value": 0.61}}},
    },
}


class TestMetricsCount:
    def test_zero_without_data(self):
        assert EvaluationDataset().metrics_count() == 0

    def test_counts_metric_keys(self):
        assert EvaluationDataset(RRE_STYLE).metrics_count() == 2

    def test_zero_when_metrics_missing(self):
        assert EvaluationDataset({"corpora": []}).metrics_count() == 0


class TestReplace:
    def test_replace_swaps_data_and_stamps_time(self):
        ds = EvaluationDataset({"metrics": {}})
        assert ds.updated_at is None

        ds.replace(RRE_STYLE)

        assert ds.data is RRE_STYLE
        assert ds.updated_at is not None


class TestMetricsFrame:
    def test_versions_shape_is_flattened(self):
        df = EvaluationDataset(RRE_STYLE).metrics_frame()

        assert list(df.columns) == METRIC_FRAME_COLUMNS
        rows = df.to_dict("records")
        assert {"metric": "P@10", "version": "v1.1", "value": 0.75} in rows
        assert len(rows) == 3

    def test_simple_shapes(self):
        df = EvaluationDataset({"metrics": {"MAP": 0.3, "F1": {"value": 0.4}, "P": {"v2": 0.9}}}).metrics_frame()

        rows = {(r["metric"], r["version"]): r["value"] for r in df.to_dict("records")}
        assert rows[("MAP", None)] == 0.3
        assert rows[("F1", None)] == 0.4
        assert rows[("P", "v2")] == 0.9

    def test_empty_frame_without_data(self):
        df = EvaluationDataset().metrics_frame()

        assert df.empty
        assert list(df.columns) == METRIC_FRAME_COLUMNS


def test_metric_version_chart_builds_spec():
    df = EvaluationDataset(RRE_STYLE).metrics_frame()

    chart = metric_version_chart(df)

    assert isinstance(chart, alt.Chart)
    spec = chart.to_dict()
    assert spec["mark"]["type"] == "bar"
    assert spec["encoding"]["column"]["field"] == "metric"


def test_frame_csv_bytes():
    df = EvaluationDataset(RRE_STYLE).metrics_frame()

    out = frame_csv_bytes(df).decode("utf-8").splitlines()

    assert out[0] == "metric,version,value"
    assert len(out) == 4
    assert frame_csv_bytes(EvaluationDataset().metrics_frame()) == b""


def test_format_interval_ms():
    assert format_interval_ms(60_000) == "1 min"
    assert format_interval_ms(120_000) == "2 min"
    assert format_interval_ms(90_000) == "90s"
    assert format_interval_ms(1_500) == "1.5s"
