"""Filter sidebar: one checkbox per catalog item."""

import json
from collections.abc import Callable
from typing import Any

import streamlit as st

from utils.filter_cascade import FilterCascadeController


def widget_key(kind: str, *parts: str) -> str:
    """Unambiguous widget key for an item; ``id`` strings can collide across corpora."""
    return f"rre_{kind}_" + json.dumps(list(parts), ensure_ascii=False)


def _on_toggle(key: str, toggle: Callable[..., bool], *args: Any) -> None:
    ok = toggle(*args, bool(st.session_state.get(key)))
    st.session_state.rre_last_apply_ok = ok


def _checkbox(label: str, key: str, value: bool, toggle: Callable[..., bool], *args: Any, disabled: bool = False) -> None:
    st.checkbox(
        label,
        value=value,
        key=key,
        disabled=disabled,
        on_change=_on_toggle,
        args=(key, toggle, *args),
    )


def render(controller: FilterCascadeController) -> None:
    """Render the filter checkboxes in the sidebar."""
    catalog = controller.catalog

    with st.sidebar:
        st.markdown("**📏 Metrics**")
        if not catalog.metrics:
            st.caption("No metrics loaded.")
        for m in catalog.metrics:
            _checkbox(m.name, widget_key("metric", m.name), m.selected, controller.toggle_metric, m.name)

        st.markdown("**🏷️ Versions**")
        if not catalog.versions:
            st.caption("No versions loaded.")
        for v in catalog.versions:
            _checkbox(v.name, widget_key("version", v.name), v.selected, controller.toggle_version, v.name)

        st.markdown("---")
        st.markdown("**📚 Corpora**")
        if not catalog.corpora:
            st.caption("No corpora loaded.")
        for c in catalog.corpora:
            _checkbox(c.name, widget_key("corpus", c.name), c.selected, controller.toggle_corpus, c.name)

            topics = catalog.topics_for(c.name)
            if not topics:
                continue
            with st.expander(f"Topics in {c.name}", expanded=False):
                for t in topics:
                    _checkbox(
                        t.name,
                        widget_key("topic", *t.key),
                        t.selected,
                        controller.toggle_topic,
                        t.corpus,
                        t.name,
                        disabled=t.disabled,
                    )
                    for qg in catalog.query_groups_for(t.corpus, t.name):
                        _checkbox(
                            f"↳ {qg.name}",
                            widget_key("qg", *qg.key),
                            qg.selected,
                            controller.toggle_query_group,
                            qg.corpus,
                            qg.topic,
                            qg.name,
                            disabled=qg.disabled,
                        )
