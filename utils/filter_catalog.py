"""Selectable filter collections for the evaluation dashboard.

The catalog holds five dimensions:

- **Metric**, **Version**, **Corpus**: flat lists of ``SelectableItem``.
- **Topic**: children of a corpus, keyed by ``(corpus, name)``.
- **Query group**: children of a (corpus, topic) pair, keyed by
  ``(corpus, topic, name)``.

Items are only ever appended.  A merge that meets an existing key leaves the
existing item (and its ``selected``/``disabled`` flags) untouched.  Newly
discovered items start out selected.

``disabled`` on topics and query groups is derived from the ancestors and is
recomputed by the ``propagate_*`` methods, which must run top-down.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any


@dataclass
class SelectableItem:
    """A metric, version or corpus entry."""

    name: str
    selected: bool = True


@dataclass
class TopicItem:
    name: str
    corpus: str
    selected: bool = True
    disabled: bool = False

    @property
    def id(self) -> str:
        return f"{self.corpus}_{self.name}"

    @property
    def key(self) -> tuple[str, str]:
        return (self.corpus, self.name)


@dataclass
class QueryGroupItem:
    name: str
    corpus: str
    topic: str
    selected: bool = True
    disabled: bool = False

    @property
    def id(self) -> str:
        return f"{self.corpus}_{self.topic}_{self.name}"

    @property
    def key(self) -> tuple[str, str, str]:
        return (self.corpus, self.topic, self.name)


@dataclass
class ActiveFilterRequest:
    """Snapshot of every effective selection, as sent to the filter endpoint."""

    metrics: list[str] = field(default_factory=list)
    versions: list[str] = field(default_factory=list)
    corpora: list[str] = field(default_factory=list)
    topics: list[dict[str, str]] = field(default_factory=list)
    query_groups: list[dict[str, str]] = field(default_factory=list)

    def to_payload(self) -> dict[str, Any]:
        """JSON body for the filter request."""
        return {
            "corpora": list(self.corpora),
            "topics": [dict(t) for t in self.topics],
            "queryGroups": [dict(qg) for qg in self.query_groups],
            "metrics": list(self.metrics),
            "versions": list(self.versions),
        }


def is_effective(item: TopicItem | QueryGroupItem) -> bool:
    """True when the item takes part in the active request."""
    return bool(item.selected and not item.disabled)


def _clean_names(names: Iterable[Any] | None) -> list[str]:
    out: list[str] = []
    for raw in names or []:
        if raw is None:
            continue
        name = str(raw)
        if name:
            out.append(name)
    return out


def _selected_names(items: Iterable[SelectableItem]) -> list[str]:
    return [it.name for it in items if it.selected]


class FilterCatalog:
    """Insertion-ordered, unique-by-key filter collections."""

    def __init__(self) -> None:
        self.metrics: list[SelectableItem] = []
        self.versions: list[SelectableItem] = []
        self.corpora: list[SelectableItem] = []
        self.topics: list[TopicItem] = []
        self.query_groups: list[QueryGroupItem] = []

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    @staticmethod
    def _find_by_name(items: list[SelectableItem], name: str) -> SelectableItem | None:
        for it in items:
            if it.name == name:
                return it
        return None

    def find_corpus(self, name: str) -> SelectableItem | None:
        return self._find_by_name(self.corpora, name)

    def find_topic(self, corpus: str, name: str) -> TopicItem | None:
        for t in self.topics:
            if t.corpus == corpus and t.name == name:
                return t
        return None

    def find_query_group(self, corpus: str, topic: str, name: str) -> QueryGroupItem | None:
        for qg in self.query_groups:
            if qg.corpus == corpus and qg.topic == topic and qg.name == name:
                return qg
        return None

    def selected_corpora(self) -> list[SelectableItem]:
        return [c for c in self.corpora if c.selected]

    def topics_for(self, corpus: str) -> list[TopicItem]:
        return [t for t in self.topics if t.corpus == corpus]

    def query_groups_for(self, corpus: str, topic: str) -> list[QueryGroupItem]:
        return [qg for qg in self.query_groups if qg.corpus == corpus and qg.topic == topic]

    # ------------------------------------------------------------------
    # Merges
    # ------------------------------------------------------------------

    def _merge_flat(self, items: list[SelectableItem], names: Iterable[Any] | None) -> list[SelectableItem]:
        added: list[SelectableItem] = []
        for name in _clean_names(names):
            if self._find_by_name(items, name) is None:
                item = SelectableItem(name=name, selected=True)
                items.append(item)
                added.append(item)
        return added

    def merge_metrics(self, names: Iterable[Any] | None) -> list[SelectableItem]:
        return self._merge_flat(self.metrics, names)

    def merge_versions(self, names: Iterable[Any] | None) -> list[SelectableItem]:
        return self._merge_flat(self.versions, names)

    def merge_corpora(self, names: Iterable[Any] | None) -> list[SelectableItem]:
        return self._merge_flat(self.corpora, names)

    def merge_topics(self, corpus: str, names: Iterable[Any] | None) -> list[TopicItem]:
        added: list[TopicItem] = []
        for name in _clean_names(names):
            if self.find_topic(corpus, name) is None:
                item = TopicItem(name=name, corpus=corpus)
                self.topics.append(item)
                added.append(item)
        return added

    def merge_query_groups(self, corpus: str, topic: str, names: Iterable[Any] | None) -> list[QueryGroupItem]:
        added: list[QueryGroupItem] = []
        for name in _clean_names(names):
            if self.find_query_group(corpus, topic, name) is None:
                item = QueryGroupItem(name=name, corpus=corpus, topic=topic)
                self.query_groups.append(item)
                added.append(item)
        return added

    # ------------------------------------------------------------------
    # Propagation (always corpus -> topic -> query group)
    # ------------------------------------------------------------------

    def propagate_corpus_selection(self) -> None:
        """Recompute every topic's ``disabled`` flag from its corpus."""
        selected_by_corpus = {c.name: c.selected for c in self.corpora}
        for t in self.topics:
            t.disabled = not selected_by_corpus.get(t.corpus, False)

    def propagate_topic_selection(self) -> None:
        """Recompute every query group's ``disabled`` flag from its topic."""
        effective_by_topic = {t.key: is_effective(t) for t in self.topics}
        for qg in self.query_groups:
            qg.disabled = not effective_by_topic.get((qg.corpus, qg.topic), False)

    def propagate(self) -> None:
        self.propagate_corpus_selection()
        self.propagate_topic_selection()

    # ------------------------------------------------------------------
    # Toggles
    # ------------------------------------------------------------------
    # These only flip ``selected``; callers run propagation afterwards.

    def set_metric_selected(self, name: str, selected: bool) -> SelectableItem:
        return self._set_flat(self.metrics, "metric", name, selected)

    def set_version_selected(self, name: str, selected: bool) -> SelectableItem:
        return self._set_flat(self.versions, "version", name, selected)

    def set_corpus_selected(self, name: str, selected: bool) -> SelectableItem:
        return self._set_flat(self.corpora, "corpus", name, selected)

    def set_topic_selected(self, corpus: str, name: str, selected: bool) -> TopicItem:
        item = self.find_topic(corpus, name)
        if item is None:
            raise KeyError(f"Unknown topic {name!r} in corpus {corpus!r}")
        item.selected = bool(selected)
        return item

    def set_query_group_selected(self, corpus: str, topic: str, name: str, selected: bool) -> QueryGroupItem:
        item = self.find_query_group(corpus, topic, name)
        if item is None:
            raise KeyError(f"Unknown query group {name!r} in {corpus!r}/{topic!r}")
        item.selected = bool(selected)
        return item

    def _set_flat(self, items: list[SelectableItem], kind: str, name: str, selected: bool) -> SelectableItem:
        item = self._find_by_name(items, name)
        if item is None:
            raise KeyError(f"Unknown {kind} {name!r}")
        item.selected = bool(selected)
        return item

    # ------------------------------------------------------------------
    # Active request
    # ------------------------------------------------------------------

    def derive_active_request(self) -> ActiveFilterRequest:
        return ActiveFilterRequest(
            metrics=_selected_names(self.metrics),
            versions=_selected_names(self.versions),
            corpora=_selected_names(self.corpora),
            topics=[
                {"topicName": t.name, "corpus": t.corpus}
                for t in self.topics
                if is_effective(t)
            ],
            query_groups=[
                {"queryGroup": qg.name, "topic": qg.topic, "corpus": qg.corpus}
                for qg in self.query_groups
                if is_effective(qg)
            ],
        )
