"""Cascading population of the filter catalog and re-issue of the active filter.

Population order:

1. metrics, versions and corpora (plus the unfiltered dataset on activation)
   are fetched concurrently;
2. as soon as corpora arrive, topics are fetched for every selected corpus;
3. as soon as a corpus's topics arrive, query groups are fetched for each of
   its effective topics.

There is no join barrier between branches: query groups for topic T are
complete once T's branch settles, regardless of the other corpora.  Network
calls run on a thread pool; every merge and propagation runs on the calling
thread while it holds the controller lock, so catalog mutations never
interleave.
"""

import logging
import threading
from collections.abc import Callable, Iterable
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from enum import Enum
from functools import partial
from typing import Any

from utils.evaluation_dataset import EvaluationDataset
from utils.filter_catalog import FilterCatalog, is_effective
from utils.rre_api import GatewayError, RREClient

logger = logging.getLogger(__name__)

ResultHandler = Callable[[Future], None]


class CascadeState(str, Enum):
    IDLE = "idle"
    LOADING_ROOTS = "loading_roots"
    LOADING_TOPICS = "loading_topics"
    LOADING_QUERY_GROUPS = "loading_query_groups"
    READY = "ready"


class FilterCascadeController:
    """Owns the filter catalog, its population order and the filter query."""

    def __init__(
        self,
        client: RREClient,
        catalog: FilterCatalog | None = None,
        dataset: EvaluationDataset | None = None,
        *,
        max_workers: int = 8,
    ) -> None:
        self.client = client
        self.catalog = catalog if catalog is not None else FilterCatalog()
        self.dataset = dataset if dataset is not None else EvaluationDataset()
        self.max_workers = max(1, int(max_workers))
        self.state = CascadeState.IDLE
        self._lock = threading.RLock()
        self._executor: ThreadPoolExecutor | None = None
        self._pending: dict[Future, ResultHandler] = {}

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def activate(self) -> None:
        """Fetch the unfiltered dataset and populate the catalog."""
        logger.info("FilterCascadeController starting")
        self._run(partial(self._load_roots, include_dataset=True), CascadeState.LOADING_ROOTS)

    def refresh_catalog(self) -> None:
        """Re-run catalog population without touching the dataset."""
        self._run(partial(self._load_roots, include_dataset=False), CascadeState.LOADING_ROOTS)

    # ------------------------------------------------------------------
    # User transitions
    # ------------------------------------------------------------------

    def toggle_corpus(self, name: str, selected: bool) -> bool:
        with self._lock:
            self.catalog.set_corpus_selected(name, selected)
            self.catalog.propagate_corpus_selection()
            self.catalog.propagate_topic_selection()
            self._run(self._load_topics, CascadeState.LOADING_TOPICS)
        return self.apply_filter()

    def toggle_topic(self, corpus: str, name: str, selected: bool) -> bool:
        with self._lock:
            topic = self.catalog.set_topic_selected(corpus, name, selected)
            self.catalog.propagate_topic_selection()
            if is_effective(topic):
                self._run(partial(self._load_query_groups, corpus, [name]), CascadeState.LOADING_QUERY_GROUPS)
        return self.apply_filter()

    def toggle_query_group(self, corpus: str, topic: str, name: str, selected: bool) -> bool:
        with self._lock:
            self.catalog.set_query_group_selected(corpus, topic, name, selected)
        return self.apply_filter()

    def toggle_metric(self, name: str, selected: bool) -> bool:
        with self._lock:
            self.catalog.set_metric_selected(name, selected)
        return self.apply_filter()

    def toggle_version(self, name: str, selected: bool) -> bool:
        with self._lock:
            self.catalog.set_version_selected(name, selected)
        return self.apply_filter()

    def apply_filter(self) -> bool:
        """Post the active request; keep the previous dataset if it fails."""
        with self._lock:
            request = self.catalog.derive_active_request()
        try:
            data = self.client.filter_evaluation_data(request)
        except GatewayError as exc:
            logger.error("Error while performing filter request: %s", exc)
            return False
        with self._lock:
            self.dataset.replace(data)
        return True

    # ------------------------------------------------------------------
    # Task plumbing
    # ------------------------------------------------------------------

    def _run(self, start: Callable[[], None], state: CascadeState) -> None:
        with self._lock:
            if self._executor is not None:
                # Already inside a cascade on this thread; join it.
                start()
                return
            self._set_state(state)
            with ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="rre-fetch") as executor:
                self._executor = executor
                self._pending = {}
                try:
                    start()
                    self._drain()
                finally:
                    self._executor = None
                    self._pending = {}
            self._set_state(CascadeState.READY)

    def _submit(self, fn: Callable[..., Any], handler: ResultHandler, *args: Any) -> None:
        assert self._executor is not None
        future = self._executor.submit(fn, *args)
        self._pending[future] = handler

    def _drain(self) -> None:
        while self._pending:
            done, _ = wait(list(self._pending), return_when=FIRST_COMPLETED)
            for future in done:
                handler = self._pending.pop(future)
                try:
                    handler(future)
                except Exception:
                    logger.exception("Unexpected error while merging a fetch result")

    def _set_state(self, state: CascadeState) -> None:
        if state != self.state:
            logger.debug("Filter cascade: %s -> %s", self.state.value, state.value)
        self.state = state

    @staticmethod
    def _names_or_none(future: Future, what: str, *, level: int = logging.ERROR) -> list[str] | None:
        try:
            return future.result()
        except GatewayError as exc:
            logger.log(level, "Error while fetching %s: %s", what, exc)
            return None

    # ------------------------------------------------------------------
    # Roots
    # ------------------------------------------------------------------

    def _load_roots(self, *, include_dataset: bool) -> None:
        if include_dataset:
            self._submit(self.client.get_data, self._on_dataset)
        self._submit(self.client.get_metric_list, partial(self._on_flat, "metrics", self.catalog.merge_metrics))
        self._submit(self.client.get_version_list, partial(self._on_flat, "versions", self.catalog.merge_versions))
        self._submit(self.client.get_corpus_list, self._on_corpora)

    def _on_dataset(self, future: Future) -> None:
        try:
            data = future.result()
        except GatewayError as exc:
            logger.error("Error while fetching evaluation data: %s", exc)
            return
        self.dataset.replace(data)

    def _on_flat(self, what: str, merge: Callable[[Iterable[Any]], list], future: Future) -> None:
        names = self._names_or_none(future, what)
        if names is None:
            return
        added = merge(names)
        if added:
            logger.debug("Merged %d new %s", len(added), what)

    def _on_corpora(self, future: Future) -> None:
        names = self._names_or_none(future, "corpora")
        if names is not None:
            added = self.catalog.merge_corpora(names)
            if added:
                logger.debug("Merged %d new corpora", len(added))
        # Known selected corpora still get their topics when the list fetch fails.
        self._load_topics()

    # ------------------------------------------------------------------
    # Topics
    # ------------------------------------------------------------------

    def _load_topics(self) -> None:
        corpora = [c.name for c in self.catalog.selected_corpora()]
        if corpora:
            self._set_state(CascadeState.LOADING_TOPICS)
        for corpus in corpora:
            self._submit(self.client.get_topic_list, partial(self._on_topics, corpus), corpus)

    def _on_topics(self, corpus: str, future: Future) -> None:
        names = self._names_or_none(future, f"topics for corpus {corpus!r}")
        if names is not None:
            added = self.catalog.merge_topics(corpus, names)
            if added:
                logger.debug("Merged %d new topics for corpus %r", len(added), corpus)
            self.catalog.propagate_corpus_selection()
            self.catalog.propagate_topic_selection()
        self._load_query_groups(corpus)

    # ------------------------------------------------------------------
    # Query groups
    # ------------------------------------------------------------------

    def _load_query_groups(self, corpus: str, topic_names: list[str] | None = None) -> None:
        corpus_item = self.catalog.find_corpus(corpus)
        if corpus_item is None or not corpus_item.selected:
            return
        topics = [
            t for t in self.catalog.topics_for(corpus)
            if is_effective(t) and (topic_names is None or t.name in topic_names)
        ]
        if topics:
            self._set_state(CascadeState.LOADING_QUERY_GROUPS)
        for t in topics:
            self._submit(
                self.client.get_query_group_list,
                partial(self._on_query_groups, corpus, t.name),
                corpus,
                t.name,
            )

    def _on_query_groups(self, corpus: str, topic: str, future: Future) -> None:
        names = self._names_or_none(
            future,
            f"query groups for {corpus!r}/{topic!r}",
            level=logging.WARNING,
        )
        if names is None:
            return
        added = self.catalog.merge_query_groups(corpus, topic, names)
        if added:
            logger.debug("Merged %d new query groups for %r/%r", len(added), corpus, topic)
        self.catalog.propagate_topic_selection()
