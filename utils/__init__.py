"""RRE Dashboard Utilities."""

from utils.config_utils import (
    DEFAULT_REQUEST_INTERVAL_MS,
    normalize_base_url,
    resolve_dashboard_config,
)
from utils.filter_catalog import (
    ActiveFilterRequest,
    FilterCatalog,
    QueryGroupItem,
    SelectableItem,
    TopicItem,
    is_effective,
)
from utils.rre_api import (
    GatewayError,
    RREClient,
    build_client,
)
from utils.filter_cascade import (
    CascadeState,
    FilterCascadeController,
)
from utils.refresh_scheduler import RefreshScheduler
from utils.evaluation_dataset import EvaluationDataset
from utils.data_helpers import (
    maybe_load_dotenv,
    as_float,
    frame_csv_bytes,
    format_interval_ms,
    init_session_state,
)
from utils.charts import metric_version_chart

__all__ = [
    # Config
    "DEFAULT_REQUEST_INTERVAL_MS",
    "normalize_base_url",
    "resolve_dashboard_config",
    # Filter catalog
    "ActiveFilterRequest",
    "FilterCatalog",
    "QueryGroupItem",
    "SelectableItem",
    "TopicItem",
    "is_effective",
    # RRE API
    "GatewayError",
    "RREClient",
    "build_client",
    # Cascade
    "CascadeState",
    "FilterCascadeController",
    "RefreshScheduler",
    "EvaluationDataset",
    # Data helpers
    "maybe_load_dotenv",
    "as_float",
    "frame_csv_bytes",
    "format_interval_ms",
    "init_session_state",
    # Charts
    "metric_version_chart",
]
