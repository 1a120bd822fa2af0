from .errors import internal_error_response
from .metrics import ITEMS_COUNT, MetricsSink, OtelMetrics, get_metrics
