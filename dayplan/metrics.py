# dayplan/metrics.py
import logging

from prometheus_client import Counter, Summary, start_http_server

logger = logging.getLogger(__name__)

SCHEDULE_TIME = Summary(
    "schedule_generation_seconds",
    "Time spent generating a day schedule",
)

SCHEDULED_ITEMS = Counter(
    "schedule_items_total",
    "Count of scheduled plan items by kind",
    ["kind"],  # task | break
)

SCHEDULE_WARNINGS = Counter(
    "schedule_warnings_total",
    "Count of warnings returned with generated schedules",
)


def record_result(result) -> None:
    breaks = sum(1 for item in result.items if item.is_break)
    SCHEDULED_ITEMS.labels(kind="break").inc(breaks)
    SCHEDULED_ITEMS.labels(kind="task").inc(len(result.items) - breaks)
    SCHEDULE_WARNINGS.inc(len(result.warnings))


def serve_metrics(port: int) -> None:
    """Expose the instruments above over HTTP for scraping."""
    start_http_server(port)
    logger.info("Metrics server listening on :%d", port)
