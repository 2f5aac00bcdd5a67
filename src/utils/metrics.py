"""Prometheus metrics for observability."""

import re
import time
from collections import defaultdict
from dataclasses import dataclass, field

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

# YouTube ids in paths (UC..., PL..., UU...) are collapsed like numeric ids
_EXTERNAL_ID_RE = re.compile(r"^[A-Za-z0-9_-]{11,}$")
# Route segments long enough to look like an external id
_ROUTE_SEGMENTS = {"watch-later"}


@dataclass
class Counter:
    """Simple counter metric."""

    name: str
    help: str
    labels: tuple[str, ...] = ()
    _values: dict[tuple, float] = field(default_factory=lambda: defaultdict(float))

    def inc(self, amount: float = 1.0, **labels: str) -> None:
        """Increment the counter."""
        label_values = tuple(labels.get(l, "") for l in self.labels)
        self._values[label_values] += amount

    def get(self, **labels: str) -> float:
        """Get counter value."""
        label_values = tuple(labels.get(l, "") for l in self.labels)
        return self._values[label_values]


@dataclass
class Histogram:
    """Simple histogram metric with predefined buckets."""

    name: str
    help: str
    labels: tuple[str, ...] = ()
    buckets: tuple[float, ...] = (0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0)
    _counts: dict[tuple, dict[float, int]] = field(
        default_factory=lambda: defaultdict(lambda: defaultdict(int))
    )
    _sums: dict[tuple, float] = field(default_factory=lambda: defaultdict(float))
    _totals: dict[tuple, int] = field(default_factory=lambda: defaultdict(int))

    def observe(self, value: float, **labels: str) -> None:
        """Observe a value."""
        label_values = tuple(labels.get(l, "") for l in self.labels)
        self._sums[label_values] += value
        self._totals[label_values] += 1
        for bucket in self.buckets:
            if value <= bucket:
                self._counts[label_values][bucket] += 1


def _format_labels(names: tuple[str, ...], values: tuple) -> str:
    return ",".join(f'{n}="{v}"' for n, v in zip(names, values))


class MetricsRegistry:
    """Registry for all metrics."""

    def __init__(self):
        # HTTP metrics
        self.http_requests_total = Counter(
            name="http_requests_total",
            help="Total number of HTTP requests",
            labels=("method", "path", "status"),
        )
        self.http_request_duration_seconds = Histogram(
            name="http_request_duration_seconds",
            help="HTTP request duration in seconds",
            labels=("method", "path"),
        )

        # YouTube Data API metrics
        self.youtube_api_requests_total = Counter(
            name="youtube_api_requests_total",
            help="Total number of YouTube Data API requests",
            labels=("endpoint", "status"),
        )
        self.youtube_api_duration_seconds = Histogram(
            name="youtube_api_duration_seconds",
            help="YouTube Data API request duration in seconds",
            labels=("endpoint",),
        )

        # Ingestion metrics
        self.channels_onboarded_total = Counter(
            name="channels_onboarded_total",
            help="Channels added to the store",
        )
        self.playlists_synced_total = Counter(
            name="playlists_synced_total",
            help="Playlist sync runs",
            labels=("outcome",),
        )
        self.videos_stored_total = Counter(
            name="videos_stored_total",
            help="Video rows created during playlist syncs",
        )

    def format_prometheus(self) -> str:
        """Format all metrics in Prometheus exposition format."""
        lines = []

        for metric in self.__dict__.values():
            if isinstance(metric, Counter):
                lines.append(f"# HELP {metric.name} {metric.help}")
                lines.append(f"# TYPE {metric.name} counter")
                for label_values, value in metric._values.items():
                    if metric.labels:
                        lines.append(
                            f"{metric.name}{{{_format_labels(metric.labels, label_values)}}} {value}"
                        )
                    else:
                        lines.append(f"{metric.name} {value}")

            elif isinstance(metric, Histogram):
                lines.append(f"# HELP {metric.name} {metric.help}")
                lines.append(f"# TYPE {metric.name} histogram")
                for label_values in metric._sums.keys():
                    if metric.labels:
                        base_labels = f"{{{_format_labels(metric.labels, label_values)}"
                        sep = ","
                    else:
                        base_labels = "{"
                        sep = ""

                    cumulative = 0
                    for bucket in metric.buckets:
                        cumulative += metric._counts[label_values].get(bucket, 0)
                        lines.append(f'{metric.name}_bucket{base_labels}{sep}le="{bucket}"}} {cumulative}')
                    lines.append(
                        f'{metric.name}_bucket{base_labels}{sep}le="+Inf"}} {metric._totals[label_values]}'
                    )
                    lines.append(f"{metric.name}_sum{base_labels}}} {metric._sums[label_values]}")
                    lines.append(f"{metric.name}_count{base_labels}}} {metric._totals[label_values]}")

        return "\n".join(lines)


# Global metrics registry
metrics = MetricsRegistry()


class MetricsMiddleware(BaseHTTPMiddleware):
    """Middleware to collect HTTP metrics."""

    async def dispatch(self, request: Request, call_next) -> Response:
        method = request.method
        path = normalize_path(request.url.path)

        start_time = time.monotonic()
        status = "500"
        try:
            response = await call_next(request)
            status = str(response.status_code)
            return response
        finally:
            duration = time.monotonic() - start_time
            metrics.http_requests_total.inc(method=method, path=path, status=status)
            metrics.http_request_duration_seconds.observe(duration, method=method, path=path)


def normalize_path(path: str) -> str:
    """Replace numeric and YouTube ids in a path with placeholders."""
    normalized = []
    for part in path.split("/"):
        if part.isdigit():
            normalized.append(":id")
        elif part not in _ROUTE_SEGMENTS and _EXTERNAL_ID_RE.match(part):
            normalized.append(":external_id")
        else:
            normalized.append(part)
    return "/".join(normalized)
