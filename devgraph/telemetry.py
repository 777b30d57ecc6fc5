"""
Observability setup:
  - OpenTelemetry tracing (OTLP gRPC export when an endpoint is configured)
  - Prometheus metrics: graph size, follow churn, feed / recommendation latency

Tracing is initialised once by the CLI entry point; the core only asks for
tracers, which are no-ops until a provider is installed.
"""
import logging

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from prometheus_client import REGISTRY, Counter, Gauge, Histogram, write_to_textfile

from devgraph.config import settings

logger = logging.getLogger(__name__)

# ─────────────────────────── Prometheus Metrics ───────────────────────────
USERS_REGISTERED_TOTAL = Counter(
    "devgraph_users_registered_total",
    "Total number of accounts registered",
)

USERS_DELETED_TOTAL = Counter(
    "devgraph_users_deleted_total",
    "Total number of accounts deleted",
)

GRAPH_USERS = Gauge(
    "devgraph_graph_users",
    "Number of users currently in the social graph",
)

FOLLOW_EDGES_TOTAL = Counter(
    "devgraph_follow_edges_total",
    "Follow edge pairs created or removed",
    ["action"],  # 'follow' or 'unfollow'
)

INCONSISTENT_EDGES_TOTAL = Counter(
    "devgraph_inconsistent_edges_total",
    "One-sided edges found while removing a follow",
)

FEED_LATENCY = Histogram(
    "devgraph_feed_latency_seconds",
    "Time spent building a ranked feed",
    buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0],
)

FEED_CANDIDATES_TOTAL = Counter(
    "devgraph_feed_candidates_total",
    "Candidate posts pushed into feeds",
    ["source"],  # 'following' or 'interests'
)

RECOMMENDATION_LATENCY = Histogram(
    "devgraph_recommendation_latency_seconds",
    "Time spent computing friend suggestions",
    buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0],
)


# ─────────────────────────── OpenTelemetry Setup ──────────────────────────
def setup_tracing() -> None:
    """Configure the global OTel TracerProvider, exporting via OTLP if configured."""
    resource = Resource.create(
        {
            "service.name": settings.service_name,
            "deployment.environment": settings.environment,
        }
    )

    provider = TracerProvider(resource=resource)

    if settings.otel_exporter_otlp_endpoint:
        try:
            otlp_exporter = OTLPSpanExporter(
                endpoint=settings.otel_exporter_otlp_endpoint,
                insecure=True,
            )
            provider.add_span_processor(BatchSpanProcessor(otlp_exporter))
            logger.info(
                "OTel tracing configured → %s", settings.otel_exporter_otlp_endpoint
            )
        except Exception as exc:
            logger.warning("Could not connect to OTLP exporter: %s — traces disabled", exc)

    trace.set_tracer_provider(provider)


def write_metrics() -> None:
    """Dump the metrics registry to the configured textfile (node-exporter format)."""
    if not settings.metrics_textfile:
        return
    write_to_textfile(settings.metrics_textfile, REGISTRY)
    logger.debug("Metrics written to %s", settings.metrics_textfile)
