"""
Prometheus Metrics Module.

Exposes application metrics for monitoring with Prometheus.
"""

from prometheus_client import Counter, Histogram, Gauge, Info, generate_latest, CONTENT_TYPE_LATEST
from fastapi import APIRouter, Response

# ============================================
# Application Info
# ============================================
APP_INFO = Info(
    "app_info",
    "Application information"
)
APP_INFO.info({
    "app_name": "docchat",
    "version": "1.0.0",
})

# ============================================
# Upload Metrics
# ============================================
UPLOADS_TOTAL = Counter(
    "uploads_total",
    "Total number of document uploads",
    ["status"]  # accepted, missing_file, invalid_type, file_too_large
)

UPLOAD_SIZE_BYTES = Histogram(
    "upload_size_bytes",
    "Size of accepted uploads in bytes",
    buckets=[1024, 10240, 102400, 1048576, 5242880, 10485760]  # 1KB to 10MB
)

# ============================================
# Extraction Metrics
# ============================================
EXTRACTIONS_TOTAL = Counter(
    "extractions_total",
    "Total number of finished extraction tasks",
    ["status"]  # ready, error, skipped
)

EXTRACTION_DURATION_SECONDS = Histogram(
    "extraction_duration_seconds",
    "Time spent extracting text from a PDF",
    buckets=[0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0, 120.0]
)

EXTRACTIONS_IN_FLIGHT = Gauge(
    "extractions_in_flight",
    "Number of extraction tasks currently running"
)

PAGES_PROCESSED_TOTAL = Counter(
    "pages_processed_total",
    "Total number of PDF pages extracted"
)

# ============================================
# HTTP Request Metrics
# ============================================
HTTP_REQUESTS_TOTAL = Counter(
    "http_requests_total",
    "Total number of HTTP requests",
    ["method", "endpoint", "status_code"]
)

HTTP_REQUEST_DURATION_SECONDS = Histogram(
    "http_request_duration_seconds",
    "Duration of HTTP requests",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0]
)

# ============================================
# Metrics Router
# ============================================
router = APIRouter()


@router.get("/metrics", include_in_schema=False)
async def metrics():
    """
    Expose Prometheus metrics endpoint.

    Returns metrics in Prometheus text format.
    """
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


# ============================================
# Helper Functions
# ============================================
def track_upload(status: str, size_bytes: int = 0):
    """Track an upload attempt."""
    UPLOADS_TOTAL.labels(status=status).inc()
    if size_bytes > 0:
        UPLOAD_SIZE_BYTES.observe(size_bytes)


def track_extraction(status: str, duration_seconds: float, page_count: int = 0):
    """Track a finished extraction task."""
    EXTRACTIONS_TOTAL.labels(status=status).inc()
    EXTRACTION_DURATION_SECONDS.observe(duration_seconds)
    if page_count > 0:
        PAGES_PROCESSED_TOTAL.inc(page_count)


def track_http_request(method: str, endpoint: str, status_code: int, duration_seconds: float):
    """Track HTTP request metrics."""
    HTTP_REQUESTS_TOTAL.labels(
        method=method,
        endpoint=endpoint,
        status_code=str(status_code)
    ).inc()
    HTTP_REQUEST_DURATION_SECONDS.labels(
        method=method,
        endpoint=endpoint
    ).observe(duration_seconds)
