"""Prometheus metrics for timer and schedule observability.

Counters for timer commands, ticks, phase switches and schedule edits.
Exposed via /metrics endpoint.
"""

from prometheus_client import Counter, Histogram, make_asgi_app

# Timer counters
timer_commands_total = Counter(
    "timer_commands_total",
    "Total timer commands handled",
    ["command"],  # command: start, stop, reset, set_fasting_hours
)

timer_ticks_total = Counter(
    "timer_ticks_total",
    "Total ticks that recomputed the timer display",
)

phase_switches_total = Counter(
    "phase_switches_total",
    "Total fasting/eating phase switches observed while ticking",
    ["to_phase"],
)

# Schedule counters
schedule_edits_total = Counter(
    "schedule_edits_total",
    "Total schedule editing operations",
    ["operation"],
)

# API counters
api_requests_total = Counter(
    "api_requests_total",
    "Total API requests",
    ["endpoint", "method", "status_code"],
)

# Histograms
api_response_duration_seconds = Histogram(
    "api_response_duration_seconds",
    "Duration of API responses",
    ["endpoint"],
)


def create_metrics_app():
    """Create ASGI app for /metrics endpoint."""
    return make_asgi_app()
