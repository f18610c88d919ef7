"""
Prometheus metrics for the reservation lifecycle.

Metrics are exposed via the /metrics endpoint for scraping by Prometheus.

Example:
    >>> from hotel_reservations.metrics import reservations_created
    >>> reservations_created.labels(claimed="true").inc()
"""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram

# =============================================================================
# Reservation Metrics
# =============================================================================

reservations_created = Counter(
    "hotel_reservations_created_total",
    "Total number of reservations booked",
    ["claimed"],
)
"""
Counter for bookings.

Labels:
    claimed: "true" when the booking is bound to an account at creation
"""

reservations_cancelled = Counter(
    "hotel_reservations_cancelled_total",
    "Total number of reservations cancelled through approved requests",
)

reservation_claims = Counter(
    "hotel_reservation_claims_total",
    "Claim attempts of confirmation-code reservations",
    ["outcome"],
)
"""
Counter for claim attempts.

Labels:
    outcome: claimed, already_claimed, not_found, email_mismatch, already_linked
"""

# =============================================================================
# Change Request Metrics
# =============================================================================

change_requests = Counter(
    "hotel_change_requests_total",
    "Change requests by type and workflow action",
    ["change_type", "action"],
)
"""
Counter for change request workflow steps.

Labels:
    change_type: DateChange or Cancellation
    action: submitted, approved, rejected
"""

# =============================================================================
# Query Metrics
# =============================================================================

availability_query_duration = Histogram(
    "hotel_availability_query_duration_seconds",
    "Time spent computing room availability for a date window",
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, float("inf")),
)

# =============================================================================
# Occupancy Gauges
# =============================================================================

rooms_occupied = Gauge(
    "hotel_rooms_occupied",
    "Rooms holding an active stay today",
)
"""Refreshed from the store on every /metrics scrape."""

rooms_total = Gauge(
    "hotel_rooms_total",
    "Rooms in the hotel",
)
