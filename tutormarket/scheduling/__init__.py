from .intervals import (
    BOOKING_HORIZON_YEARS,
    TimeSlot,
    add_years,
    booking_horizon,
    ensure_row_invariants,
    ensure_valid_order,
)

__all__ = [
    "BOOKING_HORIZON_YEARS",
    "TimeSlot",
    "add_years",
    "booking_horizon",
    "ensure_row_invariants",
    "ensure_valid_order",
]
