"""Diagnostics package.

- year_lengths: Milesian year-length table; optional barcode plot (numpy + matplotlib)
- round_trip: random compose/decompose round trips over registered parameter sets
"""

__all__ = ["year_lengths", "round_trip"]
