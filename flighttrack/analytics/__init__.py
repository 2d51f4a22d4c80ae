"""
Analytics module for FlightTrack.

Provides NumPy-based statistics over observed flight durations.
"""

from flighttrack.analytics.duration_stats import (
    DurationStats,
    mean_duration,
    summarize_durations,
)

__all__ = [
    'DurationStats',
    'mean_duration',
    'summarize_durations',
]
