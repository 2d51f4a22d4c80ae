"""
Query services.

On-demand lookups against the flight source that do not touch the
history store.
"""

from flighttrack.services.route_query import (
    QueryStatus,
    RouteFlight,
    RouteQueryError,
    RouteQueryResult,
    RouteQueryService,
)

__all__ = [
    'QueryStatus',
    'RouteFlight',
    'RouteQueryError',
    'RouteQueryResult',
    'RouteQueryService',
]
