"""CLI for flight tracking and route history."""

import argparse
import sys
import time
from datetime import datetime

from flighttrack.app import configure_logging
from flighttrack.config import load_config
from flighttrack.context import AppContext
from flighttrack.services import RouteQueryError


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description='Track flights and record route durations (e.g. LAX-JFK)'
    )
    parser.add_argument(
        '--verbose',
        '-v',
        action='store_true',
        help='Enable debug logging',
    )
    sub = parser.add_subparsers(dest='command', required=True)

    sub.add_parser(
        'ingest',
        help='Run one ingestion of the configured route (exit code 1 on failure)',
    )

    route = sub.add_parser('route', help='Fetch current flights and average duration for a route')
    route.add_argument('departure', help='Departure IATA code (e.g. LAX)')
    route.add_argument('arrival', help='Arrival IATA code (e.g. JFK)')
    route.add_argument('--limit', '-n', type=int, help='Max flights to fetch')

    history = sub.add_parser('history', help='Show stored durations for a route')
    history.add_argument('departure', help='Departure IATA code')
    history.add_argument('arrival', help='Arrival IATA code')
    history.add_argument(
        '--days',
        '-d',
        type=int,
        help='Also print the average over the past N days',
    )

    track = sub.add_parser('track', help='Poll a flight and print each result')
    track.add_argument('flight_code', help='Flight IATA code (e.g. AA100)')
    track.add_argument(
        '--polls',
        '-p',
        type=int,
        default=1,
        help='Number of polls before stopping (default 1)',
    )

    serve = sub.add_parser('serve', help='Run the HTTP API')
    serve.add_argument('--port', type=int, help='Port to listen on (default $PORT or 5000)')

    return parser.parse_args(argv)


def _cmd_ingest(context: AppContext) -> int:
    result = context.build_pipeline().run()
    if not result.success:
        print(f'Ingestion failed: {result.error}', file=sys.stderr)
        return 1
    print(
        f'Fetched {result.fetched}, inserted {result.inserted}, '
        f'skipped {result.skipped}'
    )
    return 0


def _cmd_route(context: AppContext, args) -> int:
    service = context.build_route_query_service()
    try:
        result = service.query(args.departure, args.arrival, limit=args.limit)
    except ValueError as e:
        print(f'Error: {e}', file=sys.stderr)
        return 1
    except RouteQueryError as e:
        print(str(e), file=sys.stderr)
        return 1

    print(f'{result.departure_iata} -> {result.arrival_iata}')
    if not result.has_data:
        print(result.message, file=sys.stderr)
        return 0

    for f in result.flights:
        print(
            f'  {f.flight_code:<8} {f.airline_name:<24} '
            f'{f.departure_airport} -> {f.arrival_airport}  {f.duration_minutes} min'
        )
    print(f'\nAverage Flight Duration: {result.average_duration:.2f} minutes')
    return 0


def _cmd_history(context: AppContext, args) -> int:
    dep, arr = args.departure.strip().upper(), args.arrival.strip().upper()
    records = context.store.history_by_route(dep, arr)

    print(f'Flight History: {dep} -> {arr}')
    if not records:
        print('No history available for this route.')
    for r in records:
        recorded = datetime.fromtimestamp(r.recorded_at / 1000).strftime('%d/%m/%Y %H:%M')
        print(f'  {r.flight_iata:<8} {r.duration_minutes:>6} min  recorded at {recorded}')

    if args.days:
        since = int(time.time() * 1000) - args.days * 24 * 3600 * 1000
        average = context.store.average_since(dep, arr, since)
        if average is None:
            print(f'\nNo records in the past {args.days} days.')
        else:
            print(f'\nAverage over past {args.days} days: {average:.2f} minutes')
    return 0


def _cmd_track(context: AppContext, args) -> int:
    tracker = context.build_tracker()
    try:
        tracker.start(args.flight_code)
    except ValueError as e:
        print(f'Error: {e}', file=sys.stderr)
        return 1

    last_update = None
    polls = 0
    try:
        while polls < args.polls:
            state = tracker.state
            if state.updated_at is not None and state.updated_at != last_update:
                last_update = state.updated_at
                polls += 1
                if state.error:
                    print(state.error, file=sys.stderr)
                else:
                    flight = state.snapshot
                    live = flight.live
                    position = f'{live.latitude}, {live.longitude} @ {live.altitude} m' if live else 'N/A'
                    print(
                        f'{flight.flight_code or "N/A"} [{flight.status or "unknown"}] '
                        f'{flight.airline_name or "N/A"} position: {position}'
                    )
            time.sleep(0.5)
    except KeyboardInterrupt:
        pass
    finally:
        tracker.stop()
    return 0


def main(argv=None):
    args = parse_args(argv)
    config = load_config()
    configure_logging(args.verbose or config.debug)

    if args.command == 'serve':
        from flighttrack.app import run_development_server

        run_development_server(port=args.port)
        return

    context = AppContext.create(config)
    try:
        if args.command == 'ingest':
            code = _cmd_ingest(context)
        elif args.command == 'route':
            code = _cmd_route(context, args)
        elif args.command == 'history':
            code = _cmd_history(context, args)
        else:
            code = _cmd_track(context, args)
    finally:
        context.close()

    sys.exit(code)


if __name__ == '__main__':
    main()
