"""
Command-line driver for the link registry.

This CLI follows this procedure for every command:
- Step 1: Initialize JSON logging and load the environment's configuration
- Step 2: Build the Registry over the configured backend
- Step 3: Run the requested operation and print its outcome as JSON

CLI usage:
    $ linkregistry shorten https://example.com/article/123 --validity 60
    $ linkregistry shorten https://example.com/article/123 --code promo2025
    $ linkregistry resolve promo2025 --agent "Mozilla/5.0" --source Email --location "Berlin, DE"
    $ linkregistry list
    $ linkregistry stats promo2025

Exit codes:
    0: success
    1: shortcode not found or expired (resolve, stats)
    2: invalid input or duplicate shortcode (shorten)
    3: persistence or configuration failure
"""

import sys
import json
import argparse
from datetime import datetime
from typing import Any

from linkregistry.models import EntryModel
from linkregistry.registry import Registry, create_registry
from linkregistry.utils import initialize_logging, load_config, utcnow
from linkregistry.exceptions import (
    ConfigurationError,
    DuplicateCodeError,
    InvalidInputError,
    PersistenceError,
    ShortcodeSpaceExhaustedError,
)


EXIT_OK = 0
EXIT_NOT_FOUND = 1
EXIT_BAD_REQUEST = 2
EXIT_FAILURE = 3


def entry_view(entry: EntryModel, now: datetime, with_clicks: bool = False) -> dict[str, Any]:
    """Render an entry for display, with expiry computed against `now`."""
    view = {
        'code': entry.code,
        'target': entry.target,
        'created_at': entry.created_at.isoformat(),
        'expires_at': entry.expires_at.isoformat(),
        'validity_minutes': entry.validity_minutes,
        'expired': entry.is_expired(now),
        'click_count': entry.click_count,
    }
    if with_clicks:
        view['clicks'] = [click.to_dict() for click in entry.clicks]
    return view


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='linkregistry',
        description='Register short codes for URLs, resolve them and inspect recorded clicks',
    )
    commands = parser.add_subparsers(dest='command', required=True)

    shorten = commands.add_parser('shorten', help='Register a URL under a new shortcode')
    shorten.add_argument('target', help='Absolute URL to redirect to')
    shorten.add_argument(
        '--validity',
        type=int,
        default=None,
        help='Minutes the shortcode stays live (default: registry.default_validity_minutes, usually 30)',
    )
    shorten.add_argument('--code', default=None, help='Requested shortcode (1-20 alphanumeric characters)')

    resolve = commands.add_parser('resolve', help='Resolve a shortcode and record a click')
    resolve.add_argument('code', help='Shortcode to resolve')
    resolve.add_argument('--agent', default='linkregistry-cli', help='Client identifier recorded with the click')
    resolve.add_argument('--source', default=None, help='Referral channel label (sampled when omitted)')
    resolve.add_argument('--location', default=None, help='Geographic origin label (sampled when omitted)')

    commands.add_parser('list', help='List retained entries, most recent first')

    stats = commands.add_parser('stats', help='Show one entry with its recorded clicks')
    stats.add_argument('code', help='Shortcode to inspect')

    return parser


def run(registry: Registry, args: argparse.Namespace) -> tuple[int, Any]:
    """Dispatch a parsed command to the registry and return (exit code, output)."""
    if args.command == 'shorten':
        try:
            entry = registry.shorten(args.target, validity_minutes=args.validity, requested_code=args.code)
        except (InvalidInputError, DuplicateCodeError) as e:
            return EXIT_BAD_REQUEST, {'message': str(e), 'errorCode': e.error_code}
        return EXIT_OK, entry_view(entry, utcnow())

    if args.command == 'resolve':
        target = registry.resolve(args.code, agent=args.agent, source=args.source, location=args.location)
        if target is None:
            return EXIT_NOT_FOUND, {'message': f"Shortcode '{args.code}' doesn't exist or has expired"}
        return EXIT_OK, {'code': args.code, 'target': target}

    if args.command == 'list':
        now = utcnow()
        return EXIT_OK, [entry_view(entry, now) for entry in registry.list_entries()]

    if args.command == 'stats':
        entry = registry.get(args.code)
        if entry is None:
            return EXIT_NOT_FOUND, {'message': f"Shortcode '{args.code}' doesn't exist"}
        return EXIT_OK, entry_view(entry, utcnow(), with_clicks=True)

    raise ValueError(f'Unknown command {args.command!r}')  # pragma: no cover


def main(argv: list[str] | None = None) -> int:
    """CLI entry point.

    Steps:
        - Parse CLI arguments
        - Initialize logging, load config and build the registry
        - Run the command and print its JSON output on stdout
    """
    args = build_parser().parse_args(argv)
    initialize_logging()

    try:
        registry = create_registry(load_config())
        exit_code, output = run(registry, args)
    except (ConfigurationError, PersistenceError, ShortcodeSpaceExhaustedError) as e:
        print(json.dumps({'message': str(e), 'errorCode': e.error_code}), file=sys.stderr)
        return EXIT_FAILURE

    print(json.dumps(output, indent=2))
    return exit_code


if __name__ == '__main__':
    sys.exit(main())
