"""
Cinechain CLI - Command-line interface for the service.

Usage:
    cinechain serve [--host H] [--port P]     Run the API server
    cinechain search <query>                  Search titles on TMDB
    cinechain credits <movie|tv> <id>         List a title's contributors

TMDB commands read the access token from TMDB_ACCESS_TOKEN.
"""

import argparse
import logging
import os
import sys


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Cinechain - six degrees of separation on film credits",
        prog="cinechain",
    )
    parser.add_argument(
        "--log-level",
        default=os.getenv("CINECHAIN_LOG_LEVEL", "INFO"),
        help="Logging level (DEBUG, INFO, WARNING, ...)",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the API server")
    serve_parser.add_argument("--host", default=os.getenv("HOST", "0.0.0.0"))
    serve_parser.add_argument("--port", type=int, default=int(os.getenv("PORT", "8000")))
    serve_parser.add_argument("--reload", action="store_true", help="Reload on code changes")

    # Search command
    search_parser = subparsers.add_parser("search", help="Search titles")
    search_parser.add_argument("query", help="Free-text title query")

    # Credits command
    credits_parser = subparsers.add_parser("credits", help="List a title's contributors")
    credits_parser.add_argument("media_type", choices=["movie", "tv"])
    credits_parser.add_argument("media_id", type=int)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "serve":
        cmd_serve(args)
    elif args.command == "search":
        cmd_search(args)
    elif args.command == "credits":
        cmd_credits(args)
    else:
        parser.print_help()
        sys.exit(1)


def _client():
    from .metadata import TMDBClient

    token = os.getenv("TMDB_ACCESS_TOKEN")
    if not token:
        print("Error: TMDB_ACCESS_TOKEN is not set")
        sys.exit(1)
    return TMDBClient(token)


def cmd_serve(args):
    """Run the API server."""
    import uvicorn

    uvicorn.run("cinechain.api.app:app", host=args.host, port=args.port, reload=args.reload)


def cmd_search(args):
    """Search titles."""
    from .metadata import MetadataProviderError, format_search_results

    try:
        options = format_search_results(_client().search_multi(args.query))
    except MetadataProviderError as e:
        print(f"Error: {e}")
        sys.exit(1)

    if not options:
        print("No results")
    for option in options:
        print(f"{option.key:<16} {option.label}")


def cmd_credits(args):
    """List contributors of a title."""
    from .engine_core import contributing_people
    from .metadata import MetadataProviderError

    try:
        raw = _client().credits(args.media_type, args.media_id)
    except MetadataProviderError as e:
        print(f"Error: {e}")
        sys.exit(1)

    people = contributing_people(raw["cast"], raw["crew"])
    print(f"{len(people)} contributors")
    for person in people:
        print(f"  {person.id:>8}  {person.name}  ({person.role or '-'})")


if __name__ == "__main__":
    main()
