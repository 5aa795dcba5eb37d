"""
Command line entry point for the Library Catalog service.

Usage:
    library-catalog init-db [--drop-existing] [--sample-data N] [--database-url URL]
    library-catalog serve [--host HOST] [--port PORT]
"""

import argparse
import logging
import sys

import uvicorn
from sqlalchemy import inspect

from .api import configure_logging, create_app
from .config import get_config
from .database import get_db_manager, seed_database

logger = logging.getLogger(__name__)


def init_db(args: argparse.Namespace) -> int:
    """Create the schema and optionally load sample data."""
    db_manager = get_db_manager(args.database_url)
    if not db_manager.verify_connection():
        logger.error("Failed to connect to database")
        return 1

    try:
        db_manager.init_database(drop_existing=args.drop_existing)

        if args.sample_data:
            logger.info("Loading sample data...")
            with db_manager.session_scope() as session:
                seed_database(
                    session,
                    num_authors=args.sample_data,
                    num_books=args.sample_data * 2,
                    num_clients=args.sample_data,
                )

        tables = inspect(db_manager.engine).get_table_names()
        logger.info("Tables: %s", ", ".join(sorted(tables)))
    finally:
        db_manager.close()

    return 0


def serve(args: argparse.Namespace) -> int:
    """Run the REST API with uvicorn."""
    config = get_config()
    app = create_app()
    uvicorn.run(
        app,
        host=args.host or config.http_host,
        port=args.port or config.http_port,
        log_level=config.effective_log_level.lower(),
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="library-catalog", description="Library Catalog service"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    init_parser = subparsers.add_parser("init-db", help="Create the database schema")
    init_parser.add_argument(
        "--drop-existing",
        action="store_true",
        help="Drop existing tables before creating new ones",
    )
    init_parser.add_argument(
        "--sample-data",
        type=int,
        default=0,
        metavar="N",
        help="Load N authors and clients and 2N books of sample data",
    )
    init_parser.add_argument("--database-url", help="Override the configured database URL")
    init_parser.set_defaults(handler=init_db)

    serve_parser = subparsers.add_parser("serve", help="Run the REST API")
    serve_parser.add_argument("--host", help="Bind address (default: from configuration)")
    serve_parser.add_argument("--port", type=int, help="Port (default: from configuration)")
    serve_parser.set_defaults(handler=serve)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging()
    return args.handler(args)


if __name__ == "__main__":
    sys.exit(main())
