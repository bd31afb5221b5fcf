#!/usr/bin/env python3
"""
Entry point for the countdown server.

Usage:
    countdown --db-file timers.db --port 8080

Environment variables (flags take precedence):
    COUNTDOWN_DB_FILE: SQLite file to read and write state from (default: timers.db)
    COUNTDOWN_HOST: Interface to listen on (default: 0.0.0.0)
    COUNTDOWN_PORT: HTTP port (default: 8080)
    COUNTDOWN_LOG_LEVEL: DEBUG, INFO, WARNING or ERROR (default: INFO)
"""

import argparse
import logging

import uvicorn
from fastapi import FastAPI

from db import create_db_engine, create_session_factory, init_db, populate_test_data
from utils.config_service import Config
from utils.logging_setup import setup_logging
from web.api import create_app

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run the countdown timer web server")
    parser.add_argument(
        "--db-file",
        default=Config.db_file(),
        help="The sqlite file to read and write state from.",
    )
    parser.add_argument(
        "--db-recreate",
        action="store_true",
        help="Drops data in the file and creates the necessary schemas.",
    )
    parser.add_argument(
        "--db-populate-test-data",
        action="store_true",
        help="Inserts rows of test data into the table.",
    )
    parser.add_argument(
        "--host",
        default=Config.host(),
        help="The interface to bind the http server to.",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=Config.port(),
        help="The http port to expose the server on.",
    )
    parser.add_argument(
        "--log-level",
        default=Config.log_level(),
        help="Logging level (DEBUG, INFO, WARNING, ERROR).",
    )
    return parser


def bootstrap(args: argparse.Namespace) -> FastAPI:
    """
    Prepare the database and build the application.

    Args:
        args: Parsed command line arguments

    Returns:
        The configured FastAPI app
    """
    engine = create_db_engine(args.db_file)
    init_db(engine, recreate=args.db_recreate)

    session_factory = create_session_factory(engine)
    if args.db_populate_test_data:
        populate_test_data(session_factory)

    return create_app(session_factory)


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for the countdown CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    app = bootstrap(args)
    logger.info("Starting countdown server on %s:%d (db=%s)", args.host, args.port, args.db_file)
    uvicorn.run(app, host=args.host, port=args.port, log_config=None)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
