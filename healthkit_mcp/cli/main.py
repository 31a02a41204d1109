"""CLI entry point for the health MCP server and data import"""
import argparse
import asyncio
import sys
from pathlib import Path
from typing import Optional

from ..core.database import Database
from ..core.logging_setup import setup_logging, get_logger
from ..importers.apple_health import AppleHealthImporter
from ..mcp.config import ServerConfig
from ..mcp.dispatcher import TOOL_DESCRIPTIONS, ToolDispatcher
from ..mcp.server import authorize, main as serve_main
from ..providers.sqlite_store import SQLiteHealthStore


def cmd_init(args: argparse.Namespace) -> int:
    """Initialize database"""
    logger = get_logger()

    try:
        config = ServerConfig.from_env(args.db)
        with Database(config.db_path) as db:
            db.init_schema()
            logger.info(f"Database initialized: {config.db_path}")
            return 0
    except Exception as e:
        logger.error(f"Init failed: {e}")
        return 1


def cmd_import(args: argparse.Namespace) -> int:
    """Handle import command"""
    logger = get_logger()
    file_path = Path(args.file)

    try:
        config = ServerConfig.from_env(args.db)
        with Database(config.db_path) as db:
            db.init_schema()

            importer = AppleHealthImporter(db, verbosity=args.verbose)
            result = importer.import_file(file_path)
            for sample_type, count in sorted(result.by_type.items()):
                logger.info(f"       {sample_type}: {count}")
            return 0

    except FileNotFoundError as e:
        logger.error(str(e))
        return 1
    except Exception as e:
        logger.error(f"Import failed: {e}", exc_info=args.verbose >= 2)
        return 1


async def _run_query(config: ServerConfig, tool: str, start_date: str, end_date: str):
    provider = SQLiteHealthStore(config.db_path, sleep_vocabulary=config.sleep_vocabulary)
    await authorize(provider)
    dispatcher = ToolDispatcher.from_provider(provider)
    return await dispatcher.dispatch(tool, {"start_date": start_date, "end_date": end_date})


def cmd_query(args: argparse.Namespace) -> int:
    """Run a single tool locally and print its text result"""
    logger = get_logger()
    try:
        config = ServerConfig.from_env(args.db)
    except ValueError as e:
        logger.error(str(e))
        return 1

    result = asyncio.run(_run_query(config, args.tool, args.start, args.end))
    print(result.text)
    return 1 if result.is_error else 0


def cmd_serve(args: argparse.Namespace) -> int:
    """Run the MCP server over stdio"""
    logger = get_logger()
    try:
        config = ServerConfig.from_env(args.db)
    except ValueError as e:
        logger.error(str(e))
        return 1
    return serve_main(config)


def main(argv: Optional[list] = None) -> int:
    """Main CLI entry point"""
    parser = argparse.ArgumentParser(
        prog="healthkit-mcp",
        description="Serve health metrics over MCP and import Apple Health exports"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v for inserts/debug, -vv for tracebacks)"
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Quiet mode (errors only)"
    )
    parser.add_argument(
        "--db",
        help="Database path (default: $HEALTHKIT_MCP_DB or data/health_data.db)"
    )

    # --db is also accepted after the subcommand; SUPPRESS keeps a global value
    db_parent = argparse.ArgumentParser(add_help=False)
    db_parent.add_argument(
        "--db",
        default=argparse.SUPPRESS,
        help="Database path (default: $HEALTHKIT_MCP_DB or data/health_data.db)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Init command
    init_parser = subparsers.add_parser("init", parents=[db_parent], help="Initialize database")
    init_parser.set_defaults(func=cmd_init)

    # Import command
    import_parser = subparsers.add_parser("import", parents=[db_parent], help="Import an Apple Health export.xml")
    import_parser.add_argument(
        "file",
        help="Path to export.xml"
    )
    import_parser.set_defaults(func=cmd_import)

    # Query command
    query_parser = subparsers.add_parser("query", parents=[db_parent], help="Run one tool and print the result")
    query_parser.add_argument(
        "tool",
        choices=list(TOOL_DESCRIPTIONS.keys()),
        help="Tool name"
    )
    query_parser.add_argument(
        "--start", "-s",
        required=True,
        help="Start date (YYYY-MM-DD)"
    )
    query_parser.add_argument(
        "--end", "-e",
        required=True,
        help="End date (YYYY-MM-DD)"
    )
    query_parser.set_defaults(func=cmd_query)

    # Serve command
    serve_parser = subparsers.add_parser("serve", parents=[db_parent], help="Run the MCP server over stdio")
    serve_parser.set_defaults(func=cmd_serve)

    args = parser.parse_args(argv)

    # Setup logging; stderr keeps stdout free for MCP and query output
    setup_logging(verbosity=args.verbose, quiet=args.quiet, log_to_file=args.command == "serve")

    if not args.command:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
