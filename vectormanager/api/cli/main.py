"""Modular CLI entry point for Vector Manager."""

import argparse
import asyncio
import sys

from loguru import logger


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the CLI.

    Args:
        verbose: Whether to enable verbose logging
    """
    logger.remove()

    if verbose:
        logger.add(
            sys.stderr,
            level="DEBUG",
            format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
        )
    else:
        logger.add(
            sys.stderr,
            level="INFO",
            format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <level>{message}</level>"
        )


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the complete argument parser.

    Returns:
        Configured ArgumentParser instance
    """
    from .parsers import (
        add_list_subparser,
        add_preview_subparser,
        add_purge_subparser,
        add_query_subparser,
        add_vectorize_subparser,
        create_main_parser,
        setup_subparsers,
    )

    parser = create_main_parser()
    subparsers = setup_subparsers(parser)

    add_preview_subparser(subparsers)
    add_vectorize_subparser(subparsers)
    add_query_subparser(subparsers)
    add_list_subparser(subparsers)
    add_purge_subparser(subparsers)

    return parser


async def async_main(argv: list[str] | None = None) -> None:
    """Async main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    setup_logging(getattr(args, "verbose", False))

    from .commands import (
        list_command,
        preview_command,
        purge_command,
        query_command,
        vectorize_command,
    )

    handlers = {
        "preview": preview_command,
        "vectorize": vectorize_command,
        "query": query_command,
        "list": list_command,
        "purge": purge_command,
    }

    try:
        handler = handlers.get(args.command)
        if handler is None:
            logger.error(f"Unknown command: {args.command}")
            sys.exit(1)
        await handler(args)

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(0)
    except Exception as e:
        logger.error(f"Command failed: {e}")
        logger.opt(exception=True).debug("Full error details:")
        sys.exit(1)


def main() -> None:
    """Main entry point for the CLI."""
    try:
        asyncio.run(async_main())
    except KeyboardInterrupt:
        sys.exit(0)


if __name__ == "__main__":
    main()
