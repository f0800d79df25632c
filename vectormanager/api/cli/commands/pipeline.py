"""Pipeline commands module - preview, vectorize, query, list and purge over a chat file."""

import argparse
import sys
from pathlib import Path
from loguru import logger

from core.models import PipelineResult, PipelineStatus
from providers.host import JsonlChatHost
from registry import ProviderRegistry
from services.pipeline_coordinator import PipelineCoordinator
from ..utils.config_helpers import args_to_config
from ..utils.output import OutputFormatter, format_ingestion_stats
from ..utils.validation import exit_on_validation_error, validate_chat_file, validate_embedding_config


def build_coordinator(
    args: argparse.Namespace,
    formatter: OutputFormatter,
    require_embeddings: bool = False,
) -> PipelineCoordinator:
    """Load configuration and wire a coordinator over the chat file.

    Args:
        args: Parsed command-line arguments
        formatter: Output formatter used as the notification sink
        require_embeddings: Exit when embedding settings are incomplete

    Returns:
        Coordinator for the chat file
    """
    if not validate_chat_file(Path(args.chat)):
        exit_on_validation_error(f"Invalid chat file: {args.chat}")

    config = args_to_config(args)
    formatter.verbose_info(repr(config))

    if require_embeddings and not validate_embedding_config(config):
        exit_on_validation_error("Embedding endpoint is not fully configured")

    host = JsonlChatHost(args.chat, notify=formatter.notify)
    registry = ProviderRegistry(config)
    coordinator = registry.create_pipeline_coordinator(host)
    formatter.verbose_info(f"Collection: {coordinator.collection_id}")
    return coordinator


def _finish(result: PipelineResult, args: argparse.Namespace, formatter: OutputFormatter) -> None:
    """Print diagnostics and exit non-zero on failure."""
    formatter.events(result)
    if getattr(args, "json", False):
        formatter.json_output(result.to_dict())
    if result.status is PipelineStatus.ERROR:
        sys.exit(1)


async def preview_command(args: argparse.Namespace) -> None:
    """Execute the preview command.

    Args:
        args: Parsed command-line arguments
    """
    formatter = OutputFormatter(verbose=args.verbose)
    coordinator = build_coordinator(args, formatter)

    result = await coordinator.preview()
    if result.status is PipelineStatus.SUCCESS and not args.json:
        print(result.payload["text"])
    _finish(result, args, formatter)


async def vectorize_command(args: argparse.Namespace) -> None:
    """Execute the vectorize command.

    Args:
        args: Parsed command-line arguments
    """
    formatter = OutputFormatter(verbose=args.verbose)
    coordinator = build_coordinator(args, formatter, require_embeddings=True)

    layers = coordinator.config.vectorization.layer_range
    formatter.info(f"Vectorizing layers {layers} into {coordinator.collection_id}")
    result = await coordinator.vectorize()
    if result.status is PipelineStatus.SUCCESS:
        formatter.info(format_ingestion_stats(result.payload))
    _finish(result, args, formatter)


async def query_command(args: argparse.Namespace) -> None:
    """Execute the query command.

    Args:
        args: Parsed command-line arguments
    """
    formatter = OutputFormatter(verbose=args.verbose)
    coordinator = build_coordinator(args, formatter, require_embeddings=True)

    result = await coordinator.on_before_generation(query_text=args.text)
    if result.status is PipelineStatus.SUCCESS and not args.json:
        print(result.payload["text"])
    elif result.status is not PipelineStatus.ERROR:
        formatter.info(result.message)
    _finish(result, args, formatter)


async def list_command(args: argparse.Namespace) -> None:
    """Execute the list command.

    Args:
        args: Parsed command-line arguments
    """
    formatter = OutputFormatter(verbose=args.verbose)
    coordinator = build_coordinator(args, formatter)

    result = await coordinator.list_hashes()
    if result.ok and not args.json:
        formatter.info(result.message)
        for chunk_hash in result.payload.get("hashes", []):
            print(chunk_hash)
    _finish(result, args, formatter)


async def purge_command(args: argparse.Namespace) -> None:
    """Execute the purge command.

    Args:
        args: Parsed command-line arguments
    """
    formatter = OutputFormatter(verbose=args.verbose)
    coordinator = build_coordinator(args, formatter)

    if not args.yes:
        answer = input(f"Delete every record in {coordinator.collection_id}? [y/N] ")
        if answer.strip().lower() not in ("y", "yes"):
            logger.info("Purge cancelled")
            return

    result = await coordinator.purge()
    _finish(result, args, formatter)
