"""
Configuration helper utilities for CLI commands.

This module bridges CLI arguments with the unified configuration system.
"""

import argparse
from pathlib import Path
from typing import Any, Dict

from vectormanager.core.config import VectorManagerConfig


def args_to_config(args: argparse.Namespace, project_dir: Path | None = None) -> VectorManagerConfig:
    """
    Convert CLI arguments to unified configuration.

    Args:
        args: Parsed CLI arguments
        project_dir: Project directory for config file loading

    Returns:
        VectorManagerConfig instance
    """
    config_overrides: Dict[str, Any] = {}

    embedding_config = {}
    if getattr(args, 'endpoint', None):
        embedding_config['endpoint'] = args.endpoint
    if getattr(args, 'custom_url', None):
        embedding_config['custom_url'] = args.custom_url
    if getattr(args, 'model', None):
        embedding_config['model'] = args.model
    if getattr(args, 'api_key', None):
        embedding_config['api_key'] = args.api_key
    if getattr(args, 'batch_size', None):
        embedding_config['batch_size'] = args.batch_size
    if getattr(args, 'no_embeddings', False):
        embedding_config['enabled'] = False

    if embedding_config:
        config_overrides['embedding'] = embedding_config

    vectorization_config = {}
    if getattr(args, 'layers', None):
        vectorization_config['layer_range'] = args.layers

    if vectorization_config:
        config_overrides['vectorization'] = vectorization_config

    store_config = {}
    if getattr(args, 'store_path', None):
        store_config['kind'] = 'local'
        store_config['path'] = str(args.store_path)
    if getattr(args, 'host_url', None):
        store_config['kind'] = 'host'
        store_config['base_url'] = args.host_url

    if store_config:
        config_overrides['vector_store'] = store_config

    retrieval_config = {}
    if getattr(args, 'threshold', None) is not None:
        retrieval_config['score_threshold'] = args.threshold
    if getattr(args, 'max_results', None):
        retrieval_config['max_results'] = args.max_results

    if retrieval_config:
        config_overrides['retrieval'] = retrieval_config

    if getattr(args, 'verbose', False):
        config_overrides['debug'] = True

    return VectorManagerConfig.load_hierarchical(
        project_dir=project_dir,
        config_file=getattr(args, 'config', None),
        **config_overrides
    )
