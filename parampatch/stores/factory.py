# coding=utf-8
# SPDX-License-Identifier: Apache-2.0
"""
Factory for creating parameter store instances.
"""

import os
import logging
from typing import Optional

from .base import ParameterStore
from .json_store import JSONParameterStore
from .memory_store import MemoryParameterStore

logger = logging.getLogger(__name__)

# Global store instance
_store_instance: Optional[ParameterStore] = None


def create_store(store_type: str, store_dir: Optional[str] = None) -> ParameterStore:
    """
    Create a new store of the given type.

    Args:
        store_type: "json" or "memory"
        store_dir: Directory for the json store (defaults to PARAMPATCH_STORE_DIR)

    Returns:
        ParameterStore instance
    """
    store_type = store_type.lower()

    if store_type == "json":
        return JSONParameterStore(store_dir)
    elif store_type == "memory":
        return MemoryParameterStore()

    logger.error(f"Unknown store type: {store_type}")
    raise ValueError(
        f"Unknown PARAMPATCH_STORE: {store_type}. "
        f"Supported values: 'json', 'memory'"
    )


def get_store() -> ParameterStore:
    """
    Get or create the global parameter store instance.

    The store is selected based on the PARAMPATCH_STORE environment variable:
    - "json" (default): One JSON file per entity under PARAMPATCH_STORE_DIR
    - "memory": Process-local store

    Returns:
        ParameterStore instance
    """
    global _store_instance

    if _store_instance is not None:
        return _store_instance

    store_type = os.getenv("PARAMPATCH_STORE", "json")
    _store_instance = create_store(store_type)
    logger.info(f"Using {_store_instance.get_store_name()} parameter store")

    return _store_instance


def reset_store() -> None:
    """Reset the global store instance (useful for testing)."""
    global _store_instance
    _store_instance = None
