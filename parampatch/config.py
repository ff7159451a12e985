# coding=utf-8
# SPDX-License-Identifier: Apache-2.0
"""
Configuration module for param-patch.

This module centralizes the configuration options for the patch CLI and
the HTTP server, including store selection, logging and server binding.
"""

import os

# ============================================================================
# Store Selection
# ============================================================================

PARAMPATCH_STORE = os.getenv("PARAMPATCH_STORE", "json")
"""
Parameter store to load entities from and persist them to.
Options: 'json', 'memory'
- 'json': One JSON file per entity under PARAMPATCH_STORE_DIR (default)
- 'memory': Process-local store, lost on exit (tests, experiments)
"""

PARAMPATCH_STORE_DIR = os.getenv("PARAMPATCH_STORE_DIR", "./entities")
"""
Directory holding `<entity_id>.json` files for the json store.
"""

# ============================================================================
# Patch Behaviour
# ============================================================================

PARAMPATCH_STRICT_TARGET = os.getenv("PARAMPATCH_STRICT_TARGET", "true").lower() == "true"
"""
Reject patches whose declared target entity differs from the entity
they are applied to.
"""

# ============================================================================
# Logging
# ============================================================================

PARAMPATCH_LOG_LEVEL = os.getenv("PARAMPATCH_LOG_LEVEL", "INFO").upper()
"""
Log level for the CLI and the server.
Options: 'DEBUG', 'INFO', 'WARNING', 'ERROR'
Parameter values are only logged at DEBUG.
"""

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# ============================================================================
# Server Settings
# ============================================================================

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8890"))
WORKERS = int(os.getenv("WORKERS", "1"))
"""
Keep WORKERS at 1 with the memory store: each worker holds its own copy.
"""
