# coding=utf-8
# SPDX-License-Identifier: Apache-2.0
"""
Serialized load -> apply -> save of patches against the configured store.

PatchApplier itself is synchronous and holds no state; concurrent HTTP
requests for the same entity are serialized here with one lock per entity.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Optional

from ..config import PARAMPATCH_STRICT_TARGET
from ..models import Entity, Patch
from ..stores import get_store
from .applier import PatchApplier

logger = logging.getLogger(__name__)

_entity_locks: Dict[str, asyncio.Lock] = {}
_entity_lock_users: Dict[str, int] = {}
_entity_locks_loop: Optional[asyncio.AbstractEventLoop] = None


def get_entity_lock(entity_id: str) -> asyncio.Lock:
    """Get the loop-bound lock guarding one entity."""
    global _entity_locks_loop

    loop = asyncio.get_running_loop()
    if _entity_locks_loop is not loop:
        _entity_locks.clear()
        _entity_lock_users.clear()
        _entity_locks_loop = loop

    lock = _entity_locks.get(entity_id)
    if lock is None:
        lock = _entity_locks[entity_id] = asyncio.Lock()
    return lock


@asynccontextmanager
async def hold_entity_lock(entity_id: str) -> AsyncIterator[None]:
    """Hold the lock for one entity, dropping it once nobody holds or awaits it."""
    lock = get_entity_lock(entity_id)
    _entity_lock_users[entity_id] = _entity_lock_users.get(entity_id, 0) + 1
    try:
        async with lock:
            yield
    finally:
        users = _entity_lock_users.get(entity_id, 1) - 1
        if users > 0:
            _entity_lock_users[entity_id] = users
        else:
            _entity_lock_users.pop(entity_id, None)
            if _entity_locks.get(entity_id) is lock:
                del _entity_locks[entity_id]


async def submit_patch(
    entity_id: str,
    patch: Patch,
    *,
    dry_run: bool = False,
    applier: Optional[PatchApplier] = None,
) -> Entity:
    """
    Apply a patch to a stored entity and persist the result.

    Args:
        entity_id: Entity to patch
        patch: Changes to apply
        dry_run: Validate against the stored entity without saving
        applier: Applier to use (defaults to one honoring PARAMPATCH_STRICT_TARGET)

    Returns:
        The patched entity (or what it would look like, for a dry run)

    Raises:
        EntityNotFoundError: The entity does not exist
        PatchError: The patch does not match the stored entity
        PatchSpecError: The patch targets another entity
    """
    if applier is None:
        applier = PatchApplier(strict_target=PARAMPATCH_STRICT_TARGET)

    store = get_store()
    async with hold_entity_lock(entity_id):
        entity = store.load(entity_id)

        if dry_run:
            entity.params = applier.check(entity, patch)
            logger.info(f"Dry run of {len(patch)} change(s) on {entity_id} succeeded")
            return entity

        applier.apply(entity, patch)
        store.save(entity)

    return entity


def reset_entity_locks() -> None:
    """Drop all entity locks (useful for testing)."""
    global _entity_locks_loop
    _entity_locks.clear()
    _entity_lock_users.clear()
    _entity_locks_loop = None
