# coding=utf-8
# SPDX-License-Identifier: Apache-2.0
"""
Router for reading entities and applying patches to them.
"""

import logging

from fastapi import APIRouter, HTTPException

from ..errors import EntityNotFoundError, PatchError, PatchSpecError, StoreCorruptError
from ..models import Entity
from ..services.patch_service import submit_patch
from ..stores import get_store
from ..structures.schemas import (
    EntityListResponse,
    EntityResponse,
    EntityUpdateRequest,
    PatchRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["Entities"],
    responses={404: {"description": "Not found"}},
)


def _not_found(e: EntityNotFoundError) -> HTTPException:
    return HTTPException(
        status_code=404,
        detail={**e.to_dict(), "type": "invalid_request_error"},
    )


def _store_corrupt(e: StoreCorruptError) -> HTTPException:
    logger.error(f"{e}")
    return HTTPException(
        status_code=500,
        detail={**e.to_dict(), "type": "server_error"},
    )


def _invalid_entity_id(entity_id: str, e: ValueError) -> HTTPException:
    return HTTPException(
        status_code=400,
        detail={
            "error": "invalid_entity_id",
            "message": str(e),
            "entity_id": entity_id,
            "type": "invalid_request_error",
        },
    )


@router.get("/entities", response_model=EntityListResponse)
async def list_entities():
    """List the ids of all stored entities."""
    return EntityListResponse(data=get_store().list_entities())


@router.get("/entities/{entity_id}", response_model=EntityResponse)
async def get_entity(entity_id: str):
    """Get an entity and its parameters."""
    try:
        entity = get_store().load(entity_id)
    except EntityNotFoundError as e:
        raise _not_found(e)
    except StoreCorruptError as e:
        raise _store_corrupt(e)
    except ValueError as e:
        raise _invalid_entity_id(entity_id, e)

    return EntityResponse.from_entity(entity)


@router.put("/entities/{entity_id}", response_model=EntityResponse)
async def put_entity(entity_id: str, request: EntityUpdateRequest):
    """Create or replace an entity."""
    entity = Entity(entity_id=entity_id, params=dict(request.params), external_id=request.external_id)
    try:
        get_store().save(entity)
    except ValueError as e:
        raise _invalid_entity_id(entity_id, e)

    logger.info(f"Stored entity {entity_id} with {len(entity.params)} parameter(s)")
    return EntityResponse.from_entity(entity)


@router.post("/entities/{entity_id}/patch", response_model=EntityResponse)
async def patch_entity(entity_id: str, request: PatchRequest):
    """
    Apply a compare-and-set patch to an entity.

    Every change must find its `expected` value in place, otherwise nothing
    is changed and 409 is returned with the offending key and values.
    """
    patch = request.to_patch()

    try:
        entity = await submit_patch(entity_id, patch, dry_run=request.dry_run)
    except EntityNotFoundError as e:
        raise _not_found(e)
    except PatchError as e:
        raise HTTPException(
            status_code=409,
            detail={**e.to_dict(), "type": "patch_error"},
        )
    except PatchSpecError as e:
        raise HTTPException(
            status_code=400,
            detail={**e.to_dict(), "type": "invalid_request_error"},
        )
    except StoreCorruptError as e:
        raise _store_corrupt(e)
    except ValueError as e:
        raise _invalid_entity_id(entity_id, e)

    return EntityResponse.from_entity(entity, dry_run=request.dry_run)
