# coding=utf-8
# SPDX-License-Identifier: Apache-2.0
"""
In-memory parameter store.
"""

from typing import Dict, List

from ..errors import EntityNotFoundError
from ..models import Entity
from .base import ParameterStore


class MemoryParameterStore(ParameterStore):
    """Process-local store. Entities are copied in and out."""

    def __init__(self):
        self._entities: Dict[str, Entity] = {}

    def load(self, entity_id: str) -> Entity:
        entity = self._entities.get(entity_id)
        if entity is None:
            raise EntityNotFoundError(entity_id)
        return entity.copy()

    def save(self, entity: Entity) -> None:
        self._entities[entity.entity_id] = entity.copy()

    def list_entities(self) -> List[str]:
        return sorted(self._entities)

    def exists(self, entity_id: str) -> bool:
        return entity_id in self._entities

    def get_store_name(self) -> str:
        return "memory"
