# coding=utf-8
# SPDX-License-Identifier: Apache-2.0
"""
Base class for parameter stores.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List

from ..models import Entity


class ParameterStore(ABC):
    """Abstract base class for places entities are loaded from and persisted to."""

    @abstractmethod
    def load(self, entity_id: str) -> Entity:
        """
        Load an entity.

        Args:
            entity_id: Opaque entity identifier

        Returns:
            A fresh Entity; mutating it does not affect the store until saved

        Raises:
            EntityNotFoundError: No entity with this id exists
        """
        pass

    @abstractmethod
    def save(self, entity: Entity) -> None:
        """Create or replace an entity."""
        pass

    @abstractmethod
    def list_entities(self) -> List[str]:
        """Return the ids of all stored entities, sorted."""
        pass

    @abstractmethod
    def get_store_name(self) -> str:
        """Return the name of this store."""
        pass

    def exists(self, entity_id: str) -> bool:
        return entity_id in self.list_entities()

    def get_store_info(self) -> Dict[str, Any]:
        """Return details about the store for the health endpoint."""
        return {"name": self.get_store_name()}
