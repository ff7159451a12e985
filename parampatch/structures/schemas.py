# coding=utf-8
# SPDX-License-Identifier: Apache-2.0
"""
Pydantic models for patch specs and the HTTP API.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr

from ..models import Entity, ParamChange, Patch


class ParamChangeModel(BaseModel):
    """A `{key, expected, newValue}` record."""

    model_config = ConfigDict(populate_by_name=True)

    key: str = Field(..., min_length=1, description="Parameter name, e.g. env.ARTIFACTORY_PASSWORD")
    expected: str = Field(
        default="",
        description="Value the parameter must currently hold; empty if it may be absent",
    )
    new_value: str = Field(..., alias="newValue", description="Value to set")

    def to_change(self) -> ParamChange:
        return ParamChange(key=self.key, expected=self.expected, new_value=self.new_value)


class PatchSpecModel(BaseModel):
    """Patch-spec file body: target entity plus ordered changes."""

    entity_id: Optional[str] = Field(default=None, description="Entity the patch was generated for")
    changes: List[ParamChangeModel] = Field(default_factory=list)

    def to_patch(self) -> Patch:
        return Patch(
            changes=[change.to_change() for change in self.changes],
            entity_id=self.entity_id,
        )


class PatchRequest(PatchSpecModel):
    """Body of POST /v1/entities/{entity_id}/patch."""

    dry_run: bool = Field(default=False, description="Validate only, do not persist")


class EntityUpdateRequest(BaseModel):
    """Body of PUT /v1/entities/{entity_id}."""

    params: Dict[str, str] = Field(default_factory=dict)
    external_id: Optional[str] = None


class EntityResponse(BaseModel):
    """An entity and its parameters."""

    entity_id: str
    external_id: Optional[str] = None
    params: Dict[str, str]
    dry_run: bool = False

    @classmethod
    def from_entity(cls, entity: Entity, dry_run: bool = False) -> "EntityResponse":
        return cls(
            entity_id=entity.entity_id,
            external_id=entity.external_id,
            params=dict(entity.params),
            dry_run=dry_run,
        )


class EntityListResponse(BaseModel):
    object: str = "list"
    data: List[str]


class StoredEntityModel(BaseModel):
    """On-disk document of the json store."""

    entity_id: Optional[StrictStr] = None
    external_id: Optional[StrictStr] = None
    params: Dict[str, StrictStr] = Field(default_factory=dict)
