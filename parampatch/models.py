# coding=utf-8
# SPDX-License-Identifier: Apache-2.0
"""
Value types for entities and the patches applied to them.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional


@dataclass
class Entity:
    """A configuration object owning a map of string parameters."""

    entity_id: str
    params: Dict[str, str] = field(default_factory=dict)
    external_id: Optional[str] = None

    def copy(self) -> "Entity":
        return Entity(
            entity_id=self.entity_id,
            params=dict(self.params),
            external_id=self.external_id,
        )


@dataclass(frozen=True)
class ParamChange:
    """One key's expected -> new value transition."""

    key: str
    expected: str
    new_value: str


@dataclass
class Patch:
    """Ordered sequence of parameter changes, optionally bound to a target entity."""

    changes: List[ParamChange] = field(default_factory=list)
    entity_id: Optional[str] = None

    def __iter__(self) -> Iterator[ParamChange]:
        return iter(self.changes)

    def __len__(self) -> int:
        return len(self.changes)

    def keys(self) -> List[str]:
        return [change.key for change in self.changes]
