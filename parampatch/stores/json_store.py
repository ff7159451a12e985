# coding=utf-8
# SPDX-License-Identifier: Apache-2.0
"""
JSON file parameter store: one `<entity_id>.json` per entity.
"""

import json
import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError

from ..errors import EntityNotFoundError, StoreCorruptError
from ..models import Entity
from ..structures.schemas import StoredEntityModel
from .base import ParameterStore

logger = logging.getLogger(__name__)

_SAFE_ID_RE = re.compile(r"^[A-Za-z0-9_\-][A-Za-z0-9_.\-]*$")


class JSONParameterStore(ParameterStore):
    """
    Stores each entity as a JSON document:

        {"entity_id": "...", "external_id": "...", "params": {"env.X": "..."}}
    """

    def __init__(self, store_dir: Optional[Union[str, Path]] = None):
        if store_dir is None:
            store_dir = os.getenv("PARAMPATCH_STORE_DIR", "./entities")
        self.store_dir = Path(store_dir)

    def _path_for(self, entity_id: str) -> Path:
        if not _SAFE_ID_RE.match(entity_id):
            raise ValueError(f"Entity id {entity_id!r} is not usable as a file name")
        return self.store_dir / f"{entity_id}.json"

    def load(self, entity_id: str) -> Entity:
        path = self._path_for(entity_id)
        if not path.exists():
            raise EntityNotFoundError(entity_id)

        try:
            with open(path, "r", encoding="utf-8") as f:
                doc = StoredEntityModel.model_validate(json.load(f))
        except json.JSONDecodeError as e:
            raise StoreCorruptError(entity_id, f"invalid JSON in {path}: {e}") from e
        except ValidationError as e:
            raise StoreCorruptError(entity_id, f"unexpected document shape in {path}: {e}") from e

        return Entity(
            entity_id=doc.entity_id or entity_id,
            params=dict(doc.params),
            external_id=doc.external_id,
        )

    def save(self, entity: Entity) -> None:
        path = self._path_for(entity.entity_id)
        self.store_dir.mkdir(parents=True, exist_ok=True)

        data: Dict[str, Any] = {
            "entity_id": entity.entity_id,
            "external_id": entity.external_id,
            "params": dict(sorted(entity.params.items())),
        }

        # Write to a sibling temp file and rename so readers never see half a file
        fd, tmp_name = tempfile.mkstemp(prefix=f".{entity.entity_id}.", suffix=".tmp", dir=self.store_dir)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
                f.write("\n")
            os.replace(tmp_name, path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

        logger.debug(f"Saved entity {entity.entity_id} to {path}")

    def list_entities(self) -> List[str]:
        if not self.store_dir.is_dir():
            return []
        return sorted(p.stem for p in self.store_dir.glob("*.json"))

    def exists(self, entity_id: str) -> bool:
        return self._path_for(entity_id).exists()

    def get_store_name(self) -> str:
        return "json"

    def get_store_info(self) -> Dict[str, Any]:
        return {"name": self.get_store_name(), "store_dir": str(self.store_dir.resolve())}
