# coding=utf-8
# SPDX-License-Identifier: Apache-2.0
"""
Compare-and-set application of patches to entities.
"""

import logging
from typing import Dict

from ..errors import MissingKey, PatchSpecError, ValueMismatch
from ..models import Entity, Patch

logger = logging.getLogger(__name__)


class PatchApplier:
    """
    Applies a patch to an entity's parameters, all or nothing.

    Every change is checked against the value left by the changes before
    it. The entity is only touched once the whole patch has validated.
    """

    def __init__(self, strict_target: bool = True):
        self.strict_target = strict_target

    def check(self, entity: Entity, patch: Patch) -> Dict[str, str]:
        """
        Validate a patch against an entity without mutating it.

        Args:
            entity: Entity the patch would be applied to
            patch: Patch to validate

        Returns:
            The parameter map the entity would have after applying the patch

        Raises:
            MissingKey: A change expects a value for an absent key
            ValueMismatch: A change expects a value other than the current one
            PatchSpecError: The patch targets another entity (strict mode)
        """
        if self.strict_target and patch.entity_id and patch.entity_id != entity.entity_id:
            raise PatchSpecError(
                f"Patch targets entity '{patch.entity_id}', not '{entity.entity_id}'",
                {"entity_id": entity.entity_id, "target": patch.entity_id},
            )

        params = dict(entity.params)
        for change in patch:
            actual = params.get(change.key)
            if actual is None:
                if change.expected:
                    raise MissingKey(change.key, change.expected)
            elif actual != change.expected:
                raise ValueMismatch(change.key, change.expected, actual)
            params[change.key] = change.new_value
            logger.debug(f"{entity.entity_id}: {change.key} {actual!r} -> {change.new_value!r}")
        return params

    def apply(self, entity: Entity, patch: Patch) -> Entity:
        """
        Apply a patch to an entity in place.

        Returns:
            The same entity, with every change committed

        Raises:
            PatchError: On the first change that does not match; the entity
                is left unchanged
        """
        try:
            params = self.check(entity, patch)
        except MissingKey as e:
            logger.warning(f"Patch rejected for {entity.entity_id}: missing parameter '{e.key}'")
            raise
        except ValueMismatch as e:
            logger.warning(f"Patch rejected for {entity.entity_id}: parameter '{e.key}' changed")
            raise

        entity.params.clear()
        entity.params.update(params)
        logger.info(f"Applied {len(patch)} change(s) to {entity.entity_id}: {', '.join(patch.keys())}")
        return entity
