# coding=utf-8
# SPDX-License-Identifier: Apache-2.0
"""
Exception classes used across param-patch.
"""

from typing import Any, Dict, Optional


class ParamPatchError(Exception):
    """Base class for all project-specific errors."""

    error_code = "error"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Converts the exception to a dictionary for structured logging."""
        return {
            "error": self.error_code,
            "message": str(self),
            **self.details,
        }


class PatchError(ParamPatchError):
    """A change in a patch does not match the entity's current state."""

    error_code = "patch_error"

    def __init__(self, message: str, key: str, expected: str, actual: Optional[str]):
        super().__init__(message, {"key": key, "expected": expected, "actual": actual})
        self.key = key
        self.expected = expected
        self.actual = actual


class MissingKey(PatchError):
    """The patch expects a value for a key the entity does not have."""

    error_code = "missing_key"

    def __init__(self, key: str, expected: str):
        super().__init__(
            f"Parameter '{key}' is missing (expected '{expected}')",
            key=key,
            expected=expected,
            actual=None,
        )


class ValueMismatch(PatchError):
    """The entity's current value differs from the patch's expected value."""

    error_code = "value_mismatch"

    def __init__(self, key: str, expected: str, actual: str):
        super().__init__(
            f"Parameter '{key}' is '{actual}', expected '{expected}'",
            key=key,
            expected=expected,
            actual=actual,
        )


class PatchSpecError(ParamPatchError):
    """A patch spec is malformed or targets another entity."""

    error_code = "invalid_patch_spec"


class EntityNotFoundError(ParamPatchError):
    """The requested entity does not exist in the store."""

    error_code = "entity_not_found"

    def __init__(self, entity_id: str):
        super().__init__(f"Entity '{entity_id}' not found", {"entity_id": entity_id})
        self.entity_id = entity_id


class StoreCorruptError(ParamPatchError):
    """A stored entity document cannot be read back as an entity."""

    error_code = "store_corrupt"

    def __init__(self, entity_id: str, reason: str):
        super().__init__(f"Stored entity '{entity_id}' is unreadable: {reason}", {"entity_id": entity_id})
        self.entity_id = entity_id
