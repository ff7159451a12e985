# coding=utf-8
# SPDX-License-Identifier: Apache-2.0
"""
param-patch: compare-and-set patches for CI project parameters.
"""

from .errors import MissingKey, PatchError, ValueMismatch
from .models import Entity, ParamChange, Patch
from .services.applier import PatchApplier

__version__ = "0.1.0"

__all__ = [
    "Entity",
    "MissingKey",
    "ParamChange",
    "Patch",
    "PatchApplier",
    "PatchError",
    "ValueMismatch",
]
