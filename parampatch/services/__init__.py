# coding=utf-8
# SPDX-License-Identifier: Apache-2.0
"""
Patch application, patch-spec loading and store orchestration.
"""

from .applier import PatchApplier
from .patch_spec import load_patch_spec, parse_patch_records, parse_patch_script

__all__ = ["PatchApplier", "load_patch_spec", "parse_patch_records", "parse_patch_script"]
