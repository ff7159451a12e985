# coding=utf-8
# SPDX-License-Identifier: Apache-2.0
"""
Parameter store implementations.
"""

from .base import ParameterStore
from .factory import get_store, reset_store

__all__ = ["ParameterStore", "get_store", "reset_store"]
