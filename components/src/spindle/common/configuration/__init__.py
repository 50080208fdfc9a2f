# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""
ArgGroup-based configuration system for Spindle.

This module provides the building blocks the launcher uses to expose its options:
- Each ArgGroup owns one option group and registers it under its own heading
- Options record events in command-line order rather than storing values
- Finalized configurations are frozen ConfigBase instances
"""

from .arg_group import ArgGroup
from .config_base import ConfigBase, FrozenConfigError
from .utils import (
    EVENTS_DEST,
    RecordOptionEvent,
    add_argument,
    add_flag_argument,
    env_or_default,
)

__all__ = [
    # Base classes
    "ArgGroup",
    "ConfigBase",
    "FrozenConfigError",
    # Utilities
    "EVENTS_DEST",
    "RecordOptionEvent",
    "add_argument",
    "add_flag_argument",
    "env_or_default",
]
