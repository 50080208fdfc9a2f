# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""
Spindle launcher configuration.

Resolves command-line option events into one frozen LauncherConfig:
    - registry: the static option table
    - resolver: accumulate events, then finalize once
    - args: argparse front end producing the event stream
"""

from .config import LauncherConfig, LauncherDefaults, MiscOptions, RelocationOptions
from .constants import NetworkMode, SecurityModel, TransferMode
from .errors import (
    ConfigConflict,
    ExclusiveGroupViolation,
    InvalidScalarValue,
    MissingRequiredArgument,
    NoSecurityModelError,
    SpindleConfigError,
    UnknownOptionError,
)
from .events import END_OF_INPUT, EndOfInput, OptionEvent, PositionalStart
from .prefixes import merge_python_prefixes
from .registry import OptionDescriptor, OptionRegistry, build_registry
from .resolver import ResolutionEngine, finalize
from .validators import location_for, parse_port

__all__ = [
    # Configuration
    "LauncherConfig",
    "LauncherDefaults",
    "MiscOptions",
    "RelocationOptions",
    "NetworkMode",
    "SecurityModel",
    "TransferMode",
    # Errors
    "ConfigConflict",
    "ExclusiveGroupViolation",
    "InvalidScalarValue",
    "MissingRequiredArgument",
    "NoSecurityModelError",
    "SpindleConfigError",
    "UnknownOptionError",
    # Events
    "END_OF_INPUT",
    "EndOfInput",
    "OptionEvent",
    "PositionalStart",
    # Resolution
    "OptionDescriptor",
    "OptionRegistry",
    "ResolutionEngine",
    "build_registry",
    "finalize",
    "merge_python_prefixes",
    "location_for",
    "parse_port",
]
