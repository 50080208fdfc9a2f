# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""Validation of scalar option values."""

from typing import Optional

from spindle.launcher.constants import NO_VALUES, YES_VALUES
from spindle.launcher.errors import InvalidScalarValue

MAX_PORT = 65535


def parse_port(value: str) -> int:
    """Parse a server port.

    Raises:
        InvalidScalarValue: If the value is not an integer, is zero, or is
            outside the TCP port range.
    """
    try:
        port = int(value.strip())
    except (AttributeError, ValueError):
        raise InvalidScalarValue(f"Port must be a number, got '{value}'") from None
    if port == 0:
        raise InvalidScalarValue("Port was given a 0 value")
    if port < 0 or port > MAX_PORT:
        raise InvalidScalarValue(f"Port {port} is outside the range 1-{MAX_PORT}")
    return port


def parse_yes_no(name: str, value: Optional[str]) -> bool:
    """Return True for "yes"/"y" and False for "no"/"n"."""
    if value in YES_VALUES:
        return True
    if value in NO_VALUES:
        return False
    raise InvalidScalarValue(f"{name} must be 'yes' or 'no'")


def location_for(root: str, number: int) -> str:
    """Per-instance server directory, e.g. ``/tmp/spindle/spindle.3``."""
    return f"{root}/spindle.{number}"
