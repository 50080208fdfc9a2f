# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""Logging setup for Spindle entry points.

The level comes from the SPINDLE_LOG environment variable
(debug, info, warn, error; default info).
"""

import logging
import os
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_SPINDLE_TO_PY_LEVEL = {
    "trace": logging.DEBUG,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}

_configured = False


def map_spindle_log_level(spindle_log: str) -> int:
    """Map a SPINDLE_LOG value to a python logging level, defaulting to INFO."""
    return _SPINDLE_TO_PY_LEVEL.get(spindle_log.strip().lower(), logging.INFO)


def configure_spindle_logging(level: Optional[str] = None) -> None:
    """Install a stderr handler on the root logger once per process."""
    global _configured
    if _configured:
        return

    spindle_log = level if level is not None else os.environ.get("SPINDLE_LOG", "info")
    logging.basicConfig(
        level=map_spindle_log_level(spindle_log),
        format=LOG_FORMAT,
        stream=sys.stderr,
    )
    _configured = True
