# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""Dump a resolved configuration to a file for post-mortem inspection."""

import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict, Type

import yaml

logger = logging.getLogger(__name__)

_ENCODERS: Dict[Type, Callable[[Any], Dict[str, Any]]] = {}


def register_encoder(cls: Type):
    """Register a function converting instances of ``cls`` to a plain dict."""

    def decorator(fn: Callable[[Any], Dict[str, Any]]):
        _ENCODERS[cls] = fn
        return fn

    return decorator


def encode_config(config: Any) -> Dict[str, Any]:
    for cls in type(config).__mro__:
        if cls in _ENCODERS:
            return _ENCODERS[cls](config)
    raise TypeError(f"No config encoder registered for {type(config).__name__}")


def dump_config(config: Any, path: str) -> Path:
    """
    Write ``config`` to ``path``.

    Files ending in .json are written as JSON, anything else as YAML.
    """
    target = Path(path).expanduser()
    data = encode_config(config)
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("w") as f:
        if target.suffix == ".json":
            json.dump(data, f, indent=2)
            f.write("\n")
        else:
            yaml.safe_dump(data, f, sort_keys=False)
    logger.info(f"Dumped resolved configuration to {target}")
    return target
