# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""Event stream consumed by the resolution engine.

A tokenizer turns a command line into a sequence of these events: one
OptionEvent per option occurrence, then a PositionalStart carrying the
command to launch, then EndOfInput.
"""

from dataclasses import dataclass
from typing import Optional, Tuple, Union


@dataclass(frozen=True)
class OptionEvent:
    """One option occurrence. ``argument`` is None for presence flags."""

    key: str
    argument: Optional[str] = None


@dataclass(frozen=True)
class PositionalStart:
    """Start of the trailing command; ``args`` is captured verbatim."""

    args: Tuple[str, ...] = ()


@dataclass(frozen=True)
class EndOfInput:
    pass


END_OF_INPUT = EndOfInput()

Event = Union[OptionEvent, PositionalStart, EndOfInput]
