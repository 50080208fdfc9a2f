# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""Constants for the Spindle launcher configuration.

This module defines the option codes, option groups and the selector enums
that make up a finalized launch configuration.
"""

from enum import Enum, IntFlag


class OptionGroup(Enum):
    """Option groups, each with its own combination semantics."""

    RELOC = "reloc"
    PUSHPULL = "pushpull"
    NETWORK = "network"
    SECURITY = "security"
    MISC = "misc"
    NONE = "none"


class ValueKind(Enum):
    """How an option's argument is interpreted."""

    BOOL_TOGGLE = "bool_toggle"
    PRESENCE_FLAG = "presence_flag"
    SCALAR_STRING = "scalar_string"
    SCALAR_INT = "scalar_int"
    MODE_SELECTOR = "mode_selector"


class OptionCode(Enum):
    """Codes accumulated into the enabled/disabled sets."""

    RELOCAOUT = "relocaout"
    RELOCSO = "relocso"
    RELOCEXEC = "relocexec"
    RELOCPY = "relocpy"
    FOLLOWFORK = "followfork"
    PUSH = "push"
    PULL = "pull"
    COBO = "cobo"
    STRIP = "strip"
    DEBUG = "debug"
    PRELOAD = "preload"
    NOCLEAN = "noclean"


class NetworkMode(Enum):
    """Transport topology used to distribute relocated objects."""

    COBO = "cobo"


class TransferMode(Enum):
    """Distribution strategy for loaded objects."""

    PUSH = "push"
    PULL = "pull"


class SecurityModel(Enum):
    """Authentication mechanism between launcher and servers."""

    MUNGE = "munge"
    KEYLMON = "lmon"
    KEYFILE = "keyfile"
    NULL = "none"

    @classmethod
    def from_name(cls, name: str) -> "SecurityModel":
        """Look up a model by its option suffix (e.g. "keyfile")."""
        for model in cls:
            if model.value == name:
                return model
        raise ValueError(
            f"Unknown security model '{name}'. "
            f"Valid options are: {', '.join(m.value for m in cls)}"
        )


class LaunchFlag(IntFlag):
    """Single flag word handed to launch consumers that expect a bitmask."""

    RELOCAOUT = 1 << 0
    RELOCSO = 1 << 1
    RELOCEXEC = 1 << 2
    RELOCPY = 1 << 3
    FOLLOWFORK = 1 << 4
    REMAPEXEC = 1 << 5
    PUSH = 1 << 6
    PULL = 1 << 7
    COBO = 1 << 8
    STRIP = 1 << 9
    DEBUG = 1 << 10
    PRELOAD = 1 << 11
    NOCLEAN = 1 << 12
    NOMPI = 1 << 13
    NOHIDE = 1 << 14
    SEC_MUNGE = 1 << 15
    SEC_KEYLMON = 1 << 16
    SEC_KEYFILE = 1 << 17
    SEC_NULL = 1 << 18


RELOC_CODES = frozenset(
    {
        OptionCode.RELOCAOUT,
        OptionCode.RELOCSO,
        OptionCode.RELOCEXEC,
        OptionCode.RELOCPY,
        OptionCode.FOLLOWFORK,
    }
)
NETWORK_CODES = frozenset({OptionCode.COBO})
PUSHPULL_CODES = frozenset({OptionCode.PUSH, OptionCode.PULL})
MISC_CODES = frozenset(
    {OptionCode.STRIP, OptionCode.DEBUG, OptionCode.PRELOAD, OptionCode.NOCLEAN}
)

DEFAULT_RELOC_CODES = RELOC_CODES
DEFAULT_NETWORK_CODE = OptionCode.COBO
DEFAULT_PUSHPULL_CODE = OptionCode.PUSH
DEFAULT_MISC_CODES = frozenset({OptionCode.STRIP})

# Compiled-in build defaults, overridable through the environment.
DEFAULT_PORT = 21940
DEFAULT_LOCATION = "$TMPDIR"
DEFAULT_PYTHON_PREFIX = "/usr"
DEFAULT_SECURITY_MODELS = ("munge", "keyfile", "none")

# Order in which a default security model is picked from the compiled set.
SECURITY_DEFAULT_PRIORITY = (
    SecurityModel.MUNGE,
    SecurityModel.KEYFILE,
    SecurityModel.KEYLMON,
    SecurityModel.NULL,
)

YES_VALUES = ("yes", "y")
NO_VALUES = ("no", "n")
YESNO = "yes|no"
