# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""Finalized launch configuration and the build defaults it is resolved against."""

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional, Tuple

from spindle.common.configuration.config_base import ConfigBase
from spindle.common.configuration.utils import env_or_default
from spindle.launcher.constants import (
    DEFAULT_LOCATION,
    DEFAULT_PORT,
    DEFAULT_PYTHON_PREFIX,
    DEFAULT_SECURITY_MODELS,
    LaunchFlag,
    NetworkMode,
    SecurityModel,
    TransferMode,
)
from spindle.launcher.errors import InvalidScalarValue
from spindle.launcher.validators import location_for, parse_port


@dataclass(frozen=True)
class RelocationOptions:
    """Which categories of objects are relocated through Spindle."""

    relocate_aout: bool = True
    relocate_libs: bool = True
    relocate_exec: bool = True
    relocate_python: bool = True
    follow_fork: bool = True
    # Derived: exec targets are remapped to their original paths (debug mode)
    remap_exec: bool = False


@dataclass(frozen=True)
class MiscOptions:
    strip: bool = True
    debug: bool = False
    preload: bool = False
    noclean: bool = False


@dataclass(frozen=True)
class LauncherDefaults:
    """
    Build defaults the resolver falls back to.

    ``from_env`` reads each default from its SPINDLE_* environment variable,
    falling back to the compiled-in constant.
    """

    port: int = DEFAULT_PORT
    location: str = DEFAULT_LOCATION
    python_prefix: str = DEFAULT_PYTHON_PREFIX
    security_models: Tuple[SecurityModel, ...] = tuple(
        SecurityModel.from_name(name) for name in DEFAULT_SECURITY_MODELS
    )
    usage_logging_file: Optional[str] = None

    @property
    def logging_enabled(self) -> bool:
        return self.usage_logging_file is not None

    @classmethod
    def from_env(cls) -> "LauncherDefaults":
        port = parse_port(env_or_default("SPINDLE_PORT", str(DEFAULT_PORT)))
        names = env_or_default("SPINDLE_SECURITY_MODELS", DEFAULT_SECURITY_MODELS)
        try:
            models = tuple(SecurityModel.from_name(name.lower()) for name in names)
        except ValueError as exc:
            raise InvalidScalarValue(f"SPINDLE_SECURITY_MODELS: {exc}") from exc
        return cls(
            port=port,
            location=env_or_default("SPINDLE_LOC", DEFAULT_LOCATION),
            python_prefix=env_or_default("SPINDLE_PYTHON_PREFIX", DEFAULT_PYTHON_PREFIX),
            security_models=models,
            usage_logging_file=env_or_default("SPINDLE_USAGE_LOGGING_FILE", None),
        )


class LauncherConfig(ConfigBase):
    """Resolved launch configuration. Built once by the resolver, then read-only."""

    reloc: RelocationOptions
    network_mode: NetworkMode
    transfer_mode: TransferMode
    security_model: SecurityModel
    misc: MiscOptions
    port: int
    location_root: str
    trailing_args: Tuple[str, ...]

    debug_override: bool = False
    use_mpi: bool = True
    hide_fds: bool = True
    logging_enabled: bool = False
    preload_file: Optional[str] = None
    python_prefixes: str = ""

    def location(self, number: int) -> str:
        """Directory used by server instance ``number``."""
        return location_for(self.location_root, number)

    @property
    def command(self) -> str:
        return self.trailing_args[0]

    def option_bits(self) -> LaunchFlag:
        """Collapse the relocation, distribution, security and misc choices into one flag word."""
        bits = LaunchFlag(0)
        reloc_flags = {
            "relocate_aout": LaunchFlag.RELOCAOUT,
            "relocate_libs": LaunchFlag.RELOCSO,
            "relocate_exec": LaunchFlag.RELOCEXEC,
            "relocate_python": LaunchFlag.RELOCPY,
            "follow_fork": LaunchFlag.FOLLOWFORK,
            "remap_exec": LaunchFlag.REMAPEXEC,
        }
        for name, flag in reloc_flags.items():
            if getattr(self.reloc, name):
                bits |= flag
        misc_flags = {
            "strip": LaunchFlag.STRIP,
            "debug": LaunchFlag.DEBUG,
            "preload": LaunchFlag.PRELOAD,
            "noclean": LaunchFlag.NOCLEAN,
        }
        for name, flag in misc_flags.items():
            if getattr(self.misc, name):
                bits |= flag

        bits |= LaunchFlag[self.network_mode.name]
        bits |= LaunchFlag[self.transfer_mode.name]
        bits |= LaunchFlag[f"SEC_{self.security_model.name}"]
        if not self.use_mpi:
            bits |= LaunchFlag.NOMPI
        if not self.hide_fds:
            bits |= LaunchFlag.NOHIDE
        return bits

    def to_dict(self) -> Dict[str, Any]:
        """JSON-serialisable view of the configuration."""
        return {
            "reloc": asdict(self.reloc),
            "network_mode": self.network_mode.value,
            "transfer_mode": self.transfer_mode.value,
            "security_model": self.security_model.value,
            "misc": asdict(self.misc),
            "port": self.port,
            "location_root": self.location_root,
            "debug_override": self.debug_override,
            "use_mpi": self.use_mpi,
            "hide_fds": self.hide_fds,
            "logging_enabled": self.logging_enabled,
            "preload_file": self.preload_file,
            "python_prefixes": self.python_prefixes,
            "trailing_args": list(self.trailing_args),
            "option_bits": int(self.option_bits()),
        }
