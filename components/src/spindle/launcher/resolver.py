# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""
Resolution of option events into a finalized LauncherConfig.

Resolution is a two-phase protocol:
    - accept(): classify each event through the registry and accumulate it
      into the enabled/disabled code sets or into a scalar field
    - finalize(): run once at end of input, check conflicts and exclusive
      groups, apply defaults and the debug override, and freeze the result

The module-level finalize() runs both phases over a whole event sequence.
"""

import logging
from typing import Dict, FrozenSet, Iterable, Optional, Set, Tuple

from spindle.launcher.config import (
    LauncherConfig,
    LauncherDefaults,
    MiscOptions,
    RelocationOptions,
)
from spindle.launcher.constants import (
    DEFAULT_MISC_CODES,
    DEFAULT_NETWORK_CODE,
    DEFAULT_PUSHPULL_CODE,
    DEFAULT_RELOC_CODES,
    MISC_CODES,
    NETWORK_CODES,
    PUSHPULL_CODES,
    RELOC_CODES,
    NetworkMode,
    OptionCode,
    OptionGroup,
    SecurityModel,
    TransferMode,
    ValueKind,
)
from spindle.launcher.errors import (
    ConfigConflict,
    ExclusiveGroupViolation,
    InvalidScalarValue,
    MissingRequiredArgument,
)
from spindle.launcher.events import EndOfInput, Event, OptionEvent, PositionalStart
from spindle.launcher.prefixes import merge_python_prefixes
from spindle.launcher.registry import OptionDescriptor, OptionRegistry, build_registry
from spindle.launcher.validators import parse_port, parse_yes_no

logger = logging.getLogger(__name__)


class ResolutionEngine:
    """Accumulates option events and finalizes them into one LauncherConfig."""

    def __init__(
        self,
        registry: Optional[OptionRegistry] = None,
        defaults: Optional[LauncherDefaults] = None,
    ):
        self.defaults = defaults if defaults is not None else LauncherDefaults()
        self.registry = (
            registry
            if registry is not None
            else build_registry(
                self.defaults.security_models,
                usage_logging=self.defaults.logging_enabled,
            )
        )

        self.enabled: Set[OptionCode] = set()
        self.disabled: Set[OptionCode] = set()
        self.scalars: Dict[str, object] = {}
        self.security_model: Optional[SecurityModel] = None
        self.trailing_args: Tuple[str, ...] = ()

        self._code_names = {d.code: d.name for d in self.registry if d.code}
        self._scan_done = False
        self._config: Optional[LauncherConfig] = None

    @property
    def finalized(self) -> bool:
        return self._config is not None

    def accept(self, event: Event) -> Optional[LauncherConfig]:
        """
        Consume one event.

        Returns the finalized config when ``event`` is EndOfInput, else None.
        Option events after the trailing command has started are ignored.
        """
        if self.finalized:
            raise RuntimeError("Configuration is already finalized")

        if isinstance(event, EndOfInput):
            return self.finalize()
        if self._scan_done:
            return None
        if isinstance(event, PositionalStart):
            self.trailing_args = tuple(event.args)
            self._scan_done = True
            return None
        if isinstance(event, OptionEvent):
            self._accept_option(self.registry.lookup(event.key), event.argument)
            return None
        raise TypeError(f"Unexpected event type: {type(event).__name__}")

    def _accept_option(
        self, descriptor: OptionDescriptor, argument: Optional[str]
    ) -> None:
        kind = descriptor.kind

        if kind == ValueKind.BOOL_TOGGLE:
            if parse_yes_no(descriptor.name, argument):
                self.enabled.add(descriptor.code)
            else:
                self.disabled.add(descriptor.code)
        elif kind == ValueKind.PRESENCE_FLAG:
            if descriptor.code is not None:
                self.enabled.add(descriptor.code)
            else:
                # Code-less presence flags only ever turn a default-on setting off
                self.scalars[descriptor.field] = False
        elif kind == ValueKind.SCALAR_INT:
            self.scalars[descriptor.field] = parse_port(_require(descriptor, argument))
        elif kind == ValueKind.SCALAR_STRING:
            self.scalars[descriptor.field] = _require(descriptor, argument)
        elif kind == ValueKind.MODE_SELECTOR:
            self.security_model = descriptor.security_model
        else:
            raise TypeError(f"Unhandled value kind: {kind}")

    def finalize(self) -> LauncherConfig:
        """Resolve the accumulated state. Runs exactly once."""
        if self.finalized:
            raise RuntimeError("Configuration is already finalized")

        enabled = frozenset(self.enabled)
        disabled = frozenset(self.disabled)

        conflicts = enabled & disabled
        if conflicts:
            raise ConfigConflict(self._names(conflicts))

        network = self._select_exclusive(
            enabled, NETWORK_CODES, DEFAULT_NETWORK_CODE, OptionGroup.NETWORK
        )
        transfer = self._select_exclusive(
            enabled, PUSHPULL_CODES, DEFAULT_PUSHPULL_CODE, OptionGroup.PUSHPULL
        )

        preload_file = self.scalars.get("preload_file")
        if preload_file is not None:
            enabled = enabled | {OptionCode.PRELOAD}

        reloc_codes = _union_group(enabled, disabled, RELOC_CODES, DEFAULT_RELOC_CODES)
        misc_codes = _union_group(enabled, disabled, MISC_CODES, DEFAULT_MISC_CODES)

        security_model = self.security_model
        if security_model is None:
            security_model = self.registry.default_security_model()
            logger.debug("No security model selected, using default %s", security_model.value)

        reloc = RelocationOptions(
            relocate_aout=OptionCode.RELOCAOUT in reloc_codes,
            relocate_libs=OptionCode.RELOCSO in reloc_codes,
            relocate_exec=OptionCode.RELOCEXEC in reloc_codes,
            relocate_python=OptionCode.RELOCPY in reloc_codes,
            follow_fork=OptionCode.FOLLOWFORK in reloc_codes,
        )
        misc = MiscOptions(
            strip=OptionCode.STRIP in misc_codes,
            debug=OptionCode.DEBUG in misc_codes,
            preload=OptionCode.PRELOAD in misc_codes,
            noclean=OptionCode.NOCLEAN in misc_codes,
        )

        # Debug mode overrides other settings: debuggers must see executables
        # at their original locations.
        if misc.debug:
            logger.debug(
                "Debug mode enabled: disabling executable relocation, remapping exec targets"
            )
            reloc = RelocationOptions(
                relocate_aout=False,
                relocate_libs=reloc.relocate_libs,
                relocate_exec=False,
                relocate_python=reloc.relocate_python,
                follow_fork=reloc.follow_fork,
                remap_exec=True,
            )

        if not self.trailing_args:
            raise MissingRequiredArgument("No MPI command line found")

        config = LauncherConfig.from_fields(
            reloc=reloc,
            network_mode=NetworkMode(network.value),
            transfer_mode=TransferMode(transfer.value),
            security_model=security_model,
            misc=misc,
            port=self.scalars.get("port", self.defaults.port),
            location_root=self.scalars.get("location_root", self.defaults.location),
            debug_override=misc.debug,
            use_mpi=self.scalars.get("use_mpi", True),
            hide_fds=self.scalars.get("hide_fds", True),
            logging_enabled=self.scalars.get(
                "logging_enabled", self.defaults.logging_enabled
            ),
            preload_file=preload_file,
            python_prefixes=merge_python_prefixes(
                self.defaults.python_prefix, self.scalars.get("user_python_prefixes")
            ),
            trailing_args=self.trailing_args,
        )
        self._config = config
        return config

    def _select_exclusive(
        self,
        enabled: FrozenSet[OptionCode],
        group_codes: FrozenSet[OptionCode],
        default: OptionCode,
        group: OptionGroup,
    ) -> OptionCode:
        chosen = enabled & group_codes
        if len(chosen) > 1:
            raise ExclusiveGroupViolation(group.value, self._names(chosen))
        if not chosen:
            return default
        return next(iter(chosen))

    def _names(self, codes: Iterable[OptionCode]):
        return [self._code_names.get(code, code.value) for code in codes]


def _union_group(
    enabled: FrozenSet[OptionCode],
    disabled: FrozenSet[OptionCode],
    group_codes: FrozenSet[OptionCode],
    defaults: FrozenSet[OptionCode],
) -> FrozenSet[OptionCode]:
    # Disabling always wins over both explicit enables and defaults
    return (group_codes - disabled) & (enabled | defaults)


def _require(descriptor: OptionDescriptor, argument: Optional[str]) -> str:
    if argument is None:
        raise InvalidScalarValue(f"{descriptor.name} requires a value")
    return argument


def finalize(
    events: Iterable[Event],
    registry: Optional[OptionRegistry] = None,
    defaults: Optional[LauncherDefaults] = None,
) -> LauncherConfig:
    """
    Resolve a complete event sequence into a LauncherConfig.

    The sequence is finalized at its first EndOfInput; if it carries none,
    it is finalized once exhausted.
    """
    engine = ResolutionEngine(registry=registry, defaults=defaults)
    for event in events:
        config = engine.accept(event)
        if config is not None:
            return config
    return engine.finalize()
