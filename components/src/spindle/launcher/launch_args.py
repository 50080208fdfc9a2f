# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""Spindle launcher option ArgGroups."""

from typing import Any, List, Optional, Tuple

from spindle.common.configuration.arg_group import ArgGroup
from spindle.common.configuration.utils import add_argument, add_flag_argument
from spindle.launcher.config import LauncherDefaults
from spindle.launcher.constants import OptionGroup, ValueKind
from spindle.launcher.events import OptionEvent
from spindle.launcher.registry import OptionDescriptor, OptionRegistry


class LauncherArgGroup(ArgGroup):
    """Registers every registry option of one OptionGroup under a single heading."""

    group: OptionGroup

    def __init__(self, registry: OptionRegistry, defaults: LauncherDefaults):
        self.registry = registry
        self.defaults = defaults

    def add_arguments(self, parser) -> None:
        g = parser.add_argument_group(self.title)
        for descriptor in self.registry.options_in_group(self.group):
            self._add_option(g, descriptor)

    def _add_option(self, g, descriptor: OptionDescriptor) -> None:
        if descriptor.kind in (ValueKind.PRESENCE_FLAG, ValueKind.MODE_SELECTOR):
            add_flag_argument(
                g,
                flag_name=descriptor.flag,
                short_flag=descriptor.short_flag,
                help=self.help_for(descriptor),
                hidden=descriptor.hidden,
                dest=descriptor.name,
                event_factory=OptionEvent,
            )
            return

        env_var, default = self.default_for(descriptor)
        add_argument(
            g,
            flag_name=descriptor.flag,
            short_flag=descriptor.short_flag,
            env_var=env_var,
            default=default,
            metavar=descriptor.metavar,
            help=self.help_for(descriptor),
            hidden=descriptor.hidden,
            dest=descriptor.name,
            event_factory=OptionEvent,
        )

    def help_for(self, descriptor: OptionDescriptor) -> str:
        return descriptor.help

    def default_for(self, descriptor: OptionDescriptor) -> Tuple[Optional[str], Any]:
        """Environment variable and default shown in help for a value option."""
        return None, None


class RelocationArgGroup(LauncherArgGroup):
    """Which objects are relocated through Spindle."""

    group = OptionGroup.RELOC
    title = "Relocation Options"


class DistributionArgGroup(LauncherArgGroup):
    """Push or pull distribution of relocated objects."""

    group = OptionGroup.PUSHPULL
    title = "Push/Pull Options"


class NetworkArgGroup(LauncherArgGroup):
    """Server network and storage options."""

    group = OptionGroup.NETWORK
    title = "Network Options"

    def default_for(self, descriptor: OptionDescriptor) -> Tuple[Optional[str], Any]:
        if descriptor.name == "port":
            return "SPINDLE_PORT", self.defaults.port
        if descriptor.name == "location":
            return "SPINDLE_LOC", self.defaults.location
        return None, None


class SecurityArgGroup(LauncherArgGroup):
    """Security model selectors, one per compiled-in model."""

    group = OptionGroup.SECURITY
    title = "Security Options"

    def help_for(self, descriptor: OptionDescriptor) -> str:
        if descriptor.security_model == self.registry.default_security_model():
            return f"{descriptor.help} (default)"
        return descriptor.help


class MiscArgGroup(LauncherArgGroup):
    group = OptionGroup.MISC
    title = "Misc Options"

    def default_for(self, descriptor: OptionDescriptor) -> Tuple[Optional[str], Any]:
        if descriptor.name == "python-prefix":
            return "SPINDLE_PYTHON_PREFIX", self.defaults.python_prefix
        return None, None


class GeneralArgGroup(LauncherArgGroup):
    """Options outside any group (e.g. --no-mpi)."""

    group = OptionGroup.NONE
    title = "General Options"


LAUNCHER_ARG_GROUPS = (
    RelocationArgGroup,
    DistributionArgGroup,
    NetworkArgGroup,
    SecurityArgGroup,
    MiscArgGroup,
    GeneralArgGroup,
)


def launcher_arg_groups(
    registry: OptionRegistry, defaults: LauncherDefaults
) -> List[LauncherArgGroup]:
    return [cls(registry, defaults) for cls in LAUNCHER_ARG_GROUPS]
