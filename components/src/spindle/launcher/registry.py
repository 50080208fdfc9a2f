# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""Static table of launcher options.

The registry maps every option name (and short key) to an OptionDescriptor
carrying its code, group and value kind. It is built once by
:func:`build_registry` and sealed; lookups never mutate it.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional

from spindle.launcher.constants import (
    SECURITY_DEFAULT_PRIORITY,
    YESNO,
    OptionCode,
    OptionGroup,
    SecurityModel,
    ValueKind,
)
from spindle.launcher.errors import NoSecurityModelError, UnknownOptionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OptionDescriptor:
    """One registered launcher option."""

    name: str
    group: OptionGroup
    kind: ValueKind
    help: str
    key: Optional[str] = None
    code: Optional[OptionCode] = None
    # Config field written by scalar options and by code-less presence flags
    field: Optional[str] = None
    metavar: Optional[str] = None
    security_model: Optional[SecurityModel] = None
    hidden: bool = False

    @property
    def flag(self) -> str:
        return f"--{self.name}"

    @property
    def short_flag(self) -> Optional[str]:
        return f"-{self.key}" if self.key else None


class OptionRegistry:
    """Name and short-key index over OptionDescriptors."""

    def __init__(self, security_models: Iterable[SecurityModel] = ()):
        self._by_name: Dict[str, OptionDescriptor] = {}
        self._by_key: Dict[str, OptionDescriptor] = {}
        self._sealed = False
        self.security_models = tuple(security_models)

    def register(self, descriptor: OptionDescriptor) -> OptionDescriptor:
        if self._sealed:
            raise RuntimeError("OptionRegistry is sealed; cannot register options")
        if descriptor.name in self._by_name:
            raise ValueError(f"Option '{descriptor.name}' is already registered")
        if descriptor.key is not None:
            if descriptor.key in self._by_key:
                raise ValueError(
                    f"Short key '-{descriptor.key}' is already used by "
                    f"'{self._by_key[descriptor.key].name}'"
                )
            self._by_key[descriptor.key] = descriptor
        self._by_name[descriptor.name] = descriptor
        return descriptor

    def seal(self) -> "OptionRegistry":
        self._sealed = True
        return self

    def lookup(self, token: str) -> OptionDescriptor:
        """Resolve "reloc-aout", "--reloc-aout", "a" or "-a" to its descriptor."""
        stripped = token.lstrip("-")
        if len(stripped) == 1:
            descriptor = self._by_key.get(stripped)
        else:
            descriptor = self._by_name.get(stripped)
        if descriptor is None:
            raise UnknownOptionError(token)
        return descriptor

    def options_in_group(self, group: OptionGroup) -> List[OptionDescriptor]:
        return [d for d in self._by_name.values() if d.group == group]

    def default_security_model(self) -> SecurityModel:
        """Pick the compiled-in default from the available models."""
        for model in SECURITY_DEFAULT_PRIORITY:
            if model in self.security_models:
                return model
        raise NoSecurityModelError("No security model available")

    def __iter__(self) -> Iterator[OptionDescriptor]:
        return iter(self._by_name.values())

    def __len__(self) -> int:
        return len(self._by_name)

    def __contains__(self, token: object) -> bool:
        if not isinstance(token, str):
            return False
        try:
            self.lookup(token)
        except UnknownOptionError:
            return False
        return True


_SECURITY_HELP = {
    SecurityModel.MUNGE: "Use munge for security authentication",
    SecurityModel.KEYLMON: "Use LaunchMON to exchange keys for security authentication",
    SecurityModel.KEYFILE: "Use a keyfile stored in a global file system for security authentication",
    SecurityModel.NULL: "Do not do any security authentication",
}


def _reloc_toggle(name, key, code, help):
    return OptionDescriptor(
        name=name,
        key=key,
        code=code,
        group=OptionGroup.RELOC,
        kind=ValueKind.BOOL_TOGGLE,
        metavar=YESNO,
        help=help,
    )


def build_registry(
    security_models: Iterable[SecurityModel],
    usage_logging: bool = False,
) -> OptionRegistry:
    """
    Build the sealed option registry for the given compiled-in security models.

    Args:
        security_models: Security models available in this build. One
            --security-<model> selector is registered per model.
        usage_logging: Whether usage logging is built in. When it is not,
            --disable-logging is still accepted but hidden from help.

    Raises:
        NoSecurityModelError: If no security model is available.
    """
    models = [m for m in SecurityModel if m in set(security_models)]
    if not models:
        raise NoSecurityModelError(
            "No security model available; at least one of "
            + ", ".join(m.value for m in SecurityModel)
            + " must be enabled"
        )

    registry = OptionRegistry(models)

    # Relocation
    registry.register(
        _reloc_toggle(
            "reloc-aout",
            "a",
            OptionCode.RELOCAOUT,
            "Relocate the main executable through Spindle. Default: yes",
        )
    )
    registry.register(
        _reloc_toggle(
            "reloc-libs",
            "l",
            OptionCode.RELOCSO,
            "Relocate shared libraries through Spindle. Default: yes",
        )
    )
    registry.register(
        _reloc_toggle(
            "reloc-python",
            "y",
            OptionCode.RELOCPY,
            "Relocate python modules (.py/.pyc) files when loaded via python. Default: yes",
        )
    )
    registry.register(
        _reloc_toggle(
            "reloc-exec",
            "x",
            OptionCode.RELOCEXEC,
            "Relocate the targets of exec/execv/execve/... calls. Default: yes",
        )
    )
    registry.register(
        _reloc_toggle(
            "follow-fork",
            "f",
            OptionCode.FOLLOWFORK,
            "Relocate objects in fork'd child processes. Default: yes",
        )
    )

    # Push / pull
    registry.register(
        OptionDescriptor(
            name="push",
            key="p",
            code=OptionCode.PUSH,
            group=OptionGroup.PUSHPULL,
            kind=ValueKind.PRESENCE_FLAG,
            help="Use a push model where objects loaded by any process are made available to all processes",
        )
    )
    registry.register(
        OptionDescriptor(
            name="pull",
            key="q",
            code=OptionCode.PULL,
            group=OptionGroup.PUSHPULL,
            kind=ValueKind.PRESENCE_FLAG,
            help="Use a pull model where objects are only made available to processes that require them",
        )
    )

    # Network
    registry.register(
        OptionDescriptor(
            name="cobo",
            key="c",
            code=OptionCode.COBO,
            group=OptionGroup.NETWORK,
            kind=ValueKind.PRESENCE_FLAG,
            help="Use a tree-based cobo network for distributing objects",
        )
    )
    registry.register(
        OptionDescriptor(
            name="port",
            key="t",
            field="port",
            group=OptionGroup.NETWORK,
            kind=ValueKind.SCALAR_INT,
            metavar="number",
            help="TCP Port for Spindle servers.",
        )
    )
    registry.register(
        OptionDescriptor(
            name="location",
            key="o",
            field="location_root",
            group=OptionGroup.NETWORK,
            kind=ValueKind.SCALAR_STRING,
            metavar="directory",
            help="Back-end directory for storing relocated files.  Should be a non-shared location such as a ramdisk.",
        )
    )

    # Security
    for model in models:
        registry.register(
            OptionDescriptor(
                name=f"security-{model.value}",
                group=OptionGroup.SECURITY,
                kind=ValueKind.MODE_SELECTOR,
                security_model=model,
                help=_SECURITY_HELP[model],
            )
        )

    # Misc
    registry.register(
        OptionDescriptor(
            name="python-prefix",
            key="r",
            field="user_python_prefixes",
            group=OptionGroup.MISC,
            kind=ValueKind.SCALAR_STRING,
            metavar="path",
            help="Colon-separated list of directories that contain the python install location",
        )
    )
    registry.register(
        OptionDescriptor(
            name="debug",
            key="d",
            code=OptionCode.DEBUG,
            group=OptionGroup.MISC,
            kind=ValueKind.BOOL_TOGGLE,
            metavar=YESNO,
            help="Hide spindle from debuggers so they think libraries come from the original locations. Default: no",
        )
    )
    registry.register(
        OptionDescriptor(
            name="preload",
            key="e",
            code=OptionCode.PRELOAD,
            field="preload_file",
            group=OptionGroup.MISC,
            kind=ValueKind.SCALAR_STRING,
            metavar="FILE",
            help=(
                "Provides a text file containing a white-space separated list of files that should be "
                "relocated to each node before execution begins"
            ),
        )
    )
    registry.register(
        OptionDescriptor(
            name="strip",
            key="s",
            code=OptionCode.STRIP,
            group=OptionGroup.MISC,
            kind=ValueKind.BOOL_TOGGLE,
            metavar=YESNO,
            help="Strip debug and symbol information from binaries before distributing them. Default: yes",
        )
    )
    registry.register(
        OptionDescriptor(
            name="noclean",
            key="n",
            code=OptionCode.NOCLEAN,
            group=OptionGroup.MISC,
            kind=ValueKind.BOOL_TOGGLE,
            metavar=YESNO,
            help="Don't remove local file cache after execution.  Default: no (removes the cache)",
        )
    )
    registry.register(
        OptionDescriptor(
            name="disable-logging",
            key="z",
            field="logging_enabled",
            group=OptionGroup.MISC,
            kind=ValueKind.PRESENCE_FLAG,
            hidden=not usage_logging,
            help="Disable usage logging for this invocation of Spindle",
        )
    )
    registry.register(
        OptionDescriptor(
            name="no-mpi",
            key="m",
            field="use_mpi",
            group=OptionGroup.NONE,
            kind=ValueKind.PRESENCE_FLAG,
            help="Run serial jobs instead of MPI job",
        )
    )
    registry.register(
        OptionDescriptor(
            name="no-hide",
            key="h",
            field="hide_fds",
            group=OptionGroup.MISC,
            kind=ValueKind.PRESENCE_FLAG,
            help="Don't hide spindle file descriptors from application",
        )
    )

    logger.debug(
        "Built option registry with %d options (security models: %s)",
        len(registry),
        ", ".join(m.value for m in models),
    )
    return registry.seal()
