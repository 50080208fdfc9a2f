# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""Utility functions for ArgGroup configuration."""

import argparse
import os
from typing import Any, Callable, Optional, TypeVar

T = TypeVar("T")

# Namespace attribute that collects recorded option events in command-line order.
EVENTS_DEST = "_option_events"


def env_or_default(env_var: str, default: T) -> T:
    """
    Get value from environment variable or return default.

    Performs type conversion based on the default value's type.

    Args:
        env_var: Environment variable name (e.g., "SPINDLE_LOC")
        default: Default value if env var not set

    Returns:
        Environment variable value (type-converted) or default

    Examples:
        >>> env_or_default("SPINDLE_LOC", "/tmp")
        "/tmp"  # if SPINDLE_LOC not set
        >>> env_or_default("SPINDLE_PORT", 21940)
        4000  # if SPINDLE_PORT="4000"
    """
    value = os.environ.get(env_var)
    if value is None:
        return default

    # Type conversion based on default type
    if isinstance(default, bool):
        return value.lower() in ("true", "1", "yes", "on")  # type: ignore
    elif isinstance(default, int):
        return int(value)  # type: ignore
    elif isinstance(default, float):
        return float(value)  # type: ignore
    elif isinstance(default, (list, tuple)):
        # List options (e.g. SPINDLE_SECURITY_MODELS) are space-separated.
        return type(default)(x.strip() for x in value.split() if x.strip())  # type: ignore
    else:
        return value  # type: ignore


class RecordOptionEvent(argparse.Action):
    """
    Record every occurrence of an option instead of storing a parsed value.

    Each occurrence appends ``event_factory(dest, value)`` to the namespace
    attribute ``EVENTS_DEST`` so the caller sees options in command-line order,
    repeats included. Options with ``nargs=0`` record ``None`` as their value.
    """

    def __init__(
        self,
        option_strings,
        dest,
        event_factory: Callable[[str, Optional[str]], Any] = lambda k, v: (k, v),
        **kwargs,
    ):
        self.event_factory = event_factory
        super().__init__(option_strings, dest, **kwargs)

    def __call__(self, parser, namespace, values, option_string=None):
        if self.nargs == 0:
            values = None
        events = getattr(namespace, EVENTS_DEST, None)
        if events is None:
            events = []
            setattr(namespace, EVENTS_DEST, events)
        events.append(self.event_factory(self.dest, values))


def add_argument(
    parser,
    *,
    flag_name: str,
    default: Any,
    help: str,
    env_var: Optional[str] = None,
    short_flag: Optional[str] = None,
    metavar: Optional[str] = None,
    hidden: bool = False,
    **kwargs: Any,
) -> None:
    """
    Add a value-taking CLI option that records an event each time it appears.

    Args:
        parser: ArgumentParser or argument group
        flag_name: Primary flag (must start with '--', e.g., "--port")
        default: Default value shown in help (applied later by the resolver)
        help: Help text
        env_var: Optional environment variable that overrides the default
        short_flag: Optional single-character alias (e.g., "-t")
        metavar: Name of the argument in usage/help output
        hidden: Keep the option out of --help output
        dest: Optional destination name (defaults to flag_name without dashes)
        event_factory: Callable building the recorded event from (dest, value)
    """
    arg_dest = _get_dest_name(flag_name, kwargs.pop("dest", None))

    names = [flag_name]
    if short_flag:
        names.insert(0, short_flag)

    add_arg_opts = {
        "dest": arg_dest,
        "action": RecordOptionEvent,
        "default": argparse.SUPPRESS,
        "metavar": metavar,
        "help": argparse.SUPPRESS
        if hidden
        else _build_help_message(help, env_var, default),
    }
    kwargs.update(add_arg_opts)

    parser.add_argument(*names, **kwargs)


def add_flag_argument(
    parser,
    *,
    flag_name: str,
    help: str,
    short_flag: Optional[str] = None,
    hidden: bool = False,
    **kwargs: Any,
) -> None:
    """
    Add a presence flag (no argument) that records an event when it appears.

    Args:
        parser: ArgumentParser or argument group
        flag_name: Primary flag (must start with '--', e.g. "--push")
        help: Help text
        short_flag: Optional single-character alias (e.g., "-p")
        hidden: Keep the option out of --help output
    """
    arg_dest = _get_dest_name(flag_name, kwargs.pop("dest", None))

    names = [flag_name]
    if short_flag:
        names.insert(0, short_flag)

    parser.add_argument(
        *names,
        dest=arg_dest,
        action=RecordOptionEvent,
        nargs=0,
        default=argparse.SUPPRESS,
        help=argparse.SUPPRESS if hidden else help,
        **kwargs,
    )


def _build_help_message(
    help_text: str, env_var: Optional[str], default: Any
) -> str:
    """
    Build help message with env var and default value.
    """
    if env_var:
        return f"{help_text}\nenv var: {env_var} | default: {default}"
    if default is not None:
        return f"{help_text}\ndefault: {default}"
    return help_text


def _get_dest_name(flag_name: str, dest: Optional[str] = None) -> str:
    """
    Get the destination name for the flag.
    """
    return dest if dest else flag_name.lstrip("-")
