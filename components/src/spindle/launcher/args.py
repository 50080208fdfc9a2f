# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

import argparse
import logging
from typing import Any, Dict, List, Optional, Sequence

from spindle import __version__
from spindle.common.config_dump import register_encoder
from spindle.common.configuration.utils import EVENTS_DEST
from spindle.launcher.config import LauncherConfig, LauncherDefaults
from spindle.launcher.errors import SpindleConfigError
from spindle.launcher.events import END_OF_INPUT, Event, PositionalStart
from spindle.launcher.launch_args import launcher_arg_groups
from spindle.launcher.registry import OptionRegistry, build_registry
from spindle.launcher.resolver import finalize

logger = logging.getLogger(__name__)

COMMAND_DEST = "mpi_command"


@register_encoder(LauncherConfig)
def _preprocess_for_encode_config(config: LauncherConfig) -> Dict[str, Any]:
    """Convert LauncherConfig to a dictionary for encoding."""
    return config.to_dict()


def create_parser(
    registry: OptionRegistry,
    defaults: LauncherDefaults,
    parser: Optional[argparse.ArgumentParser] = None,
) -> argparse.ArgumentParser:
    """Build the command-line parser for every option in ``registry``.

    Options do not store values; each occurrence records an OptionEvent in
    command-line order. The first positional token and everything after it
    is captured verbatim as the command to launch.
    """
    if parser is None:
        parser = _base_parser()

    # -h belongs to --no-hide, so help is -? / --help
    parser.add_argument(
        "-?", "--help", action="help", help="Show this help message and exit"
    )
    parser.add_argument(
        "-V", "--version", action="version", version=f"Spindle {__version__}"
    )

    for arg_group in launcher_arg_groups(registry, defaults):
        arg_group.add_arguments(parser)

    parser.add_argument(
        COMMAND_DEST,
        nargs=argparse.REMAINDER,
        metavar="mpi_command",
        help="Command line of the job to launch under Spindle",
    )
    return parser


def tokenize(
    parser: argparse.ArgumentParser, argv: Optional[Sequence[str]] = None
) -> List[Event]:
    """Turn a command line into the resolver's event stream.

    Unknown options are reported by the parser itself (exit status 2).
    """
    args = parser.parse_args(argv)
    events: List[Event] = list(getattr(args, EVENTS_DEST, []))
    command = list(getattr(args, COMMAND_DEST, None) or [])
    # One leading "--" ends the launcher options; later ones belong to the command
    if command[:1] == ["--"]:
        command = command[1:]
    if command:
        events.append(PositionalStart(tuple(command)))
    events.append(END_OF_INPUT)
    return events


def parse_args(
    argv: Optional[Sequence[str]] = None,
    defaults: Optional[LauncherDefaults] = None,
) -> LauncherConfig:
    """Parse command-line arguments for the Spindle launcher.

    Any configuration error is reported through ``parser.error``, which
    prints usage and exits with status 2.

    Returns:
        LauncherConfig: The finalized configuration.
    """
    parser = _base_parser()
    try:
        if defaults is None:
            defaults = LauncherDefaults.from_env()
        registry = build_registry(
            defaults.security_models, usage_logging=defaults.logging_enabled
        )
    except SpindleConfigError as exc:
        parser.error(str(exc))

    create_parser(registry, defaults, parser)
    events = tokenize(parser, argv)
    logger.debug("Tokenized %d events", len(events))

    try:
        return finalize(events, registry=registry, defaults=defaults)
    except SpindleConfigError as exc:
        parser.error(str(exc))


def _base_parser() -> argparse.ArgumentParser:
    return argparse.ArgumentParser(
        prog="spindle",
        usage="%(prog)s [OPTIONS..] mpi_command",
        description="Spindle launcher configuration",
        formatter_class=argparse.RawTextHelpFormatter,
        add_help=False,
        allow_abbrev=False,
    )
