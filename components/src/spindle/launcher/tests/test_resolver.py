# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""Unit tests for the resolution engine."""

import pytest

from spindle.common.configuration.config_base import FrozenConfigError
from spindle.launcher.config import LauncherDefaults, MiscOptions, RelocationOptions
from spindle.launcher.constants import NetworkMode, SecurityModel, TransferMode
from spindle.launcher.errors import (
    ConfigConflict,
    ExclusiveGroupViolation,
    InvalidScalarValue,
    MissingRequiredArgument,
    UnknownOptionError,
)
from spindle.launcher.events import END_OF_INPUT, OptionEvent, PositionalStart
from spindle.launcher.resolver import ResolutionEngine, finalize

pytestmark = [
    pytest.mark.unit,
    pytest.mark.pre_merge,
]

COMMAND = ("mpirun", "-n", "4", "./app")


def resolve(*options, command=COMMAND, defaults=None):
    """Finalize ``options`` (key or (key, argument) pairs) followed by ``command``."""
    events = []
    for option in options:
        if isinstance(option, tuple):
            events.append(OptionEvent(*option))
        else:
            events.append(OptionEvent(option))
    if command is not None:
        events.append(PositionalStart(command))
    events.append(END_OF_INPUT)
    return finalize(events, defaults=defaults or LauncherDefaults())


class TestDefaults:
    """Test the configuration produced with no options."""

    def test_all_defaults(self):
        config = resolve()

        assert config.reloc == RelocationOptions()
        assert config.reloc.remap_exec is False
        assert config.network_mode == NetworkMode.COBO
        assert config.transfer_mode == TransferMode.PUSH
        assert config.security_model == SecurityModel.MUNGE
        assert config.misc == MiscOptions(strip=True)
        assert config.port == 21940
        assert config.location_root == "$TMPDIR"
        assert config.debug_override is False
        assert config.use_mpi is True
        assert config.hide_fds is True
        assert config.logging_enabled is False
        assert config.preload_file is None
        assert config.python_prefixes == "/usr"
        assert config.trailing_args == COMMAND

    def test_defaults_object_is_respected(self):
        defaults = LauncherDefaults(
            port=4000,
            location="/dev/shm",
            python_prefix="/opt/python3:/usr",
            security_models=(SecurityModel.KEYFILE, SecurityModel.NULL),
            usage_logging_file="/var/log/spindle_usage.log",
        )
        config = resolve(defaults=defaults)

        assert config.port == 4000
        assert config.location_root == "/dev/shm"
        assert config.python_prefixes == "/opt/python3:/usr"
        assert config.security_model == SecurityModel.KEYFILE
        assert config.logging_enabled is True


class TestConflicts:
    """Test enabled/disabled conflict detection."""

    def test_same_option_enabled_and_disabled(self):
        with pytest.raises(ConfigConflict) as exc_info:
            resolve(("reloc-aout", "yes"), ("reloc-aout", "no"))
        assert exc_info.value.options == ["reloc-aout"]

    def test_conflict_order_does_not_matter(self):
        with pytest.raises(ConfigConflict):
            resolve(("strip", "n"), ("strip", "y"))

    def test_conflict_names_every_option_across_groups(self):
        with pytest.raises(ConfigConflict) as exc_info:
            resolve(("debug", "yes"), ("strip", "no"), ("debug", "no"), ("s", "yes"))
        assert exc_info.value.options == ["debug", "strip"]
        assert "debug, strip" in str(exc_info.value)

    def test_repeated_enable_is_not_a_conflict(self):
        config = resolve(("follow-fork", "yes"), ("f", "y"))
        assert config.reloc.follow_fork is True


class TestExclusiveGroups:
    """Test Network and PushPull resolve to exactly one value."""

    def test_push_and_pull_fails(self):
        with pytest.raises(ExclusiveGroupViolation) as exc_info:
            resolve("push", "pull")
        assert exc_info.value.group == "pushpull"
        assert exc_info.value.options == ["pull", "push"]

    def test_pull_selected(self):
        assert resolve("pull").transfer_mode == TransferMode.PULL

    def test_push_twice_is_one_selection(self):
        assert resolve("push", "p").transfer_mode == TransferMode.PUSH

    def test_explicit_cobo(self):
        assert resolve("cobo").network_mode == NetworkMode.COBO


class TestIndependentGroups:
    """Test Reloc and Misc union semantics."""

    def test_enable_keeps_default_on_toggles(self):
        config = resolve(("reloc-libs", "yes"))
        assert config.reloc == RelocationOptions()

    def test_disable_removes_only_that_toggle(self):
        config = resolve(("reloc-python", "no"), ("reloc-libs", "no"))

        assert config.reloc.relocate_python is False
        assert config.reloc.relocate_libs is False
        assert config.reloc.relocate_aout is True
        assert config.reloc.relocate_exec is True
        assert config.reloc.follow_fork is True

    def test_disable_default_on_misc_bit(self):
        assert resolve(("strip", "no")).misc.strip is False

    def test_multiple_misc_options_active(self):
        config = resolve(("noclean", "yes"), ("debug", "yes"))

        assert config.misc == MiscOptions(strip=True, debug=True, noclean=True)

    def test_short_keys(self):
        config = resolve(("a", "n"), ("-x", "no"), ("n", "y"))

        assert config.reloc.relocate_aout is False
        assert config.reloc.relocate_exec is False
        assert config.misc.noclean is True

    @pytest.mark.parametrize("value", ["maybe", "YES", "", "1"])
    def test_invalid_boolean(self, value):
        with pytest.raises(InvalidScalarValue, match="reloc-aout must be 'yes' or 'no'"):
            resolve(("reloc-aout", value))


class TestDebugOverride:
    """Test debug mode forcing executable relocation off."""

    def test_debug_clears_aout_and_exec(self):
        config = resolve(("debug", "yes"))

        assert config.debug_override is True
        assert config.reloc.relocate_aout is False
        assert config.reloc.relocate_exec is False
        assert config.reloc.remap_exec is True
        assert config.reloc.relocate_libs is True
        assert config.reloc.relocate_python is True
        assert config.reloc.follow_fork is True

    def test_debug_wins_over_explicit_enable(self):
        config = resolve(("reloc-aout", "yes"), ("reloc-exec", "yes"), ("d", "y"))

        assert config.reloc.relocate_aout is False
        assert config.reloc.relocate_exec is False
        assert config.reloc.remap_exec is True

    def test_debug_keeps_other_disables(self):
        config = resolve(("debug", "yes"), ("reloc-libs", "no"))
        assert config.reloc.relocate_libs is False

    def test_debug_no_leaves_relocation(self):
        config = resolve(("debug", "no"))

        assert config.debug_override is False
        assert config.reloc == RelocationOptions()


class TestScalars:
    """Test scalar and selector options."""

    def test_port_last_write_wins(self):
        assert resolve(("port", "1000"), ("t", "1234")).port == 1234

    @pytest.mark.parametrize("value", ["0", "abc"])
    def test_bad_port(self, value):
        with pytest.raises(InvalidScalarValue):
            resolve(("port", value))

    def test_location(self):
        config = resolve(("location", "/tmp/spindle"))

        assert config.location_root == "/tmp/spindle"
        assert config.location(3) == "/tmp/spindle/spindle.3"

    def test_preload_sets_path_and_bit(self):
        config = resolve(("preload", "/home/user/preload.txt"))

        assert config.preload_file == "/home/user/preload.txt"
        assert config.misc.preload is True

    def test_python_prefix_merged(self):
        assert resolve(("python-prefix", "/usr:/opt/py")).python_prefixes == "/opt/py:/usr"

    def test_security_last_selection_wins(self):
        config = resolve("security-munge", "security-keyfile")
        assert config.security_model == SecurityModel.KEYFILE

    def test_security_not_compiled_in_is_unknown(self):
        defaults = LauncherDefaults(security_models=(SecurityModel.KEYFILE,))
        with pytest.raises(UnknownOptionError):
            resolve("security-munge", defaults=defaults)

    def test_presence_flags_clear_booleans(self):
        defaults = LauncherDefaults(usage_logging_file="/var/log/spindle_usage.log")
        config = resolve("no-mpi", "no-hide", "disable-logging", defaults=defaults)

        assert config.use_mpi is False
        assert config.hide_fds is False
        assert config.logging_enabled is False

    def test_value_option_without_argument(self):
        with pytest.raises(InvalidScalarValue, match="location requires a value"):
            resolve("location")


class TestTrailingArguments:
    """Test capture of the command to launch."""

    def test_options_after_command_are_ignored(self):
        events = [
            PositionalStart(("srun", "--pull")),
            OptionEvent("pull"),
            OptionEvent("reloc-aout", "bogus"),
            PositionalStart(("other",)),
            END_OF_INPUT,
        ]
        config = finalize(events, defaults=LauncherDefaults())

        assert config.transfer_mode == TransferMode.PUSH
        assert config.reloc.relocate_aout is True
        assert config.trailing_args == ("srun", "--pull")

    def test_missing_command(self):
        with pytest.raises(MissingRequiredArgument, match="No MPI command line found"):
            resolve(("port", "1234"), command=None)

    def test_empty_command(self):
        with pytest.raises(MissingRequiredArgument):
            resolve(command=())

    def test_unknown_option(self):
        with pytest.raises(UnknownOptionError) as exc_info:
            resolve("--bogus")
        assert exc_info.value.token == "--bogus"


class TestEngineProtocol:
    """Test the accumulate-then-finalize protocol."""

    def test_accept_returns_config_at_end_of_input(self):
        engine = ResolutionEngine(defaults=LauncherDefaults())

        assert engine.accept(OptionEvent("pull")) is None
        assert engine.accept(PositionalStart(("app",))) is None
        config = engine.accept(END_OF_INPUT)

        assert config is not None
        assert engine.finalized
        assert config.transfer_mode == TransferMode.PULL

    def test_finalize_runs_once(self):
        engine = ResolutionEngine(defaults=LauncherDefaults())
        engine.accept(PositionalStart(("app",)))
        engine.finalize()

        with pytest.raises(RuntimeError):
            engine.finalize()
        with pytest.raises(RuntimeError):
            engine.accept(OptionEvent("push"))

    def test_sequence_without_end_marker(self):
        config = finalize([PositionalStart(("app",))], defaults=LauncherDefaults())
        assert config.trailing_args == ("app",)

    def test_config_is_frozen(self):
        config = resolve()
        with pytest.raises(FrozenConfigError):
            config.port = 1

    def test_unexpected_event_type(self):
        engine = ResolutionEngine(defaults=LauncherDefaults())
        with pytest.raises(TypeError):
            engine.accept("--push")
