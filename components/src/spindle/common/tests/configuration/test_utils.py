# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""Tests for configuration utility functions."""
import argparse

import pytest

from spindle.common.configuration.utils import (
    EVENTS_DEST,
    add_argument,
    add_flag_argument,
    env_or_default,
)

pytestmark = [
    pytest.mark.unit,
    pytest.mark.pre_merge,
]


class TestEnvOrDefault:
    """Test env_or_default function."""

    def test_returns_default_when_env_not_set(self, monkeypatch):
        """Test returns default value when env var not set."""
        monkeypatch.delenv("TEST_VAR", raising=False)

        result = env_or_default("TEST_VAR", "default_value")
        assert result == "default_value"

    def test_returns_env_when_set(self, monkeypatch):
        """Test returns env value when set."""
        monkeypatch.setenv("TEST_VAR", "env_value")

        result = env_or_default("TEST_VAR", "default_value")
        assert result == "env_value"

    def test_bool_conversion(self, monkeypatch):
        """Test bool conversion for true and false values."""
        for value in ["true", "1", "yes", "ON"]:
            monkeypatch.setenv("TEST_BOOL", value)
            assert env_or_default("TEST_BOOL", False) is True, f"Failed for value: {value}"

        for value in ["false", "0", "no", "off"]:
            monkeypatch.setenv("TEST_BOOL", value)
            assert env_or_default("TEST_BOOL", True) is False, f"Failed for value: {value}"

    def test_int_conversion(self, monkeypatch):
        """Test int conversion."""
        monkeypatch.setenv("TEST_INT", "42")

        result = env_or_default("TEST_INT", 0)
        assert result == 42
        assert isinstance(result, int)

    def test_tuple_is_space_separated(self, monkeypatch):
        """Test tuple defaults split the env value on whitespace."""
        monkeypatch.setenv("TEST_MODELS", " munge  keyfile ")

        result = env_or_default("TEST_MODELS", ("none",))
        assert result == ("munge", "keyfile")

    def test_none_default_passes_string_through(self, monkeypatch):
        """Test a None default returns the raw env string."""
        monkeypatch.setenv("TEST_PATH", "/var/log/spindle")
        assert env_or_default("TEST_PATH", None) == "/var/log/spindle"

        monkeypatch.delenv("TEST_PATH")
        assert env_or_default("TEST_PATH", None) is None


def _events(args):
    return getattr(args, EVENTS_DEST, [])


class TestAddArgument:
    """Test add_argument records events instead of storing values."""

    def _parser(self):
        parser = argparse.ArgumentParser()
        add_argument(
            parser,
            flag_name="--port",
            short_flag="-t",
            env_var="TEST_PORT",
            default=21940,
            metavar="number",
            help="Server port",
        )
        return parser

    def test_records_value_in_order(self):
        """Test each occurrence is recorded, repeats included."""
        args = self._parser().parse_args(["--port", "1", "-t", "2", "--port=3"])
        assert _events(args) == [("port", "1"), ("port", "2"), ("port", "3")]

    def test_absent_option_leaves_no_attribute(self):
        """Test no default is stored on the namespace."""
        args = self._parser().parse_args([])
        assert not hasattr(args, "port")
        assert _events(args) == []

    def test_custom_event_factory(self):
        """Test the event factory builds the recorded object."""
        parser = argparse.ArgumentParser()
        add_argument(
            parser,
            flag_name="--location",
            default=None,
            help="Location",
            event_factory=lambda key, value: f"{key}={value}",
        )
        args = parser.parse_args(["--location", "/tmp"])
        assert _events(args) == ["location=/tmp"]

    def test_help_includes_env_var_and_default(self):
        """Test that help text includes environment variable name and default."""
        help_text = self._parser().format_help()
        assert "TEST_PORT" in help_text
        assert "21940" in help_text

    def test_hidden_option_not_in_help(self):
        """Test hidden options are accepted but not shown."""
        parser = argparse.ArgumentParser()
        add_argument(
            parser, flag_name="--secret", default=None, help="Secret", hidden=True
        )
        assert "--secret" not in parser.format_help()
        assert _events(parser.parse_args(["--secret", "x"])) == [("secret", "x")]


class TestAddFlagArgument:
    """Test add_flag_argument function."""

    def test_flag_records_none_value(self):
        """Test a presence flag records its name with no value."""
        parser = argparse.ArgumentParser()
        add_flag_argument(parser, flag_name="--push", short_flag="-p", help="Push")

        args = parser.parse_args(["--push", "-p"])
        assert _events(args) == [("push", None), ("push", None)]

    def test_flags_interleave_with_values(self):
        """Test flags and value options share one ordered event list."""
        parser = argparse.ArgumentParser()
        add_flag_argument(parser, flag_name="--pull", help="Pull")
        add_argument(parser, flag_name="--debug", default="no", help="Debug")

        args = parser.parse_args(["--debug", "yes", "--pull", "--debug=no"])
        assert _events(args) == [("debug", "yes"), ("pull", None), ("debug", "no")]
