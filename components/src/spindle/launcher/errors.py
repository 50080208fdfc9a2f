# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""Errors raised while resolving a launch configuration.

Every error is fatal: a malformed launch configuration is never partially
honored, so none of these are caught inside the resolver.
"""

from typing import Iterable


class SpindleConfigError(ValueError):
    """Base class for launch configuration failures."""


class UnknownOptionError(SpindleConfigError):
    """A token does not match any registered option."""

    def __init__(self, token: str):
        self.token = token
        super().__init__(f"unrecognized option '{token}'")


class InvalidScalarValue(SpindleConfigError):
    """An option was given a malformed value."""


class ConfigConflict(SpindleConfigError):
    """The same option was both enabled and disabled."""

    def __init__(self, options: Iterable[str]):
        self.options = sorted(options)
        super().__init__(
            "Cannot have the same option both enabled and disabled: "
            + ", ".join(self.options)
        )


class ExclusiveGroupViolation(SpindleConfigError):
    """More than one option was selected in an exclusive group."""

    def __init__(self, group: str, options: Iterable[str]):
        self.group = group
        self.options = sorted(options)
        super().__init__(
            f"Cannot enable multiple {group} options: {', '.join(self.options)}"
        )


class MissingRequiredArgument(SpindleConfigError):
    """No command to launch was supplied."""


class NoSecurityModelError(SpindleConfigError):
    """The compiled-in security model set is empty."""
