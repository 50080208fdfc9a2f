# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
from typing import Any


class FrozenConfigError(AttributeError):
    """Raised when a finalized configuration is modified."""


class ConfigBase:
    """Base configuration class that allows properties with and without defaults in arbitrary order.

    Instances are built exactly once through :meth:`from_fields` and are frozen
    afterwards: any attribute assignment or deletion raises FrozenConfigError.
    """

    _frozen: bool = False

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        raise TypeError(
            f"{self.__class__.__name__} is built with {self.__class__.__name__}.from_fields()"
        )

    @classmethod
    def from_fields(cls, **fields: Any):
        obj = cls.__new__(cls)

        # 1) Set everything provided by the caller
        for k, v in fields.items():
            object.__setattr__(obj, k, v)

        # 2) Populate annotated defaults from the class (and base classes)
        #    only if not already provided.
        required = []
        for base in reversed(cls.__mro__):
            anns = getattr(base, "__annotations__", {})
            for name in anns:
                if name.startswith("_"):
                    continue

                if name in obj.__dict__:
                    continue

                if name in getattr(base, "__dict__", {}):
                    object.__setattr__(obj, name, getattr(base, name))
                else:
                    required.append(name)

        missing = [name for name in required if name not in obj.__dict__]
        if missing:
            raise TypeError(
                f"{cls.__name__} missing required fields: {', '.join(missing)}"
            )

        object.__setattr__(obj, "_frozen", True)
        return obj

    def __setattr__(self, name: str, value: Any) -> None:
        if self._frozen:
            raise FrozenConfigError(
                f"{self.__class__.__name__} is frozen; cannot set '{name}'"
            )
        super().__setattr__(name, value)

    def __delattr__(self, name: str) -> None:
        if self._frozen:
            raise FrozenConfigError(
                f"{self.__class__.__name__} is frozen; cannot delete '{name}'"
            )
        super().__delattr__(name)

    def fields(self) -> dict:
        return {k: v for k, v in self.__dict__.items() if not k.startswith("_")}

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.fields() == other.fields()

    def __repr__(self) -> str:
        items = ", ".join(f"{k}={v!r}" for k, v in sorted(self.fields().items()))
        return f"{self.__class__.__name__}({items})"
