# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""Merging of python install prefix lists."""

from typing import List, Optional


def split_prefixes(prefixes: Optional[str]) -> List[str]:
    """Split a colon-separated path list, dropping empty segments."""
    if not prefixes:
        return []
    return [p for p in prefixes.split(":") if p]


def merge_python_prefixes(default: Optional[str], user: Optional[str] = None) -> str:
    """
    Merge the compiled-in and user python prefix lists.

    The result is the deduplicated union of both lists, colon-joined in
    ascending lexicographic order.

    Examples:
        >>> merge_python_prefixes("/usr", "/usr:/opt/py")
        '/opt/py:/usr'
    """
    merged = set(split_prefixes(default))
    merged.update(split_prefixes(user))
    return ":".join(sorted(merged))
