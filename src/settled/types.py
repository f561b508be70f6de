"""Constrained type aliases for configuration validation.

These aliases carry msgspec constraints, so values pulled from untyped
sources (environment variables, config files) are checked when converted:

    >>> import msgspec
    >>> from settled.types import WorkerLimit
    >>> msgspec.convert('8', WorkerLimit, strict=False)
    8
    >>> msgspec.convert('0', WorkerLimit, strict=False)
    # ValidationError: Expected `int` >= 1

See Also:
    - https://jcristharif.com/msgspec/constraints.html
"""

from __future__ import annotations

from typing import Annotated

import msgspec

__all__ = [
    'WorkerLimit',
]

WorkerLimit = Annotated[int, msgspec.Meta(ge=1, le=256)]
"""Maximum number of worker threads used by capture_sync.

Valid range: 1 to 256 (inclusive)
"""
