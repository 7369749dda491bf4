"""
Configuration for feature selection.

Defaults live on ``Config`` as class attributes so callers can adjust them
for a whole session (``Config.max_len = None``) without threading options
through every call.
"""

from __future__ import annotations


class Config:
    # Character-length bounds applied after pattern selection.
    # 79 covers the longest natural-language tokens; None means unbounded.
    min_len: int = 1
    max_len: int | None = 79

    default_concatenator: str = "_"
    default_weighting: str = "count"
