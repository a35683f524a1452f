"""Reconciliation of new career facts into a canonical memory profile.

Two layers:
1) ``merge_profiles``: deterministic id-based merge that never drops data
2) ``ReconciliationEngine``: oracle-assisted merges of free text, Q&A answers,
   files and external repositories, each funnelled through (1)
"""

from __future__ import annotations

from .contracts import IdentityKey, KindCounts, MergeReport, MergeResult
from .engine import (
    ANALYSIS_FAILED_SUMMARY,
    DEFAULT_ENHANCE_CONTEXT,
    DEFAULT_IMPACT_SCORE,
    ENHANCEMENT_FAILED_CHANGES,
    ORACLE_MERGE_KINDS,
    ReconciliationEngine,
)
from .keys import identity_key, normalize_key_text
from .merge import merge_profiles, next_timestamp

__all__ = [
    "ANALYSIS_FAILED_SUMMARY",
    "DEFAULT_ENHANCE_CONTEXT",
    "DEFAULT_IMPACT_SCORE",
    "ENHANCEMENT_FAILED_CHANGES",
    "ORACLE_MERGE_KINDS",
    "IdentityKey",
    "KindCounts",
    "MergeReport",
    "MergeResult",
    "ReconciliationEngine",
    "identity_key",
    "merge_profiles",
    "next_timestamp",
    "normalize_key_text",
]
