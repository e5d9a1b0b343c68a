"""Snapshot loading for the bot's decision loop."""

from .loader import check_consistency, dump_state, load_state, parse_state

__all__ = [
    "check_consistency",
    "dump_state",
    "load_state",
    "parse_state",
]
