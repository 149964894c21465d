"""Fuzzy search/replace editing of text files."""

from .engine import MatchNotFoundError, PatchEngine
from .locator import LineMatch, LocateFailure, locate

__all__ = ["LineMatch", "LocateFailure", "MatchNotFoundError", "PatchEngine", "locate"]
