from __future__ import annotations


class InvalidMove(ValueError):
    """A move targets an occupied cell, a decided sub-board, or lies off the board."""


class InvalidState(ValueError):
    """A snapshot (or its wire encoding) is malformed or self-inconsistent."""


class InvariantViolation(AssertionError):
    """The search reached a node that the outcome invariants say cannot exist."""
