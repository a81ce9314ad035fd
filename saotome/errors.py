from __future__ import annotations


class InvalidMove(ValueError):
    """A move the rules do not allow right now.

    The state is left untouched; the same player may try again.
    """
