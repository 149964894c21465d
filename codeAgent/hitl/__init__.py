"""Human-in-the-loop confirmation."""

from .confirmation import ConsoleConfirmer, LineReader, is_affirmative

__all__ = ["ConsoleConfirmer", "LineReader", "is_affirmative"]
