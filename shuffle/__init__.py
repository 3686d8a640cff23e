from .session import EmptyError, ShuffleSession

__all__ = ["EmptyError", "ShuffleSession"]
