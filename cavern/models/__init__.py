from .high_score import HighScore  # noqa: F401

__all__ = ["HighScore"]
