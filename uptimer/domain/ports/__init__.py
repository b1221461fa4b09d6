"""Domain ports package."""

from .checker import IChecker, ICheckerResolver

__all__ = ["IChecker", "ICheckerResolver"]
