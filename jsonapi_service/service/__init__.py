"""Service entry point."""

from .base import ServiceApi

__all__ = ["ServiceApi"]
