from .base import JSONAPIViewSet

__all__ = ["JSONAPIViewSet"]
