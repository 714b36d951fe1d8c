# commons/models/__init__.py

from .base_models import BaseModel

__all__ = ["BaseModel"]
