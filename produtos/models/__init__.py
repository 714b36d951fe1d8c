# produtos/models/__init__.py

from .produtos_models import Produto

__all__ = [
    "Produto",
]
