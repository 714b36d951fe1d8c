# vendas/models/__init__.py

from .venda_models import CancelamentoVenda, MetodoPagamento, Venda, VendaImutavelError
from .venda_item_models import VendaItem
from .venda_sequencia_models import SequenciaVenda

__all__ = [
    "CancelamentoVenda",
    "MetodoPagamento",
    "SequenciaVenda",
    "Venda",
    "VendaImutavelError",
    "VendaItem",
]
