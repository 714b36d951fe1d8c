# vendas/services/carrinho/__init__.py

from .carrinho import Carrinho, LinhaCarrinho, calcular_troco
from .desconto_global import (
    DescontoGlobalResolvido,
    DescontoPercentual,
    DescontoPrecoFinal,
    ModoDesconto,
    criar_desconto_global,
)
from .dto import ResumoCarrinho, ResumoItemCarrinho
from .repositorio import CarrinhoRepositorio

__all__ = [
    "Carrinho",
    "LinhaCarrinho",
    "calcular_troco",
    "DescontoGlobalResolvido",
    "DescontoPercentual",
    "DescontoPrecoFinal",
    "ModoDesconto",
    "criar_desconto_global",
    "ResumoCarrinho",
    "ResumoItemCarrinho",
    "CarrinhoRepositorio",
]
