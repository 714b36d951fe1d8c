# vendas/services/carrinho/dto.py

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional


@dataclass
class ResumoItemCarrinho:
    produto_id: str
    descricao: str
    quantidade: Optional[int]
    preco_unitario: Decimal
    percentual_desconto_catalogo: Decimal
    percentual_desconto_linha: Decimal
    desconto_efetivo: Decimal
    preco_unitario_com_desconto: Decimal
    total_bruto: Decimal
    desconto: Decimal
    subtotal: Decimal


@dataclass
class ResumoCarrinho:
    subtotal: Decimal
    total_desconto_itens: Decimal
    base_desconto_global: Decimal
    modo_desconto_global: Optional[str]
    percentual_desconto_global: Decimal
    valor_desconto_global: Decimal
    total_desconto: Decimal
    total: Decimal
    metodo_pagamento: str
    valor_recebido: Optional[Decimal]
    troco: Optional[Decimal]
    pagamento_insuficiente: bool
    cliente_id: Optional[str]
    itens: List[ResumoItemCarrinho] = field(default_factory=list)
