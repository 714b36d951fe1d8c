# produtos/services/dto.py

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class ItemCatalogo:
    """
    Cópia (por valor) do produto no momento da consulta.

    O carrinho guarda esta cópia, nunca o model Produto, para que alterações
    posteriores no cadastro não alterem linhas já precificadas.
    """

    produto_id: str
    codigo_interno: str
    descricao: str
    preco_unitario: Decimal
    percentual_desconto: Decimal
    quantidade_disponivel: int
