# vendas/services/colaboradores.py

"""
Contratos dos colaboradores consumidos pelo motor de vendas e pelo caixa,
e a implementação Django do repositório de vendas.

Estoque e catálogo ficam em produtos.services.estoque_service; o
encerramento de sessão autenticada fica em caixa.services.sessao_auth_service.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Protocol, Sequence

from produtos.services.dto import ItemCatalogo
from vendas.models import Venda, VendaItem

logger = logging.getLogger(__name__)


class CatalogoProtocol(Protocol):
    def obter_item_catalogo(self, produto_id) -> ItemCatalogo:
        ...


class EstoqueProtocol(Protocol):
    """
    Fonte autoritativa de estoque.

    baixar_estoque deve recusar (ConflitoEstoqueError) quando o saldo não
    cobre a quantidade no momento da baixa.
    """

    def obter_quantidade_disponivel(self, produto_id) -> int:
        ...

    def baixar_estoque(self, produto_id, quantidade: int) -> None:
        ...

    def repor_estoque(self, produto_id, quantidade: int) -> None:
        ...


class RepositorioVendasProtocol(Protocol):
    def persistir_venda(self, venda: Venda, itens: Sequence[VendaItem]):
        ...

    def consultar_vendas_da_sessao(self, *, operador, inicio: datetime, fim: datetime) -> List[Venda]:
        ...


class SessaoAuthProtocol(Protocol):
    """Encerra o contexto autenticado do operador (logout forçado)."""

    def encerrar_sessao(self, operador) -> None:
        ...


class VendaRepositorio:
    """Repositório de vendas sobre o ORM."""

    def persistir_venda(self, venda: Venda, itens: Sequence[VendaItem]):
        venda.full_clean()
        venda.save()
        for item in itens:
            item.venda = venda
            item.full_clean()
        VendaItem.objects.bulk_create(itens)

        logger.info(
            "venda_persistida",
            extra={
                "event": "venda_persistida",
                "venda_id": str(venda.id),
                "numero": venda.numero,
                "operador_id": venda.operador_id,
                "sessao_id": str(venda.sessao_caixa_id),
                "itens": len(itens),
                "total": float(venda.total),
            },
        )
        return venda.id

    def consultar_vendas_da_sessao(self, *, operador, inicio: datetime, fim: datetime) -> List[Venda]:
        """Vendas do operador no intervalo [inicio, fim], sem as canceladas."""
        return list(
            Venda.objects.filter(
                operador=operador,
                criado_em__gte=inicio,
                criado_em__lte=fim,
                cancelamento__isnull=True,
            ).order_by("criado_em")
        )
