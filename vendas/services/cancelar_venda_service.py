# vendas/services/cancelar_venda_service.py

from __future__ import annotations

import logging
from typing import Optional

from django.core.exceptions import ValidationError
from django.db import transaction

from caixa.models import SessaoCaixa
from produtos.services.estoque_service import EstoqueService
from vendas.models import CancelamentoVenda, Venda
from vendas.services.colaboradores import EstoqueProtocol
from vendas.services.exceptions import CancelamentoVendaError

logger = logging.getLogger(__name__)


@transaction.atomic
def cancelar_venda(
    *,
    venda: Venda,
    operador,
    motivo: str,
    estoque: Optional[EstoqueProtocol] = None,
) -> CancelamentoVenda:
    """
    Cancela uma venda com um registro compensatório.

    - A Venda original não é alterada; o CancelamentoVenda a tira do
      fechamento de caixa.
    - O estoque de cada item volta para o produto.
    - Só uma vez por venda, e só enquanto a sessão de caixa não foi fechada.
    """
    estoque = estoque or EstoqueService()

    if not motivo or not motivo.strip():
        raise ValidationError({"motivo": "Informe o motivo do cancelamento."})

    # trava a sessão para não cruzar com um fechamento em andamento
    sessao = SessaoCaixa.objects.select_for_update().get(pk=venda.sessao_caixa_id)
    if sessao.status != SessaoCaixa.Status.ABERTA:
        raise CancelamentoVendaError(
            "CAIXA_FECHADO",
            f"Venda {venda.numero} pertence a um caixa {sessao.get_status_display().lower()}; "
            "não pode ser cancelada.",
        )

    if CancelamentoVenda.objects.filter(venda_id=venda.pk).exists():
        raise CancelamentoVendaError(
            "VENDA_JA_CANCELADA",
            f"Venda {venda.numero} já foi cancelada.",
        )

    cancelamento = CancelamentoVenda.objects.create(
        venda=venda,
        operador=operador,
        motivo=motivo.strip(),
    )

    for item in venda.itens.all():
        estoque.repor_estoque(item.produto_id, item.quantidade)

    logger.info(
        "venda_cancelada",
        extra={
            "event": "venda_cancelada",
            "venda_id": str(venda.id),
            "numero": venda.numero,
            "operador_id": operador.pk,
            "sessao_id": str(sessao.id),
            "total": float(venda.total),
            "motivo": cancelamento.motivo,
        },
    )
    return cancelamento
