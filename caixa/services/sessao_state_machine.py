# caixa/services/sessao_state_machine.py

from __future__ import annotations

import logging
from typing import Iterable

from django.utils import timezone

from caixa.models import SessaoCaixa
from caixa.services.exceptions import TransicaoSessaoInvalidaError

logger = logging.getLogger(__name__)

Status = SessaoCaixa.Status

# FECHADA é terminal: não existe reabertura de caixa.
# EM_FECHAMENTO volta para ABERTA quando o fechamento falha.
TRANSICOES_VALIDAS: dict[str, set[str]] = {
    Status.ABERTA: {Status.EM_FECHAMENTO},
    Status.EM_FECHAMENTO: {Status.FECHADA, Status.ABERTA},
    Status.FECHADA: set(),
}


class SessaoCaixaStateMachine:
    """
    ÚNICO ponto autorizado a trocar o status da SessaoCaixa.

    A troca é um UPDATE condicional ao status lido: se outro processo já
    mudou a sessão, nenhuma linha é atualizada e a transição é recusada.
    Assim dois fechamentos simultâneos não conseguem ambos sair de ABERTA.
    """

    @classmethod
    def validar_transicao(cls, sessao: SessaoCaixa, novo_status: str) -> None:
        permitidos: Iterable[str] = TRANSICOES_VALIDAS.get(sessao.status, set())
        if novo_status not in permitidos:
            raise TransicaoSessaoInvalidaError(sessao.id, sessao.status, novo_status)

    @classmethod
    def mudar_status(
        cls,
        sessao: SessaoCaixa,
        novo_status: str,
        *,
        motivo: str | None = None,
        extra_context: dict | None = None,
        **campos,
    ) -> None:
        status_atual = sessao.status
        cls.validar_transicao(sessao, novo_status)

        atualizados = SessaoCaixa.objects.filter(pk=sessao.pk, status=status_atual).update(
            status=novo_status,
            updated_at=timezone.now(),
            **campos,
        )
        if atualizados == 0:
            sessao.refresh_from_db(fields=["status"])
            raise TransicaoSessaoInvalidaError(sessao.id, sessao.status, novo_status)

        sessao.status = novo_status
        for campo, valor in campos.items():
            setattr(sessao, campo, valor)

        context = {
            "event": "sessao_caixa_transicao",
            "sessao_id": str(sessao.id),
            "operador_id": sessao.operador_id,
            "status_anterior": status_atual,
            "status_novo": novo_status,
            "motivo": motivo,
        }
        if extra_context:
            context.update(extra_context)

        logger.info("sessao_caixa_transicao", extra=context)

    @classmethod
    def para_em_fechamento(cls, sessao: SessaoCaixa, **kwargs) -> None:
        cls.mudar_status(sessao, Status.EM_FECHAMENTO, **kwargs)

    @classmethod
    def para_fechada(cls, sessao: SessaoCaixa, **kwargs) -> None:
        cls.mudar_status(sessao, Status.FECHADA, **kwargs)

    @classmethod
    def para_aberta(cls, sessao: SessaoCaixa, **kwargs) -> None:
        cls.mudar_status(sessao, Status.ABERTA, **kwargs)
