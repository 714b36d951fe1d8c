# caixa/services/caixa_service.py

from __future__ import annotations

import logging
from typing import Mapping, Optional

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from caixa.models import (
    CategoriaRetirada,
    FechamentoCaixa,
    FechamentoCaixaMetodo,
    RetiradaCaixa,
    SessaoCaixa,
)
from caixa.services.exceptions import CaixaServiceError, TransicaoSessaoInvalidaError
from caixa.services.reconciliacao import reconciliar, validar_contagem
from caixa.services.sessao_auth_service import SessaoAuthJWT
from caixa.services.sessao_state_machine import SessaoCaixaStateMachine
from commons.monetario import ZERO, arredondar_moeda, para_decimal
from vendas.services.colaboradores import (
    RepositorioVendasProtocol,
    SessaoAuthProtocol,
    VendaRepositorio,
)

logger = logging.getLogger(__name__)


class CaixaService:
    @staticmethod
    def _sessao_ativa_para_update(operador) -> Optional[SessaoCaixa]:
        return (
            SessaoCaixa.objects.select_for_update()
            .filter(operador=operador)
            .exclude(status=SessaoCaixa.Status.FECHADA)
            .first()
        )

    @staticmethod
    def obter_sessao_aberta(operador) -> Optional[SessaoCaixa]:
        return (
            SessaoCaixa.objects.filter(operador=operador)
            .exclude(status=SessaoCaixa.Status.FECHADA)
            .first()
        )

    @staticmethod
    @transaction.atomic
    def obter_ou_abrir_sessao(operador) -> SessaoCaixa:
        """
        Sessão ABERTA do operador, abrindo uma nova se ainda não existir.

        Chamado pela finalização de venda: a primeira venda do turno abre o
        caixa. Sessão EM_FECHAMENTO não aceita novas vendas.
        """
        sessao = CaixaService._sessao_ativa_para_update(operador)

        if sessao is not None:
            if sessao.status != SessaoCaixa.Status.ABERTA:
                raise CaixaServiceError(
                    "CAIXA_EM_FECHAMENTO",
                    "O caixa do operador está em fechamento; não é possível registrar vendas.",
                )
            return sessao

        sessao = SessaoCaixa.objects.create(operador=operador, aberto_em=timezone.now())

        logger.info(
            "caixa_aberto",
            extra={
                "event": "caixa_aberto",
                "sessao_id": str(sessao.id),
                "operador_id": operador.pk,
                "aberto_em": sessao.aberto_em.isoformat(),
            },
        )
        return sessao

    @staticmethod
    @transaction.atomic
    def registrar_retirada(
        *,
        operador,
        valor,
        motivo: str,
        categoria: str = CategoriaRetirada.OUTRO,
    ) -> RetiradaCaixa:
        """
        Registra uma retirada de dinheiro (sangria) na sessão ABERTA.

        A retirada é informativa: entra em total_retiradas do fechamento,
        mas não altera os totais do sistema nem as diferenças.
        """
        valor = arredondar_moeda(para_decimal(valor, "valor"))
        if valor <= 0:
            raise ValidationError({"valor": "Valor da retirada deve ser maior que zero."})

        if not motivo or not motivo.strip():
            raise ValidationError({"motivo": "Informe o motivo da retirada."})

        if categoria not in CategoriaRetirada.values:
            raise ValidationError({"categoria": f"Categoria de retirada inválida: {categoria!r}."})

        sessao = CaixaService._sessao_ativa_para_update(operador)
        if sessao is None or sessao.status != SessaoCaixa.Status.ABERTA:
            raise CaixaServiceError("CAIXA_NAO_ABERTO", "Não há caixa aberto para o operador.")

        retirada = RetiradaCaixa.objects.create(
            sessao=sessao,
            operador=operador,
            valor=valor,
            motivo=motivo.strip(),
            categoria=categoria,
        )

        logger.info(
            "caixa_retirada",
            extra={
                "event": "caixa_retirada",
                "sessao_id": str(sessao.id),
                "retirada_id": str(retirada.id),
                "operador_id": operador.pk,
                "valor": float(valor),
                "categoria": categoria,
            },
        )
        return retirada

    @staticmethod
    @transaction.atomic
    def _iniciar_fechamento(operador) -> SessaoCaixa:
        sessao = CaixaService._sessao_ativa_para_update(operador)

        if sessao is None:
            raise CaixaServiceError("CAIXA_NAO_ABERTO", "Não há caixa aberto para o operador.")

        if sessao.status != SessaoCaixa.Status.ABERTA:
            raise TransicaoSessaoInvalidaError(sessao.id, sessao.status, SessaoCaixa.Status.EM_FECHAMENTO)

        SessaoCaixaStateMachine.para_em_fechamento(sessao, motivo="Fechamento solicitado.")
        return sessao

    @staticmethod
    @transaction.atomic
    def _concluir_fechamento(
        *,
        sessao: SessaoCaixa,
        operador,
        totais_contados: Mapping[str, object],
        observacoes: Optional[str],
        repositorio: RepositorioVendasProtocol,
    ) -> FechamentoCaixa:
        fechado_em = timezone.now()

        vendas = repositorio.consultar_vendas_da_sessao(
            operador=operador,
            inicio=sessao.aberto_em,
            fim=fechado_em,
        )
        resultado = reconciliar(vendas, totais_contados)

        retiradas = list(sessao.retiradas.all())
        total_retiradas = arredondar_moeda(sum((r.valor for r in retiradas), ZERO))

        fechamento = FechamentoCaixa.objects.create(
            sessao=sessao,
            operador=operador,
            quantidade_vendas=resultado.quantidade_vendas,
            total_sistema=resultado.total_sistema,
            total_contado=resultado.total_contado,
            diferenca_total=resultado.diferenca_total,
            total_retiradas=total_retiradas,
            observacoes=observacoes,
            fechado_em=fechado_em,
        )
        FechamentoCaixaMetodo.objects.bulk_create(
            [
                FechamentoCaixaMetodo(
                    fechamento=fechamento,
                    metodo_pagamento=totais.metodo_pagamento,
                    quantidade_vendas=totais.quantidade_vendas,
                    total_sistema=totais.total_sistema,
                    total_contado=totais.total_contado,
                    diferenca=totais.diferenca,
                )
                for totais in resultado.metodos
            ]
        )
        fechamento.vendas.set(vendas)
        fechamento.retiradas.set(retiradas)

        SessaoCaixaStateMachine.para_fechada(
            sessao,
            motivo="Fechamento concluído.",
            fechado_em=fechado_em,
        )

        logger.info(
            "caixa_fechado",
            extra={
                "event": "caixa_fechado",
                "sessao_id": str(sessao.id),
                "fechamento_id": str(fechamento.id),
                "operador_id": operador.pk,
                "quantidade_vendas": resultado.quantidade_vendas,
                "total_sistema": float(resultado.total_sistema),
                "total_contado": float(resultado.total_contado),
                "diferenca_total": float(resultado.diferenca_total),
                "diferencas": {
                    m.metodo_pagamento: float(m.diferenca) for m in resultado.metodos
                },
                "total_retiradas": float(total_retiradas),
            },
        )
        return fechamento

    @staticmethod
    def fechar_caixa(
        *,
        operador,
        totais_contados: Mapping[str, object],
        observacoes: Optional[str] = None,
        repositorio: Optional[RepositorioVendasProtocol] = None,
        sessao_auth: Optional[SessaoAuthProtocol] = None,
    ) -> FechamentoCaixa:
        """
        Fecha a sessão de caixa do operador.

        Fluxo:
        - Valida a contagem (todos os métodos informados) antes de tocar na
          sessão: contagem incompleta mantém a sessão ABERTA.
        - ABERTA → EM_FECHAMENTO (update condicional; só um fechamento vence).
        - Reconcilia vendas do intervalo da sessão contra os valores contados
          e grava o FechamentoCaixa; EM_FECHAMENTO → FECHADA.
        - Se algo falhar depois do início, a sessão volta para ABERTA.
        - Com o fechamento gravado, encerra a sessão autenticada do operador.
        """
        repositorio = repositorio or VendaRepositorio()
        sessao_auth = sessao_auth or SessaoAuthJWT()

        validar_contagem(totais_contados)

        sessao = CaixaService._iniciar_fechamento(operador)

        try:
            fechamento = CaixaService._concluir_fechamento(
                sessao=sessao,
                operador=operador,
                totais_contados=totais_contados,
                observacoes=observacoes,
                repositorio=repositorio,
            )
        except Exception:
            logger.exception(
                "Falha ao concluir fechamento de caixa. sessao_id=%s operador_id=%s",
                sessao.id,
                operador.pk,
            )
            sessao.refresh_from_db(fields=["status"])
            SessaoCaixaStateMachine.para_aberta(sessao, motivo="Falha no fechamento.")
            raise

        sessao_auth.encerrar_sessao(operador)
        return fechamento
