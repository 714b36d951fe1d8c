# caixa/api/v1/views.py

import logging

from rest_framework import status
from rest_framework.response import Response

from caixa.api.v1.serializers import (
    FechamentoCaixaSerializer,
    FecharCaixaInputSerializer,
    RetiradaCaixaSerializer,
    RetiradaInputSerializer,
    SessaoCaixaSerializer,
)
from caixa.models import FechamentoCaixa
from caixa.services.caixa_service import CaixaService
from commons.views.api_views import PdvAPIView

logger = logging.getLogger(__name__)


class SessaoCaixaAtualView(PdvAPIView):
    def get(self, request, *args, **kwargs):
        sessao = CaixaService.obter_sessao_aberta(request.user)
        if sessao is None:
            return self._erro(
                "CAIXA_NAO_ABERTO",
                "Não há caixa aberto para o operador.",
                status.HTTP_404_NOT_FOUND,
            )
        return Response(SessaoCaixaSerializer(sessao).data)


class RetiradaCaixaView(PdvAPIView):
    def post(self, request, *args, **kwargs):
        ser = RetiradaInputSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        dados = ser.validated_data

        retirada = CaixaService.registrar_retirada(
            operador=request.user,
            valor=dados["valor"],
            motivo=dados["motivo"],
            categoria=dados["categoria"],
        )
        return Response(RetiradaCaixaSerializer(retirada).data, status=status.HTTP_201_CREATED)


class FecharCaixaView(PdvAPIView):
    """
    Fecha o caixa do operador autenticado.

    Depois do fechamento os refresh tokens do operador são revogados: ele
    precisa autenticar de novo para continuar operando.

    Códigos de resposta:
    - 201: fechamento gravado (diferenças, mesmo não zeradas, não são erro).
    - 409: não há caixa aberto / caixa já em fechamento.
    - 422: contagem incompleta (sessão continua ABERTA).
    """

    def post(self, request, *args, **kwargs):
        ser = FecharCaixaInputSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        dados = ser.validated_data

        logger.info(
            "HTTP PDV: solicitar fechamento de caixa. operador_id=%s request_id=%s",
            request.user.pk,
            self.get_request_id(request),
        )

        fechamento = CaixaService.fechar_caixa(
            operador=request.user,
            totais_contados=dados["totais_contados"],
            observacoes=dados.get("observacoes") or None,
        )
        fechamento = FechamentoCaixa.objects.prefetch_related(
            "metodos", "vendas", "retiradas"
        ).get(pk=fechamento.pk)
        return Response(FechamentoCaixaSerializer(fechamento).data, status=status.HTTP_201_CREATED)
