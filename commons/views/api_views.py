# commons/views/api_views.py

import logging
from uuid import uuid4

from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from caixa.services.exceptions import (
    CaixaServiceError,
    ContagemIncompletaError,
)
from produtos.services.exceptions import EstoqueError, ProdutoNaoEncontradoError
from vendas.services.exceptions import (
    CancelamentoVendaError,
    EstoqueInsuficienteError,
    FinalizacaoVendaError,
)

logger = logging.getLogger(__name__)


def _detalhe_validacao(exc: DjangoValidationError):
    if hasattr(exc, "error_dict"):
        return exc.message_dict
    return exc.messages


class PdvAPIView(APIView):
    """
    Base das views do PDV.

    Converte as exceções de domínio em JSON padronizado
    {"code", "detail", "request_id", ...}:

    - 400: ValidationError (entrada do operador)
    - 404: produto inexistente/inativo
    - 409: conflito de estado (estoque, sessão de caixa, cancelamento)
    - 422: regra de negócio da finalização/fechamento não atendida
    """

    permission_classes = [IsAuthenticated]

    def get_request_id(self, request) -> str:
        return (
            getattr(request, "request_id", None)
            or request.headers.get("X-Request-ID")
            or str(uuid4())
        )

    def _erro(self, code: str, detail, http_status: int, **extra) -> Response:
        corpo = {"code": code, "detail": detail, "request_id": self.get_request_id(self.request)}
        corpo.update(extra)
        return Response(corpo, status=http_status)

    def handle_exception(self, exc):
        request_id = self.get_request_id(self.request)

        if isinstance(exc, DjangoValidationError):
            logger.warning(
                "HTTP PDV: erro de validação. path=%s erro=%s request_id=%s",
                self.request.path,
                exc,
                request_id,
            )
            return self._erro("ERRO_VALIDACAO", _detalhe_validacao(exc), status.HTTP_400_BAD_REQUEST)

        if isinstance(exc, ProdutoNaoEncontradoError):
            return self._erro(
                exc.code,
                str(exc),
                status.HTTP_404_NOT_FOUND,
                produto_id=str(exc.produto_id),
            )

        if isinstance(exc, EstoqueInsuficienteError):
            logger.warning(
                "HTTP PDV: estoque insuficiente. produto_id=%s request_id=%s",
                exc.produto_id,
                request_id,
            )
            return self._erro(
                exc.code,
                str(exc),
                status.HTTP_409_CONFLICT,
                produto_id=str(exc.produto_id),
                quantidade_solicitada=exc.quantidade_solicitada,
                quantidade_disponivel=exc.quantidade_disponivel,
            )

        if isinstance(exc, FinalizacaoVendaError):
            logger.warning(
                "HTTP PDV: finalização recusada. code=%s request_id=%s",
                exc.code,
                request_id,
            )
            return self._erro(exc.code, str(exc), status.HTTP_422_UNPROCESSABLE_ENTITY)

        if isinstance(exc, ContagemIncompletaError):
            return self._erro(
                exc.code,
                str(exc),
                status.HTTP_422_UNPROCESSABLE_ENTITY,
                metodos_faltantes=exc.metodos_faltantes,
            )

        if isinstance(exc, (CaixaServiceError, CancelamentoVendaError, EstoqueError)):
            logger.warning(
                "HTTP PDV: conflito de estado. code=%s erro=%s request_id=%s",
                exc.code,
                exc,
                request_id,
            )
            return self._erro(exc.code, str(exc), status.HTTP_409_CONFLICT)

        return super().handle_exception(exc)
