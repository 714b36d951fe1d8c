# caixa/services/sessao_auth_service.py

from __future__ import annotations

import logging

from rest_framework_simplejwt.token_blacklist.models import BlacklistedToken, OutstandingToken

logger = logging.getLogger(__name__)


class SessaoAuthJWT:
    """
    Logout forçado do operador: coloca na blacklist todos os refresh tokens
    ainda válidos emitidos para ele. Depois disso o operador precisa
    autenticar de novo para obter um access token.
    """

    def encerrar_sessao(self, operador) -> int:
        pendentes = OutstandingToken.objects.filter(
            user=operador,
            blacklistedtoken__isnull=True,
        )

        encerrados = 0
        for token in pendentes:
            _, criado = BlacklistedToken.objects.get_or_create(token=token)
            if criado:
                encerrados += 1

        logger.info(
            "sessao_operador_encerrada",
            extra={
                "event": "sessao_operador_encerrada",
                "operador_id": operador.pk,
                "tokens_revogados": encerrados,
            },
        )
        return encerrados
