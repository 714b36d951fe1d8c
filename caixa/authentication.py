# caixa/authentication.py

import logging

from django.db.models import Max
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import InvalidToken
from rest_framework_simplejwt.utils import datetime_from_epoch

from caixa.models import FechamentoCaixa

logger = logging.getLogger(__name__)


class JWTAuthenticationCaixa(JWTAuthentication):
    """
    JWT que perde a validade no fechamento de caixa do operador.

    O fechamento revoga os refresh tokens (SessaoAuthJWT), mas um access
    token já emitido continuaria valendo até expirar. Aqui todo token emitido
    antes do último fechamento do operador é recusado com 401.
    """

    def get_user(self, validated_token):
        user = super().get_user(validated_token)

        ultimo_fechamento = FechamentoCaixa.objects.filter(operador=user).aggregate(
            ultimo=Max("fechado_em")
        )["ultimo"]
        if ultimo_fechamento is None:
            return user

        iat = validated_token.get("iat")
        if iat is None or datetime_from_epoch(iat) < ultimo_fechamento:
            logger.info(
                "token_recusado_apos_fechamento",
                extra={
                    "event": "token_recusado_apos_fechamento",
                    "operador_id": user.pk,
                    "fechado_em": ultimo_fechamento.isoformat(),
                },
            )
            raise InvalidToken("Token emitido antes do fechamento de caixa; autentique-se novamente.")

        return user
