# vendas/services/numeracao_service.py

from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from vendas.models import SequenciaVenda

logger = logging.getLogger(__name__)

PREFIXO_NUMERO_VENDA = "INV"
LIMITE_SEQUENCIA_DIARIA = 9999


@transaction.atomic
def gerar_numero_venda(data: Optional[date] = None) -> str:
    """
    Reserva o próximo número de venda do dia: INV + AAMMDD + sequência de 4
    dígitos (ex.: INV2410060001).

    A linha da sequência do dia fica travada (select_for_update) até o fim da
    transação de quem chamou, então dois terminais não recebem o mesmo número.
    """
    data = data or timezone.localdate()

    SequenciaVenda.objects.get_or_create(data=data)
    sequencia = SequenciaVenda.objects.select_for_update().get(data=data)

    if sequencia.proximo_numero > LIMITE_SEQUENCIA_DIARIA:
        raise ValidationError(f"Sequência diária de vendas esgotada para {data:%Y-%m-%d}.")

    sequencia.numero_atual = sequencia.proximo_numero
    sequencia.save(update_fields=["numero_atual", "updated_at"])

    numero = f"{PREFIXO_NUMERO_VENDA}{data:%y%m%d}{sequencia.numero_atual:04d}"
    logger.debug("Número de venda reservado. numero=%s", numero)
    return numero
