# vendas/services/carrinho/repositorio.py

from __future__ import annotations

import logging

from django.conf import settings
from django.core.cache import cache

from vendas.services.carrinho.carrinho import Carrinho

logger = logging.getLogger(__name__)


class CarrinhoRepositorio:
    """
    Guarda o carrinho em andamento de cada operador no cache do Django.

    O carrinho é estado de trabalho do terminal, não dado de negócio: só
    vira registro no banco quando a venda é finalizada.
    """

    @staticmethod
    def _chave(operador) -> str:
        return f"pdv:carrinho:{operador.pk}"

    @classmethod
    def obter(cls, operador) -> Carrinho:
        carrinho = cache.get(cls._chave(operador))
        if carrinho is None:
            logger.debug("Carrinho novo para operador_id=%s", operador.pk)
            carrinho = Carrinho()
        return carrinho

    @classmethod
    def salvar(cls, operador, carrinho: Carrinho) -> None:
        cache.set(
            cls._chave(operador),
            carrinho,
            timeout=getattr(settings, "PDV_CARRINHO_TIMEOUT", 60 * 60 * 8),
        )

    @classmethod
    def descartar(cls, operador) -> None:
        cache.delete(cls._chave(operador))
        logger.info("Carrinho descartado. operador_id=%s", operador.pk)
