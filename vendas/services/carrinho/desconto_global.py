# vendas/services/carrinho/desconto_global.py

"""
Desconto global do carrinho.

O operador informa o desconto de UM dos dois jeitos:
- PERCENTUAL: % sobre a base (subtotal − descontos de linha);
- PRECO_FINAL: o total desejado; o desconto é o que falta para chegar nele.

Cada variante guarda só o seu próprio valor e é resolvida contra a base
atual no momento da leitura. Trocar de modo converte o valor a partir da
base atual e descarta o anterior, então nunca existem dois descontos
globais somados.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import ClassVar, Union

from django.core.exceptions import ValidationError
from django.db import models

from commons.monetario import (
    ZERO,
    aplicar_percentual,
    arredondar_moeda,
    percentual_equivalente,
    validar_percentual,
    validar_valor_nao_negativo,
)


class ModoDesconto(models.TextChoices):
    PERCENTUAL = "PERCENTUAL", "Percentual sobre o total"
    PRECO_FINAL = "PRECO_FINAL", "Preço final desejado"


@dataclass(frozen=True)
class DescontoGlobalResolvido:
    modo: str
    percentual: Decimal
    valor: Decimal
    total: Decimal


@dataclass(frozen=True)
class DescontoPercentual:
    percentual: Decimal

    modo: ClassVar[str] = ModoDesconto.PERCENTUAL

    def __post_init__(self):
        object.__setattr__(
            self, "percentual", validar_percentual(self.percentual, "percentual_desconto_global")
        )

    def resolver(self, base: Decimal) -> DescontoGlobalResolvido:
        valor = arredondar_moeda(aplicar_percentual(base, self.percentual)) if base > 0 else ZERO
        return DescontoGlobalResolvido(
            modo=self.modo,
            percentual=self.percentual,
            valor=valor,
            total=base - valor,
        )

    def converter(self, base: Decimal) -> "DescontoPrecoFinal":
        return DescontoPrecoFinal(self.resolver(base).total)


@dataclass(frozen=True)
class DescontoPrecoFinal:
    valor_alvo: Decimal

    modo: ClassVar[str] = ModoDesconto.PRECO_FINAL

    def __post_init__(self):
        object.__setattr__(
            self,
            "valor_alvo",
            arredondar_moeda(validar_valor_nao_negativo(self.valor_alvo, "preco_final")),
        )

    def resolver(self, base: Decimal) -> DescontoGlobalResolvido:
        # alvo acima da base não vira acréscimo
        valor = max(ZERO, base - self.valor_alvo)
        return DescontoGlobalResolvido(
            modo=self.modo,
            percentual=percentual_equivalente(valor, base),
            valor=valor,
            total=base - valor,
        )

    def converter(self, base: Decimal) -> DescontoPercentual:
        return DescontoPercentual(self.resolver(base).percentual)


DescontoGlobal = Union[DescontoPercentual, DescontoPrecoFinal]


def criar_desconto_global(modo: str, valor) -> DescontoGlobal:
    if modo == ModoDesconto.PERCENTUAL:
        return DescontoPercentual(valor)
    if modo == ModoDesconto.PRECO_FINAL:
        return DescontoPrecoFinal(valor)
    raise ValidationError({"modo": f"Modo de desconto desconhecido: {modo!r}."})
