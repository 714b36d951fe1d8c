# commons/monetario.py

"""
Utilitários numéricos compartilhados pelo motor de vendas e pelo caixa.

Todos os valores monetários trafegam como Decimal. Arredondamento para
centavos é sempre ROUND_HALF_UP, e só acontece nos pontos em que o valor
vira dinheiro (subtotal de item, desconto global, troco). Percentuais
equivalentes são mantidos sem arredondar para que a conversão entre modos
de desconto não acumule erro.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

from django.core.exceptions import ValidationError

CENTAVOS = Decimal("0.01")
ZERO = Decimal("0.00")
CEM = Decimal("100")

ValorNumerico = Union[Decimal, int, str]


def para_decimal(valor: ValorNumerico, campo: str = "valor") -> Decimal:
    """
    Converte a entrada do operador para Decimal.

    float é convertido via str para não carregar o erro binário.
    """
    if isinstance(valor, Decimal):
        resultado = valor
    else:
        if isinstance(valor, float):
            valor = str(valor)
        try:
            resultado = Decimal(valor)
        except (InvalidOperation, TypeError, ValueError):
            raise ValidationError({campo: f"Valor numérico inválido: {valor!r}."})

    if not resultado.is_finite():
        raise ValidationError({campo: f"Valor numérico inválido: {valor!r}."})
    return resultado


def arredondar_moeda(valor: ValorNumerico) -> Decimal:
    return para_decimal(valor).quantize(CENTAVOS, rounding=ROUND_HALF_UP)


def aplicar_percentual(valor: Decimal, percentual: Decimal) -> Decimal:
    """Retorna `percentual`% de `valor`, sem arredondar."""
    return valor * percentual / CEM


def percentual_equivalente(parte: Decimal, base: Decimal) -> Decimal:
    """
    Quanto `parte` representa de `base`, em %.

    Base zero ou negativa não tem percentual definido; devolve zero.
    """
    if base <= 0:
        return Decimal("0")
    return parte / base * CEM


def validar_percentual(percentual: ValorNumerico, campo: str = "percentual") -> Decimal:
    """
    Garante percentual em [0, 100].

    Valores fora da faixa são rejeitados, nunca ajustados.
    """
    valor = para_decimal(percentual, campo)
    if valor < 0 or valor > CEM:
        raise ValidationError({campo: "Percentual deve estar entre 0 e 100."})
    return valor


def validar_valor_nao_negativo(valor: ValorNumerico, campo: str = "valor") -> Decimal:
    resultado = para_decimal(valor, campo)
    if resultado < 0:
        raise ValidationError({campo: "Valor não pode ser negativo."})
    return resultado


def quantizar(valor: ValorNumerico, casas: int) -> Decimal:
    """Arredonda (ROUND_HALF_UP) para `casas` decimais, para gravação em DecimalField."""
    return para_decimal(valor).quantize(Decimal(1).scaleb(-casas), rounding=ROUND_HALF_UP)
