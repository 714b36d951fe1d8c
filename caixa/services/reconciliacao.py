# caixa/services/reconciliacao.py

"""
Reconciliação do fechamento de caixa (cálculo puro, sem banco).

    sistema[m]   = Σ total das vendas pagas com m
    diferenca[m] = contado[m] − sistema[m]   (positivo: sobra, negativo: falta)
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterable, Mapping, Tuple

from django.core.exceptions import ValidationError

from caixa.services.exceptions import ContagemIncompletaError
from commons.monetario import ZERO, arredondar_moeda, validar_valor_nao_negativo
from vendas.models.venda_models import MetodoPagamento


@dataclass(frozen=True)
class TotaisMetodo:
    metodo_pagamento: str
    quantidade_vendas: int
    total_sistema: Decimal
    total_contado: Decimal

    @property
    def diferenca(self) -> Decimal:
        return self.total_contado - self.total_sistema


@dataclass(frozen=True)
class ResultadoReconciliacao:
    metodos: Tuple[TotaisMetodo, ...]
    quantidade_vendas: int

    @property
    def total_sistema(self) -> Decimal:
        return sum((m.total_sistema for m in self.metodos), ZERO)

    @property
    def total_contado(self) -> Decimal:
        return sum((m.total_contado for m in self.metodos), ZERO)

    @property
    def diferenca_total(self) -> Decimal:
        return sum((m.diferenca for m in self.metodos), ZERO)

    def por_metodo(self, metodo_pagamento: str) -> TotaisMetodo:
        for totais in self.metodos:
            if totais.metodo_pagamento == metodo_pagamento:
                return totais
        raise KeyError(metodo_pagamento)


def validar_contagem(totais_contados: Mapping[str, object]) -> Dict[str, Decimal]:
    """
    Exige um valor contado (>= 0) para cada método de pagamento.

    Método ausente levanta ContagemIncompletaError; método desconhecido ou
    valor inválido levanta ValidationError.
    """
    desconhecidos = set(totais_contados) - set(MetodoPagamento.values)
    if desconhecidos:
        raise ValidationError(
            {"totais_contados": f"Métodos de pagamento desconhecidos: {', '.join(sorted(desconhecidos))}."}
        )

    faltantes = [m for m in MetodoPagamento.values if totais_contados.get(m) is None]
    if faltantes:
        raise ContagemIncompletaError(faltantes)

    return {
        metodo: arredondar_moeda(validar_valor_nao_negativo(totais_contados[metodo], metodo))
        for metodo in MetodoPagamento.values
    }


def calcular_totais_sistema(vendas: Iterable) -> Dict[str, Tuple[int, Decimal]]:
    """(quantidade, total) por método, para todos os métodos da enumeração."""
    totais = {metodo: (0, ZERO) for metodo in MetodoPagamento.values}
    for venda in vendas:
        quantidade, total = totais[venda.metodo_pagamento]
        totais[venda.metodo_pagamento] = (quantidade + 1, total + venda.total)
    return totais


def reconciliar(vendas: Iterable, totais_contados: Mapping[str, object]) -> ResultadoReconciliacao:
    contados = validar_contagem(totais_contados)
    vendas = list(vendas)
    sistema = calcular_totais_sistema(vendas)

    metodos = tuple(
        TotaisMetodo(
            metodo_pagamento=metodo,
            quantidade_vendas=sistema[metodo][0],
            total_sistema=sistema[metodo][1],
            total_contado=contados[metodo],
        )
        for metodo in MetodoPagamento.values
    )
    return ResultadoReconciliacao(metodos=metodos, quantidade_vendas=len(vendas))
