# vendas/services/precificacao.py

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from django.core.exceptions import ValidationError

from commons.monetario import CEM, arredondar_moeda, validar_percentual


@dataclass(frozen=True)
class PrecoLinha:
    preco_unitario: Decimal
    percentual_desconto_catalogo: Decimal
    percentual_desconto_linha: Decimal
    desconto_efetivo: Decimal
    preco_unitario_com_desconto: Decimal
    quantidade: int
    total_bruto: Decimal
    subtotal: Decimal

    @property
    def valor_desconto(self) -> Decimal:
        return self.total_bruto - self.subtotal


def calcular_preco_linha(
    *,
    preco_unitario: Decimal,
    percentual_desconto_catalogo: Decimal,
    percentual_desconto_linha: Decimal,
    quantidade: int,
) -> PrecoLinha:
    """
    Precifica uma linha do carrinho.

    - desconto_efetivo = catálogo + linha (soma simples, não composta);
    - preco_unitario_com_desconto = preço × (1 − desconto_efetivo/100);
    - subtotal = preco_unitario_com_desconto × quantidade, em centavos.

    O desconto de linha é validado em [0, 100]. A soma com o desconto de
    catálogo não é limitada aqui; quem chama decide a política.
    """
    percentual_desconto_linha = validar_percentual(
        percentual_desconto_linha, "percentual_desconto"
    )

    if quantidade is None or quantidade < 0:
        raise ValidationError({"quantidade": "Quantidade não pode ser negativa."})

    desconto_efetivo = percentual_desconto_catalogo + percentual_desconto_linha
    preco_com_desconto = preco_unitario * (CEM - desconto_efetivo) / CEM

    return PrecoLinha(
        preco_unitario=preco_unitario,
        percentual_desconto_catalogo=percentual_desconto_catalogo,
        percentual_desconto_linha=percentual_desconto_linha,
        desconto_efetivo=desconto_efetivo,
        preco_unitario_com_desconto=preco_com_desconto,
        quantidade=quantidade,
        total_bruto=arredondar_moeda(preco_unitario * quantidade),
        subtotal=arredondar_moeda(preco_com_desconto * quantidade),
    )
