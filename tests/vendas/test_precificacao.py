# tests/vendas/test_precificacao.py

from decimal import Decimal

import pytest
from django.core.exceptions import ValidationError

from vendas.services.precificacao import calcular_preco_linha


def test_desconto_de_catalogo_e_linha_sao_somados_nao_compostos():
    preco = calcular_preco_linha(
        preco_unitario=Decimal("100"),
        percentual_desconto_catalogo=Decimal("10"),
        percentual_desconto_linha=Decimal("5"),
        quantidade=2,
    )

    assert preco.desconto_efetivo == Decimal("15")
    assert preco.preco_unitario_com_desconto == Decimal("85")
    assert preco.total_bruto == Decimal("200.00")
    assert preco.subtotal == Decimal("170.00")
    assert preco.valor_desconto == Decimal("30.00")


def test_subtotal_arredonda_para_centavos_no_fim():
    # 3 × 9.99 × 0.67 = 20.0799 → 20.08
    preco = calcular_preco_linha(
        preco_unitario=Decimal("9.99"),
        percentual_desconto_catalogo=Decimal("0"),
        percentual_desconto_linha=Decimal("33"),
        quantidade=3,
    )

    assert preco.subtotal == Decimal("20.08")
    assert preco.total_bruto == Decimal("29.97")


def test_quantidade_zero_gera_linha_zerada():
    preco = calcular_preco_linha(
        preco_unitario=Decimal("10"),
        percentual_desconto_catalogo=Decimal("0"),
        percentual_desconto_linha=Decimal("0"),
        quantidade=0,
    )

    assert preco.subtotal == Decimal("0.00")
    assert preco.total_bruto == Decimal("0.00")


@pytest.mark.parametrize("desconto", ["-1", "100.5", "250"])
def test_desconto_de_linha_fora_da_faixa_e_rejeitado(desconto):
    with pytest.raises(ValidationError) as exc:
        calcular_preco_linha(
            preco_unitario=Decimal("10"),
            percentual_desconto_catalogo=Decimal("0"),
            percentual_desconto_linha=desconto,
            quantidade=1,
        )

    assert "percentual_desconto" in exc.value.message_dict


def test_quantidade_negativa_e_rejeitada():
    with pytest.raises(ValidationError):
        calcular_preco_linha(
            preco_unitario=Decimal("10"),
            percentual_desconto_catalogo=Decimal("0"),
            percentual_desconto_linha=Decimal("0"),
            quantidade=-1,
        )
