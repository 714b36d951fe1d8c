# tests/vendas/test_numeracao_service.py

from datetime import date

import pytest
from django.core.exceptions import ValidationError

from vendas.models import SequenciaVenda
from vendas.services.numeracao_service import gerar_numero_venda


@pytest.mark.django_db
def test_numero_segue_formato_inv_data_sequencia():
    dia = date(2024, 10, 6)

    assert gerar_numero_venda(dia) == "INV2410060001"
    assert gerar_numero_venda(dia) == "INV2410060002"


@pytest.mark.django_db
def test_sequencia_reinicia_a_cada_dia():
    gerar_numero_venda(date(2024, 10, 6))

    assert gerar_numero_venda(date(2024, 10, 7)) == "INV2410070001"


@pytest.mark.django_db
def test_sequencia_diaria_esgotada():
    SequenciaVenda.objects.create(data=date(2024, 10, 6), numero_atual=9999)

    with pytest.raises(ValidationError):
        gerar_numero_venda(date(2024, 10, 6))
