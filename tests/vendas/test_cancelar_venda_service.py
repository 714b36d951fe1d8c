# tests/vendas/test_cancelar_venda_service.py

from decimal import Decimal

import pytest
from django.core.exceptions import ValidationError

from caixa.models import SessaoCaixa
from produtos.services.estoque_service import CatalogoService
from vendas.models import CancelamentoVenda, MetodoPagamento, Venda
from vendas.services.cancelar_venda_service import cancelar_venda
from vendas.services.carrinho import Carrinho
from vendas.services.exceptions import CancelamentoVendaError
from vendas.services.finalizar_venda_service import finalizar_venda


@pytest.fixture
def venda(criar_produto, operador):
    produto = criar_produto(preco="25.00", estoque=10)
    carrinho = Carrinho()
    carrinho.adicionar_item(CatalogoService().obter_item_catalogo(produto.pk), quantidade=3)
    return finalizar_venda(
        carrinho=carrinho,
        operador=operador,
        metodo_pagamento=MetodoPagamento.CARTAO,
    )


@pytest.mark.django_db
def test_cancelar_venda_repoe_estoque_sem_alterar_a_venda(venda, operador):
    produto = venda.itens.get().produto
    assert produto.estoque == 7

    cancelamento = cancelar_venda(venda=venda, operador=operador, motivo="Cliente desistiu")

    assert cancelamento.venda_id == venda.pk
    assert cancelamento.motivo == "Cliente desistiu"
    produto.refresh_from_db()
    assert produto.estoque == 10

    venda = Venda.objects.get(pk=venda.pk)
    assert venda.total == Decimal("75.00")
    assert venda.cancelada is True


@pytest.mark.django_db
def test_venda_so_pode_ser_cancelada_uma_vez(venda, operador):
    cancelar_venda(venda=venda, operador=operador, motivo="Erro de digitação")

    with pytest.raises(CancelamentoVendaError) as exc:
        cancelar_venda(venda=venda, operador=operador, motivo="De novo")

    assert exc.value.code == "VENDA_JA_CANCELADA"
    assert CancelamentoVenda.objects.count() == 1
    assert venda.itens.get().produto.estoque == 10


@pytest.mark.django_db
def test_venda_de_caixa_fechado_nao_pode_ser_cancelada(venda, operador):
    SessaoCaixa.objects.filter(pk=venda.sessao_caixa_id).update(status=SessaoCaixa.Status.FECHADA)

    with pytest.raises(CancelamentoVendaError) as exc:
        cancelar_venda(venda=venda, operador=operador, motivo="Tarde demais")

    assert exc.value.code == "CAIXA_FECHADO"
    assert CancelamentoVenda.objects.count() == 0


@pytest.mark.django_db
def test_cancelamento_exige_motivo(venda, operador):
    with pytest.raises(ValidationError):
        cancelar_venda(venda=venda, operador=operador, motivo="   ")
