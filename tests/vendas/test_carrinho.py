# tests/vendas/test_carrinho.py

from decimal import Decimal

import pytest
from django.core.exceptions import ValidationError

from produtos.services.dto import ItemCatalogo
from vendas.models import MetodoPagamento
from vendas.services.carrinho import (
    Carrinho,
    DescontoPercentual,
    DescontoPrecoFinal,
    ModoDesconto,
)


def _item(
    produto_id="p1",
    preco="100",
    desconto="10",
    disponivel=10,
    descricao="Camiseta",
) -> ItemCatalogo:
    return ItemCatalogo(
        produto_id=produto_id,
        codigo_interno=produto_id.upper(),
        descricao=descricao,
        preco_unitario=Decimal(preco),
        percentual_desconto=Decimal(desconto),
        quantidade_disponivel=disponivel,
    )


@pytest.fixture
def carrinho_170():
    """Preço 100, catálogo 10%, linha 5%, qtd 2 → subtotal da linha 170."""
    carrinho = Carrinho()
    carrinho.adicionar_item(_item(), quantidade=2, percentual_desconto=Decimal("5"))
    return carrinho


# =============================================================================
# Cenários de referência
# =============================================================================

def test_linha_com_desconto_de_catalogo_e_linha(carrinho_170):
    resumo = carrinho_170.calcular_resumo()

    assert resumo.subtotal == Decimal("200.00")
    assert resumo.total_desconto_itens == Decimal("30.00")
    assert resumo.base_desconto_global == Decimal("170.00")
    assert resumo.itens[0].subtotal == Decimal("170.00")
    assert resumo.total == Decimal("170.00")


def test_desconto_global_percentual_sobre_base_apos_descontos_de_linha(carrinho_170):
    resumo = carrinho_170.aplicar_desconto_percentual(Decimal("10"))

    assert resumo.modo_desconto_global == ModoDesconto.PERCENTUAL
    assert resumo.valor_desconto_global == Decimal("17.00")
    assert resumo.total == Decimal("153.00")
    assert resumo.total_desconto == Decimal("47.00")


def test_troca_para_preco_final_140(carrinho_170):
    carrinho_170.aplicar_desconto_percentual(Decimal("10"))
    carrinho_170.alternar_modo_desconto(ModoDesconto.PRECO_FINAL)

    resumo = carrinho_170.aplicar_preco_final(Decimal("140"))

    assert resumo.modo_desconto_global == ModoDesconto.PRECO_FINAL
    assert resumo.valor_desconto_global == Decimal("30.00")
    assert resumo.percentual_desconto_global.quantize(Decimal("0.01")) == Decimal("17.65")
    assert resumo.total == Decimal("140.00")


def test_troco_de_200_sobre_153(carrinho_170):
    carrinho_170.aplicar_desconto_percentual(Decimal("10"))

    resumo = carrinho_170.informar_valor_recebido(Decimal("200"))

    assert resumo.troco == Decimal("47.00")
    assert resumo.pagamento_insuficiente is False


def test_valor_recebido_menor_que_total_aparece_no_resumo_sem_erro(carrinho_170):
    carrinho_170.aplicar_desconto_percentual(Decimal("10"))

    resumo = carrinho_170.informar_valor_recebido(Decimal("100"))

    assert resumo.troco == Decimal("-53.00")
    assert resumo.pagamento_insuficiente is True


def test_valor_recebido_exato_da_troco_zero(carrinho_170):
    resumo = carrinho_170.informar_valor_recebido(Decimal("170"))

    assert resumo.troco == Decimal("0.00")
    assert resumo.pagamento_insuficiente is False


# =============================================================================
# Desconto global
# =============================================================================

def test_preco_final_acima_da_base_nao_gera_acrescimo(carrinho_170):
    resumo = carrinho_170.aplicar_preco_final(Decimal("500"))

    assert resumo.valor_desconto_global == Decimal("0.00")
    assert resumo.percentual_desconto_global == Decimal("0")
    assert resumo.total == Decimal("170.00")


def test_desconto_global_em_carrinho_vazio_resolve_para_zero():
    carrinho = Carrinho()

    resumo = carrinho.aplicar_preco_final(Decimal("50"))

    assert resumo.valor_desconto_global == Decimal("0.00")
    assert resumo.percentual_desconto_global == Decimal("0")
    assert resumo.total == Decimal("0.00")


def test_ida_e_volta_entre_modos_preserva_o_total(carrinho_170):
    carrinho_170.aplicar_desconto_percentual(Decimal("17.65"))
    total_original = carrinho_170.calcular_resumo().total

    carrinho_170.alternar_modo_desconto(ModoDesconto.PRECO_FINAL)
    assert carrinho_170.calcular_resumo().total == total_original
    preco_final = carrinho_170.desconto_global.valor_alvo
    assert preco_final == Decimal("139.99")

    resumo = carrinho_170.alternar_modo_desconto(ModoDesconto.PERCENTUAL)

    # volta como (base - preço final) / base, não como o 17.65 digitado
    base = resumo.base_desconto_global
    assert resumo.modo_desconto_global == ModoDesconto.PERCENTUAL
    assert resumo.percentual_desconto_global == (base - preco_final) / base * Decimal("100")
    assert resumo.percentual_desconto_global != Decimal("17.65")
    assert resumo.total == total_original


def test_trocar_de_modo_descarta_o_valor_anterior(carrinho_170):
    carrinho_170.aplicar_desconto_percentual(Decimal("10"))
    carrinho_170.alternar_modo_desconto(ModoDesconto.PRECO_FINAL)

    assert isinstance(carrinho_170.desconto_global, DescontoPrecoFinal)
    assert carrinho_170.desconto_global.valor_alvo == Decimal("153.00")

    # nunca dois descontos globais somados
    resumo = carrinho_170.calcular_resumo()
    assert resumo.valor_desconto_global == Decimal("17.00")


def test_desconto_percentual_acompanha_a_base_quando_o_carrinho_muda(carrinho_170):
    carrinho_170.aplicar_desconto_percentual(Decimal("10"))

    resumo = carrinho_170.alterar_quantidade("p1", 4)

    assert resumo.base_desconto_global == Decimal("340.00")
    assert resumo.valor_desconto_global == Decimal("34.00")
    assert resumo.total == Decimal("306.00")


def test_alternar_modo_sem_desconto_nao_faz_nada(carrinho_170):
    resumo = carrinho_170.alternar_modo_desconto(ModoDesconto.PRECO_FINAL)

    assert carrinho_170.desconto_global is None
    assert resumo.total == Decimal("170.00")


def test_alternar_para_modo_desconhecido_e_rejeitado_mesmo_sem_desconto(carrinho_170):
    with pytest.raises(ValidationError):
        carrinho_170.alternar_modo_desconto("XYZ")

    assert carrinho_170.desconto_global is None


def test_alternar_para_modo_desconhecido_mantem_desconto_atual(carrinho_170):
    carrinho_170.aplicar_desconto_percentual(Decimal("10"))

    with pytest.raises(ValidationError):
        carrinho_170.alternar_modo_desconto("XYZ")

    assert carrinho_170.desconto_global == DescontoPercentual(Decimal("10"))


def test_remover_desconto_global(carrinho_170):
    carrinho_170.aplicar_desconto_percentual(Decimal("10"))

    resumo = carrinho_170.remover_desconto_global()

    assert resumo.modo_desconto_global is None
    assert resumo.total == Decimal("170.00")


@pytest.mark.parametrize("percentual", ["-5", "101"])
def test_desconto_global_percentual_fora_da_faixa(carrinho_170, percentual):
    with pytest.raises(ValidationError):
        carrinho_170.aplicar_desconto_percentual(percentual)

    assert carrinho_170.desconto_global is None


def test_preco_final_negativo_e_rejeitado(carrinho_170):
    with pytest.raises(ValidationError):
        carrinho_170.aplicar_preco_final(Decimal("-1"))


def test_total_nao_aumenta_quando_descontos_aumentam(carrinho_170):
    totais = []
    for percentual in ["0", "5", "10", "50", "100"]:
        totais.append(carrinho_170.aplicar_desconto_percentual(Decimal(percentual)).total)

    assert totais == sorted(totais, reverse=True)
    assert totais[-1] == Decimal("0.00")

    carrinho_170.remover_desconto_global()
    totais_linha = []
    for percentual in ["0", "10", "45", "90"]:
        totais_linha.append(carrinho_170.alterar_desconto_item("p1", Decimal(percentual)).total)

    assert totais_linha == sorted(totais_linha, reverse=True)


def test_desconto_percentual_guarda_so_o_proprio_valor():
    desconto = DescontoPercentual(Decimal("12.5"))

    resolvido = desconto.resolver(Decimal("80"))

    assert resolvido.valor == Decimal("10.00")
    assert resolvido.total == Decimal("70.00")


# =============================================================================
# Itens
# =============================================================================

def test_itens_mantem_ordem_de_inclusao():
    carrinho = Carrinho()
    carrinho.adicionar_item(_item("b", descricao="B"))
    carrinho.adicionar_item(_item("a", descricao="A"))
    resumo = carrinho.adicionar_item(_item("c", descricao="C"))

    assert [i.produto_id for i in resumo.itens] == ["b", "a", "c"]


def test_adicionar_item_repetido_e_rejeitado(carrinho_170):
    with pytest.raises(ValidationError):
        carrinho_170.adicionar_item(_item(), quantidade=1)

    assert carrinho_170.obter_linha("p1").quantidade == 2


@pytest.mark.parametrize("quantidade", [0, -3])
def test_quantidade_nao_positiva_e_rejeitada(quantidade):
    carrinho = Carrinho()

    with pytest.raises(ValidationError):
        carrinho.adicionar_item(_item(), quantidade=quantidade)

    assert carrinho.esta_vazio


def test_quantidade_acima_do_estoque_consultado_e_rejeitada():
    carrinho = Carrinho()

    with pytest.raises(ValidationError) as exc:
        carrinho.adicionar_item(_item(disponivel=3), quantidade=4)

    assert "quantidade" in exc.value.message_dict


def test_quantidade_em_branco_nao_soma_no_total(carrinho_170):
    carrinho_170.adicionar_item(_item("p2", preco="50", desconto="0"), quantidade=1)

    resumo = carrinho_170.alterar_quantidade("p2", None)

    assert resumo.itens[1].quantidade is None
    assert resumo.itens[1].subtotal == Decimal("0.00")
    assert resumo.total == Decimal("170.00")


def test_alterar_quantidade_invalida_mantem_linha(carrinho_170):
    with pytest.raises(ValidationError):
        carrinho_170.alterar_quantidade("p1", 0)

    assert carrinho_170.obter_linha("p1").quantidade == 2


def test_desconto_catalogo_mais_linha_acima_de_100_e_rejeitado():
    carrinho = Carrinho()

    with pytest.raises(ValidationError) as exc:
        carrinho.adicionar_item(_item(desconto="60"), percentual_desconto=Decimal("50"))

    assert "percentual_desconto" in exc.value.message_dict
    assert carrinho.esta_vazio


def test_desconto_catalogo_mais_linha_igual_a_100_zera_a_linha():
    carrinho = Carrinho()

    resumo = carrinho.adicionar_item(_item(desconto="60"), percentual_desconto=Decimal("40"))

    assert resumo.itens[0].subtotal == Decimal("0.00")
    assert resumo.total == Decimal("0.00")


def test_editar_item_fora_do_carrinho_e_rejeitado(carrinho_170):
    with pytest.raises(ValidationError):
        carrinho_170.remover_item("nao-existe")
    with pytest.raises(ValidationError):
        carrinho_170.alterar_quantidade("nao-existe", 1)


def test_remover_item(carrinho_170):
    resumo = carrinho_170.remover_item("p1")

    assert carrinho_170.esta_vazio
    assert resumo.total == Decimal("0.00")
    assert resumo.itens == []


# =============================================================================
# Pagamento / cliente
# =============================================================================

def test_valor_recebido_negativo_e_rejeitado(carrinho_170):
    with pytest.raises(ValidationError):
        carrinho_170.informar_valor_recebido(Decimal("-10"))


def test_metodo_nao_dinheiro_descarta_valor_recebido(carrinho_170):
    carrinho_170.informar_valor_recebido(Decimal("200"))

    resumo = carrinho_170.definir_metodo_pagamento(MetodoPagamento.CARTAO)

    assert resumo.valor_recebido is None
    assert resumo.troco is None
    assert resumo.pagamento_insuficiente is False


def test_metodo_de_pagamento_desconhecido_e_rejeitado(carrinho_170):
    with pytest.raises(ValidationError):
        carrinho_170.definir_metodo_pagamento("PIX")


def test_limpar_reseta_todo_o_estado(carrinho_170):
    carrinho_170.aplicar_desconto_percentual(Decimal("10"))
    carrinho_170.informar_valor_recebido(Decimal("200"))
    carrinho_170.definir_cliente("cliente-9")
    carrinho_170.observacoes = "entregar amanhã"

    carrinho_170.limpar()

    resumo = carrinho_170.calcular_resumo()
    assert carrinho_170.esta_vazio
    assert carrinho_170.desconto_global is None
    assert carrinho_170.observacoes is None
    assert resumo.valor_recebido is None
    assert resumo.cliente_id is None
    assert resumo.metodo_pagamento == MetodoPagamento.DINHEIRO
