# vendas/services/finalizar_venda_service.py

from __future__ import annotations

import logging
from typing import List, Optional, Tuple, Union
from uuid import UUID

from django.core.exceptions import ValidationError
from django.db import transaction

from caixa.services.caixa_service import CaixaService
from commons.monetario import arredondar_moeda, quantizar, validar_valor_nao_negativo
from produtos.services.estoque_service import CatalogoService, EstoqueService
from produtos.services.exceptions import ConflitoEstoqueError, ProdutoNaoEncontradoError
from vendas.models import MetodoPagamento, Venda, VendaItem
from vendas.services.carrinho import Carrinho, ResumoCarrinho, calcular_troco
from vendas.services.colaboradores import (
    CatalogoProtocol,
    EstoqueProtocol,
    RepositorioVendasProtocol,
    VendaRepositorio,
)
from vendas.services.exceptions import (
    CarrinhoVazioError,
    EstoqueInsuficienteError,
    PagamentoInsuficienteError,
)
from vendas.services.numeracao_service import gerar_numero_venda

logger = logging.getLogger(__name__)


def _validar_pre_condicoes(
    carrinho: Carrinho,
    metodo_pagamento: str,
    valor_recebido,
    catalogo: CatalogoProtocol,
    estoque: EstoqueProtocol,
) -> Tuple[Carrinho, ResumoCarrinho]:
    """
    Confere o carrinho contra o cadastro atual.

    Devolve uma cópia do carrinho precificada pelo catálogo deste instante e
    o resumo dela; o carrinho recebido não é alterado.
    """
    # 1) carrinho com itens
    if carrinho.esta_vazio:
        raise CarrinhoVazioError()

    # quantidade em branco é correção do operador, não falha de negócio
    em_branco = [linha.item.descricao for linha in carrinho.linhas if linha.quantidade is None]
    if em_branco:
        raise ValidationError(
            {"quantidade": f"Informe a quantidade de: {', '.join(em_branco)}."}
        )

    # 2) catálogo e estoque relidos na fonte, não do snapshot do carrinho.
    # Produto inativado depois de entrar no carrinho conta como saldo zero.
    itens_atuais = {}
    for linha in carrinho.linhas:
        try:
            item_atual = catalogo.obter_item_catalogo(linha.produto_id)
            disponivel = estoque.obter_quantidade_disponivel(linha.produto_id)
        except ProdutoNaoEncontradoError:
            item_atual, disponivel = None, 0

        if linha.quantidade > disponivel:
            raise EstoqueInsuficienteError(
                produto_id=linha.produto_id,
                descricao=linha.item.descricao,
                quantidade_solicitada=linha.quantidade,
                quantidade_disponivel=disponivel,
            )

        if (
            item_atual.preco_unitario != linha.item.preco_unitario
            or item_atual.percentual_desconto != linha.item.percentual_desconto
        ):
            logger.info(
                "Catálogo alterado desde a inclusão no carrinho; linha reprecificada. "
                "produto_id=%s preco=%s->%s desconto=%s->%s",
                linha.produto_id,
                linha.item.preco_unitario,
                item_atual.preco_unitario,
                linha.item.percentual_desconto,
                item_atual.percentual_desconto,
            )
        itens_atuais[linha.produto_id] = item_atual

    carrinho_atual = carrinho.com_catalogo_atualizado(itens_atuais)
    resumo = carrinho_atual.calcular_resumo()

    # 3) dinheiro precisa cobrir o total
    if metodo_pagamento == MetodoPagamento.DINHEIRO:
        if valor_recebido is None or valor_recebido < resumo.total:
            raise PagamentoInsuficienteError(total=resumo.total, valor_recebido=valor_recebido)

    return carrinho_atual, resumo


def _montar_venda(
    *,
    carrinho: Carrinho,
    resumo: ResumoCarrinho,
    operador,
    sessao,
    numero: str,
    metodo_pagamento: str,
    valor_recebido,
    request_id: Optional[str],
) -> tuple[Venda, List[VendaItem]]:
    """Copia (por valor) tudo o que a venda precisa guardar do carrinho."""
    eh_dinheiro = metodo_pagamento == MetodoPagamento.DINHEIRO

    venda = Venda(
        numero=numero,
        operador=operador,
        sessao_caixa=sessao,
        cliente_id=resumo.cliente_id,
        metodo_pagamento=metodo_pagamento,
        subtotal=resumo.subtotal,
        total_desconto_itens=resumo.total_desconto_itens,
        modo_desconto_global=resumo.modo_desconto_global,
        percentual_desconto_global=quantizar(resumo.percentual_desconto_global, 4),
        valor_desconto_global=resumo.valor_desconto_global,
        total_desconto=resumo.total_desconto,
        total=resumo.total,
        valor_recebido=valor_recebido if eh_dinheiro else None,
        troco=calcular_troco(resumo.total, valor_recebido) if eh_dinheiro else None,
        observacoes=carrinho.observacoes,
        request_id=request_id,
    )

    itens = [
        VendaItem(
            venda=venda,
            produto_id=item.produto_id,
            ordem=ordem,
            descricao=item.descricao,
            quantidade=item.quantidade,
            preco_unitario=item.preco_unitario,
            percentual_desconto_catalogo=quantizar(item.percentual_desconto_catalogo, 2),
            percentual_desconto_linha=quantizar(item.percentual_desconto_linha, 2),
            percentual_desconto_efetivo=quantizar(item.desconto_efetivo, 2),
            preco_unitario_com_desconto=quantizar(item.preco_unitario_com_desconto, 6),
            total_bruto=item.total_bruto,
            desconto=item.desconto,
            subtotal=item.subtotal,
        )
        for ordem, item in enumerate(resumo.itens, start=1)
    ]
    return venda, itens


def finalizar_venda(
    *,
    carrinho: Carrinho,
    operador,
    metodo_pagamento: Optional[str] = None,
    valor_recebido=None,
    catalogo: Optional[CatalogoProtocol] = None,
    estoque: Optional[EstoqueProtocol] = None,
    repositorio: Optional[RepositorioVendasProtocol] = None,
    request_id: Optional[Union[str, UUID]] = None,
) -> Venda:
    """
    Transforma o carrinho em uma Venda imutável e baixa o estoque.

    Pré-condições, nesta ordem (cada uma com sua falha):
    1) carrinho não vazio → CarrinhoVazioError
       (quantidade em branco → ValidationError)
    2) estoque atual cobre cada linha → EstoqueInsuficienteError
       (produto inativado conta como saldo zero)
    3) dinheiro: valor_recebido >= total → PagamentoInsuficienteError

    Preço e desconto de catálogo são relidos aqui: a venda guarda o cadastro
    do momento da finalização, não o do momento em que o item entrou no
    carrinho.

    Numeração, gravação da venda e baixa de estoque acontecem numa única
    transação. Se alguma baixa for recusada (ConflitoEstoqueError), tudo é
    desfeito e a falha sai como EstoqueInsuficienteError.

    O carrinho só é limpo depois do commit; em qualquer falha ele fica
    exatamente como estava.
    """
    catalogo = catalogo or CatalogoService()
    estoque = estoque or EstoqueService()
    repositorio = repositorio or VendaRepositorio()
    request_id = str(request_id) if request_id is not None else None

    if metodo_pagamento is None:
        metodo_pagamento = carrinho.metodo_pagamento
    if metodo_pagamento not in MetodoPagamento.values:
        raise ValidationError(
            {"metodo_pagamento": f"Método de pagamento inválido: {metodo_pagamento!r}."}
        )

    if valor_recebido is None and metodo_pagamento == MetodoPagamento.DINHEIRO:
        valor_recebido = carrinho.valor_recebido
    if valor_recebido is not None:
        valor_recebido = arredondar_moeda(validar_valor_nao_negativo(valor_recebido, "valor_recebido"))

    logger.info(
        "Iniciando finalização de venda. operador_id=%s itens=%s metodo=%s request_id=%s",
        operador.pk,
        len(carrinho.linhas),
        metodo_pagamento,
        request_id,
    )

    carrinho_atual, resumo = _validar_pre_condicoes(
        carrinho, metodo_pagamento, valor_recebido, catalogo, estoque
    )

    try:
        with transaction.atomic():
            sessao = CaixaService.obter_ou_abrir_sessao(operador)
            numero = gerar_numero_venda()

            venda, itens = _montar_venda(
                carrinho=carrinho_atual,
                resumo=resumo,
                operador=operador,
                sessao=sessao,
                numero=numero,
                metodo_pagamento=metodo_pagamento,
                valor_recebido=valor_recebido,
                request_id=request_id,
            )
            repositorio.persistir_venda(venda, itens)

            for item in itens:
                estoque.baixar_estoque(item.produto_id, item.quantidade)

    except ConflitoEstoqueError as exc:
        linha = carrinho.obter_linha(exc.produto_id)
        logger.warning(
            "Baixa de estoque recusada na finalização; venda desfeita. "
            "operador_id=%s produto_id=%s qtd=%s request_id=%s",
            operador.pk,
            exc.produto_id,
            exc.quantidade_solicitada,
            request_id,
        )
        raise EstoqueInsuficienteError(
            produto_id=linha.produto_id,
            descricao=linha.item.descricao,
            quantidade_solicitada=exc.quantidade_solicitada,
        ) from exc

    carrinho.limpar()

    logger.info(
        "venda_finalizada",
        extra={
            "event": "venda_finalizada",
            "venda_id": str(venda.id),
            "numero": venda.numero,
            "operador_id": operador.pk,
            "sessao_id": str(sessao.id),
            "metodo_pagamento": metodo_pagamento,
            "subtotal": float(venda.subtotal),
            "total_desconto": float(venda.total_desconto),
            "total": float(venda.total),
            "troco": float(venda.troco) if venda.troco is not None else None,
            "request_id": request_id,
        },
    )
    return venda
