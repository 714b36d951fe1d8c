# produtos/services/estoque_service.py

from __future__ import annotations

import logging

from django.core.exceptions import ValidationError
from django.db.models import F

from produtos.models import Produto
from produtos.services.dto import ItemCatalogo
from produtos.services.exceptions import ConflitoEstoqueError, ProdutoNaoEncontradoError

logger = logging.getLogger(__name__)


class CatalogoService:
    """Leitura do cadastro de produtos para montar linhas de carrinho."""

    def obter_item_catalogo(self, produto_id) -> ItemCatalogo:
        produto = Produto.objects.filter(pk=produto_id, ativo=True).first()
        if produto is None:
            raise ProdutoNaoEncontradoError(produto_id)

        return ItemCatalogo(
            produto_id=str(produto.id),
            codigo_interno=produto.codigo_interno,
            descricao=produto.descricao,
            preco_unitario=produto.preco_venda,
            percentual_desconto=produto.percentual_desconto,
            quantidade_disponivel=produto.estoque,
        )


class EstoqueService:
    """
    Fonte autoritativa do saldo de estoque.

    A baixa é um UPDATE condicional (estoque >= quantidade): se outro
    terminal consumiu o saldo entre a conferência e a baixa, nenhuma linha é
    atualizada e a baixa é recusada com ConflitoEstoqueError.
    """

    def obter_quantidade_disponivel(self, produto_id) -> int:
        estoque = (
            Produto.objects.filter(pk=produto_id, ativo=True)
            .values_list("estoque", flat=True)
            .first()
        )
        if estoque is None:
            raise ProdutoNaoEncontradoError(produto_id)
        return estoque

    def baixar_estoque(self, produto_id, quantidade: int) -> None:
        if quantidade <= 0:
            raise ValidationError({"quantidade": "Quantidade da baixa deve ser maior que zero."})

        atualizados = Produto.objects.filter(
            pk=produto_id,
            ativo=True,
            estoque__gte=quantidade,
        ).update(estoque=F("estoque") - quantidade)

        if atualizados == 0:
            logger.warning(
                "Baixa de estoque recusada. produto_id=%s quantidade=%s",
                produto_id,
                quantidade,
            )
            raise ConflitoEstoqueError(produto_id, quantidade)

        logger.info(
            "Baixa de estoque efetuada. produto_id=%s quantidade=%s",
            produto_id,
            quantidade,
        )

    def repor_estoque(self, produto_id, quantidade: int) -> None:
        if quantidade <= 0:
            raise ValidationError({"quantidade": "Quantidade da reposição deve ser maior que zero."})

        atualizados = Produto.objects.filter(pk=produto_id).update(
            estoque=F("estoque") + quantidade
        )
        if atualizados == 0:
            raise ProdutoNaoEncontradoError(produto_id)

        logger.info(
            "Estoque reposto. produto_id=%s quantidade=%s",
            produto_id,
            quantidade,
        )
