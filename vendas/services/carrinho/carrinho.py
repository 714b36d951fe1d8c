# vendas/services/carrinho/carrinho.py

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, List, Optional

from django.core.exceptions import ValidationError

from commons.monetario import (
    CEM,
    ZERO,
    arredondar_moeda,
    validar_percentual,
    validar_valor_nao_negativo,
)
from produtos.services.dto import ItemCatalogo
from vendas.models.venda_models import MetodoPagamento
from vendas.services.carrinho.desconto_global import (
    DescontoGlobal,
    DescontoPercentual,
    DescontoPrecoFinal,
)
from vendas.services.carrinho.dto import ResumoCarrinho, ResumoItemCarrinho
from vendas.services.precificacao import PrecoLinha, calcular_preco_linha

logger = logging.getLogger(__name__)


def calcular_troco(total: Decimal, valor_recebido: Decimal) -> Decimal:
    """Troco em dinheiro; negativo indica pagamento insuficiente."""
    return arredondar_moeda(valor_recebido - total)


@dataclass
class LinhaCarrinho:
    item: ItemCatalogo
    quantidade: Optional[int] = 1
    percentual_desconto: Decimal = Decimal("0")

    @property
    def produto_id(self) -> str:
        return self.item.produto_id

    def precificar(self) -> PrecoLinha:
        # quantidade em branco (edição em andamento) não soma nada
        return calcular_preco_linha(
            preco_unitario=self.item.preco_unitario,
            percentual_desconto_catalogo=self.item.percentual_desconto,
            percentual_desconto_linha=self.percentual_desconto,
            quantidade=self.quantidade or 0,
        )


class Carrinho:
    """
    Carrinho do PDV (um por operador/terminal), mantido em memória.

    Toda mutação valida a entrada, aplica a alteração e devolve o resumo
    recalculado. Entrada inválida levanta ValidationError e não altera nada.
    Nenhum total é armazenado: o resumo é sempre derivado do estado atual.
    """

    def __init__(self):
        self._linhas: Dict[str, LinhaCarrinho] = {}
        self.cliente_id: Optional[str] = None
        self.desconto_global: Optional[DescontoGlobal] = None
        self.metodo_pagamento: str = MetodoPagamento.DINHEIRO
        self.valor_recebido: Optional[Decimal] = None
        self.observacoes: Optional[str] = None

    # ------------------------------------------------------------------
    # Leitura
    # ------------------------------------------------------------------
    @property
    def linhas(self) -> List[LinhaCarrinho]:
        return list(self._linhas.values())

    @property
    def esta_vazio(self) -> bool:
        return not self._linhas

    def obter_linha(self, produto_id) -> LinhaCarrinho:
        linha = self._linhas.get(str(produto_id))
        if linha is None:
            raise ValidationError({"produto_id": f"Produto {produto_id} não está no carrinho."})
        return linha

    # ------------------------------------------------------------------
    # Itens
    # ------------------------------------------------------------------
    def adicionar_item(
        self,
        item: ItemCatalogo,
        quantidade: int = 1,
        percentual_desconto=Decimal("0"),
    ) -> ResumoCarrinho:
        if item.produto_id in self._linhas:
            raise ValidationError(
                {"produto_id": f"{item.descricao} já está no carrinho; altere a quantidade da linha."}
            )

        quantidade = self._validar_quantidade(item, quantidade)
        percentual = self._validar_desconto_linha(item, percentual_desconto)

        self._linhas[item.produto_id] = LinhaCarrinho(
            item=item,
            quantidade=quantidade,
            percentual_desconto=percentual,
        )
        logger.debug(
            "Item adicionado ao carrinho. produto_id=%s qtd=%s perc_desc=%s",
            item.produto_id,
            quantidade,
            percentual,
        )
        return self.calcular_resumo()

    def remover_item(self, produto_id) -> ResumoCarrinho:
        linha = self.obter_linha(produto_id)
        del self._linhas[linha.produto_id]
        logger.debug("Item removido do carrinho. produto_id=%s", linha.produto_id)
        return self.calcular_resumo()

    def alterar_quantidade(self, produto_id, quantidade: Optional[int]) -> ResumoCarrinho:
        """
        Altera a quantidade de uma linha.

        None deixa a quantidade em branco (operador digitando); a linha não
        soma nos totais e precisa ser preenchida antes da finalização.
        """
        linha = self.obter_linha(produto_id)
        if quantidade is not None:
            quantidade = self._validar_quantidade(linha.item, quantidade)
        linha.quantidade = quantidade
        return self.calcular_resumo()

    def alterar_desconto_item(self, produto_id, percentual_desconto) -> ResumoCarrinho:
        linha = self.obter_linha(produto_id)
        linha.percentual_desconto = self._validar_desconto_linha(linha.item, percentual_desconto)
        return self.calcular_resumo()

    # ------------------------------------------------------------------
    # Desconto global
    # ------------------------------------------------------------------
    def aplicar_desconto_percentual(self, percentual) -> ResumoCarrinho:
        self.desconto_global = DescontoPercentual(percentual)
        return self.calcular_resumo()

    def aplicar_preco_final(self, valor_alvo) -> ResumoCarrinho:
        self.desconto_global = DescontoPrecoFinal(valor_alvo)
        return self.calcular_resumo()

    def alternar_modo_desconto(self, modo: str) -> ResumoCarrinho:
        """
        Troca o modo de entrada do desconto global, convertendo o valor atual
        a partir da base corrente. O valor do modo anterior é descartado.
        """
        if modo not in (DescontoPercentual.modo, DescontoPrecoFinal.modo):
            raise ValidationError({"modo": f"Modo de desconto desconhecido: {modo!r}."})

        if self.desconto_global is None or self.desconto_global.modo == modo:
            return self.calcular_resumo()

        self.desconto_global = self.desconto_global.converter(self.base_desconto_global())
        logger.debug(
            "Modo de desconto global alterado. modo=%s desconto=%s",
            modo,
            self.desconto_global,
        )
        return self.calcular_resumo()

    def remover_desconto_global(self) -> ResumoCarrinho:
        self.desconto_global = None
        return self.calcular_resumo()

    # ------------------------------------------------------------------
    # Pagamento / cliente
    # ------------------------------------------------------------------
    def definir_metodo_pagamento(self, metodo_pagamento: str) -> ResumoCarrinho:
        if metodo_pagamento not in MetodoPagamento.values:
            raise ValidationError(
                {"metodo_pagamento": f"Método de pagamento inválido: {metodo_pagamento!r}."}
            )
        self.metodo_pagamento = metodo_pagamento
        if metodo_pagamento != MetodoPagamento.DINHEIRO:
            self.valor_recebido = None
        return self.calcular_resumo()

    def informar_valor_recebido(self, valor) -> ResumoCarrinho:
        if valor is None:
            self.valor_recebido = None
        else:
            self.valor_recebido = arredondar_moeda(
                validar_valor_nao_negativo(valor, "valor_recebido")
            )
        return self.calcular_resumo()

    def definir_cliente(self, cliente_id: Optional[str]) -> ResumoCarrinho:
        self.cliente_id = str(cliente_id) if cliente_id else None
        return self.calcular_resumo()

    def com_catalogo_atualizado(self, itens: Dict[str, ItemCatalogo]) -> "Carrinho":
        """
        Cópia do carrinho com preço e desconto de catálogo relidos do cadastro.

        Usada na finalização: a venda é precificada pelo catálogo do momento
        em que é fechada. Este carrinho não é alterado.
        """
        copia = Carrinho()
        copia.cliente_id = self.cliente_id
        copia.desconto_global = self.desconto_global
        copia.metodo_pagamento = self.metodo_pagamento
        copia.valor_recebido = self.valor_recebido
        copia.observacoes = self.observacoes

        for produto_id, linha in self._linhas.items():
            item = itens.get(produto_id, linha.item)
            copia._linhas[produto_id] = LinhaCarrinho(
                item=item,
                quantidade=linha.quantidade,
                percentual_desconto=self._validar_desconto_linha(item, linha.percentual_desconto),
            )
        return copia

    def limpar(self) -> None:
        self._linhas.clear()
        self.cliente_id = None
        self.desconto_global = None
        self.metodo_pagamento = MetodoPagamento.DINHEIRO
        self.valor_recebido = None
        self.observacoes = None

    # ------------------------------------------------------------------
    # Cálculo
    # ------------------------------------------------------------------
    def base_desconto_global(self) -> Decimal:
        """Subtotal − descontos de item: base comum aos dois modos."""
        return sum((linha.precificar().subtotal for linha in self._linhas.values()), ZERO)

    def calcular_resumo(self) -> ResumoCarrinho:
        itens_resumo = []
        subtotal = ZERO
        total_desconto_itens = ZERO

        for linha in self._linhas.values():
            preco = linha.precificar()
            subtotal += preco.total_bruto
            total_desconto_itens += preco.valor_desconto
            itens_resumo.append(
                ResumoItemCarrinho(
                    produto_id=linha.produto_id,
                    descricao=linha.item.descricao,
                    quantidade=linha.quantidade,
                    preco_unitario=preco.preco_unitario,
                    percentual_desconto_catalogo=preco.percentual_desconto_catalogo,
                    percentual_desconto_linha=preco.percentual_desconto_linha,
                    desconto_efetivo=preco.desconto_efetivo,
                    preco_unitario_com_desconto=preco.preco_unitario_com_desconto,
                    total_bruto=preco.total_bruto,
                    desconto=preco.valor_desconto,
                    subtotal=preco.subtotal,
                )
            )

        base = subtotal - total_desconto_itens

        modo_global = None
        percentual_global = Decimal("0")
        valor_global = ZERO
        if self.desconto_global is not None:
            resolvido = self.desconto_global.resolver(base)
            modo_global = resolvido.modo
            percentual_global = resolvido.percentual
            valor_global = resolvido.valor

        total = base - valor_global

        troco = None
        pagamento_insuficiente = False
        if self.metodo_pagamento == MetodoPagamento.DINHEIRO and self.valor_recebido is not None:
            troco = calcular_troco(total, self.valor_recebido)
            pagamento_insuficiente = troco < 0

        return ResumoCarrinho(
            subtotal=subtotal,
            total_desconto_itens=total_desconto_itens,
            base_desconto_global=base,
            modo_desconto_global=modo_global,
            percentual_desconto_global=percentual_global,
            valor_desconto_global=valor_global,
            total_desconto=total_desconto_itens + valor_global,
            total=total,
            metodo_pagamento=self.metodo_pagamento,
            valor_recebido=self.valor_recebido,
            troco=troco,
            pagamento_insuficiente=pagamento_insuficiente,
            cliente_id=self.cliente_id,
            itens=itens_resumo,
        )

    # ------------------------------------------------------------------
    # Validações de entrada
    # ------------------------------------------------------------------
    @staticmethod
    def _validar_quantidade(item: ItemCatalogo, quantidade) -> int:
        if isinstance(quantidade, bool) or not isinstance(quantidade, int):
            raise ValidationError({"quantidade": "Quantidade deve ser um número inteiro."})

        if quantidade <= 0:
            raise ValidationError({"quantidade": "Quantidade deve ser maior que zero."})

        if quantidade > item.quantidade_disponivel:
            raise ValidationError(
                {
                    "quantidade": (
                        f"Quantidade solicitada ({quantidade}) maior que o estoque "
                        f"disponível de {item.descricao} ({item.quantidade_disponivel})."
                    )
                }
            )
        return quantidade

    @staticmethod
    def _validar_desconto_linha(item: ItemCatalogo, percentual) -> Decimal:
        percentual = validar_percentual(percentual, "percentual_desconto")
        if item.percentual_desconto + percentual > CEM:
            raise ValidationError(
                {
                    "percentual_desconto": (
                        f"Desconto de catálogo ({item.percentual_desconto}%) + desconto do "
                        f"item ({percentual}%) não pode passar de 100%."
                    )
                }
            )
        return percentual
