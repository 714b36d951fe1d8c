# vendas/services/exceptions.py

from decimal import Decimal
from typing import Optional


class FinalizacaoVendaError(Exception):
    """
    Erro genérico de finalização de venda.
    Base para erros específicos; o carrinho permanece intacto.
    """

    code = "ERRO_FINALIZACAO_VENDA"

    def __init__(self, mensagem: str):
        self.mensagem = mensagem
        super().__init__(mensagem)


class CarrinhoVazioError(FinalizacaoVendaError):
    code = "CARRINHO_VAZIO"

    def __init__(self, mensagem: str = "Não é possível finalizar uma venda sem itens."):
        super().__init__(mensagem)


class EstoqueInsuficienteError(FinalizacaoVendaError):
    """
    Quantidade solicitada em uma linha excede o saldo disponível.

    Também usado quando a baixa de estoque é recusada depois da conferência
    (ConflitoEstoqueError do estoque).
    """

    code = "ESTOQUE_INSUFICIENTE"

    def __init__(
        self,
        *,
        produto_id: str,
        descricao: str,
        quantidade_solicitada: int,
        quantidade_disponivel: Optional[int] = None,
    ):
        self.produto_id = produto_id
        self.descricao = descricao
        self.quantidade_solicitada = quantidade_solicitada
        self.quantidade_disponivel = quantidade_disponivel

        if quantidade_disponivel is None:
            mensagem = (
                f"Estoque insuficiente para {descricao}: a baixa de "
                f"{quantidade_solicitada} unidade(s) foi recusada."
            )
        else:
            mensagem = (
                f"Estoque insuficiente para {descricao}. "
                f"Solicitado: {quantidade_solicitada}. Disponível: {quantidade_disponivel}."
            )
        super().__init__(mensagem)


class PagamentoInsuficienteError(FinalizacaoVendaError):
    code = "PAGAMENTO_INSUFICIENTE"

    def __init__(self, *, total: Decimal, valor_recebido: Optional[Decimal]):
        self.total = total
        self.valor_recebido = valor_recebido
        super().__init__(
            f"Valor recebido ({valor_recebido if valor_recebido is not None else '0.00'}) "
            f"é menor que o total da venda ({total})."
        )


class CancelamentoVendaError(Exception):
    """Erros de negócio do cancelamento de venda."""

    def __init__(self, code: str, message: str):
        self.code = code
        super().__init__(message)
