# produtos/services/exceptions.py


class EstoqueError(Exception):
    """Erros do módulo de estoque."""

    code = "ERRO_ESTOQUE"


class ProdutoNaoEncontradoError(EstoqueError):
    code = "PRODUTO_NAO_ENCONTRADO"

    def __init__(self, produto_id):
        self.produto_id = produto_id
        super().__init__(f"Produto {produto_id} não encontrado ou inativo.")


class ConflitoEstoqueError(EstoqueError):
    """
    A baixa de estoque foi recusada: o saldo mudou entre a conferência e a
    baixa (outro terminal vendeu o mesmo produto).
    """

    code = "CONFLITO_ESTOQUE"

    def __init__(self, produto_id, quantidade_solicitada: int):
        self.produto_id = produto_id
        self.quantidade_solicitada = quantidade_solicitada
        super().__init__(
            f"Baixa de {quantidade_solicitada} unidade(s) recusada para o produto "
            f"{produto_id}: saldo insuficiente no momento da baixa."
        )
