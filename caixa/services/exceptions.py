# caixa/services/exceptions.py

from typing import Iterable


class CaixaServiceError(Exception):
    """Erros de negócio do módulo de caixa."""

    def __init__(self, code: str, message: str):
        self.code = code
        super().__init__(message)


class ContagemIncompletaError(CaixaServiceError):
    """
    Fechamento recusado: falta o valor contado de algum método de pagamento.
    A sessão continua ABERTA.
    """

    def __init__(self, metodos_faltantes: Iterable[str]):
        self.metodos_faltantes = sorted(metodos_faltantes)
        super().__init__(
            "CONTAGEM_INCOMPLETA",
            "Informe o valor contado para todos os métodos de pagamento. "
            f"Faltando: {', '.join(self.metodos_faltantes)}.",
        )


class TransicaoSessaoInvalidaError(CaixaServiceError):
    def __init__(self, sessao_id, status_atual: str, status_novo: str):
        self.sessao_id = sessao_id
        self.status_atual = status_atual
        self.status_novo = status_novo
        super().__init__(
            "TRANSICAO_SESSAO_INVALIDA",
            f"Transição de {status_atual} para {status_novo} não é permitida "
            f"para a sessão de caixa {sessao_id}.",
        )
