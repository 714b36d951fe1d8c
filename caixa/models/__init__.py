# caixa/models/__init__.py

from .caixa_models import (
    CategoriaRetirada,
    FechamentoCaixa,
    FechamentoCaixaMetodo,
    FechamentoImutavelError,
    RetiradaCaixa,
    SessaoCaixa,
)

__all__ = [
    "CategoriaRetirada",
    "FechamentoCaixa",
    "FechamentoCaixaMetodo",
    "FechamentoImutavelError",
    "RetiradaCaixa",
    "SessaoCaixa",
]
