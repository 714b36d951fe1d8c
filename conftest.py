# conftest.py (na raiz do projeto)

import itertools
from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from django.core.cache import cache
from rest_framework.test import APIClient

from produtos.models import Produto

_seq = itertools.count(1)


# =============================================================================
# ESTADO COMPARTILHADO
# =============================================================================

@pytest.fixture(autouse=True)
def _limpar_cache():
    """
    Carrinhos e throttling moram no cache local: cada teste começa limpo.
    """
    cache.clear()
    yield
    cache.clear()


# =============================================================================
# USUÁRIOS / CLIENTES HTTP
# =============================================================================

@pytest.fixture
def criar_operador(db):
    User = get_user_model()

    def _criar(username: str | None = None):
        username = username or f"operador{next(_seq)}"
        return User.objects.create_user(username=username, password="senha-forte-123")

    return _criar


@pytest.fixture
def operador(criar_operador):
    return criar_operador("caixa01")


@pytest.fixture
def api_client(operador):
    """
    APIClient já autenticado como `operador`.

    Uso:
        resp = api_client.post(url, data={...}, format="json")
    """
    client = APIClient()
    client.force_authenticate(user=operador)
    return client


# =============================================================================
# PRODUTOS
# =============================================================================

@pytest.fixture
def criar_produto(db):
    """
    Fábrica de produtos ativos.

    Uso:
        produto = criar_produto(preco="100.00", desconto="10", estoque=5)
    """

    def _criar(
        *,
        preco="10.00",
        desconto="0",
        estoque=100,
        descricao=None,
    ) -> Produto:
        n = next(_seq)
        return Produto.objects.create(
            codigo_interno=f"P{n:05d}",
            descricao=descricao or f"Produto {n}",
            preco_venda=Decimal(preco),
            percentual_desconto=Decimal(desconto),
            estoque=estoque,
        )

    return _criar
