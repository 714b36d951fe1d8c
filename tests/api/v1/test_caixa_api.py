# tests/api/v1/test_caixa_api.py

from datetime import timedelta

import pytest
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient
from rest_framework_simplejwt.token_blacklist.models import BlacklistedToken
from rest_framework_simplejwt.tokens import RefreshToken

from caixa.models import FechamentoCaixa, SessaoCaixa


@pytest.fixture
def vender_via_api(api_client, criar_produto):
    def _vender(preco, metodo="DIN"):
        produto = criar_produto(preco=preco, estoque=1)
        api_client.post(
            reverse("vendas:carrinho-itens"),
            data={"produto_id": str(produto.pk), "quantidade": 1},
            format="json",
        )
        dados = {"metodo_pagamento": metodo}
        if metodo == "DIN":
            dados["valor_recebido"] = preco
        resp = api_client.post(reverse("vendas:carrinho-finalizar"), data=dados, format="json")
        assert resp.status_code == status.HTTP_201_CREATED
        return resp.json()

    return _vender


@pytest.mark.django_db
def test_sem_caixa_aberto_retorna_404(api_client):
    resp = api_client.get(reverse("caixa:sessao-atual"))

    assert resp.status_code == status.HTTP_404_NOT_FOUND
    assert resp.json()["code"] == "CAIXA_NAO_ABERTO"


@pytest.mark.django_db
def test_primeira_venda_abre_o_caixa(api_client, vender_via_api):
    vender_via_api("10.00")

    resp = api_client.get(reverse("caixa:sessao-atual"))

    assert resp.status_code == status.HTTP_200_OK
    assert resp.json()["status"] == "ABERTA"


@pytest.mark.django_db
def test_registrar_retirada(api_client, vender_via_api):
    vender_via_api("50.00")

    resp = api_client.post(
        reverse("caixa:retiradas"),
        data={"valor": "20.00", "motivo": "Compra de gelo", "categoria": "NEGOCIO"},
        format="json",
    )

    assert resp.status_code == status.HTTP_201_CREATED
    assert resp.json()["valor"] == "20.00"
    assert resp.json()["categoria"] == "NEGOCIO"


@pytest.mark.django_db
def test_retirada_sem_caixa_retorna_409(api_client):
    resp = api_client.post(
        reverse("caixa:retiradas"),
        data={"valor": "20.00", "motivo": "Troco"},
        format="json",
    )

    assert resp.status_code == status.HTTP_409_CONFLICT
    assert resp.json()["code"] == "CAIXA_NAO_ABERTO"


@pytest.mark.django_db
def test_fechar_caixa_com_diferenca(api_client, operador, vender_via_api):
    v1 = vender_via_api("50.00")
    v2 = vender_via_api("70.00")
    RefreshToken.for_user(operador)

    resp = api_client.post(
        reverse("caixa:fechar"),
        data={
            "totais_contados": {"DIN": "115.00", "CAR": "0", "TRF": "0"},
            "observacoes": "Conferido com o gerente",
        },
        format="json",
    )

    assert resp.status_code == status.HTTP_201_CREATED
    body = resp.json()
    assert body["total_sistema"] == "120.00"
    assert body["total_contado"] == "115.00"
    assert body["diferenca_total"] == "-5.00"
    assert sorted(body["vendas"]) == sorted([v1["numero"], v2["numero"]])

    por_metodo = {m["metodo_pagamento"]: m for m in body["metodos"]}
    assert set(por_metodo) == {"DIN", "CAR", "TRF"}
    assert por_metodo["DIN"]["diferenca"] == "-5.00"
    assert por_metodo["CAR"]["diferenca"] == "0.00"

    assert SessaoCaixa.objects.get(operador=operador).status == SessaoCaixa.Status.FECHADA
    assert BlacklistedToken.objects.filter(token__user=operador).exists()


@pytest.mark.django_db
def test_fechar_caixa_com_contagem_incompleta_retorna_422(api_client, operador, vender_via_api):
    vender_via_api("10.00")

    resp = api_client.post(
        reverse("caixa:fechar"),
        data={"totais_contados": {"DIN": "10.00", "CAR": None}},
        format="json",
    )

    assert resp.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    body = resp.json()
    assert body["code"] == "CONTAGEM_INCOMPLETA"
    assert body["metodos_faltantes"] == ["CAR", "TRF"]
    assert SessaoCaixa.objects.get(operador=operador).status == SessaoCaixa.Status.ABERTA


@pytest.mark.django_db
def test_fechar_sem_caixa_aberto_retorna_409(api_client):
    resp = api_client.post(
        reverse("caixa:fechar"),
        data={"totais_contados": {"DIN": "0", "CAR": "0", "TRF": "0"}},
        format="json",
    )

    assert resp.status_code == status.HTTP_409_CONFLICT
    assert resp.json()["code"] == "CAIXA_NAO_ABERTO"


@pytest.mark.django_db
def test_cancelamento_depois_do_fechamento_e_recusado(api_client, vender_via_api):
    venda = vender_via_api("10.00", metodo="CAR")
    api_client.post(
        reverse("caixa:fechar"),
        data={"totais_contados": {"DIN": "0", "CAR": "10", "TRF": "0"}},
        format="json",
    )

    resp = api_client.post(
        reverse("vendas:venda-cancelar", kwargs={"venda_id": venda["id"]}),
        data={"motivo": "Tarde demais"},
        format="json",
    )

    assert resp.status_code == status.HTTP_409_CONFLICT
    assert resp.json()["code"] == "CAIXA_FECHADO"


@pytest.mark.django_db
def test_fechamento_lista_as_retiradas(api_client, vender_via_api):
    vender_via_api("50.00")
    api_client.post(
        reverse("caixa:retiradas"),
        data={"valor": "20.00", "motivo": "Compra de gelo", "categoria": "NEGOCIO"},
        format="json",
    )

    resp = api_client.post(
        reverse("caixa:fechar"),
        data={"totais_contados": {"DIN": "50.00", "CAR": "0", "TRF": "0"}},
        format="json",
    )

    assert resp.status_code == status.HTTP_201_CREATED
    body = resp.json()
    assert body["total_retiradas"] == "20.00"
    assert [(r["valor"], r["motivo"]) for r in body["retiradas"]] == [("20.00", "Compra de gelo")]


# =============================================================================
# Logout forçado com JWT real
# =============================================================================

def _login(operador):
    client = APIClient()
    resp = client.post(
        reverse("token-obtain"),
        data={"username": operador.username, "password": "senha-forte-123"},
        format="json",
    )
    assert resp.status_code == status.HTTP_200_OK
    tokens = resp.json()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {tokens['access']}")
    return client, tokens


@pytest.mark.django_db
def test_access_token_emitido_antes_do_fechamento_e_recusado(operador, criar_produto):
    client, tokens = _login(operador)
    produto = criar_produto(preco="10.00", estoque=5)

    client.post(
        reverse("vendas:carrinho-itens"),
        data={"produto_id": str(produto.pk), "quantidade": 1},
        format="json",
    )
    resp = client.post(reverse("vendas:carrinho-finalizar"), data={"metodo_pagamento": "CAR"}, format="json")
    assert resp.status_code == status.HTTP_201_CREATED

    resp = client.post(
        reverse("caixa:fechar"),
        data={"totais_contados": {"DIN": "0", "CAR": "10", "TRF": "0"}},
        format="json",
    )
    assert resp.status_code == status.HTTP_201_CREATED

    # mesmo access token: nada de vender depois do fechamento
    assert client.get(reverse("vendas:carrinho")).status_code == status.HTTP_401_UNAUTHORIZED
    resp = client.post(
        reverse("vendas:carrinho-itens"),
        data={"produto_id": str(produto.pk), "quantidade": 1},
        format="json",
    )
    assert resp.status_code == status.HTTP_401_UNAUTHORIZED
    resp = client.post(reverse("vendas:carrinho-finalizar"), data={"metodo_pagamento": "CAR"}, format="json")
    assert resp.status_code == status.HTTP_401_UNAUTHORIZED

    resp = APIClient().post(reverse("token-refresh"), data={"refresh": tokens["refresh"]}, format="json")
    assert resp.status_code == status.HTTP_401_UNAUTHORIZED

    assert SessaoCaixa.objects.filter(operador=operador).count() == 1
    produto.refresh_from_db()
    assert produto.estoque == 4


@pytest.mark.django_db
def test_novo_login_depois_do_fechamento_e_aceito(operador, criar_produto):
    client, _ = _login(operador)
    produto = criar_produto(preco="10.00", estoque=5)
    client.post(
        reverse("vendas:carrinho-itens"),
        data={"produto_id": str(produto.pk), "quantidade": 1},
        format="json",
    )
    client.post(reverse("vendas:carrinho-finalizar"), data={"metodo_pagamento": "CAR"}, format="json")
    resp = client.post(
        reverse("caixa:fechar"),
        data={"totais_contados": {"DIN": "0", "CAR": "10", "TRF": "0"}},
        format="json",
    )
    # fechamento de uma hora atrás: o próximo login é claramente posterior
    FechamentoCaixa.objects.filter(pk=resp.json()["id"]).update(
        fechado_em=timezone.now() - timedelta(hours=1)
    )

    novo, _ = _login(operador)
    resp = novo.get(reverse("vendas:carrinho"))

    assert resp.status_code == status.HTTP_200_OK
    assert resp.json()["itens"] == []
