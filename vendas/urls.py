# vendas/urls.py

from django.urls import path

from vendas.api.v1.views import (
    CancelarVendaView,
    CarrinhoAlternarModoDescontoView,
    CarrinhoClienteView,
    CarrinhoDescontoGlobalView,
    CarrinhoItemDetalheView,
    CarrinhoItensView,
    CarrinhoPagamentoView,
    CarrinhoView,
    FinalizarVendaView,
    VendaDetalheView,
)

app_name = "vendas"

urlpatterns = [
    path("carrinho/", CarrinhoView.as_view(), name="carrinho"),
    path("carrinho/itens/", CarrinhoItensView.as_view(), name="carrinho-itens"),
    path(
        "carrinho/itens/<uuid:produto_id>/",
        CarrinhoItemDetalheView.as_view(),
        name="carrinho-item-detalhe",
    ),
    path(
        "carrinho/desconto-global/",
        CarrinhoDescontoGlobalView.as_view(),
        name="carrinho-desconto-global",
    ),
    path(
        "carrinho/desconto-global/alternar-modo/",
        CarrinhoAlternarModoDescontoView.as_view(),
        name="carrinho-desconto-global-alternar",
    ),
    path("carrinho/pagamento/", CarrinhoPagamentoView.as_view(), name="carrinho-pagamento"),
    path("carrinho/cliente/", CarrinhoClienteView.as_view(), name="carrinho-cliente"),
    path("carrinho/finalizar/", FinalizarVendaView.as_view(), name="carrinho-finalizar"),
    path("vendas/<uuid:venda_id>/", VendaDetalheView.as_view(), name="venda-detalhe"),
    path("vendas/<uuid:venda_id>/cancelar/", CancelarVendaView.as_view(), name="venda-cancelar"),
]
