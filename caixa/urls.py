# caixa/urls.py

from django.urls import path

from caixa.api.v1.views import FecharCaixaView, RetiradaCaixaView, SessaoCaixaAtualView

app_name = "caixa"

urlpatterns = [
    path("sessao/", SessaoCaixaAtualView.as_view(), name="sessao-atual"),
    path("retiradas/", RetiradaCaixaView.as_view(), name="retiradas"),
    path("fechar/", FecharCaixaView.as_view(), name="fechar"),
]
