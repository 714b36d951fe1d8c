# vendas/api/v1/views.py

import logging

from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.response import Response

from commons.views.api_views import PdvAPIView
from produtos.services.estoque_service import CatalogoService
from vendas.api.v1.serializers import (
    AdicionarItemInputSerializer,
    AlterarItemInputSerializer,
    AlternarModoDescontoInputSerializer,
    CancelamentoVendaSerializer,
    CancelarVendaInputSerializer,
    ClienteInputSerializer,
    DescontoGlobalInputSerializer,
    FinalizarVendaInputSerializer,
    PagamentoInputSerializer,
    ResumoCarrinhoSerializer,
    VendaSerializer,
)
from vendas.models import Venda
from vendas.services.cancelar_venda_service import cancelar_venda
from vendas.services.carrinho import CarrinhoRepositorio, ModoDesconto
from vendas.services.finalizar_venda_service import finalizar_venda

logger = logging.getLogger(__name__)


class CarrinhoBaseView(PdvAPIView):
    """
    Carrinho em andamento do operador autenticado.

    Cada mutação carrega o carrinho do cache, aplica a alteração e só grava
    de volta se ela for aceita; erro de validação deixa o carrinho como
    estava.
    """

    def _carregar(self, request):
        return CarrinhoRepositorio.obter(request.user)

    def _responder(self, request, carrinho, resumo, http_status=status.HTTP_200_OK) -> Response:
        CarrinhoRepositorio.salvar(request.user, carrinho)
        return Response(ResumoCarrinhoSerializer(resumo).data, status=http_status)


class CarrinhoView(CarrinhoBaseView):
    def get(self, request, *args, **kwargs):
        carrinho = self._carregar(request)
        return Response(ResumoCarrinhoSerializer(carrinho.calcular_resumo()).data)

    def delete(self, request, *args, **kwargs):
        CarrinhoRepositorio.descartar(request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)


class CarrinhoItensView(CarrinhoBaseView):
    def post(self, request, *args, **kwargs):
        ser = AdicionarItemInputSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        dados = ser.validated_data

        item = CatalogoService().obter_item_catalogo(dados["produto_id"])

        carrinho = self._carregar(request)
        resumo = carrinho.adicionar_item(
            item,
            quantidade=dados["quantidade"],
            percentual_desconto=dados["percentual_desconto"],
        )

        logger.info(
            "HTTP PDV: item adicionado ao carrinho. operador_id=%s produto_id=%s qtd=%s request_id=%s",
            request.user.pk,
            item.produto_id,
            dados["quantidade"],
            self.get_request_id(request),
        )
        return self._responder(request, carrinho, resumo, status.HTTP_201_CREATED)


class CarrinhoItemDetalheView(CarrinhoBaseView):
    def patch(self, request, produto_id, *args, **kwargs):
        ser = AlterarItemInputSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        dados = ser.validated_data

        carrinho = self._carregar(request)
        if "quantidade" in dados:
            resumo = carrinho.alterar_quantidade(produto_id, dados["quantidade"])
        if "percentual_desconto" in dados:
            resumo = carrinho.alterar_desconto_item(produto_id, dados["percentual_desconto"])

        return self._responder(request, carrinho, resumo)

    def delete(self, request, produto_id, *args, **kwargs):
        carrinho = self._carregar(request)
        resumo = carrinho.remover_item(produto_id)
        return self._responder(request, carrinho, resumo)


class CarrinhoDescontoGlobalView(CarrinhoBaseView):
    def put(self, request, *args, **kwargs):
        ser = DescontoGlobalInputSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        modo = ser.validated_data["modo"]
        valor = ser.validated_data["valor"]

        carrinho = self._carregar(request)
        if modo == ModoDesconto.PERCENTUAL:
            resumo = carrinho.aplicar_desconto_percentual(valor)
        else:
            resumo = carrinho.aplicar_preco_final(valor)
        return self._responder(request, carrinho, resumo)

    def delete(self, request, *args, **kwargs):
        carrinho = self._carregar(request)
        resumo = carrinho.remover_desconto_global()
        return self._responder(request, carrinho, resumo)


class CarrinhoAlternarModoDescontoView(CarrinhoBaseView):
    def post(self, request, *args, **kwargs):
        ser = AlternarModoDescontoInputSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        carrinho = self._carregar(request)
        resumo = carrinho.alternar_modo_desconto(ser.validated_data["modo"])
        return self._responder(request, carrinho, resumo)


class CarrinhoPagamentoView(CarrinhoBaseView):
    def put(self, request, *args, **kwargs):
        ser = PagamentoInputSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        dados = ser.validated_data

        carrinho = self._carregar(request)
        carrinho.definir_metodo_pagamento(dados["metodo_pagamento"])
        resumo = carrinho.informar_valor_recebido(dados.get("valor_recebido"))
        return self._responder(request, carrinho, resumo)


class CarrinhoClienteView(CarrinhoBaseView):
    def put(self, request, *args, **kwargs):
        ser = ClienteInputSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        dados = ser.validated_data

        carrinho = self._carregar(request)
        if "observacoes" in dados:
            carrinho.observacoes = dados["observacoes"] or None
        resumo = carrinho.definir_cliente(dados.get("cliente_id"))
        return self._responder(request, carrinho, resumo)


class FinalizarVendaView(CarrinhoBaseView):
    """
    Finaliza o carrinho do operador.

    Códigos de resposta:
    - 201: venda criada; carrinho descartado.
    - 400: quantidade em branco / entrada inválida.
    - 409: estoque insuficiente (na conferência ou na baixa) ou caixa em fechamento.
    - 422: carrinho vazio ou dinheiro insuficiente.
    """

    def post(self, request, *args, **kwargs):
        ser = FinalizarVendaInputSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        dados = ser.validated_data
        request_id = self.get_request_id(request)

        carrinho = self._carregar(request)

        logger.info(
            "HTTP PDV: solicitar finalização de venda. operador_id=%s itens=%s request_id=%s",
            request.user.pk,
            len(carrinho.linhas),
            request_id,
        )

        venda = finalizar_venda(
            carrinho=carrinho,
            operador=request.user,
            metodo_pagamento=dados.get("metodo_pagamento"),
            valor_recebido=dados.get("valor_recebido"),
            request_id=request_id,
        )
        CarrinhoRepositorio.descartar(request.user)

        venda = Venda.objects.prefetch_related("itens").get(pk=venda.pk)
        return Response(VendaSerializer(venda).data, status=status.HTTP_201_CREATED)


class VendaDetalheView(PdvAPIView):
    def get(self, request, venda_id, *args, **kwargs):
        venda = get_object_or_404(Venda.objects.prefetch_related("itens"), pk=venda_id)
        return Response(VendaSerializer(venda).data)


class CancelarVendaView(PdvAPIView):
    def post(self, request, venda_id, *args, **kwargs):
        ser = CancelarVendaInputSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        venda = get_object_or_404(Venda, pk=venda_id)

        logger.info(
            "HTTP PDV: solicitar cancelamento de venda. venda_id=%s operador_id=%s request_id=%s",
            venda.id,
            request.user.pk,
            self.get_request_id(request),
        )

        cancelamento = cancelar_venda(
            venda=venda,
            operador=request.user,
            motivo=ser.validated_data["motivo"],
        )
        return Response(CancelamentoVendaSerializer(cancelamento).data, status=status.HTTP_201_CREATED)
