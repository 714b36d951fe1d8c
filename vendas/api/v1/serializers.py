# vendas/api/v1/serializers.py

from rest_framework import serializers

from vendas.models import MetodoPagamento, Venda, VendaItem
from vendas.services.carrinho import ModoDesconto


# --- Saída: resumo do carrinho (dataclasses do serviço) ---

class ResumoItemCarrinhoSerializer(serializers.Serializer):
    produto_id = serializers.CharField()
    descricao = serializers.CharField()
    quantidade = serializers.IntegerField(allow_null=True)
    preco_unitario = serializers.DecimalField(max_digits=None, decimal_places=3)
    percentual_desconto_catalogo = serializers.DecimalField(max_digits=None, decimal_places=2)
    percentual_desconto_linha = serializers.DecimalField(max_digits=None, decimal_places=2)
    desconto_efetivo = serializers.DecimalField(max_digits=None, decimal_places=2)
    preco_unitario_com_desconto = serializers.DecimalField(max_digits=None, decimal_places=6)
    total_bruto = serializers.DecimalField(max_digits=None, decimal_places=2)
    desconto = serializers.DecimalField(max_digits=None, decimal_places=2)
    subtotal = serializers.DecimalField(max_digits=None, decimal_places=2)


class ResumoCarrinhoSerializer(serializers.Serializer):
    subtotal = serializers.DecimalField(max_digits=None, decimal_places=2)
    total_desconto_itens = serializers.DecimalField(max_digits=None, decimal_places=2)
    base_desconto_global = serializers.DecimalField(max_digits=None, decimal_places=2)
    modo_desconto_global = serializers.CharField(allow_null=True)
    percentual_desconto_global = serializers.DecimalField(max_digits=None, decimal_places=4)
    valor_desconto_global = serializers.DecimalField(max_digits=None, decimal_places=2)
    total_desconto = serializers.DecimalField(max_digits=None, decimal_places=2)
    total = serializers.DecimalField(max_digits=None, decimal_places=2)
    metodo_pagamento = serializers.CharField()
    valor_recebido = serializers.DecimalField(max_digits=None, decimal_places=2, allow_null=True)
    troco = serializers.DecimalField(max_digits=None, decimal_places=2, allow_null=True)
    pagamento_insuficiente = serializers.BooleanField()
    cliente_id = serializers.CharField(allow_null=True)
    itens = ResumoItemCarrinhoSerializer(many=True)


# --- Entrada: mutações do carrinho ---

class AdicionarItemInputSerializer(serializers.Serializer):
    produto_id = serializers.UUIDField()
    quantidade = serializers.IntegerField(default=1)
    percentual_desconto = serializers.DecimalField(max_digits=5, decimal_places=2, default=0)


class AlterarItemInputSerializer(serializers.Serializer):
    """
    Altera quantidade e/ou desconto de uma linha.

    quantidade null deixa a linha em branco (edição em andamento).
    """

    quantidade = serializers.IntegerField(required=False, allow_null=True)
    percentual_desconto = serializers.DecimalField(max_digits=5, decimal_places=2, required=False)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("Informe quantidade e/ou percentual_desconto.")
        return attrs


class DescontoGlobalInputSerializer(serializers.Serializer):
    modo = serializers.ChoiceField(choices=ModoDesconto.choices)
    valor = serializers.DecimalField(max_digits=14, decimal_places=4)


class AlternarModoDescontoInputSerializer(serializers.Serializer):
    modo = serializers.ChoiceField(choices=ModoDesconto.choices)


class PagamentoInputSerializer(serializers.Serializer):
    metodo_pagamento = serializers.ChoiceField(choices=MetodoPagamento.choices)
    valor_recebido = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        required=False,
        allow_null=True,
    )


class ClienteInputSerializer(serializers.Serializer):
    cliente_id = serializers.CharField(max_length=64, required=False, allow_null=True, allow_blank=True)
    observacoes = serializers.CharField(required=False, allow_null=True, allow_blank=True)


class FinalizarVendaInputSerializer(serializers.Serializer):
    metodo_pagamento = serializers.ChoiceField(choices=MetodoPagamento.choices, required=False)
    valor_recebido = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        required=False,
        allow_null=True,
    )


class CancelarVendaInputSerializer(serializers.Serializer):
    motivo = serializers.CharField(max_length=255)


# --- Saída: venda persistida ---

class VendaItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = VendaItem
        exclude = ["venda"]


class VendaSerializer(serializers.ModelSerializer):
    itens = VendaItemSerializer(many=True, read_only=True)
    cancelada = serializers.BooleanField(read_only=True)

    class Meta:
        model = Venda
        fields = [
            "id",
            "numero",
            "operador",
            "sessao_caixa",
            "cliente_id",
            "metodo_pagamento",
            "subtotal",
            "total_desconto_itens",
            "modo_desconto_global",
            "percentual_desconto_global",
            "valor_desconto_global",
            "total_desconto",
            "total",
            "valor_recebido",
            "troco",
            "observacoes",
            "criado_em",
            "cancelada",
            "itens",
        ]


class CancelamentoVendaSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    venda_id = serializers.UUIDField()
    numero = serializers.CharField(source="venda.numero")
    motivo = serializers.CharField()
    criado_em = serializers.DateTimeField()
