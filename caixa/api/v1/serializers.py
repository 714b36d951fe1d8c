# caixa/api/v1/serializers.py

from rest_framework import serializers

from caixa.models import (
    CategoriaRetirada,
    FechamentoCaixa,
    FechamentoCaixaMetodo,
    RetiradaCaixa,
    SessaoCaixa,
)


class SessaoCaixaSerializer(serializers.ModelSerializer):
    class Meta:
        model = SessaoCaixa
        fields = ["id", "operador", "status", "aberto_em", "fechado_em"]


class RetiradaInputSerializer(serializers.Serializer):
    valor = serializers.DecimalField(max_digits=15, decimal_places=2)
    motivo = serializers.CharField(max_length=255)
    categoria = serializers.ChoiceField(
        choices=CategoriaRetirada.choices,
        default=CategoriaRetirada.OUTRO,
    )


class RetiradaCaixaSerializer(serializers.ModelSerializer):
    class Meta:
        model = RetiradaCaixa
        fields = ["id", "sessao", "operador", "valor", "motivo", "categoria", "criado_em"]


class FecharCaixaInputSerializer(serializers.Serializer):
    """
    Valores contados por método de pagamento, ex.:
    {"totais_contados": {"DIN": "120.00", "CAR": "95.50", "TRF": "0"}}

    A exigência de todos os métodos fica no serviço (ContagemIncompletaError).
    """

    totais_contados = serializers.DictField(
        child=serializers.DecimalField(max_digits=15, decimal_places=2, allow_null=True),
    )
    observacoes = serializers.CharField(required=False, allow_null=True, allow_blank=True)


class FechamentoCaixaMetodoSerializer(serializers.ModelSerializer):
    class Meta:
        model = FechamentoCaixaMetodo
        fields = [
            "metodo_pagamento",
            "quantidade_vendas",
            "total_sistema",
            "total_contado",
            "diferenca",
        ]


class FechamentoCaixaSerializer(serializers.ModelSerializer):
    metodos = FechamentoCaixaMetodoSerializer(many=True, read_only=True)
    vendas = serializers.SlugRelatedField(many=True, read_only=True, slug_field="numero")
    retiradas = RetiradaCaixaSerializer(many=True, read_only=True)

    class Meta:
        model = FechamentoCaixa
        fields = [
            "id",
            "sessao",
            "operador",
            "quantidade_vendas",
            "total_sistema",
            "total_contado",
            "diferenca_total",
            "total_retiradas",
            "observacoes",
            "fechado_em",
            "metodos",
            "vendas",
            "retiradas",
        ]
