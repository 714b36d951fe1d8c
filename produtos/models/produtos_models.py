# produtos/models/produtos_models.py

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models


class Produto(models.Model):
    """
    Cadastro de produtos consumido pelo PDV.

    O motor de vendas só lê daqui (preço, desconto de catálogo e estoque);
    a manutenção do cadastro fica fora do PDV. O estoque só é alterado
    pelo EstoqueService.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    codigo_interno = models.CharField(
        max_length=40,
        unique=True,
        help_text="Código interno/SKU do produto.",
    )

    descricao = models.CharField(
        max_length=255,
        help_text="Descrição principal do produto.",
    )

    preco_venda = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        default=Decimal("0.000"),
        help_text="Preço de venda padrão do produto.",
    )

    percentual_desconto = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text=(
            "Desconto de catálogo (%) aplicado a toda venda do produto, "
            "somado ao desconto de linha informado no caixa."
        ),
    )

    estoque = models.IntegerField(
        default=0,
        help_text="Quantidade disponível para venda.",
    )

    ativo = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Produto"
        verbose_name_plural = "Produtos"
        ordering = ["descricao"]
        indexes = [
            models.Index(fields=["codigo_interno"], name="idx_prod_codigo_interno"),
            models.Index(fields=["descricao"], name="idx_prod_descricao"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(estoque__gte=0),
                name="ck_produto_estoque_nao_negativo",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.codigo_interno} - {self.descricao}"

    def clean(self):
        super().clean()

        if self.preco_venda is not None and self.preco_venda < 0:
            raise ValidationError({"preco_venda": "Preço de venda não pode ser negativo."})

        if self.percentual_desconto < 0 or self.percentual_desconto > 100:
            raise ValidationError(
                {"percentual_desconto": "Desconto de catálogo deve estar entre 0% e 100%."}
            )

        if self.estoque < 0:
            raise ValidationError({"estoque": "Estoque não pode ser negativo."})
