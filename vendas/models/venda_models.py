# vendas/models/venda_models.py

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone


class MetodoPagamento(models.TextChoices):
    DINHEIRO = "DIN", "Dinheiro"
    CARTAO = "CAR", "Cartão"
    TRANSFERENCIA = "TRF", "Transferência"


class VendaImutavelError(ValidationError):
    """Venda e itens finalizados não podem ser alterados nem apagados."""


class Venda(models.Model):
    """
    Venda finalizada no PDV.

    Pilares:
    - Criada uma única vez pelo serviço de finalização, já com todos os
      totais calculados; nunca é alterada depois disso.
    - Itens guardam snapshot de preço/desconto do momento da venda.
    - Cancelamento é um registro compensatório (CancelamentoVenda), não
      uma edição da venda.
    - Ligada à sessão de caixa do operador, usada no fechamento.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    numero = models.CharField(
        max_length=20,
        unique=True,
        help_text="Número da venda (INV + AAMMDD + sequência diária de 4 dígitos).",
    )

    operador = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="vendas_operadas",
        help_text="Usuário operador (caixa) que finalizou a venda.",
    )

    sessao_caixa = models.ForeignKey(
        "caixa.SessaoCaixa",
        on_delete=models.PROTECT,
        related_name="vendas",
        help_text="Sessão de caixa em que a venda foi realizada.",
    )

    cliente_id = models.CharField(
        max_length=64,
        null=True,
        blank=True,
        help_text="Referência ao cliente associado (cadastro externo ao PDV).",
    )

    metodo_pagamento = models.CharField(
        max_length=3,
        choices=MetodoPagamento.choices,
    )

    # Totais financeiros
    subtotal = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        help_text="Soma de preço de catálogo × quantidade, antes de qualquer desconto.",
    )
    total_desconto_itens = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )
    modo_desconto_global = models.CharField(
        max_length=20,
        null=True,
        blank=True,
        help_text="Modo em que o desconto global foi informado (PERCENTUAL / PRECO_FINAL).",
    )
    percentual_desconto_global = models.DecimalField(
        max_digits=9,
        decimal_places=4,
        default=Decimal("0.0000"),
        help_text="Percentual equivalente do desconto global (auditoria).",
    )
    valor_desconto_global = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )
    total_desconto = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text="Descontos de itens + desconto global.",
    )
    total = models.DecimalField(max_digits=12, decimal_places=2)

    valor_recebido = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        help_text="Valor entregue pelo cliente (somente dinheiro).",
    )
    troco = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
    )

    observacoes = models.TextField(blank=True, null=True)

    request_id = models.CharField(
        max_length=64,
        blank=True,
        null=True,
        db_index=True,
    )

    criado_em = models.DateTimeField(default=timezone.now, editable=False)

    class Meta:
        db_table = "venda"
        verbose_name = "Venda"
        verbose_name_plural = "Vendas"
        ordering = ["criado_em"]
        indexes = [
            models.Index(fields=["operador", "criado_em"], name="idx_venda_operador_data"),
            models.Index(fields=["sessao_caixa"], name="idx_venda_sessao"),
        ]

    def __str__(self) -> str:
        return f"Venda {self.numero} - {self.total}"

    def clean(self):
        errors = {}

        for campo in [
            "subtotal",
            "total_desconto_itens",
            "valor_desconto_global",
            "total_desconto",
            "total",
        ]:
            valor = getattr(self, campo, None)
            if valor is not None and valor < 0:
                errors[campo] = "O campo não pode ser negativo."

        if self.subtotal is not None and self.total_desconto is not None and self.total is not None:
            if self.subtotal - self.total_desconto != self.total:
                errors["total"] = "Total deve ser igual a subtotal - total_desconto."

        if self.metodo_pagamento == MetodoPagamento.DINHEIRO:
            if self.valor_recebido is None or self.valor_recebido < (self.total or 0):
                errors["valor_recebido"] = "Valor recebido em dinheiro não cobre o total."
        elif self.valor_recebido is not None or self.troco is not None:
            errors["valor_recebido"] = "Valor recebido e troco só se aplicam a dinheiro."

        if errors:
            raise ValidationError(errors)

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise VendaImutavelError(f"Venda {self.numero} já finalizada não pode ser alterada.")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise VendaImutavelError(f"Venda {self.numero} não pode ser apagada; use o cancelamento.")

    @property
    def cancelada(self) -> bool:
        return CancelamentoVenda.objects.filter(venda_id=self.pk).exists()


class CancelamentoVenda(models.Model):
    """
    Registro compensatório de cancelamento.

    A venda original continua intacta; a existência deste registro é o que
    a exclui do fechamento de caixa.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    venda = models.OneToOneField(
        Venda,
        on_delete=models.PROTECT,
        related_name="cancelamento",
    )
    operador = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="cancelamentos_venda",
    )
    motivo = models.CharField(max_length=255)
    criado_em = models.DateTimeField(default=timezone.now, editable=False)

    class Meta:
        db_table = "venda_cancelamento"

    def __str__(self) -> str:
        return f"Cancelamento da venda {self.venda_id}"
