# caixa/models/caixa_models.py

from __future__ import annotations

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q
from django.utils import timezone

from commons.models import BaseModel
from vendas.models.venda_models import MetodoPagamento


class SessaoCaixa(BaseModel):
    """
    Período de trabalho de UM operador, da primeira venda até o fechamento.

    Regras principais:
    - Apenas 1 sessão não FECHADA por operador.
    - Aberta implicitamente pela primeira venda do turno.
    - Status só muda via SessaoCaixaStateMachine.
    """

    class Status(models.TextChoices):
        ABERTA = "ABERTA", "Aberta"
        EM_FECHAMENTO = "EM_FECHAMENTO", "Em fechamento"
        FECHADA = "FECHADA", "Fechada"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    operador = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="sessoes_caixa",
    )

    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.ABERTA,
    )

    aberto_em = models.DateTimeField(default=timezone.now)
    fechado_em = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "caixa_sessao"
        constraints = [
            models.UniqueConstraint(
                fields=["operador"],
                condition=~Q(status="FECHADA"),
                name="uq_sessao_caixa_ativa_por_operador",
            ),
        ]
        indexes = [
            models.Index(fields=["operador", "status"]),
        ]

    def __str__(self) -> str:
        return f"Sessão {self.id} - Operador {self.operador_id} - {self.status}"


class FechamentoImutavelError(ValidationError):
    """Fechamento de caixa é registro de auditoria: não muda depois de criado."""


class FechamentoCaixa(models.Model):
    """
    Resultado do fechamento de uma sessão de caixa.

    Diferença = contado − sistema: positiva é sobra, negativa é falta.
    Diferenças diferentes de zero são registradas como vieram; não são erro.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    sessao = models.OneToOneField(
        SessaoCaixa,
        on_delete=models.PROTECT,
        related_name="fechamento",
    )
    operador = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="fechamentos_caixa",
    )

    quantidade_vendas = models.PositiveIntegerField(default=0)
    total_sistema = models.DecimalField(max_digits=15, decimal_places=2, default=Decimal("0.00"))
    total_contado = models.DecimalField(max_digits=15, decimal_places=2, default=Decimal("0.00"))
    diferenca_total = models.DecimalField(max_digits=15, decimal_places=2, default=Decimal("0.00"))
    total_retiradas = models.DecimalField(
        max_digits=15,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text="Soma das retiradas (sangrias) da sessão. Informativo.",
    )

    observacoes = models.TextField(blank=True, null=True)

    vendas = models.ManyToManyField(
        "vendas.Venda",
        related_name="fechamentos",
        blank=True,
        help_text="Vendas consideradas na reconciliação.",
    )
    retiradas = models.ManyToManyField(
        "RetiradaCaixa",
        related_name="fechamentos",
        blank=True,
        help_text="Retiradas somadas em total_retiradas.",
    )

    fechado_em = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "caixa_fechamento"
        indexes = [
            models.Index(fields=["operador", "fechado_em"]),
        ]

    def __str__(self) -> str:
        return f"Fechamento {self.id} - Sessão {self.sessao_id} - Diferença {self.diferenca_total}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise FechamentoImutavelError("Fechamento de caixa não pode ser alterado.")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise FechamentoImutavelError("Fechamento de caixa não pode ser apagado.")


class FechamentoCaixaMetodo(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    fechamento = models.ForeignKey(
        FechamentoCaixa,
        on_delete=models.PROTECT,
        related_name="metodos",
    )
    metodo_pagamento = models.CharField(max_length=3, choices=MetodoPagamento.choices)

    quantidade_vendas = models.PositiveIntegerField(default=0)
    total_sistema = models.DecimalField(max_digits=15, decimal_places=2)
    total_contado = models.DecimalField(max_digits=15, decimal_places=2)
    diferenca = models.DecimalField(max_digits=15, decimal_places=2)

    class Meta:
        db_table = "caixa_fechamento_metodo"
        constraints = [
            models.UniqueConstraint(
                fields=["fechamento", "metodo_pagamento"],
                name="uq_fechamento_metodo",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.metodo_pagamento}: sistema {self.total_sistema} / contado {self.total_contado}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise FechamentoImutavelError("Fechamento de caixa não pode ser alterado.")
        super().save(*args, **kwargs)


class CategoriaRetirada(models.TextChoices):
    PESSOAL = "PESSOAL", "Pessoal"
    NEGOCIO = "NEGOCIO", "Negócio"
    FORNECEDOR = "FORNECEDOR", "Fornecedor"
    OUTRO = "OUTRO", "Outro"


class RetiradaCaixa(models.Model):
    """Retirada de dinheiro da gaveta (sangria) durante a sessão."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    sessao = models.ForeignKey(
        SessaoCaixa,
        on_delete=models.PROTECT,
        related_name="retiradas",
    )
    operador = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="retiradas_caixa",
    )
    valor = models.DecimalField(max_digits=15, decimal_places=2)
    motivo = models.CharField(max_length=255)
    categoria = models.CharField(
        max_length=20,
        choices=CategoriaRetirada.choices,
        default=CategoriaRetirada.OUTRO,
    )
    criado_em = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "caixa_retirada"

    def __str__(self) -> str:
        return f"Retirada {self.valor} - Sessão {self.sessao_id}"
