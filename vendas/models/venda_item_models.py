# vendas/models/venda_item_models.py

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models

from produtos.models import Produto
from vendas.models.venda_models import Venda, VendaImutavelError


class VendaItem(models.Model):
    """
    Item de uma venda finalizada.

    Todos os campos comerciais são cópia (snapshot) do momento da venda:
    alterar preço ou desconto do Produto depois não altera este registro.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    venda = models.ForeignKey(
        Venda,
        on_delete=models.PROTECT,
        related_name="itens",
        help_text="Venda à qual este item pertence.",
    )

    produto = models.ForeignKey(
        Produto,
        on_delete=models.PROTECT,
        related_name="itens_venda",
        help_text="Produto vendido.",
    )

    ordem = models.PositiveSmallIntegerField(
        help_text="Posição do item no carrinho (ordem de inclusão).",
    )

    # Snapshot comercial
    descricao = models.CharField(
        max_length=255,
        help_text="Descrição do produto no momento da venda (snapshot).",
    )

    quantidade = models.PositiveIntegerField(help_text="Quantidade vendida.")

    preco_unitario = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        help_text="Preço de catálogo no momento da venda.",
    )

    percentual_desconto_catalogo = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal("0.00"),
    )
    percentual_desconto_linha = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text="Desconto informado pelo operador neste item.",
    )
    percentual_desconto_efetivo = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text="Catálogo + linha (soma simples).",
    )

    preco_unitario_com_desconto = models.DecimalField(
        max_digits=18,
        decimal_places=6,
    )

    total_bruto = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        help_text="Quantidade × preço de catálogo.",
    )

    desconto = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text="Valor absoluto de desconto de catálogo + linha neste item.",
    )

    subtotal = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        help_text="Total do item já com descontos de catálogo e linha.",
    )

    class Meta:
        db_table = "venda_item"
        verbose_name = "Item de Venda"
        verbose_name_plural = "Itens de Venda"
        ordering = ["venda", "ordem"]
        constraints = [
            models.UniqueConstraint(fields=["venda", "produto"], name="uq_vendaitem_venda_produto"),
        ]

    def __str__(self) -> str:
        return f"Item {self.ordem} da Venda {self.venda_id}"

    def clean(self):
        errors = {}

        if self.quantidade is None or self.quantidade <= 0:
            errors["quantidade"] = "Quantidade do item deve ser maior que zero."

        if self.preco_unitario is None or self.preco_unitario < 0:
            errors["preco_unitario"] = "Preço unitário não pode ser negativo."

        if (
            self.total_bruto is not None
            and self.desconto is not None
            and self.subtotal is not None
            and self.total_bruto - self.desconto != self.subtotal
        ):
            errors["subtotal"] = "Subtotal deve ser igual a total_bruto - desconto."

        if errors:
            raise ValidationError(errors)

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise VendaImutavelError("Item de venda finalizada não pode ser alterado.")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise VendaImutavelError("Item de venda finalizada não pode ser apagado.")
