# vendas/models/venda_sequencia_models.py

from django.db import models


class SequenciaVenda(models.Model):
    """
    Controla a numeração diária das vendas (INV + AAMMDD + 4 dígitos).

    Uma linha por dia; numero_atual é o último número utilizado.
    """

    data = models.DateField(unique=True)
    numero_atual = models.PositiveIntegerField(
        default=0,
        help_text="Último número utilizado. Próximo será numero_atual + 1.",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "venda_sequencia"
        verbose_name = "Sequência de Venda"
        verbose_name_plural = "Sequências de Venda"

    def __str__(self):
        return f"{self.data:%Y-%m-%d} - {self.numero_atual}"

    @property
    def proximo_numero(self) -> int:
        return self.numero_atual + 1
