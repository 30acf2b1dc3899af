import uuid

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models

from oceanica.catalog.models import Produto


class ItemCarrinho(models.Model):
    """
    Linha do carrinho de um usuário. Cada produto aparece no máximo uma vez por usuário.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    usuario = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='itens_carrinho'
    )
    produto = models.ForeignKey(Produto, on_delete=models.CASCADE, related_name='itens_carrinho')
    quantidade = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    criado_em = models.DateTimeField(auto_now_add=True)
    atualizado_em = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = 'Item do Carrinho'
        verbose_name_plural = 'Itens do Carrinho'
        db_table = 'carrinho_item'
        unique_together = ('usuario', 'produto')
        ordering = ['criado_em']

    def __str__(self):
        return f"{self.quantidade}x {self.produto.nome}"
