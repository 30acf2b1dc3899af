import uuid
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

# ====================================================================
# Produto
# ====================================================================

class Produto(models.Model):
    """Modelo para os produtos vendidos pela peixaria (pescados, frutos do mar, congelados)."""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    nome = models.CharField(max_length=255, verbose_name="Nome do Produto")
    descricao = models.TextField(blank=True, null=True, verbose_name="Descrição")
    preco = models.DecimalField(
        max_digits=10, decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))],
        verbose_name="Preço"
    )
    # PositiveIntegerField garante estoque >= 0 também no banco
    estoque = models.PositiveIntegerField(default=0, verbose_name="Estoque")
    image_url = models.URLField(max_length=1000, blank=True, null=True, verbose_name="URL da Imagem")
    image_url1 = models.URLField(max_length=1000, blank=True, null=True, verbose_name="URL da Segunda Imagem")
    criado_em = models.DateTimeField(auto_now_add=True, verbose_name="Criado em")
    atualizado_em = models.DateTimeField(auto_now=True, verbose_name="Atualizado em")

    class Meta:
        verbose_name = "Produto"
        verbose_name_plural = "Produtos"
        db_table = 'catalogo_produto'
        ordering = ['-criado_em']

    def __str__(self):
        return self.nome
