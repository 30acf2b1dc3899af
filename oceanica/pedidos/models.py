import uuid
from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models

from oceanica.catalog.models import Produto
from oceanica.core.entities import (
    STATUS_PENDENTE, STATUS_CONFIRMADO, STATUS_ENVIADO, STATUS_CANCELADO
)


class Pedido(models.Model):
    """
    Modelo para pedidos de compra.
    """
    STATUS_CHOICES = [
        (STATUS_PENDENTE, 'Pendente'),
        (STATUS_CONFIRMADO, 'Confirmado'),
        (STATUS_ENVIADO, 'Enviado'),
        (STATUS_CANCELADO, 'Cancelado'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # FK para o modelo de usuário
    usuario = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name='pedidos',
        verbose_name="Cliente"
    )
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDENTE, verbose_name="Status")

    # Preços
    frete = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'), verbose_name="Valor do Frete")
    total = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'), verbose_name="Total do Pedido")

    endereco = models.ForeignKey(
        'infrastructure.Endereco',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='pedidos',
        verbose_name="Endereço de Entrega"
    )

    criado_em = models.DateTimeField(auto_now_add=True, verbose_name="Data do Pedido")
    atualizado_em = models.DateTimeField(auto_now=True, verbose_name="Atualizado em")

    class Meta:
        verbose_name = 'Pedido'
        verbose_name_plural = 'Pedidos'
        ordering = ['-criado_em']
        db_table = 'pedido_compra'

    def __str__(self):
        user_info = str(self.usuario) if self.usuario else 'Convidado'
        return f"Pedido {self.id} - {user_info} - {self.status}"


class ItemPedido(models.Model):
    """
    Modelo para os itens contidos em um pedido. Preço e subtotal são congelados no momento da compra.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    pedido = models.ForeignKey(Pedido, on_delete=models.CASCADE, related_name='itens')

    # Produtos com vendas registradas não podem ser removidos do catálogo
    produto = models.ForeignKey(Produto, on_delete=models.PROTECT, related_name='itens_pedido')

    quantidade = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    preco = models.DecimalField(
        max_digits=10, decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))],
        verbose_name="Preço Unitário"
    )
    subtotal = models.DecimalField(max_digits=10, decimal_places=2, verbose_name="Subtotal")
    criado_em = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = 'Item do Pedido'
        verbose_name_plural = 'Itens do Pedido'
        db_table = 'pedido_item'
        ordering = ['criado_em']

    def __str__(self):
        return f"{self.quantidade}x {self.produto} (Pedido {self.pedido_id})"

    def save(self, *args, **kwargs):
        self.subtotal = self.preco * self.quantidade
        super().save(*args, **kwargs)
