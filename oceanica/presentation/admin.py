# Configuração da interface administrativa do Django para os modelos da Oceânica Pescados.

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from oceanica.infrastructure.models import Usuario, Endereco
from oceanica.catalog.models import Produto
from oceanica.carrinho.models import ItemCarrinho
from oceanica.pedidos.models import Pedido, ItemPedido

# ====================================================================
# 1. ADMIN PERSONALIZADO PARA USUÁRIOS (login por email, sem username)
# ====================================================================

class EnderecoInline(admin.TabularInline):
    model = Endereco
    extra = 0
    fields = ('rua', 'numero', 'bairro', 'cidade', 'estado', 'cep', 'is_default')


@admin.register(Usuario)
class UsuarioAdmin(BaseUserAdmin):
    """Customização do modelo Usuario. Usa email/senha e exibe o perfil (role)."""

    list_display = ('email', 'nome', 'telefone', 'role', 'is_active', 'criado_em')
    list_filter = ('role', 'is_active', 'is_staff')

    # O BaseUserAdmin referencia 'username', que não existe no modelo Usuario
    fieldsets = (
        (None, {'fields': ('email', 'password')}),
        ('Informações de Perfil', {'fields': ('nome', 'telefone', 'role')}),
        ('Permissões', {'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions')}),
        ('Datas', {'fields': ('last_login', 'criado_em', 'atualizado_em')}),
    )
    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'nome', 'telefone', 'role', 'password1', 'password2'),
        }),
    )
    readonly_fields = ('last_login', 'criado_em', 'atualizado_em')
    inlines = [EnderecoInline]

    search_fields = ('email', 'nome', 'telefone')
    ordering = ('email',)


# ====================================================================
# 2. ADMIN PARA PRODUTOS
# ====================================================================

@admin.register(Produto)
class ProdutoAdmin(admin.ModelAdmin):
    list_display = ('nome', 'preco', 'estoque', 'criado_em')
    list_filter = ('criado_em',)
    search_fields = ('nome', 'descricao', 'id')
    ordering = ('nome',)
    fieldsets = (
        ('Informações Básicas', {
            'fields': ('nome', 'descricao', 'preco', 'estoque')
        }),
        ('Imagens', {
            'fields': ('image_url', 'image_url1'),
        }),
    )


@admin.register(ItemCarrinho)
class ItemCarrinhoAdmin(admin.ModelAdmin):
    list_display = ('usuario', 'produto', 'quantidade', 'atualizado_em')
    search_fields = ('usuario__email', 'produto__nome')
    list_select_related = ('usuario', 'produto')


@admin.register(Endereco)
class EnderecoAdmin(admin.ModelAdmin):
    list_display = ('usuario', 'rua', 'cidade', 'estado', 'cep', 'is_default')
    list_filter = ('estado', 'is_default')
    search_fields = ('usuario__email', 'rua', 'cidade', 'cep')


# ====================================================================
# 3. ADMIN PARA PEDIDOS
# ====================================================================

class ItemPedidoInline(admin.TabularInline):
    """Exibe os itens comprados dentro do detalhe do Pedido."""
    model = ItemPedido
    readonly_fields = ('produto', 'preco', 'quantidade', 'subtotal')
    extra = 0
    can_delete = False


@admin.register(Pedido)
class PedidoAdmin(admin.ModelAdmin):
    list_display = ('id', 'usuario', 'criado_em', 'total', 'status')
    list_filter = ('status', 'criado_em')
    search_fields = ('id', 'usuario__email', 'usuario__nome')
    date_hierarchy = 'criado_em'
    inlines = [ItemPedidoInline]
    readonly_fields = ('usuario', 'endereco', 'frete', 'total', 'criado_em', 'atualizado_em')

    def has_add_permission(self, request):
        """Pedidos nascem pelo checkout ou pelas rotas de pedido administrativo."""
        return False
