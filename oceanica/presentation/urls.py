"""
Define as rotas da API REST.
Rotas fixas (statistics, my, admin, ...) são declaradas antes das rotas com <uuid:pk>.
"""
from django.urls import path

from . import views, views_auth, views_admin


urlpatterns = [
    # ====================================================================
    # 1. HEALTH CHECK
    # ====================================================================
    path('health', views.HealthAPIView.as_view(), name='health'),

    # ====================================================================
    # 2. ROTAS DE AUTENTICAÇÃO
    # ====================================================================
    path('auth/register', views_auth.RegistroAPIView.as_view(), name='auth_register'),
    path('auth/login', views_auth.LoginAPIView.as_view(), name='auth_login'),
    path('auth/verify-token', views_auth.VerificarTokenAPIView.as_view(), name='auth_verify_token'),
    path('auth/profile', views_auth.PerfilAPIView.as_view(), name='auth_profile'),
    path('auth/protected', views_auth.RotaProtegidaAPIView.as_view(), name='auth_protected'),
    path('auth/admin', views_auth.RotaAdminAPIView.as_view(), name='auth_admin'),
    path('auth/clients', views_auth.ClientesAPIView.as_view(), name='auth_clients'),
    path('auth/user/<uuid:pk>', views_auth.UsuarioDetalheAPIView.as_view(), name='auth_user'),

    # ====================================================================
    # 3. ROTAS DE CATÁLOGO
    # ====================================================================
    path('products', views.ProdutoListaAPIView.as_view(), name='products'),
    path('products/<uuid:pk>', views.ProdutoDetalheAPIView.as_view(), name='product_detail'),
    path('products/<uuid:pk>/stock', views.ProdutoEstoqueAPIView.as_view(), name='product_stock'),

    # ====================================================================
    # 4. ROTAS DO CARRINHO
    # ====================================================================
    path('cart', views.CarrinhoAPIView.as_view(), name='cart'),
    path('cart/count', views.CarrinhoContagemAPIView.as_view(), name='cart_count'),
    path('cart/<uuid:produto_id>', views.CarrinhoItemAPIView.as_view(), name='cart_item'),

    # ====================================================================
    # 5. ROTAS DE PEDIDOS
    # ====================================================================
    path('orders', views.PedidoListaAPIView.as_view(), name='orders'),
    path('orders/my', views.MeusPedidosAPIView.as_view(), name='orders_my'),
    path('orders/statistics', views_admin.EstatisticasPedidosAPIView.as_view(), name='orders_statistics'),
    path('orders/admin', views_admin.PedidoAdminAPIView.as_view(), name='orders_admin'),
    path('orders/external', views.PedidoExternoAPIView.as_view(), name='orders_external'),
    path('orders/simple', views.PedidoSimplesAPIView.as_view(), name='orders_simple'),
    path('orders/<uuid:pk>', views.PedidoDetalheAPIView.as_view(), name='order_detail'),
    path('orders/<uuid:pk>/cancel', views.CancelarPedidoAPIView.as_view(), name='order_cancel'),
    path('orders/<uuid:pk>/status', views_admin.AtualizarStatusPedidoAPIView.as_view(), name='order_status'),

    # ====================================================================
    # 6. ROTAS DE ITENS DE PEDIDO
    # ====================================================================
    path('order-items', views.ItensPedidoAPIView.as_view(), name='order_items'),
    path('order-items/statistics/sales', views_admin.EstatisticasVendasAPIView.as_view(), name='order_items_sales'),
    path('order-items/order/<uuid:pedido_id>', views.ItensDoPedidoAPIView.as_view(), name='order_items_by_order'),
    path('order-items/order/<uuid:pedido_id>/total', views.TotaisPedidoAPIView.as_view(), name='order_items_total'),
    path('order-items/product/<uuid:produto_id>', views_admin.ItensPorProdutoAPIView.as_view(), name='order_items_by_product'),
    path('order-items/<uuid:pk>', views.ItemPedidoDetalheAPIView.as_view(), name='order_item_detail'),
    path('order-items/<uuid:pk>/quantity', views.ItemPedidoQuantidadeAPIView.as_view(), name='order_item_quantity'),

    # ====================================================================
    # 7. ROTAS DE ENDEREÇOS
    # ====================================================================
    path('addresses', views.EnderecoListaAPIView.as_view(), name='addresses'),
    path('addresses/my', views.MeusEnderecosAPIView.as_view(), name='addresses_my'),
    path('addresses/statistics', views_admin.EstatisticasEnderecosAPIView.as_view(), name='addresses_statistics'),
    path('addresses/<uuid:pk>', views.EnderecoDetalheAPIView.as_view(), name='address_detail'),
]
