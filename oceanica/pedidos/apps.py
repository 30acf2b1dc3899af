from django.apps import AppConfig

class PedidosConfig(AppConfig):
    name = 'oceanica.pedidos'
    label = 'pedidos'
    # Nome amigável que será exibido no admin
    verbose_name = 'Vendas e Pedidos'
    default_auto_field = 'django.db.models.BigAutoField'
