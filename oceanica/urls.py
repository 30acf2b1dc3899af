# oceanica/urls.py
"""
Configuração principal de URL do projeto Oceânica Pescados.

Este arquivo centraliza o roteamento, incluindo:
1. Rotas da API REST (oceanica.presentation)
2. Rotas do Admin (Django Admin)
3. Rotas da Documentação da API (Swagger/Redoc)
"""
from django.contrib import admin
from django.urls import path, include
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView, SpectacularRedocView


urlpatterns = [
    # URL para o painel de administração padrão do Django
    path('admin/', admin.site.urls),

    # ====================================================================
    # ROTAS DE DOCUMENTAÇÃO DA API (DRF SPECTACULAR)
    # ====================================================================
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/swagger/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
    path('api/docs/redoc/', SpectacularRedocView.as_view(url_name='schema'), name='redoc'),

    # Rotas da API (auth, products, cart, orders, order-items, addresses, health)
    path('', include('oceanica.presentation.urls')),
]

# Rotas inexistentes respondem em JSON, como o restante da API
handler404 = 'oceanica.presentation.handlers.rota_nao_encontrada'
