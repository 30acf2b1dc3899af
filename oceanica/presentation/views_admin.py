# oceanica/presentation/views_admin.py
"""
Views administrativas da API (role 'admin'): gestão de pedidos e relatórios.
"""
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.views import APIView

from oceanica.core.dependency_injection import (
    get_criar_pedido_admin_use_case,
    get_atualizar_status_pedido_use_case,
    get_estatisticas_pedidos_use_case,
    get_gerenciar_itens_pedido_use_case,
    get_gerenciar_enderecos_use_case,
)

from .handlers import resposta
from .permissions import IsAdminRole
from .serializers import (
    PedidoSerializer,
    ItemPedidoSerializer,
    PedidoAdminSerializer,
    StatusSerializer,
    ItensPorProdutoQuerySerializer,
    EstatisticasVendasQuerySerializer,
)
from .views import validar_corpo, validar_query


class AdminAPIView(APIView):
    permission_classes = [IsAuthenticated, IsAdminRole]


# ====================================================================
# GERENCIAMENTO DE PEDIDOS
# ====================================================================

class PedidoAdminAPIView(AdminAPIView):
    """Pedido de balcão: criado pelo administrador para um cliente sem cadastro."""

    def post(self, request):
        dados = validar_corpo(PedidoAdminSerializer, request)
        pedido = get_criar_pedido_admin_use_case().criar_pedido_admin(
            itens=dados['itens'],
            cliente_nome=dados['cliente']['nome'],
            cliente_telefone=dados['cliente']['telefone'],
            frete=dados['frete'],
        )
        return resposta(
            'Pedido criado com sucesso',
            {'order': PedidoSerializer(pedido).data},
            status_code=status.HTTP_201_CREATED,
        )


class AtualizarStatusPedidoAPIView(AdminAPIView):

    def patch(self, request, pk):
        dados = validar_corpo(StatusSerializer, request)
        pedido = get_atualizar_status_pedido_use_case().executar(str(pk), dados['status'])
        return resposta('Status do pedido atualizado com sucesso', {'order': PedidoSerializer(pedido).data})


class EstatisticasPedidosAPIView(AdminAPIView):

    def get(self, request):
        estatisticas = get_estatisticas_pedidos_use_case().executar()
        return resposta('Estatísticas obtidas com sucesso', {'statistics': estatisticas})


# ====================================================================
# RELATÓRIOS DE VENDAS E ENDEREÇOS
# ====================================================================

class ItensPorProdutoAPIView(AdminAPIView):

    def get(self, request, produto_id):
        query = validar_query(ItensPorProdutoQuerySerializer, request)
        itens = get_gerenciar_itens_pedido_use_case().listar_por_produto(str(produto_id), **query)
        return resposta('Itens por produto listados com sucesso', {'items': ItemPedidoSerializer(itens, many=True).data})


class EstatisticasVendasAPIView(AdminAPIView):

    def get(self, request):
        query = validar_query(EstatisticasVendasQuerySerializer, request)
        if query.get('produto_id'):
            query['produto_id'] = str(query['produto_id'])
        estatisticas = get_gerenciar_itens_pedido_use_case().estatisticas_vendas(**query)
        return resposta('Estatísticas de vendas obtidas com sucesso', {'statistics': estatisticas})


class EstatisticasEnderecosAPIView(AdminAPIView):

    def get(self, request):
        estatisticas = get_gerenciar_enderecos_use_case().estatisticas()
        return resposta('Estatísticas obtidas com sucesso', {'statistics': estatisticas})
