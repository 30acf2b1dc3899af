"""
Views da API REST: catálogo, carrinho, pedidos, itens de pedido, endereços e health check.

As views apenas validam a entrada com os serializers, chamam o caso de uso e
montam a resposta no envelope padrão. Erros do Core sobem até o
`api_exception_handler`.
"""
import time

from django.conf import settings
from django.utils import timezone
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.views import APIView

from oceanica.core.dependency_injection import (
    get_listar_produtos_use_case,
    get_detalhar_produto_use_case,
    get_criar_produto_use_case,
    get_atualizar_produto_use_case,
    get_deletar_produto_use_case,
    get_atualizar_estoque_use_case,
    get_gerenciar_carrinho_use_case,
    get_criar_pedido_use_case,
    get_criar_pedido_admin_use_case,
    get_listar_pedidos_use_case,
    get_detalhar_pedido_use_case,
    get_cancelar_pedido_use_case,
    get_gerenciar_itens_pedido_use_case,
    get_gerenciar_enderecos_use_case,
)

from .handlers import resposta
from .permissions import IsAdminRole
from .serializers import (
    ProdutoSerializer,
    CarrinhoSerializer,
    ItemCarrinhoSerializer,
    PedidoSerializer,
    PedidoResumoSerializer,
    ItemPedidoSerializer,
    EnderecoSerializer,
    ProdutoEntradaSerializer,
    EstoqueSerializer,
    AdicionarItemCarrinhoSerializer,
    QuantidadeSerializer,
    CriarPedidoSerializer,
    PedidoExternoSerializer,
    PedidoSimplesSerializer,
    CriarItensPedidoSerializer,
    EnderecoEntradaSerializer,
    MeusPedidosQuerySerializer,
    ProdutoQuerySerializer,
    PedidoQuerySerializer,
    EnderecoQuerySerializer,
)
from .views_auth import usuario_atual

INICIO_PROCESSO = time.monotonic()


def validar_query(serializer_class, request):
    """Valida os parâmetros da query string e devolve os dados com as chaves internas."""
    serializer = serializer_class(data=request.query_params)
    serializer.is_valid(raise_exception=True)
    return serializer.validated_data


def validar_corpo(serializer_class, request, **kwargs):
    serializer = serializer_class(data=request.data, **kwargs)
    serializer.is_valid(raise_exception=True)
    return serializer.validated_data


class PermissaoPorMetodoMixin:
    """
    Define as permissões para cada método HTTP.
    `permissoes_por_metodo` mapeia o método para a lista de classes de permissão.
    """
    permissoes_por_metodo = {}

    def get_permissions(self):
        classes = self.permissoes_por_metodo.get(self.request.method, self.permission_classes)
        return [permission() for permission in classes]


# ====================================================================
# HEALTH CHECK
# ====================================================================

class HealthAPIView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def get(self, request):
        return resposta(
            'API Oceanica Pescados',
            timestamp=timezone.now().isoformat(),
            environment=settings.ENVIRONMENT,
            version=settings.API_VERSION,
            uptime=round(time.monotonic() - INICIO_PROCESSO, 3),
        )


# ====================================================================
# CATÁLOGO DE PRODUTOS
# ====================================================================

class ProdutoListaAPIView(PermissaoPorMetodoMixin, APIView):
    """Listagem pública e criação (admin) de produtos."""
    permissoes_por_metodo = {
        'GET': [AllowAny],
        'POST': [IsAuthenticated, IsAdminRole],
    }

    def get(self, request):
        query = validar_query(ProdutoQuerySerializer, request)
        produtos, paginacao = get_listar_produtos_use_case().executar(**query)
        return resposta('Produtos listados com sucesso', {
            'products': ProdutoSerializer(produtos, many=True).data,
            'pagination': paginacao.to_dict(),
        })

    def post(self, request):
        dados = validar_corpo(ProdutoEntradaSerializer, request)
        produto = get_criar_produto_use_case().executar(**dados)
        return resposta(
            'Produto criado com sucesso',
            {'product': ProdutoSerializer(produto).data},
            status_code=status.HTTP_201_CREATED,
        )


class ProdutoDetalheAPIView(PermissaoPorMetodoMixin, APIView):
    permissoes_por_metodo = {
        'GET': [AllowAny],
        'PUT': [IsAuthenticated, IsAdminRole],
        'DELETE': [IsAuthenticated, IsAdminRole],
    }

    def get(self, request, pk):
        produto = get_detalhar_produto_use_case().executar(str(pk))
        return resposta('Produto encontrado com sucesso', {'product': ProdutoSerializer(produto).data})

    def put(self, request, pk):
        dados = validar_corpo(ProdutoEntradaSerializer, request, partial=True)
        produto = get_atualizar_produto_use_case().executar(str(pk), dados)
        return resposta('Produto atualizado com sucesso', {'product': ProdutoSerializer(produto).data})

    def delete(self, request, pk):
        get_deletar_produto_use_case().executar(str(pk))
        return resposta('Produto removido com sucesso')


class ProdutoEstoqueAPIView(APIView):
    permission_classes = [IsAuthenticated, IsAdminRole]

    def patch(self, request, pk):
        dados = validar_corpo(EstoqueSerializer, request)
        produto = get_atualizar_estoque_use_case().executar(str(pk), dados['quantidade'])
        return resposta('Estoque atualizado com sucesso', {'product': ProdutoSerializer(produto).data})


# ====================================================================
# CARRINHO
# ====================================================================

class CarrinhoAPIView(APIView):
    """
    API View para gerenciar o carrinho do usuário logado.
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        carrinho = get_gerenciar_carrinho_use_case().obter_carrinho(str(request.user.pk))
        return resposta('Carrinho obtido com sucesso', {'cart': CarrinhoSerializer(carrinho).data})

    def post(self, request):
        """Adiciona um item ao carrinho (ou incrementa a quantidade da linha existente)."""
        dados = validar_corpo(AdicionarItemCarrinhoSerializer, request)
        item = get_gerenciar_carrinho_use_case().adicionar_item(
            str(request.user.pk), str(dados['produto_id']), dados['quantidade']
        )
        return resposta(
            'Item adicionado ao carrinho com sucesso',
            {'cartItem': ItemCarrinhoSerializer(item).data},
            status_code=status.HTTP_201_CREATED,
        )

    def delete(self, request):
        removidos = get_gerenciar_carrinho_use_case().limpar(str(request.user.pk))
        return resposta('Carrinho limpo com sucesso', {'removedCount': removidos})


class CarrinhoContagemAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        linhas, quantidade = get_gerenciar_carrinho_use_case().contar_itens(str(request.user.pk))
        return resposta(
            'Contagem do carrinho obtida com sucesso',
            {'counts': {'uniqueItems': linhas, 'totalQuantity': quantidade}},
        )


class CarrinhoItemAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def put(self, request, produto_id):
        dados = validar_corpo(QuantidadeSerializer, request)
        item = get_gerenciar_carrinho_use_case().atualizar_quantidade(
            str(request.user.pk), str(produto_id), dados['quantidade']
        )
        return resposta('Quantidade do item atualizada com sucesso', {'cartItem': ItemCarrinhoSerializer(item).data})

    def delete(self, request, produto_id):
        get_gerenciar_carrinho_use_case().remover_item(str(request.user.pk), str(produto_id))
        return resposta('Item removido do carrinho com sucesso')


# ====================================================================
# PEDIDOS
# ====================================================================

class PedidoListaAPIView(PermissaoPorMetodoMixin, APIView):
    """POST cria o pedido a partir do carrinho; GET lista todos os pedidos (admin)."""
    permissoes_por_metodo = {
        'GET': [IsAuthenticated, IsAdminRole],
        'POST': [IsAuthenticated],
    }

    def get(self, request):
        query = validar_query(PedidoQuerySerializer, request)
        if query.get('usuario_id'):
            query['usuario_id'] = str(query['usuario_id'])
        pedidos, paginacao = get_listar_pedidos_use_case().listar_todos(**query)
        return resposta('Pedidos listados com sucesso', {
            'orders': PedidoResumoSerializer(pedidos, many=True).data,
            'pagination': paginacao.to_dict(),
        })

    def post(self, request):
        dados = validar_corpo(CriarPedidoSerializer, request)
        pedido = get_criar_pedido_use_case().executar(
            usuario_id=str(request.user.pk),
            endereco_id=str(dados['endereco_id']),
            frete=dados['frete'],
        )
        return resposta(
            'Pedido criado com sucesso',
            {'order': PedidoSerializer(pedido).data},
            status_code=status.HTTP_201_CREATED,
        )


class MeusPedidosAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        query = validar_query(MeusPedidosQuerySerializer, request)
        pedidos, paginacao = get_listar_pedidos_use_case().listar_do_usuario(str(request.user.pk), **query)
        return resposta('Seus pedidos listados com sucesso', {
            'orders': PedidoResumoSerializer(pedidos, many=True).data,
            'pagination': paginacao.to_dict(),
        })


class PedidoDetalheAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, pk):
        pedido = get_detalhar_pedido_use_case().executar(str(pk), usuario_atual(request))
        return resposta('Pedido encontrado com sucesso', {'order': PedidoSerializer(pedido).data})


class CancelarPedidoAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def patch(self, request, pk):
        pedido = get_cancelar_pedido_use_case().executar(str(pk), usuario_atual(request))
        return resposta('Pedido cancelado com sucesso', {'order': PedidoSerializer(pedido).data})


class PedidoExternoAPIView(APIView):
    """Pedidos vindos de canais externos (site institucional, WhatsApp), sem login."""
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        dados = validar_corpo(PedidoExternoSerializer, request)
        pedido = get_criar_pedido_admin_use_case().criar_pedido_externo(
            itens=dados['itens'],
            cliente_nome=dados['cliente']['nome'],
            cliente_telefone=dados['cliente']['telefone'],
            endereco=dados['endereco'],
            frete=dados['frete'],
        )
        return resposta(
            'Pedido externo criado com sucesso',
            {'order': PedidoSerializer(pedido).data},
            status_code=status.HTTP_201_CREATED,
        )


class PedidoSimplesAPIView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        dados = validar_corpo(PedidoSimplesSerializer, request)
        pedido = get_criar_pedido_admin_use_case().criar_pedido_simples(
            str(dados['produto_id']), dados['nome'], dados['telefone']
        )
        return resposta(
            'Pedido criado com sucesso',
            {'order': PedidoSerializer(pedido).data},
            status_code=status.HTTP_201_CREATED,
        )


# ====================================================================
# ITENS DE PEDIDO
# ====================================================================

class ItensPedidoAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        dados = validar_corpo(CriarItensPedidoSerializer, request)
        itens = get_gerenciar_itens_pedido_use_case().criar_itens(
            str(dados['pedido_id']),
            [{**item, 'produto_id': str(item['produto_id'])} for item in dados['itens']],
            usuario_atual(request),
        )
        return resposta(
            'Itens do pedido criados com sucesso',
            {'items': ItemPedidoSerializer(itens, many=True).data},
            status_code=status.HTTP_201_CREATED,
        )


class ItensDoPedidoAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, pedido_id):
        itens = get_gerenciar_itens_pedido_use_case().listar_por_pedido(str(pedido_id), usuario_atual(request))
        return resposta('Itens do pedido listados com sucesso', {'items': ItemPedidoSerializer(itens, many=True).data})

    def delete(self, request, pedido_id):
        removidos = get_gerenciar_itens_pedido_use_case().remover_do_pedido(str(pedido_id), usuario_atual(request))
        return resposta(f'{removidos} itens removidos com sucesso', {'deletedCount': removidos})


class TotaisPedidoAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, pedido_id):
        totais = get_gerenciar_itens_pedido_use_case().calcular_totais(str(pedido_id), usuario_atual(request))
        totais['totalAmount'] = f"{totais['totalAmount']:.2f}"
        return resposta('Totais calculados com sucesso', {'totals': totais})


class ItemPedidoDetalheAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, pk):
        item = get_gerenciar_itens_pedido_use_case().buscar(str(pk), usuario_atual(request))
        return resposta('Item encontrado com sucesso', {'item': ItemPedidoSerializer(item).data})

    def delete(self, request, pk):
        get_gerenciar_itens_pedido_use_case().remover(str(pk), usuario_atual(request))
        return resposta('Item removido com sucesso')


class ItemPedidoQuantidadeAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def put(self, request, pk):
        dados = validar_corpo(QuantidadeSerializer, request)
        item = get_gerenciar_itens_pedido_use_case().atualizar_quantidade(
            str(pk), dados['quantidade'], usuario_atual(request)
        )
        return resposta('Quantidade atualizada com sucesso', {'item': ItemPedidoSerializer(item).data})


# ====================================================================
# ENDEREÇOS
# ====================================================================

class EnderecoListaAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        """Administradores recebem todos os endereços paginados; demais usuários, apenas os próprios."""
        solicitante = usuario_atual(request)
        query = validar_query(EnderecoQuerySerializer, request) if solicitante.is_admin else {}
        enderecos, paginacao = get_gerenciar_enderecos_use_case().listar(solicitante, **query)

        if paginacao is None:
            return resposta('Seus endereços listados com sucesso', {
                'addresses': EnderecoSerializer(enderecos, many=True).data,
            })
        return resposta('Endereços listados com sucesso', {
            'addresses': EnderecoSerializer(enderecos, many=True).data,
            'pagination': paginacao.to_dict(),
        })

    def post(self, request):
        dados = validar_corpo(EnderecoEntradaSerializer, request)
        endereco = get_gerenciar_enderecos_use_case().criar(str(request.user.pk), dados)
        return resposta(
            'Endereço criado com sucesso',
            {'address': EnderecoSerializer(endereco).data},
            status_code=status.HTTP_201_CREATED,
        )


class MeusEnderecosAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        enderecos = get_gerenciar_enderecos_use_case().listar_do_usuario(str(request.user.pk))
        return resposta('Seus endereços listados com sucesso', {
            'addresses': EnderecoSerializer(enderecos, many=True).data,
        })


class EnderecoDetalheAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, pk):
        endereco = get_gerenciar_enderecos_use_case().buscar(str(pk), usuario_atual(request))
        return resposta('Endereço encontrado com sucesso', {'address': EnderecoSerializer(endereco).data})

    def put(self, request, pk):
        dados = validar_corpo(EnderecoEntradaSerializer, request, partial=True)
        endereco = get_gerenciar_enderecos_use_case().atualizar(str(pk), usuario_atual(request), dados)
        return resposta('Endereço atualizado com sucesso', {'address': EnderecoSerializer(endereco).data})

    def delete(self, request, pk):
        get_gerenciar_enderecos_use_case().remover(str(pk), usuario_atual(request))
        return resposta('Endereço removido com sucesso')
