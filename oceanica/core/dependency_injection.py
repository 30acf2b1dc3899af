# oceanica/core/dependency_injection.py
"""
Módulo de Injeção de Dependência (DI).
Responsável por instanciar os Use Cases com suas dependências de Repositórios/Serviços
concretos da camada de Infraestrutura.
"""
from django.db import transaction

from oceanica.infrastructure.repositories import (
    UsuarioRepositoryDjango,
    ProdutoRepositoryDjango,
    CarrinhoRepositoryDjango,
    EnderecoRepositoryDjango,
    PedidoRepositoryDjango,
    ItemPedidoRepositoryDjango,
)
from oceanica.infrastructure.tokens import JWTTokenService
from .use_cases import (
    RegistrarUsuarioUseCase,
    AutenticarUsuarioUseCase,
    VerificarTokenUseCase,
    ConsultarUsuariosUseCase,
    ListarProdutosUseCase,
    DetalharProdutoUseCase,
    CriarProdutoUseCase,
    AtualizarProdutoUseCase,
    DeletarProdutoUseCase,
    AtualizarEstoqueUseCase,
    GerenciarCarrinhoUseCase,
    CriarPedidoUseCase,
    CriarPedidoAdminUseCase,
    ListarPedidosUseCase,
    DetalharPedidoUseCase,
    CancelarPedidoUseCase,
    AtualizarStatusPedidoUseCase,
    EstatisticasPedidosUseCase,
    GerenciarItensPedidoUseCase,
    GerenciarEnderecosUseCase,
)

# Repositórios e Serviços Concretos
usuario_repo = UsuarioRepositoryDjango()
produto_repo = ProdutoRepositoryDjango()
carrinho_repo = CarrinhoRepositoryDjango()
endereco_repo = EnderecoRepositoryDjango()
pedido_repo = PedidoRepositoryDjango()
item_pedido_repo = ItemPedidoRepositoryDjango()
token_service = JWTTokenService()

# ====================================================================
# Use Cases de Autenticação/Usuários
# ====================================================================

def get_registrar_usuario_use_case() -> RegistrarUsuarioUseCase:
    return RegistrarUsuarioUseCase(usuario_repo, token_service)

def get_autenticar_usuario_use_case() -> AutenticarUsuarioUseCase:
    return AutenticarUsuarioUseCase(usuario_repo, token_service)

def get_verificar_token_use_case() -> VerificarTokenUseCase:
    return VerificarTokenUseCase(usuario_repo, token_service)

def get_consultar_usuarios_use_case() -> ConsultarUsuariosUseCase:
    return ConsultarUsuariosUseCase(usuario_repo)


# ====================================================================
# Use Cases de Catálogo/Administração
# ====================================================================

def get_listar_produtos_use_case() -> ListarProdutosUseCase:
    return ListarProdutosUseCase(produto_repo)

def get_detalhar_produto_use_case() -> DetalharProdutoUseCase:
    return DetalharProdutoUseCase(produto_repo)

def get_criar_produto_use_case() -> CriarProdutoUseCase:
    return CriarProdutoUseCase(produto_repo)

def get_atualizar_produto_use_case() -> AtualizarProdutoUseCase:
    return AtualizarProdutoUseCase(produto_repo)

def get_deletar_produto_use_case() -> DeletarProdutoUseCase:
    return DeletarProdutoUseCase(produto_repo)

def get_atualizar_estoque_use_case() -> AtualizarEstoqueUseCase:
    return AtualizarEstoqueUseCase(produto_repo)


# ====================================================================
# Use Cases de Vendas/Carrinho
# ====================================================================

def get_gerenciar_carrinho_use_case() -> GerenciarCarrinhoUseCase:
    return GerenciarCarrinhoUseCase(carrinho_repo, produto_repo)

def get_criar_pedido_use_case() -> CriarPedidoUseCase:
    return CriarPedidoUseCase(
        pedido_repo=pedido_repo,
        carrinho_repo=carrinho_repo,
        produto_repo=produto_repo,
        endereco_repo=endereco_repo,
        transacao=transaction.atomic,
    )

def get_criar_pedido_admin_use_case() -> CriarPedidoAdminUseCase:
    return CriarPedidoAdminUseCase(
        pedido_repo=pedido_repo,
        produto_repo=produto_repo,
        usuario_repo=usuario_repo,
        endereco_repo=endereco_repo,
        transacao=transaction.atomic,
    )

def get_listar_pedidos_use_case() -> ListarPedidosUseCase:
    return ListarPedidosUseCase(pedido_repo)

def get_detalhar_pedido_use_case() -> DetalharPedidoUseCase:
    return DetalharPedidoUseCase(pedido_repo)

def get_cancelar_pedido_use_case() -> CancelarPedidoUseCase:
    return CancelarPedidoUseCase(pedido_repo, produto_repo, transacao=transaction.atomic)

def get_atualizar_status_pedido_use_case() -> AtualizarStatusPedidoUseCase:
    return AtualizarStatusPedidoUseCase(pedido_repo, produto_repo, transacao=transaction.atomic)

def get_estatisticas_pedidos_use_case() -> EstatisticasPedidosUseCase:
    return EstatisticasPedidosUseCase(pedido_repo)

def get_gerenciar_itens_pedido_use_case() -> GerenciarItensPedidoUseCase:
    return GerenciarItensPedidoUseCase(item_pedido_repo, pedido_repo, produto_repo)


# ====================================================================
# Use Cases de Endereços
# ====================================================================

def get_gerenciar_enderecos_use_case() -> GerenciarEnderecosUseCase:
    return GerenciarEnderecosUseCase(endereco_repo, usuario_repo)
