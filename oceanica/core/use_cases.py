# oceanica/core/use_cases.py
"""
Implementação dos Casos de Uso (Lógica de Negócio) da aplicação.
Esta camada depende apenas das Entidades e Portas (Interfaces) do Core,
garantindo o isolamento da lógica de negócio.

Operações que escrevem em várias tabelas recebem um `transacao`: um callable
que devolve um context manager (na infraestrutura, `django.db.transaction.atomic`).
"""
import logging
import random
import time
from contextlib import nullcontext
from typing import List, Optional, Dict, Tuple, Callable
from decimal import Decimal, InvalidOperation
from datetime import datetime

# Entidades e Exceções
from oceanica.core.entities import (
    Usuario, Produto, Carrinho, ItemCarrinho, Endereco, Pedido, ItemPedido, Paginacao,
    ROLE_CLIENTE, ROLES_VALIDOS, STATUS_VALIDOS, STATUS_CANCELADO,
)
from oceanica.core.exceptions import (
    DadosInvalidosError,
    CredenciaisInvalidasError,
    TokenInvalidoError,
    AcessoNegadoError,
    EmailJaCadastradoError,
    ItemNaoEncontradoError,
    ProdutoNaoEncontradoError,
    PedidoNaoEncontradoError,
    UsuarioNaoEncontradoError,
    EnderecoNaoEncontradoError,
    EnderecoInvalidoError,
    EstoqueInsuficienteError,
    CarrinhoVazioError,
    StatusInvalidoError,
    TransicaoStatusInvalidaError,
)

# Portas (Interfaces) - Importadas do oceanica/core/ports.py
from oceanica.core.ports import (
    IUsuarioRepository,
    IProdutoRepository,
    ICarrinhoRepository,
    IEnderecoRepository,
    IPedidoRepository,
    IItemPedidoRepository,
    ITokenService,
)

logger = logging.getLogger(__name__)

LIMITE_QUANTIDADE_CARRINHO = 100
CAMPOS_ORDENACAO_PRODUTO = ('name', 'price', 'stock', 'created_at', 'updated_at')
CAMPOS_ORDENACAO_PEDIDO = ('created_at', 'updated_at', 'total_price', 'status')
CAMPOS_ORDENACAO_ENDERECO = ('created_at', 'city', 'state', 'street')
DOMINIO_EMAIL_TEMPORARIO = 'temp.oceanica.local'

# campo: (rótulo, tamanho máximo, obrigatório, gênero do rótulo)
REGRAS_ENDERECO = {
    'rua': ('Rua', 255, True, 'a'),
    'cidade': ('Cidade', 100, True, 'a'),
    'estado': ('Estado', 50, True, 'o'),
    'cep': ('CEP', 20, True, 'o'),
    'numero': ('Número', 20, False, 'o'),
    'complemento': ('Complemento', 255, False, 'o'),
    'bairro': ('Bairro', 100, False, 'o'),
}


# ====================================================================
# FUNÇÕES AUXILIARES DE VALIDAÇÃO
# ====================================================================

def validar_paginacao(pagina: int, limite: int, limite_maximo: int) -> None:
    if pagina is None or pagina < 1:
        raise DadosInvalidosError("Página deve ser um número válido maior que zero")
    if limite is None or limite < 1 or limite > limite_maximo:
        raise DadosInvalidosError(f"Limite deve ser um número entre 1 e {limite_maximo}")


def validar_ordenacao(ordenar_por: str, ordem: str, campos_validos: tuple) -> Tuple[str, str]:
    """Valida o campo e a direção de ordenação, devolvendo a direção normalizada."""
    if ordenar_por not in campos_validos:
        raise DadosInvalidosError("Campo de ordenação inválido")
    ordem = (ordem or '').upper()
    if ordem not in ('ASC', 'DESC'):
        raise DadosInvalidosError("Ordem de classificação inválida")
    return ordenar_por, ordem


def _para_decimal(valor, mensagem: str) -> Decimal:
    try:
        return Decimal(str(valor))
    except (InvalidOperation, TypeError, ValueError):
        raise DadosInvalidosError(mensagem)


def _mesmo_id(a, b) -> bool:
    return a is not None and b is not None and str(a) == str(b)


def _baixar_estoque(produto_repo: IProdutoRepository, itens: List[ItemPedido]) -> None:
    """Debita o estoque de cada item. A atualização é condicional no repositório."""
    for item in itens:
        if not produto_repo.ajustar_estoque(item.produto_id, -item.quantidade):
            raise EstoqueInsuficienteError(
                item.produto_nome or item.produto_id, 0, item.quantidade,
                message=f"Estoque insuficiente para {item.produto_nome or item.produto_id}"
            )


def _repor_estoque(produto_repo: IProdutoRepository, itens: List[ItemPedido]) -> None:
    for item in itens:
        produto_repo.ajustar_estoque(item.produto_id, item.quantidade)


# ====================================================================
# 1. CASOS DE USO DE AUTENTICAÇÃO E USUÁRIOS
# ====================================================================

class RegistrarUsuarioUseCase:
    """Cadastra um novo usuário e devolve o usuário criado com o seu token de acesso."""
    def __init__(self, usuario_repo: IUsuarioRepository, token_service: ITokenService):
        self.usuario_repo = usuario_repo
        self.token_service = token_service

    def executar(
        self,
        email: str,
        senha: str,
        nome: str,
        telefone: Optional[str] = None,
        role: str = ROLE_CLIENTE
    ) -> Tuple[Usuario, str]:
        email = (email or '').strip().lower()
        role = role or ROLE_CLIENTE
        if role not in ROLES_VALIDOS:
            raise DadosInvalidosError("Tipo de usuário inválido. Use: cliente ou admin")

        if self.usuario_repo.buscar_por_email(email):
            raise EmailJaCadastradoError()

        usuario = self.usuario_repo.criar(
            Usuario(email=email, nome=(nome or '').strip(), telefone=telefone or '', role=role),
            senha
        )
        logger.info("Usuário registrado: %s (%s)", usuario.email, usuario.role)
        return usuario, self.token_service.gerar_token(usuario)


class AutenticarUsuarioUseCase:
    def __init__(self, usuario_repo: IUsuarioRepository, token_service: ITokenService):
        self.usuario_repo = usuario_repo
        self.token_service = token_service

    def executar(self, email: str, senha: str) -> Tuple[Usuario, str]:
        """Valida as credenciais. Email inexistente e senha errada produzem o mesmo erro."""
        usuario = self.usuario_repo.verificar_credenciais((email or '').strip().lower(), senha)
        if not usuario:
            logger.warning("Tentativa de login inválida para %s", email)
            raise CredenciaisInvalidasError()
        return usuario, self.token_service.gerar_token(usuario)


class VerificarTokenUseCase:
    def __init__(self, usuario_repo: IUsuarioRepository, token_service: ITokenService):
        self.usuario_repo = usuario_repo
        self.token_service = token_service

    def executar(self, token: Optional[str]) -> Usuario:
        if not token:
            raise DadosInvalidosError("Token é obrigatório")

        claims = self.token_service.validar_token(token)
        usuario = self.usuario_repo.buscar_por_id(claims.get('user_id'))
        if not usuario:
            raise TokenInvalidoError()
        return usuario


class ConsultarUsuariosUseCase:
    """Consultas de perfil e listagem de clientes."""
    def __init__(self, usuario_repo: IUsuarioRepository):
        self.usuario_repo = usuario_repo

    def buscar_perfil(self, usuario_id: str) -> Usuario:
        usuario = self.usuario_repo.buscar_por_id(usuario_id)
        if not usuario:
            raise UsuarioNaoEncontradoError()
        return usuario

    def buscar_usuario(self, usuario_id: str, solicitante: Usuario) -> Usuario:
        """Um usuário só consulta o próprio cadastro; administradores consultam qualquer um."""
        if not solicitante.is_admin and not _mesmo_id(solicitante.id, usuario_id):
            raise AcessoNegadoError()
        return self.buscar_perfil(usuario_id)

    def listar_clientes(self) -> List[Usuario]:
        return self.usuario_repo.listar_por_role(ROLE_CLIENTE)


# ====================================================================
# 2. CASOS DE USO DO CATÁLOGO
# ====================================================================

def _validar_dados_produto(dados: Dict) -> Dict:
    """Valida e normaliza os campos de produto presentes em `dados`."""
    validados = dict(dados)
    if 'nome' in validados:
        nome = (validados['nome'] or '').strip()
        if not nome:
            raise DadosInvalidosError("Nome do produto é obrigatório")
        validados['nome'] = nome

    if 'preco' in validados:
        preco = _para_decimal(validados['preco'], "Preço deve ser um número válido")
        if preco <= 0:
            raise DadosInvalidosError("Preço deve ser maior que zero")
        validados['preco'] = preco

    if 'estoque' in validados:
        estoque = validados['estoque']
        if estoque is None:
            estoque = 0
        if int(estoque) < 0:
            raise DadosInvalidosError("Estoque não pode ser negativo")
        validados['estoque'] = int(estoque)

    for campo in ('descricao', 'image_url', 'image_url1'):
        if campo in validados and isinstance(validados[campo], str):
            validados[campo] = validados[campo].strip() or None

    return validados


class ListarProdutosUseCase:
    """Caso de Uso responsável por listar produtos com busca, paginação e ordenação."""
    def __init__(self, produto_repo: IProdutoRepository):
        self.produto_repo = produto_repo

    def executar(
        self,
        pagina: int = 1,
        limite: int = 10,
        busca: Optional[str] = None,
        ordenar_por: str = 'created_at',
        ordem: str = 'DESC'
    ) -> Tuple[List[Produto], Paginacao]:
        validar_paginacao(pagina, limite, 100)
        ordenar_por, ordem = validar_ordenacao(ordenar_por, ordem, CAMPOS_ORDENACAO_PRODUTO)
        busca = (busca or '').strip() or None

        produtos, total = self.produto_repo.listar(pagina, limite, busca, ordenar_por, ordem)
        return produtos, Paginacao(pagina=pagina, limite=limite, total=total)


class DetalharProdutoUseCase:
    """Caso de Uso para obter os detalhes de um produto específico."""
    def __init__(self, produto_repo: IProdutoRepository):
        self.produto_repo = produto_repo

    def executar(self, produto_id: str) -> Produto:
        produto = self.produto_repo.buscar_por_id(produto_id)
        if not produto:
            raise ProdutoNaoEncontradoError()
        return produto


class CriarProdutoUseCase:
    def __init__(self, produto_repo: IProdutoRepository):
        self.produto_repo = produto_repo

    def executar(
        self,
        nome: str,
        preco,
        estoque: int = 0,
        descricao: Optional[str] = None,
        image_url: Optional[str] = None,
        image_url1: Optional[str] = None
    ) -> Produto:
        dados = _validar_dados_produto({
            'nome': nome, 'preco': preco, 'estoque': estoque,
            'descricao': descricao, 'image_url': image_url, 'image_url1': image_url1,
        })
        produto = self.produto_repo.salvar(Produto(**dados))
        logger.info("Produto criado: %s (%s)", produto.nome, produto.id)
        return produto


class AtualizarProdutoUseCase:
    CAMPOS = ('nome', 'descricao', 'preco', 'estoque', 'image_url', 'image_url1')

    def __init__(self, produto_repo: IProdutoRepository):
        self.produto_repo = produto_repo

    def executar(self, produto_id: str, dados: Dict) -> Produto:
        """Atualização parcial: apenas os campos presentes em `dados` são alterados."""
        produto = self.produto_repo.buscar_por_id(produto_id)
        if not produto:
            raise ProdutoNaoEncontradoError()

        alteracoes = {campo: valor for campo, valor in dados.items() if campo in self.CAMPOS}
        if not alteracoes:
            raise DadosInvalidosError("Nenhum campo fornecido para atualização")

        validados = _validar_dados_produto(alteracoes)
        for campo, valor in validados.items():
            setattr(produto, campo, valor)
        return self.produto_repo.salvar(produto, campos=list(validados))


class DeletarProdutoUseCase:
    def __init__(self, produto_repo: IProdutoRepository):
        self.produto_repo = produto_repo

    def executar(self, produto_id: str) -> None:
        if not self.produto_repo.deletar(produto_id):
            raise ProdutoNaoEncontradoError()
        logger.info("Produto removido: %s", produto_id)


class AtualizarEstoqueUseCase:
    """Soma uma quantidade (positiva ou negativa) ao estoque do produto."""
    def __init__(self, produto_repo: IProdutoRepository):
        self.produto_repo = produto_repo

    def executar(self, produto_id: str, quantidade: int) -> Produto:
        if quantidade is None:
            raise DadosInvalidosError("Quantidade deve ser um número válido")

        if not self.produto_repo.buscar_por_id(produto_id):
            raise ProdutoNaoEncontradoError()

        if not self.produto_repo.ajustar_estoque(produto_id, int(quantidade)):
            raise DadosInvalidosError("Operação resultaria em estoque negativo")
        return self.produto_repo.buscar_por_id(produto_id)


# ====================================================================
# 3. CASOS DE USO DO CARRINHO
# ====================================================================

class GerenciarCarrinhoUseCase:
    """
    Caso de Uso que centraliza a lógica de gestão do carrinho (adicionar, atualizar, remover, visualizar).
    """
    def __init__(self, carrinho_repo: ICarrinhoRepository, produto_repo: IProdutoRepository):
        self.carrinho_repo = carrinho_repo
        self.produto_repo = produto_repo

    @staticmethod
    def _validar_quantidade(quantidade: int) -> None:
        if quantidade is None or quantidade <= 0:
            raise DadosInvalidosError("Quantidade deve ser maior que zero")
        if quantidade > LIMITE_QUANTIDADE_CARRINHO:
            raise DadosInvalidosError(
                f"Quantidade máxima por item é {LIMITE_QUANTIDADE_CARRINHO}"
            )

    def obter_carrinho(self, usuario_id: str) -> Carrinho:
        return self.carrinho_repo.buscar_por_usuario(usuario_id)

    def contar_itens(self, usuario_id: str) -> Tuple[int, int]:
        """Retorna (linhas distintas, quantidade total)."""
        carrinho = self.obter_carrinho(usuario_id)
        return carrinho.quantidade_linhas, carrinho.total_itens

    def adicionar_item(self, usuario_id: str, produto_id: str, quantidade: int = 1) -> ItemCarrinho:
        """Adiciona ou incrementa um item no carrinho, verificando estoque."""
        self._validar_quantidade(quantidade)

        produto = self.produto_repo.buscar_por_id(produto_id)
        if not produto:
            raise ProdutoNaoEncontradoError()

        carrinho = self.carrinho_repo.buscar_por_usuario(usuario_id)
        item_existente = carrinho.buscar_item(produto_id)
        quantidade_no_carrinho = item_existente.quantidade if item_existente else 0
        quantidade_total = quantidade_no_carrinho + quantidade

        if quantidade_total > produto.estoque:
            raise EstoqueInsuficienteError(
                produto.nome, produto.estoque, quantidade_total,
                message=(f"Estoque insuficiente. Você já tem {quantidade_no_carrinho} no carrinho. "
                         f"Máximo possível: {max(produto.estoque - quantidade_no_carrinho, 0)}")
            )

        return self.carrinho_repo.salvar_item(usuario_id, produto_id, quantidade_total)

    def atualizar_quantidade(self, usuario_id: str, produto_id: str, quantidade: int) -> ItemCarrinho:
        self._validar_quantidade(quantidade)

        carrinho = self.carrinho_repo.buscar_por_usuario(usuario_id)
        if not carrinho.buscar_item(produto_id):
            raise ItemNaoEncontradoError("Item não encontrado no carrinho")

        produto = self.produto_repo.buscar_por_id(produto_id)
        if not produto:
            raise ProdutoNaoEncontradoError()

        if quantidade > produto.estoque:
            raise EstoqueInsuficienteError(
                produto.nome, produto.estoque, quantidade,
                message=f"Estoque insuficiente. Disponível: {produto.estoque}"
            )

        return self.carrinho_repo.salvar_item(usuario_id, produto_id, quantidade)

    def remover_item(self, usuario_id: str, produto_id: str) -> None:
        """Remove um item do carrinho completamente."""
        if not self.carrinho_repo.remover_item(usuario_id, produto_id):
            raise ItemNaoEncontradoError("Item não encontrado no carrinho")

    def limpar(self, usuario_id: str) -> int:
        return self.carrinho_repo.limpar(usuario_id)


# ====================================================================
# 4. CASOS DE USO DE PEDIDO E CHECKOUT
# ====================================================================

class CriarPedidoUseCase:
    """
    Checkout do carrinho: valida endereço e estoque, grava o pedido com os itens,
    debita o estoque e esvazia o carrinho, tudo na mesma transação.
    """
    def __init__(
        self,
        pedido_repo: IPedidoRepository,
        carrinho_repo: ICarrinhoRepository,
        produto_repo: IProdutoRepository,
        endereco_repo: IEnderecoRepository,
        transacao: Callable = nullcontext
    ):
        self.pedido_repo = pedido_repo
        self.carrinho_repo = carrinho_repo
        self.produto_repo = produto_repo
        self.endereco_repo = endereco_repo
        self.transacao = transacao

    def executar(self, usuario_id: str, endereco_id: str, frete=Decimal('0.00')) -> Pedido:
        frete = _para_decimal(frete if frete is not None else 0, "Preço do frete deve ser um número válido")
        if frete < 0:
            raise DadosInvalidosError("Preço do frete não pode ser negativo")
        if not endereco_id:
            raise DadosInvalidosError("ID do endereço é obrigatório")

        with self.transacao():
            endereco = self.endereco_repo.buscar_por_id(endereco_id)
            if not endereco or not _mesmo_id(endereco.usuario_id, usuario_id):
                raise EnderecoInvalidoError()

            carrinho = self.carrinho_repo.buscar_por_usuario(usuario_id)
            if not carrinho.itens:
                raise CarrinhoVazioError()

            itens = []
            for item in carrinho.itens:
                produto = item.produto
                if item.quantidade > produto.estoque:
                    raise EstoqueInsuficienteError(produto.nome, produto.estoque, item.quantidade)
                itens.append(ItemPedido(
                    produto_id=produto.id,
                    quantidade=item.quantidade,
                    preco=produto.preco,
                    produto_nome=produto.nome,
                ))

            pedido = self.pedido_repo.salvar(
                Pedido(usuario_id=usuario_id, itens=itens, frete=frete, endereco_id=endereco_id)
            )
            _baixar_estoque(self.produto_repo, itens)
            self.carrinho_repo.limpar(usuario_id)

        logger.info("Pedido %s criado para o usuário %s. Total: %s", pedido.id, usuario_id, pedido.total)
        return pedido


class CriarPedidoAdminUseCase:
    """
    Pedidos criados fora do fluxo de carrinho (balcão, canais externos, pedido rápido).
    O cliente é registrado como um usuário temporário.
    """
    def __init__(
        self,
        pedido_repo: IPedidoRepository,
        produto_repo: IProdutoRepository,
        usuario_repo: IUsuarioRepository,
        endereco_repo: IEnderecoRepository,
        transacao: Callable = nullcontext
    ):
        self.pedido_repo = pedido_repo
        self.produto_repo = produto_repo
        self.usuario_repo = usuario_repo
        self.endereco_repo = endereco_repo
        self.transacao = transacao

    @staticmethod
    def gerar_email_temporario() -> str:
        return f"temp_{time.time_ns()}{random.randint(0, 999):03d}@{DOMINIO_EMAIL_TEMPORARIO}"

    def criar_pedido_admin(
        self, itens: List[Dict], cliente_nome: str, cliente_telefone: str, frete=Decimal('0.00')
    ) -> Pedido:
        return self._criar(itens, cliente_nome, cliente_telefone, frete)

    def criar_pedido_externo(
        self, itens: List[Dict], cliente_nome: str, cliente_telefone: str,
        endereco: Dict, frete=Decimal('0.00')
    ) -> Pedido:
        if not endereco:
            raise DadosInvalidosError("Endereço é obrigatório")
        return self._criar(itens, cliente_nome, cliente_telefone, frete, endereco)

    def criar_pedido_simples(self, produto_id: str, cliente_nome: str, cliente_telefone: str) -> Pedido:
        """Uma unidade de um produto, sem frete."""
        if not produto_id:
            raise DadosInvalidosError("ID do produto é obrigatório")
        return self._criar([{'produto_id': produto_id, 'quantidade': 1}], cliente_nome, cliente_telefone)

    def _criar(
        self, itens: List[Dict], cliente_nome: str, cliente_telefone: str,
        frete=Decimal('0.00'), endereco_dados: Optional[Dict] = None
    ) -> Pedido:
        if not itens:
            raise DadosInvalidosError("Lista de itens é obrigatória")
        if not (cliente_nome or '').strip():
            raise DadosInvalidosError("Nome do cliente é obrigatório")
        if not (cliente_telefone or '').strip():
            raise DadosInvalidosError("Telefone do cliente é obrigatório")
        frete = _para_decimal(frete if frete is not None else 0, "Preço do frete deve ser um número válido")
        if frete < 0:
            raise DadosInvalidosError("Preço do frete não pode ser negativo")
        for item in itens:
            if not item.get('produto_id'):
                raise DadosInvalidosError("ID do produto é obrigatório")
            if not item.get('quantidade') or int(item['quantidade']) <= 0:
                raise DadosInvalidosError("Quantidade deve ser maior que zero")
        if endereco_dados is not None:
            endereco_dados = validar_dados_endereco(endereco_dados)

        with self.transacao():
            ids = {str(item['produto_id']) for item in itens}
            produtos = {str(p.id): p for p in self.produto_repo.buscar_por_ids(list(ids))}
            if len(produtos) != len(ids):
                raise DadosInvalidosError("Um ou mais produtos não foram encontrados")

            itens_pedido = []
            for item in itens:
                produto = produtos[str(item['produto_id'])]
                quantidade = int(item['quantidade'])
                if quantidade > produto.estoque:
                    raise EstoqueInsuficienteError(produto.nome, produto.estoque, quantidade)
                itens_pedido.append(ItemPedido(
                    produto_id=produto.id, quantidade=quantidade,
                    preco=produto.preco, produto_nome=produto.nome,
                ))

            cliente = self.usuario_repo.criar(
                Usuario(
                    email=self.gerar_email_temporario(),
                    nome=cliente_nome.strip(),
                    telefone=cliente_telefone.strip(),
                    role=ROLE_CLIENTE,
                ),
                None
            )

            endereco_id = None
            if endereco_dados is not None:
                endereco = self.endereco_repo.salvar(
                    Endereco(usuario_id=cliente.id, **{**endereco_dados, 'is_default': True})
                )
                endereco_id = endereco.id

            pedido = self.pedido_repo.salvar(Pedido(
                usuario_id=cliente.id, itens=itens_pedido, frete=frete, endereco_id=endereco_id,
            ))
            _baixar_estoque(self.produto_repo, itens_pedido)

        logger.info("Pedido %s criado para o cliente temporário %s", pedido.id, cliente.email)
        return pedido


class ListarPedidosUseCase:
    def __init__(self, pedido_repo: IPedidoRepository):
        self.pedido_repo = pedido_repo

    @staticmethod
    def _validar_filtros(status: Optional[str], ordenar_por: str, ordem: str) -> Tuple[Optional[str], str, str]:
        if status:
            status = status.strip().lower()
            if status not in STATUS_VALIDOS:
                raise StatusInvalidoError(f"Status inválido. Use: {', '.join(STATUS_VALIDOS)}")
        ordenar_por, ordem = validar_ordenacao(ordenar_por, ordem, CAMPOS_ORDENACAO_PEDIDO)
        return status or None, ordenar_por, ordem

    def listar_do_usuario(
        self,
        usuario_id: str,
        pagina: int = 1,
        limite: int = 10,
        status: Optional[str] = None,
        ordenar_por: str = 'created_at',
        ordem: str = 'DESC'
    ) -> Tuple[List[Pedido], Paginacao]:
        validar_paginacao(pagina, limite, 50)
        status, ordenar_por, ordem = self._validar_filtros(status, ordenar_por, ordem)

        pedidos, total = self.pedido_repo.listar(
            pagina, limite, usuario_id=usuario_id, status=status,
            ordenar_por=ordenar_por, ordem=ordem
        )
        return pedidos, Paginacao(pagina=pagina, limite=limite, total=total)

    def listar_todos(
        self,
        pagina: int = 1,
        limite: int = 10,
        status: Optional[str] = None,
        usuario_id: Optional[str] = None,
        ordenar_por: str = 'created_at',
        ordem: str = 'DESC'
    ) -> Tuple[List[Pedido], Paginacao]:
        """Listagem administrativa com filtros por status e cliente."""
        validar_paginacao(pagina, limite, 100)
        status, ordenar_por, ordem = self._validar_filtros(status, ordenar_por, ordem)

        pedidos, total = self.pedido_repo.listar(
            pagina, limite, usuario_id=usuario_id, status=status,
            ordenar_por=ordenar_por, ordem=ordem
        )
        return pedidos, Paginacao(pagina=pagina, limite=limite, total=total)


class DetalharPedidoUseCase:
    def __init__(self, pedido_repo: IPedidoRepository):
        self.pedido_repo = pedido_repo

    def executar(self, pedido_id: str, solicitante: Usuario) -> Pedido:
        """Pedidos de outros usuários são tratados como inexistentes."""
        pedido = self.pedido_repo.buscar_por_id(pedido_id)
        if not pedido or (not solicitante.is_admin and not _mesmo_id(pedido.usuario_id, solicitante.id)):
            raise PedidoNaoEncontradoError()
        return pedido


class CancelarPedidoUseCase:
    """Cancela um pedido pendente ou confirmado e devolve os itens ao estoque."""
    def __init__(self, pedido_repo: IPedidoRepository, produto_repo: IProdutoRepository,
                 transacao: Callable = nullcontext):
        self.pedido_repo = pedido_repo
        self.produto_repo = produto_repo
        self.transacao = transacao

    def executar(self, pedido_id: str, solicitante: Usuario) -> Pedido:
        with self.transacao():
            pedido = self.pedido_repo.buscar_por_id(pedido_id)
            if not pedido or (not solicitante.is_admin and not _mesmo_id(pedido.usuario_id, solicitante.id)):
                raise PedidoNaoEncontradoError()

            if not pedido.pode_ser_cancelado:
                raise StatusInvalidoError(f'Não é possível cancelar pedido com status "{pedido.status}"')

            atualizado = self.pedido_repo.atualizar_status(pedido.id, STATUS_CANCELADO, pedido.status)
            if not atualizado:
                raise StatusInvalidoError("O pedido foi alterado por outra operação. Tente novamente.")
            _repor_estoque(self.produto_repo, pedido.itens)

        logger.info("Pedido %s cancelado por %s. Estoque restaurado.", pedido.id, solicitante.email)
        return atualizado


class AtualizarStatusPedidoUseCase:
    def __init__(self, pedido_repo: IPedidoRepository, produto_repo: IProdutoRepository,
                 transacao: Callable = nullcontext):
        self.pedido_repo = pedido_repo
        self.produto_repo = produto_repo
        self.transacao = transacao

    def executar(self, pedido_id: str, novo_status: str) -> Pedido:
        novo_status = (novo_status or '').strip().lower()
        if novo_status not in STATUS_VALIDOS:
            raise StatusInvalidoError(f"Status inválido. Use: {', '.join(STATUS_VALIDOS)}")

        with self.transacao():
            pedido = self.pedido_repo.buscar_por_id(pedido_id)
            if not pedido:
                raise PedidoNaoEncontradoError()

            if not pedido.pode_transitar_para(novo_status):
                raise TransicaoStatusInvalidaError(pedido.status, novo_status)

            atualizado = self.pedido_repo.atualizar_status(pedido.id, novo_status, pedido.status)
            if not atualizado:
                raise StatusInvalidoError("O pedido foi alterado por outra operação. Tente novamente.")

            if novo_status == STATUS_CANCELADO:
                _repor_estoque(self.produto_repo, pedido.itens)

        logger.info("Pedido %s: status %s -> %s", pedido.id, pedido.status, novo_status)
        return atualizado


class EstatisticasPedidosUseCase:
    def __init__(self, pedido_repo: IPedidoRepository):
        self.pedido_repo = pedido_repo

    def executar(self) -> Dict:
        return self.pedido_repo.estatisticas()


# ====================================================================
# 5. CASOS DE USO DE ITENS DE PEDIDO
# ====================================================================

class GerenciarItensPedidoUseCase:
    """Manutenção direta dos itens de um pedido já existente."""
    def __init__(
        self,
        item_repo: IItemPedidoRepository,
        pedido_repo: IPedidoRepository,
        produto_repo: IProdutoRepository
    ):
        self.item_repo = item_repo
        self.pedido_repo = pedido_repo
        self.produto_repo = produto_repo

    def _obter_pedido(self, pedido_id: str, solicitante: Usuario) -> Pedido:
        pedido = self.pedido_repo.buscar_por_id(pedido_id)
        if not pedido or (not solicitante.is_admin and not _mesmo_id(pedido.usuario_id, solicitante.id)):
            raise PedidoNaoEncontradoError()
        return pedido

    def _obter_item(self, item_id: str, solicitante: Usuario) -> ItemPedido:
        item = self.item_repo.buscar_por_id(item_id)
        if not item:
            raise ItemNaoEncontradoError("Item não encontrado")
        try:
            self._obter_pedido(item.pedido_id, solicitante)
        except PedidoNaoEncontradoError:
            raise ItemNaoEncontradoError("Item não encontrado")
        return item

    def criar_itens(self, pedido_id: str, itens: List[Dict], solicitante: Usuario) -> List[ItemPedido]:
        if not pedido_id:
            raise DadosInvalidosError("ID do pedido é obrigatório")
        if not itens:
            raise DadosInvalidosError("Lista de itens é obrigatória")

        novos = []
        for posicao, item in enumerate(itens, start=1):
            if not item.get('produto_id'):
                raise DadosInvalidosError(f"Item {posicao}: ID do produto é obrigatório")
            quantidade = item.get('quantidade')
            if quantidade is None or int(quantidade) <= 0:
                raise DadosInvalidosError(f"Item {posicao}: Quantidade deve ser maior que zero")
            preco = _para_decimal(item.get('preco'), f"Item {posicao}: Preço deve ser um número válido")
            if preco <= 0:
                raise DadosInvalidosError(f"Item {posicao}: Preço deve ser maior que zero")
            novos.append(ItemPedido(produto_id=item['produto_id'], quantidade=int(quantidade), preco=preco))

        self._obter_pedido(pedido_id, solicitante)
        for item in novos:
            produto = self.produto_repo.buscar_por_id(item.produto_id)
            if not produto:
                raise ProdutoNaoEncontradoError(f"Produto {item.produto_id} não encontrado")
            item.produto_nome = produto.nome

        return self.item_repo.criar_itens(pedido_id, novos)

    def listar_por_pedido(self, pedido_id: str, solicitante: Usuario) -> List[ItemPedido]:
        self._obter_pedido(pedido_id, solicitante)
        return self.item_repo.listar_por_pedido(pedido_id)

    def buscar(self, item_id: str, solicitante: Usuario) -> ItemPedido:
        return self._obter_item(item_id, solicitante)

    def atualizar_quantidade(self, item_id: str, quantidade: int, solicitante: Usuario) -> ItemPedido:
        """Altera a quantidade e recalcula o subtotal do item."""
        if quantidade is None or quantidade <= 0:
            raise DadosInvalidosError("Quantidade deve ser um número válido maior que zero")
        self._obter_item(item_id, solicitante)
        return self.item_repo.atualizar_quantidade(item_id, quantidade)

    def remover(self, item_id: str, solicitante: Usuario) -> None:
        self._obter_item(item_id, solicitante)
        self.item_repo.deletar(item_id)

    def remover_do_pedido(self, pedido_id: str, solicitante: Usuario) -> int:
        self._obter_pedido(pedido_id, solicitante)
        return self.item_repo.deletar_por_pedido(pedido_id)

    def calcular_totais(self, pedido_id: str, solicitante: Usuario) -> Dict:
        itens = self.listar_por_pedido(pedido_id, solicitante)
        return {
            'totalItems': len(itens),
            'totalQuantity': sum(item.quantidade for item in itens),
            'totalAmount': sum((item.subtotal for item in itens), Decimal('0.00')),
        }

    def listar_por_produto(self, produto_id: str, limite: int = 50, offset: int = 0) -> List[ItemPedido]:
        if limite is None or limite < 1 or limite > 100:
            raise DadosInvalidosError("Limite deve ser um número entre 1 e 100")
        if offset is None or offset < 0:
            raise DadosInvalidosError("Offset deve ser um número maior ou igual a zero")
        return self.item_repo.listar_por_produto(produto_id, limite, offset)

    def estatisticas_vendas(
        self,
        produto_id: Optional[str] = None,
        data_inicio: Optional[datetime] = None,
        data_fim: Optional[datetime] = None,
        limite: int = 10
    ) -> List[Dict]:
        if limite is None or limite < 1 or limite > 100:
            raise DadosInvalidosError("Limite deve ser um número entre 1 e 100")
        if data_inicio and data_fim and data_inicio > data_fim:
            raise DadosInvalidosError("Data de início deve ser anterior à data de fim")
        return self.item_repo.estatisticas_vendas(produto_id, data_inicio, data_fim, limite)


# ====================================================================
# 6. CASOS DE USO DE ENDEREÇOS
# ====================================================================

def validar_dados_endereco(dados: Dict, parcial: bool = False) -> Dict:
    """
    Valida campos obrigatórios e tamanhos máximos de um endereço.
    Em modo parcial só os campos presentes são verificados.
    """
    validados = {}
    for campo, (rotulo, tamanho, obrigatorio, genero) in REGRAS_ENDERECO.items():
        if campo not in dados:
            if obrigatorio and not parcial:
                raise DadosInvalidosError(f"{rotulo} é obrigatóri{genero}")
            continue
        valor = dados[campo]
        valor = str(valor).strip() if valor is not None else None
        if obrigatorio and not valor:
            raise DadosInvalidosError(f"{rotulo} é obrigatóri{genero}")
        if valor and len(valor) > tamanho:
            raise DadosInvalidosError(f"{rotulo} deve ter no máximo {tamanho} caracteres")
        validados[campo] = valor or None
    if 'is_default' in dados:
        validados['is_default'] = bool(dados['is_default'])
    return validados


class GerenciarEnderecosUseCase:
    def __init__(self, endereco_repo: IEnderecoRepository, usuario_repo: IUsuarioRepository):
        self.endereco_repo = endereco_repo
        self.usuario_repo = usuario_repo

    def _obter(self, endereco_id: str, solicitante: Usuario) -> Endereco:
        endereco = self.endereco_repo.buscar_por_id(endereco_id)
        if not endereco or (not solicitante.is_admin and not _mesmo_id(endereco.usuario_id, solicitante.id)):
            raise EnderecoNaoEncontradoError()
        return endereco

    def criar(self, usuario_id: str, dados: Dict) -> Endereco:
        validados = validar_dados_endereco(dados)
        if not self.usuario_repo.buscar_por_id(usuario_id):
            raise UsuarioNaoEncontradoError()
        return self.endereco_repo.salvar(Endereco(usuario_id=usuario_id, **validados))

    def listar(
        self,
        solicitante: Usuario,
        pagina: int = 1,
        limite: int = 20,
        cidade: Optional[str] = None,
        estado: Optional[str] = None,
        ordenar_por: str = 'created_at',
        ordem: str = 'DESC'
    ) -> Tuple[List[Endereco], Optional[Paginacao]]:
        """Administradores recebem a listagem paginada de todos os endereços."""
        if not solicitante.is_admin:
            return self.listar_do_usuario(solicitante.id), None

        validar_paginacao(pagina, limite, 100)
        ordenar_por, ordem = validar_ordenacao(ordenar_por, ordem, CAMPOS_ORDENACAO_ENDERECO)
        enderecos, total = self.endereco_repo.listar(
            pagina, limite, cidade=cidade or None, estado=estado or None,
            ordenar_por=ordenar_por, ordem=ordem
        )
        return enderecos, Paginacao(pagina=pagina, limite=limite, total=total)

    def listar_do_usuario(self, usuario_id: str) -> List[Endereco]:
        return self.endereco_repo.listar_por_usuario(usuario_id)

    def buscar(self, endereco_id: str, solicitante: Usuario) -> Endereco:
        return self._obter(endereco_id, solicitante)

    def atualizar(self, endereco_id: str, solicitante: Usuario, dados: Dict) -> Endereco:
        endereco = self._obter(endereco_id, solicitante)
        campos = {k: v for k, v in dados.items() if k in REGRAS_ENDERECO or k == 'is_default'}
        if not campos:
            raise DadosInvalidosError("Nenhum campo para atualizar foi fornecido")

        for campo, valor in validar_dados_endereco(campos, parcial=True).items():
            setattr(endereco, campo, valor)
        return self.endereco_repo.salvar(endereco)

    def remover(self, endereco_id: str, solicitante: Usuario) -> None:
        endereco = self._obter(endereco_id, solicitante)
        self.endereco_repo.deletar(endereco.id)

    def estatisticas(self) -> Dict:
        return self.endereco_repo.estatisticas()
