# oceanica/core/ports.py
"""
Definição das Portas (Interfaces/Protocolos) da Arquitetura Limpa.

Estes protocolos definem o contrato que a camada de Infraestrutura (Repositórios, Serviços)
DEVE seguir para se conectar à camada Core (Casos de Uso).
"""

from typing import Protocol, List, Optional, Dict, Tuple
from abc import abstractmethod
from datetime import datetime

# Importa as Entidades que definem o Contrato de Dados
from oceanica.core.entities import (
    Usuario, Produto, Carrinho, ItemCarrinho, Endereco, Pedido, ItemPedido
)


# ====================================================================
# 1. REPOSITÓRIOS (Portas de Persistência)
# ====================================================================

class IUsuarioRepository(Protocol):
    """Protocolo para a persistência e autenticação de Usuários."""

    @abstractmethod
    def buscar_por_id(self, usuario_id: str) -> Optional[Usuario]: ...

    @abstractmethod
    def buscar_por_email(self, email: str) -> Optional[Usuario]: ...

    @abstractmethod
    def criar(self, usuario: Usuario, senha: Optional[str]) -> Usuario:
        """Cria o usuário. Sem senha, a conta recebe uma senha inutilizável."""
        ...

    @abstractmethod
    def verificar_credenciais(self, email: str, senha: str) -> Optional[Usuario]: ...

    @abstractmethod
    def listar_por_role(self, role: str) -> List[Usuario]: ...


class IProdutoRepository(Protocol):
    """Protocolo para a persistência e busca de Produtos."""

    @abstractmethod
    def buscar_por_id(self, produto_id: str) -> Optional[Produto]: ...

    @abstractmethod
    def buscar_por_ids(self, produto_ids: List[str]) -> List[Produto]: ...

    @abstractmethod
    def listar(
        self,
        pagina: int,
        limite: int,
        busca: Optional[str] = None,
        ordenar_por: str = 'created_at',
        ordem: str = 'DESC'
    ) -> Tuple[List[Produto], int]: ...

    @abstractmethod
    def salvar(self, produto: Produto, campos: Optional[List[str]] = None) -> Produto:
        """Com `campos`, grava apenas essas colunas de um produto existente."""
        ...

    @abstractmethod
    def deletar(self, produto_id: str) -> bool: ...

    @abstractmethod
    def ajustar_estoque(self, produto_id: str, delta: int) -> bool:
        """Soma `delta` ao estoque. Retorna False se o resultado ficaria negativo."""
        ...


class ICarrinhoRepository(Protocol):
    """Protocolo para a persistência do Carrinho."""

    @abstractmethod
    def buscar_por_usuario(self, usuario_id: str) -> Carrinho: ...

    @abstractmethod
    def salvar_item(self, usuario_id: str, produto_id: str, quantidade: int) -> ItemCarrinho: ...

    @abstractmethod
    def remover_item(self, usuario_id: str, produto_id: str) -> bool: ...

    @abstractmethod
    def limpar(self, usuario_id: str) -> int: ...


class IEnderecoRepository(Protocol):
    """Protocolo para a persistência de Endereços."""

    @abstractmethod
    def buscar_por_id(self, endereco_id: str) -> Optional[Endereco]: ...

    @abstractmethod
    def listar_por_usuario(self, usuario_id: str) -> List[Endereco]: ...

    @abstractmethod
    def listar(
        self,
        pagina: int,
        limite: int,
        cidade: Optional[str] = None,
        estado: Optional[str] = None,
        ordenar_por: str = 'created_at',
        ordem: str = 'DESC'
    ) -> Tuple[List[Endereco], int]: ...

    @abstractmethod
    def salvar(self, endereco: Endereco) -> Endereco: ...

    @abstractmethod
    def deletar(self, endereco_id: str) -> bool: ...

    @abstractmethod
    def estatisticas(self) -> Dict: ...


class IPedidoRepository(Protocol):
    """Protocolo para a persistência de Pedidos."""

    @abstractmethod
    def salvar(self, pedido: Pedido) -> Pedido: ...

    @abstractmethod
    def buscar_por_id(self, pedido_id: str) -> Optional[Pedido]: ...

    @abstractmethod
    def listar(
        self,
        pagina: int,
        limite: int,
        usuario_id: Optional[str] = None,
        status: Optional[str] = None,
        ordenar_por: str = 'created_at',
        ordem: str = 'DESC'
    ) -> Tuple[List[Pedido], int]: ...

    @abstractmethod
    def atualizar_status(self, pedido_id: str, status: str, status_atual: Optional[str] = None) -> Optional[Pedido]:
        """Troca o status. Com `status_atual`, só altera se o pedido ainda estiver nele."""
        ...

    @abstractmethod
    def estatisticas(self) -> Dict: ...


class IItemPedidoRepository(Protocol):
    """Protocolo para a persistência dos Itens de Pedido."""

    @abstractmethod
    def criar_itens(self, pedido_id: str, itens: List[ItemPedido]) -> List[ItemPedido]: ...

    @abstractmethod
    def buscar_por_id(self, item_id: str) -> Optional[ItemPedido]: ...

    @abstractmethod
    def listar_por_pedido(self, pedido_id: str) -> List[ItemPedido]: ...

    @abstractmethod
    def atualizar_quantidade(self, item_id: str, quantidade: int) -> ItemPedido: ...

    @abstractmethod
    def deletar(self, item_id: str) -> bool: ...

    @abstractmethod
    def deletar_por_pedido(self, pedido_id: str) -> int: ...

    @abstractmethod
    def listar_por_produto(self, produto_id: str, limite: int, offset: int) -> List[ItemPedido]: ...

    @abstractmethod
    def estatisticas_vendas(
        self,
        produto_id: Optional[str] = None,
        data_inicio: Optional[datetime] = None,
        data_fim: Optional[datetime] = None,
        limite: int = 10
    ) -> List[Dict]: ...


# ====================================================================
# 2. SERVIÇOS (Portas de Serviços Externos)
# ====================================================================

class ITokenService(Protocol):
    """Protocolo para emissão e validação de tokens de acesso."""

    @abstractmethod
    def gerar_token(self, usuario: Usuario) -> str: ...

    @abstractmethod
    def validar_token(self, token: str) -> Dict:
        """Retorna as claims do token ou levanta TokenInvalidoError."""
        ...
