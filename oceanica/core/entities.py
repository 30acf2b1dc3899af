from dataclasses import dataclass, field
from decimal import Decimal
from datetime import datetime
from typing import List, Optional, Dict
import math

# ====================================================================
# CONSTANTES DE DOMÍNIO
# ====================================================================

ROLE_CLIENTE = 'cliente'
ROLE_ADMIN = 'admin'
ROLES_VALIDOS = (ROLE_CLIENTE, ROLE_ADMIN)

STATUS_PENDENTE = 'pendente'
STATUS_CONFIRMADO = 'confirmado'
STATUS_ENVIADO = 'enviado'
STATUS_CANCELADO = 'cancelado'
STATUS_VALIDOS = (STATUS_PENDENTE, STATUS_CONFIRMADO, STATUS_ENVIADO, STATUS_CANCELADO)

# Tabela fixa de transições de status do pedido
TRANSICOES_STATUS: Dict[str, tuple] = {
    STATUS_PENDENTE: (STATUS_CONFIRMADO, STATUS_CANCELADO),
    STATUS_CONFIRMADO: (STATUS_ENVIADO, STATUS_CANCELADO),
    STATUS_ENVIADO: (),
    STATUS_CANCELADO: (),
}

STATUS_CANCELAVEIS = (STATUS_PENDENTE, STATUS_CONFIRMADO)


# ====================================================================
# ENTIDADES CORE
# Representam os objetos de negócio puros.
# ====================================================================

@dataclass
class Usuario:
    """Entidade do Usuário, usada como referência para pedidos/carrinhos."""
    email: str
    nome: str = ''
    telefone: str = ''
    role: str = ROLE_CLIENTE
    id: Optional[str] = None
    criado_em: Optional[datetime] = None
    atualizado_em: Optional[datetime] = None

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


@dataclass
class Endereco:
    """Entidade do Endereço de Entrega."""
    usuario_id: str
    rua: str
    cidade: str
    estado: str
    cep: str
    numero: Optional[str] = None
    complemento: Optional[str] = None
    bairro: Optional[str] = None
    is_default: bool = False
    id: Optional[str] = None
    criado_em: Optional[datetime] = None
    atualizado_em: Optional[datetime] = None


@dataclass
class Produto:
    """Entidade do Produto (pescados e derivados) que está sendo vendido."""
    nome: str
    preco: Decimal
    estoque: int = 0
    descricao: Optional[str] = None
    image_url: Optional[str] = None
    image_url1: Optional[str] = None
    id: Optional[str] = None
    criado_em: Optional[datetime] = None
    atualizado_em: Optional[datetime] = None


@dataclass
class ItemCarrinho:
    """Linha do carrinho: um produto e a quantidade desejada."""
    produto_id: str
    quantidade: int
    usuario_id: Optional[str] = None
    produto: Optional[Produto] = None
    id: Optional[str] = None

    @property
    def subtotal(self) -> Decimal:
        if not self.produto:
            return Decimal('0.00')
        return self.produto.preco * self.quantidade


@dataclass
class Carrinho:
    """Agregado do carrinho de um usuário."""
    usuario_id: str
    itens: List[ItemCarrinho] = field(default_factory=list)

    @property
    def total_itens(self) -> int:
        """Soma das quantidades de todas as linhas."""
        return sum(item.quantidade for item in self.itens)

    @property
    def quantidade_linhas(self) -> int:
        return len(self.itens)

    @property
    def valor_total(self) -> Decimal:
        return sum((item.subtotal for item in self.itens), Decimal('0.00'))

    def buscar_item(self, produto_id: str) -> Optional[ItemCarrinho]:
        return next((item for item in self.itens if str(item.produto_id) == str(produto_id)), None)


@dataclass
class ItemPedido:
    """Item de um pedido com o preço congelado no momento da compra."""
    produto_id: str
    quantidade: int
    preco: Decimal
    pedido_id: Optional[str] = None
    produto_nome: Optional[str] = None
    id: Optional[str] = None
    criado_em: Optional[datetime] = None

    @property
    def subtotal(self) -> Decimal:
        return self.preco * self.quantidade


@dataclass
class Pedido:
    """Entidade do Pedido de compra."""
    usuario_id: str
    itens: List[ItemPedido] = field(default_factory=list)
    status: str = STATUS_PENDENTE
    frete: Decimal = Decimal('0.00')
    endereco_id: Optional[str] = None
    id: Optional[str] = None
    total_informado: Optional[Decimal] = None
    quantidade_itens: Optional[int] = None
    cliente_nome: Optional[str] = None
    cliente_email: Optional[str] = None
    criado_em: Optional[datetime] = None
    atualizado_em: Optional[datetime] = None

    @property
    def total_produtos(self) -> Decimal:
        return sum((item.subtotal for item in self.itens), Decimal('0.00'))

    @property
    def total(self) -> Decimal:
        """Total do pedido: itens + frete. Pedidos já persistidos devolvem o valor gravado."""
        if self.total_informado is not None:
            return self.total_informado
        return self.total_produtos + self.frete

    def pode_transitar_para(self, novo_status: str) -> bool:
        return novo_status in TRANSICOES_STATUS.get(self.status, ())

    @property
    def pode_ser_cancelado(self) -> bool:
        return self.status in STATUS_CANCELAVEIS


@dataclass
class Paginacao:
    """Metadados de paginação devolvidos pelas listagens."""
    pagina: int
    limite: int
    total: int

    @property
    def total_paginas(self) -> int:
        return math.ceil(self.total / self.limite) if self.limite else 0

    @property
    def offset(self) -> int:
        return (self.pagina - 1) * self.limite

    def to_dict(self) -> Dict:
        return {
            'currentPage': self.pagina,
            'totalPages': self.total_paginas,
            'totalItems': self.total,
            'itemsPerPage': self.limite,
            'hasNextPage': self.pagina < self.total_paginas,
            'hasPreviousPage': self.pagina > 1,
        }
