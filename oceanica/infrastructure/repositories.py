"""
Camada de Infraestrutura: Implementação de Repositórios.

Esta camada traduz as operações abstratas definidas nas Portas do Core
em chamadas concretas ao Django ORM.
"""
from typing import List, Optional, Dict, Tuple
from datetime import datetime, timedelta
from decimal import Decimal
import uuid

from django.apps import apps
from django.contrib.auth import authenticate, get_user_model
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Q, F, Sum, Avg, Count, Min, Max, Prefetch, ProtectedError
from django.db.models.functions import TruncMonth
from django.db.utils import IntegrityError
from django.utils import timezone

# Importações da Camada CORE (ENTIDADES e PORTAS)
from oceanica.core.entities import (
    Usuario, Produto, Carrinho, ItemCarrinho, Endereco, Pedido, ItemPedido,
    STATUS_VALIDOS, STATUS_CANCELADO,
)
from oceanica.core.ports import (
    IUsuarioRepository,
    IProdutoRepository,
    ICarrinhoRepository,
    IEnderecoRepository,
    IPedidoRepository,
    IItemPedidoRepository,
)
from oceanica.core.exceptions import (
    DadosInvalidosError,
    EmailJaCadastradoError,
    ProdutoNaoEncontradoError,
    EnderecoNaoEncontradoError,
    ItemNaoEncontradoError,
)

from .mappers import (
    UsuarioMapper, EnderecoMapper, ProdutoMapper, ItemCarrinhoMapper, CarrinhoMapper,
    ItemPedidoMapper, PedidoMapper,
)


# ====================================================================
# 1. HELPERS
# ====================================================================

# Helper para Lazy Loading
def get_model(app_label, model_name):
    """Busca o modelo Django de forma segura (Lazy Loading)."""
    return apps.get_model(app_label, model_name)


# Campos de ordenação expostos pela API -> campos dos modelos
ORDENACAO_PRODUTO = {
    'name': 'nome', 'price': 'preco', 'stock': 'estoque',
    'created_at': 'criado_em', 'updated_at': 'atualizado_em',
}
ORDENACAO_PEDIDO = {
    'created_at': 'criado_em', 'updated_at': 'atualizado_em',
    'total_price': 'total', 'status': 'status',
}
ORDENACAO_ENDERECO = {
    'created_at': 'criado_em', 'city': 'cidade', 'state': 'estado', 'street': 'rua',
}


def _ordenacao(mapa: Dict[str, str], ordenar_por: str, ordem: str) -> str:
    campo = mapa.get(ordenar_por, 'criado_em')
    return f"-{campo}" if (ordem or '').upper() == 'DESC' else campo


def _uuid_valido(valor) -> bool:
    try:
        uuid.UUID(str(valor))
    except (ValueError, TypeError, AttributeError):
        return False
    return True


def _buscar_ou_none(queryset, pk):
    """Retorna o model ou None, inclusive para IDs em formato inválido."""
    if not _uuid_valido(pk):
        return None
    try:
        return queryset.get(pk=pk)
    except (queryset.model.DoesNotExist, ValidationError):
        return None


# ====================================================================
# 2. REPOSITÓRIOS (Implementação Django ORM)
# ====================================================================

class UsuarioRepositoryDjango(IUsuarioRepository):
    """Implementação do UsuarioRepository usando o Django ORM e o backend de autenticação."""

    @property
    def UsuarioModel(self):
        return get_user_model()

    def buscar_por_id(self, usuario_id: str) -> Optional[Usuario]:
        return UsuarioMapper.to_entity(_buscar_ou_none(self.UsuarioModel.objects.all(), usuario_id))

    def buscar_por_email(self, email: str) -> Optional[Usuario]:
        model = self.UsuarioModel.objects.filter(email__iexact=email).first()
        return UsuarioMapper.to_entity(model)

    def criar(self, usuario: Usuario, senha: Optional[str]) -> Usuario:
        try:
            with transaction.atomic():
                model = self.UsuarioModel.objects.create_user(
                    email=usuario.email,
                    password=senha,
                    nome=usuario.nome,
                    telefone=usuario.telefone or '',
                    role=usuario.role,
                )
        except IntegrityError:
            raise EmailJaCadastradoError()
        return UsuarioMapper.to_entity(model)

    def verificar_credenciais(self, email: str, senha: str) -> Optional[Usuario]:
        # O ModelBackend compara com o USERNAME_FIELD (email) e ignora usuários inativos
        model = authenticate(username=email, password=senha)
        return UsuarioMapper.to_entity(model)

    def listar_por_role(self, role: str) -> List[Usuario]:
        qs = self.UsuarioModel.objects.filter(role=role).order_by('nome')
        return [UsuarioMapper.to_entity(model) for model in qs]


class ProdutoRepositoryDjango(IProdutoRepository):
    """Implementação do ProdutoRepository usando o Django ORM."""

    # Propriedade para carregar o modelo de forma LAZY
    @property
    def ProdutoModel(self):
        return get_model('catalog', 'Produto')

    def buscar_por_id(self, produto_id: str) -> Optional[Produto]:
        return ProdutoMapper.to_entity(_buscar_ou_none(self.ProdutoModel.objects.all(), produto_id))

    def buscar_por_ids(self, produto_ids: List[str]) -> List[Produto]:
        ids = [pid for pid in produto_ids if _uuid_valido(pid)]
        return [ProdutoMapper.to_entity(model) for model in self.ProdutoModel.objects.filter(pk__in=ids)]

    def listar(
        self,
        pagina: int,
        limite: int,
        busca: Optional[str] = None,
        ordenar_por: str = 'created_at',
        ordem: str = 'DESC'
    ) -> Tuple[List[Produto], int]:
        qs = self.ProdutoModel.objects.all()

        if busca:
            # Busca por nome ou descrição (case-insensitive)
            qs = qs.filter(Q(nome__icontains=busca) | Q(descricao__icontains=busca))

        total = qs.count()
        offset = (pagina - 1) * limite
        qs = qs.order_by(_ordenacao(ORDENACAO_PRODUTO, ordenar_por, ordem), 'id')[offset:offset + limite]
        return [ProdutoMapper.to_entity(model) for model in qs], total

    @transaction.atomic
    def salvar(self, produto: Produto, campos: Optional[List[str]] = None) -> Produto:
        """
        Salva ou atualiza um Produto, convertendo a entidade para o modelo.

        Com `campos`, apenas essas colunas são gravadas sobre a linha bloqueada, então
        o estoque debitado por outra transação não é sobrescrito por um valor antigo.
        """
        model = None
        if produto.id:
            model = _buscar_ou_none(self.ProdutoModel.objects.select_for_update(), produto.id)
            if model is None:
                raise ProdutoNaoEncontradoError(f"Produto ID {produto.id} não existe para atualização.")

        if model is not None and campos is not None:
            for campo in campos:
                setattr(model, campo, getattr(produto, campo))
            model.save(update_fields=[*campos, 'atualizado_em'])
        else:
            model = ProdutoMapper.to_model(produto, model)
            model.save()
        return ProdutoMapper.to_entity(model)

    def deletar(self, produto_id: str) -> bool:
        model = _buscar_ou_none(self.ProdutoModel.objects.all(), produto_id)
        if model is None:
            return False
        try:
            model.delete()
        except ProtectedError:
            raise DadosInvalidosError("Produto possui pedidos vinculados e não pode ser removido")
        return True

    def ajustar_estoque(self, produto_id: str, delta: int) -> bool:
        """
        Atualização atômica do estoque. Para débitos, a condição `estoque >= -delta`
        faz parte do UPDATE, então duas compras simultâneas não deixam o estoque negativo.
        """
        if not _uuid_valido(produto_id):
            return False
        qs = self.ProdutoModel.objects.filter(pk=produto_id)
        if delta < 0:
            qs = qs.filter(estoque__gte=-delta)
        return qs.update(estoque=F('estoque') + delta, atualizado_em=timezone.now()) > 0


class CarrinhoRepositoryDjango(ICarrinhoRepository):
    """Implementação do CarrinhoRepository usando o Django ORM."""

    @property
    def ItemCarrinhoModel(self):
        return get_model('carrinho', 'ItemCarrinho')

    def buscar_por_usuario(self, usuario_id: str) -> Carrinho:
        itens = (
            self.ItemCarrinhoModel.objects
            .filter(usuario_id=usuario_id)
            .select_related('produto')
            .order_by('criado_em')
        )
        return CarrinhoMapper.to_entity(usuario_id, itens)

    def salvar_item(self, usuario_id: str, produto_id: str, quantidade: int) -> ItemCarrinho:
        """Grava a quantidade absoluta da linha, criando-a quando não existe."""
        model, _ = self.ItemCarrinhoModel.objects.update_or_create(
            usuario_id=usuario_id,
            produto_id=produto_id,
            defaults={'quantidade': quantidade},
        )
        return ItemCarrinhoMapper.to_entity(model)

    def remover_item(self, usuario_id: str, produto_id: str) -> bool:
        if not _uuid_valido(produto_id):
            return False
        removidos, _ = self.ItemCarrinhoModel.objects.filter(
            usuario_id=usuario_id, produto_id=produto_id
        ).delete()
        return removidos > 0

    def limpar(self, usuario_id: str) -> int:
        removidos, _ = self.ItemCarrinhoModel.objects.filter(usuario_id=usuario_id).delete()
        return removidos


class EnderecoRepositoryDjango(IEnderecoRepository):
    """Implementação do EnderecoRepository usando o Django ORM."""

    @property
    def EnderecoModel(self):
        return get_model('infrastructure', 'Endereco')

    def buscar_por_id(self, endereco_id: str) -> Optional[Endereco]:
        return EnderecoMapper.to_entity(_buscar_ou_none(self.EnderecoModel.objects.all(), endereco_id))

    def listar_por_usuario(self, usuario_id: str) -> List[Endereco]:
        qs = self.EnderecoModel.objects.filter(usuario_id=usuario_id).order_by('-criado_em')
        return [EnderecoMapper.to_entity(model) for model in qs]

    def listar(
        self,
        pagina: int,
        limite: int,
        cidade: Optional[str] = None,
        estado: Optional[str] = None,
        ordenar_por: str = 'created_at',
        ordem: str = 'DESC'
    ) -> Tuple[List[Endereco], int]:
        qs = self.EnderecoModel.objects.all()
        if cidade:
            qs = qs.filter(cidade__icontains=cidade)
        if estado:
            qs = qs.filter(estado__icontains=estado)

        total = qs.count()
        offset = (pagina - 1) * limite
        qs = qs.order_by(_ordenacao(ORDENACAO_ENDERECO, ordenar_por, ordem), 'id')[offset:offset + limite]
        return [EnderecoMapper.to_entity(model) for model in qs], total

    @transaction.atomic
    def salvar(self, endereco: Endereco) -> Endereco:
        """Salva o endereço. Um novo endereço padrão desmarca os demais do mesmo usuário."""
        model = None
        if endereco.id:
            model = _buscar_ou_none(self.EnderecoModel.objects.all(), endereco.id)
            if model is None:
                raise EnderecoNaoEncontradoError()

        model = EnderecoMapper.to_model(endereco, model)
        if model.is_default:
            self.EnderecoModel.objects.filter(
                usuario_id=model.usuario_id, is_default=True
            ).exclude(pk=model.pk).update(is_default=False)
        model.save()
        return EnderecoMapper.to_entity(model)

    def deletar(self, endereco_id: str) -> bool:
        if not _uuid_valido(endereco_id):
            return False
        removidos, _ = self.EnderecoModel.objects.filter(pk=endereco_id).delete()
        return removidos > 0

    def estatisticas(self) -> Dict:
        por_estado = (
            self.EnderecoModel.objects.values('estado')
            .annotate(count=Count('id')).order_by('-count', 'estado')[:10]
        )
        por_cidade = (
            self.EnderecoModel.objects.values('cidade', 'estado')
            .annotate(count=Count('id')).order_by('-count', 'cidade')[:10]
        )
        usuarios = (
            get_user_model().objects
            .annotate(address_count=Count('enderecos'))
            .filter(address_count__gt=0)
            .order_by('-address_count', 'email')
            .values('email', 'address_count')[:10]
        )
        return {
            'totalAddresses': self.EnderecoModel.objects.count(),
            'byState': [{'state': row['estado'], 'count': row['count']} for row in por_estado],
            'byCity': [
                {'city': row['cidade'], 'state': row['estado'], 'count': row['count']}
                for row in por_cidade
            ],
            'usersWithMostAddresses': list(usuarios),
        }


class PedidoRepositoryDjango(IPedidoRepository):
    """Implementação do PedidoRepository usando o Django ORM."""

    @property
    def PedidoModel(self):
        return get_model('pedidos', 'Pedido')

    @property
    def ItemPedidoModel(self):
        return get_model('pedidos', 'ItemPedido')

    def _queryset_detalhado(self):
        return self.PedidoModel.objects.select_related('usuario').prefetch_related(
            Prefetch('itens', queryset=self.ItemPedidoModel.objects.select_related('produto'))
        )

    @transaction.atomic
    def salvar(self, pedido: Pedido) -> Pedido:
        """Grava o pedido e os seus itens com preço e subtotal congelados."""
        model = self.PedidoModel.objects.create(
            usuario_id=pedido.usuario_id,
            status=pedido.status,
            frete=pedido.frete,
            total=pedido.total,
            endereco_id=pedido.endereco_id,
        )
        for item in pedido.itens:
            self.ItemPedidoModel.objects.create(
                pedido=model,
                produto_id=item.produto_id,
                quantidade=item.quantidade,
                preco=item.preco,
            )
        return self.buscar_por_id(model.pk)

    def buscar_por_id(self, pedido_id: str) -> Optional[Pedido]:
        return PedidoMapper.to_entity(_buscar_ou_none(self._queryset_detalhado(), pedido_id))

    def listar(
        self,
        pagina: int,
        limite: int,
        usuario_id: Optional[str] = None,
        status: Optional[str] = None,
        ordenar_por: str = 'created_at',
        ordem: str = 'DESC'
    ) -> Tuple[List[Pedido], int]:
        qs = self.PedidoModel.objects.select_related('usuario')
        if usuario_id:
            qs = qs.filter(usuario_id=usuario_id)
        if status:
            qs = qs.filter(status=status)

        total = qs.count()
        offset = (pagina - 1) * limite
        qs = (
            qs.annotate(quantidade_itens=Count('itens'))
            .order_by(_ordenacao(ORDENACAO_PEDIDO, ordenar_por, ordem), 'id')[offset:offset + limite]
        )
        return [PedidoMapper.to_entity(model, com_itens=False) for model in qs], total

    def atualizar_status(self, pedido_id: str, status: str, status_atual: Optional[str] = None) -> Optional[Pedido]:
        """
        Atualiza o status. Com `status_atual`, a troca só acontece se o pedido
        ainda estiver naquele status; caso contrário retorna None.
        """
        qs = self.PedidoModel.objects.filter(pk=pedido_id)
        if status_atual is not None:
            qs = qs.filter(status=status_atual)
        if not qs.update(status=status, atualizado_em=timezone.now()):
            return None
        return self.buscar_por_id(pedido_id)

    def estatisticas(self) -> Dict:
        pedidos = self.PedidoModel.objects.all()
        validos = pedidos.exclude(status=STATUS_CANCELADO)

        contagem_status = {status: 0 for status in STATUS_VALIDOS}
        for row in pedidos.values('status').annotate(count=Count('id')):
            contagem_status[row['status']] = row['count']

        receita = validos.aggregate(total=Sum('total'), average=Avg('total'), count=Count('id'))

        inicio = timezone.now() - timedelta(days=365)
        mensal = (
            pedidos.filter(criado_em__gte=inicio)
            .annotate(mes=TruncMonth('criado_em'))
            .values('mes')
            .annotate(
                orders=Count('id'),
                revenue=Sum('total', filter=~Q(status=STATUS_CANCELADO)),
            )
            .order_by('mes')
        )

        mais_vendidos = (
            self.ItemPedidoModel.objects
            .exclude(pedido__status=STATUS_CANCELADO)
            .values('produto_id', 'produto__nome')
            .annotate(quantity=Sum('quantidade'), revenue=Sum('subtotal'))
            .order_by('-quantity', 'produto__nome')[:10]
        )

        return {
            'statusCounts': contagem_status,
            'revenue': {
                'total': receita['total'] or Decimal('0.00'),
                'average': receita['average'] or Decimal('0.00'),
                'count': receita['count'],
            },
            'monthlyData': [
                {
                    'month': row['mes'].strftime('%Y-%m'),
                    'orders': row['orders'],
                    'revenue': row['revenue'] or Decimal('0.00'),
                }
                for row in mensal
            ],
            'topProducts': [
                {
                    'product_id': str(row['produto_id']),
                    'name': row['produto__nome'],
                    'quantity': row['quantity'],
                    'revenue': row['revenue'],
                }
                for row in mais_vendidos
            ],
        }


class ItemPedidoRepositoryDjango(IItemPedidoRepository):
    """Implementação do ItemPedidoRepository usando o Django ORM."""

    @property
    def ItemPedidoModel(self):
        return get_model('pedidos', 'ItemPedido')

    @transaction.atomic
    def criar_itens(self, pedido_id: str, itens: List[ItemPedido]) -> List[ItemPedido]:
        criados = []
        for item in itens:
            model = self.ItemPedidoModel.objects.create(
                pedido_id=pedido_id,
                produto_id=item.produto_id,
                quantidade=item.quantidade,
                preco=item.preco,
            )
            criados.append(ItemPedidoMapper.to_entity(model))
        return criados

    def buscar_por_id(self, item_id: str) -> Optional[ItemPedido]:
        model = _buscar_ou_none(self.ItemPedidoModel.objects.select_related('produto'), item_id)
        return ItemPedidoMapper.to_entity(model) if model else None

    def listar_por_pedido(self, pedido_id: str) -> List[ItemPedido]:
        qs = self.ItemPedidoModel.objects.filter(pedido_id=pedido_id).select_related('produto').order_by('criado_em')
        return [ItemPedidoMapper.to_entity(model) for model in qs]

    def atualizar_quantidade(self, item_id: str, quantidade: int) -> ItemPedido:
        model = _buscar_ou_none(self.ItemPedidoModel.objects.select_related('produto'), item_id)
        if model is None:
            raise ItemNaoEncontradoError("Item não encontrado")
        model.quantidade = quantidade
        # save() recalcula o subtotal
        model.save()
        return ItemPedidoMapper.to_entity(model)

    def deletar(self, item_id: str) -> bool:
        if not _uuid_valido(item_id):
            return False
        removidos, _ = self.ItemPedidoModel.objects.filter(pk=item_id).delete()
        return removidos > 0

    def deletar_por_pedido(self, pedido_id: str) -> int:
        removidos, _ = self.ItemPedidoModel.objects.filter(pedido_id=pedido_id).delete()
        return removidos

    def listar_por_produto(self, produto_id: str, limite: int, offset: int) -> List[ItemPedido]:
        qs = (
            self.ItemPedidoModel.objects
            .filter(produto_id=produto_id)
            .select_related('produto')
            .order_by('-criado_em')[offset:offset + limite]
        )
        return [ItemPedidoMapper.to_entity(model) for model in qs]

    def estatisticas_vendas(
        self,
        produto_id: Optional[str] = None,
        data_inicio: Optional[datetime] = None,
        data_fim: Optional[datetime] = None,
        limite: int = 10
    ) -> List[Dict]:
        qs = self.ItemPedidoModel.objects.all()
        if produto_id:
            qs = qs.filter(produto_id=produto_id)
        if data_inicio:
            qs = qs.filter(criado_em__gte=data_inicio)
        if data_fim:
            qs = qs.filter(criado_em__lte=data_fim)

        linhas = (
            qs.values('produto_id', 'produto__nome')
            .annotate(
                total_orders=Count('id'),
                total_quantity_sold=Sum('quantidade'),
                total_revenue=Sum('subtotal'),
                average_price=Avg('preco'),
                first_sale=Min('criado_em'),
                last_sale=Max('criado_em'),
            )
            .order_by('-total_revenue')[:limite]
        )
        return [
            {
                'product_id': str(row['produto_id']),
                'product_name': row['produto__nome'],
                'total_orders': row['total_orders'],
                'total_quantity_sold': row['total_quantity_sold'],
                'total_revenue': row['total_revenue'],
                'average_price': row['average_price'],
                'first_sale': row['first_sale'],
                'last_sale': row['last_sale'],
            }
            for row in linhas
        ]
