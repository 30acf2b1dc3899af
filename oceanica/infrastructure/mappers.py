"""
Mapeadores (Mappers) para converter entre:
1. Modelos do Django ORM
2. Entidades de Domínio (oceanica.core.entities)
"""
from typing import Optional

from django.apps import apps

# Importa as entidades do Core
from oceanica.core.entities import (
    Usuario as UsuarioEntity,
    Endereco as EnderecoEntity,
    Produto as ProdutoEntity,
    Carrinho as CarrinhoEntity,
    ItemCarrinho as ItemCarrinhoEntity,
    Pedido as PedidoEntity,
    ItemPedido as ItemPedidoEntity,
)

# ====================================================================
# Uso de apps.get_model para evitar dependências circulares
# ====================================================================

def get_model(app_label: str, model_name: str):
    """Retorna um modelo do Django de forma segura (lazy loading)."""
    return apps.get_model(app_label, model_name)


def _id(valor) -> Optional[str]:
    return str(valor) if valor is not None else None


class UsuarioMapper:
    @staticmethod
    def to_entity(model) -> Optional[UsuarioEntity]:
        if not model:
            return None
        return UsuarioEntity(
            id=_id(model.pk),
            email=model.email,
            nome=model.nome,
            telefone=model.telefone,
            role=model.role,
            criado_em=model.criado_em,
            atualizado_em=model.atualizado_em,
        )


class EnderecoMapper:
    @staticmethod
    def to_entity(model) -> Optional[EnderecoEntity]:
        if not model:
            return None
        return EnderecoEntity(
            id=_id(model.pk),
            usuario_id=_id(model.usuario_id),
            rua=model.rua,
            numero=model.numero,
            complemento=model.complemento,
            bairro=model.bairro,
            cidade=model.cidade,
            estado=model.estado,
            cep=model.cep,
            is_default=model.is_default,
            criado_em=model.criado_em,
            atualizado_em=model.atualizado_em,
        )

    @staticmethod
    def to_model(entity: EnderecoEntity, model=None):
        """Copia os campos da entidade para um model novo ou existente (sem salvar)."""
        if model is None:
            model = get_model('infrastructure', 'Endereco')(usuario_id=entity.usuario_id)
        for campo in ('rua', 'numero', 'complemento', 'bairro', 'cidade', 'estado', 'cep', 'is_default'):
            setattr(model, campo, getattr(entity, campo))
        return model


class ProdutoMapper:
    @staticmethod
    def to_entity(model) -> Optional[ProdutoEntity]:
        if not model:
            return None
        return ProdutoEntity(
            id=_id(model.pk),
            nome=model.nome,
            descricao=model.descricao,
            preco=model.preco,
            estoque=model.estoque,
            image_url=model.image_url,
            image_url1=model.image_url1,
            criado_em=model.criado_em,
            atualizado_em=model.atualizado_em,
        )

    @staticmethod
    def to_model(entity: ProdutoEntity, model=None):
        if model is None:
            model = get_model('catalog', 'Produto')()
        for campo in ('nome', 'descricao', 'preco', 'estoque', 'image_url', 'image_url1'):
            setattr(model, campo, getattr(entity, campo))
        return model


class ItemCarrinhoMapper:
    @staticmethod
    def to_entity(model) -> ItemCarrinhoEntity:
        return ItemCarrinhoEntity(
            id=_id(model.pk),
            usuario_id=_id(model.usuario_id),
            produto_id=_id(model.produto_id),
            quantidade=model.quantidade,
            produto=ProdutoMapper.to_entity(model.produto),
        )


class CarrinhoMapper:
    @staticmethod
    def to_entity(usuario_id, itens_models) -> CarrinhoEntity:
        return CarrinhoEntity(
            usuario_id=_id(usuario_id),
            itens=[ItemCarrinhoMapper.to_entity(item) for item in itens_models],
        )


class ItemPedidoMapper:
    @staticmethod
    def to_entity(model) -> ItemPedidoEntity:
        return ItemPedidoEntity(
            id=_id(model.pk),
            pedido_id=_id(model.pedido_id),
            produto_id=_id(model.produto_id),
            produto_nome=model.produto.nome if model.produto_id else None,
            quantidade=model.quantidade,
            preco=model.preco,
            criado_em=model.criado_em,
        )


class PedidoMapper:
    @staticmethod
    def to_entity(model, com_itens: bool = True) -> Optional[PedidoEntity]:
        """
        Converte o Pedido. Com `com_itens=False` os itens não são carregados e a
        contagem vem da anotação `quantidade_itens` da consulta, quando presente.
        """
        if not model:
            return None
        itens = [ItemPedidoMapper.to_entity(item) for item in model.itens.all()] if com_itens else []
        usuario = model.usuario
        return PedidoEntity(
            id=_id(model.pk),
            usuario_id=_id(model.usuario_id),
            status=model.status,
            frete=model.frete,
            total_informado=model.total,
            endereco_id=_id(model.endereco_id),
            itens=itens,
            quantidade_itens=getattr(model, 'quantidade_itens', len(itens)),
            cliente_nome=usuario.nome if usuario else None,
            cliente_email=usuario.email if usuario else None,
            criado_em=model.criado_em,
            atualizado_em=model.atualizado_em,
        )
