"""
Serializers da API.

Os nomes dos campos no JSON seguem o contrato público (inglês); o `source` de cada
campo aponta para o atributo em português das entidades do Core. Assim o
`validated_data` dos serializers de entrada já chega aos casos de uso com as
chaves internas (nome, preco, estoque, ...).
"""
import re

from rest_framework import serializers

from oceanica.core.entities import ROLES_VALIDOS


# ====================================================================
# SERIALIZERS DE SAÍDA (Entidades -> JSON)
# ====================================================================

class UsuarioSerializer(serializers.Serializer):
    id = serializers.CharField(read_only=True)
    email = serializers.EmailField(read_only=True)
    name = serializers.CharField(source='nome', read_only=True)
    phone = serializers.CharField(source='telefone', read_only=True)
    role = serializers.CharField(read_only=True)
    created_at = serializers.DateTimeField(source='criado_em', read_only=True)


class ClienteSerializer(serializers.Serializer):
    name = serializers.CharField(source='nome', read_only=True)
    phone = serializers.CharField(source='telefone', read_only=True)


class ProdutoSerializer(serializers.Serializer):
    id = serializers.CharField(read_only=True)
    name = serializers.CharField(source='nome', read_only=True)
    description = serializers.CharField(source='descricao', read_only=True)
    price = serializers.DecimalField(source='preco', max_digits=10, decimal_places=2, read_only=True)
    stock = serializers.IntegerField(source='estoque', read_only=True)
    image_url = serializers.CharField(read_only=True)
    image_url1 = serializers.CharField(read_only=True)
    created_at = serializers.DateTimeField(source='criado_em', read_only=True)
    updated_at = serializers.DateTimeField(source='atualizado_em', read_only=True)


# ====================================================================
# SERIALIZERS PARA O CARRINHO
# ====================================================================

class ProdutoCarrinhoSerializer(serializers.Serializer):
    """Resumo do produto exibido dentro de cada linha do carrinho."""
    name = serializers.CharField(source='nome', read_only=True)
    description = serializers.CharField(source='descricao', read_only=True)
    price = serializers.DecimalField(source='preco', max_digits=10, decimal_places=2, read_only=True)
    imageUrl = serializers.CharField(source='image_url', read_only=True)
    stock = serializers.IntegerField(source='estoque', read_only=True)


class ItemCarrinhoSerializer(serializers.Serializer):
    id = serializers.CharField(read_only=True)
    productId = serializers.CharField(source='produto_id', read_only=True)
    quantity = serializers.IntegerField(source='quantidade', read_only=True)
    product = ProdutoCarrinhoSerializer(source='produto', read_only=True)
    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)


class CarrinhoSerializer(serializers.Serializer):
    """
    Serializer principal para o carrinho de compras.
    Representa a lista de itens usando o ItemCarrinhoSerializer e o resumo de totais.
    """
    userId = serializers.CharField(source='usuario_id', read_only=True)
    items = ItemCarrinhoSerializer(source='itens', many=True, read_only=True)
    summary = serializers.SerializerMethodField()

    def get_summary(self, carrinho):
        return {
            'totalItems': carrinho.total_itens,
            'totalAmount': f"{carrinho.valor_total:.2f}",
            'itemCount': carrinho.quantidade_linhas,
        }


# ====================================================================
# SERIALIZERS PARA PEDIDOS E ITENS
# ====================================================================

class ItemPedidoSerializer(serializers.Serializer):
    id = serializers.CharField(read_only=True)
    order_id = serializers.CharField(source='pedido_id', read_only=True)
    product_id = serializers.CharField(source='produto_id', read_only=True)
    product_name = serializers.CharField(source='produto_nome', read_only=True)
    quantity = serializers.IntegerField(source='quantidade', read_only=True)
    price = serializers.DecimalField(source='preco', max_digits=10, decimal_places=2, read_only=True)
    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    created_at = serializers.DateTimeField(source='criado_em', read_only=True)


class PedidoResumoSerializer(serializers.Serializer):
    """Pedido sem os itens, usado nas listagens."""
    id = serializers.CharField(read_only=True)
    user_id = serializers.CharField(source='usuario_id', read_only=True)
    status = serializers.CharField(read_only=True)
    shipping_price = serializers.DecimalField(source='frete', max_digits=10, decimal_places=2, read_only=True)
    total_price = serializers.DecimalField(source='total', max_digits=12, decimal_places=2, read_only=True)
    address_id = serializers.CharField(source='endereco_id', read_only=True)
    items_count = serializers.IntegerField(source='quantidade_itens', read_only=True)
    customer_name = serializers.CharField(source='cliente_nome', read_only=True)
    customer_email = serializers.CharField(source='cliente_email', read_only=True)
    created_at = serializers.DateTimeField(source='criado_em', read_only=True)
    updated_at = serializers.DateTimeField(source='atualizado_em', read_only=True)


class PedidoSerializer(PedidoResumoSerializer):
    items = ItemPedidoSerializer(source='itens', many=True, read_only=True)
    total_products = serializers.DecimalField(
        source='total_produtos', max_digits=12, decimal_places=2, read_only=True
    )


class EnderecoSerializer(serializers.Serializer):
    id = serializers.CharField(read_only=True)
    user_id = serializers.CharField(source='usuario_id', read_only=True)
    street = serializers.CharField(source='rua', read_only=True)
    number = serializers.CharField(source='numero', read_only=True)
    complement = serializers.CharField(source='complemento', read_only=True)
    neighborhood = serializers.CharField(source='bairro', read_only=True)
    city = serializers.CharField(source='cidade', read_only=True)
    state = serializers.CharField(source='estado', read_only=True)
    postal_code = serializers.CharField(source='cep', read_only=True)
    is_default = serializers.BooleanField(read_only=True)
    created_at = serializers.DateTimeField(source='criado_em', read_only=True)
    updated_at = serializers.DateTimeField(source='atualizado_em', read_only=True)


# ====================================================================
# SERIALIZERS DE ENTRADA: AUTENTICAÇÃO
# ====================================================================

class RegistroSerializer(serializers.Serializer):
    email = serializers.EmailField(
        max_length=255,
        error_messages={'required': 'Email é obrigatório', 'blank': 'Email é obrigatório', 'invalid': 'Formato de email inválido'},
    )
    password = serializers.CharField(
        source='senha',
        min_length=6,
        write_only=True,
        trim_whitespace=False,
        error_messages={
            'required': 'Senha é obrigatória',
            'blank': 'Senha é obrigatória',
            'min_length': 'Senha deve ter pelo menos 6 caracteres',
        },
    )
    name = serializers.CharField(
        source='nome',
        min_length=3,
        max_length=255,
        error_messages={
            'required': 'Nome é obrigatório',
            'blank': 'Nome é obrigatório',
            'min_length': 'Nome deve ter pelo menos 3 caracteres',
        },
    )
    phone = serializers.CharField(source='telefone', required=False, allow_blank=True, allow_null=True)
    role = serializers.ChoiceField(
        choices=ROLES_VALIDOS,
        required=False,
        error_messages={'invalid_choice': 'Tipo de usuário inválido. Use: cliente ou admin'},
    )

    def validate_phone(self, value):
        # Aceita máscaras como (11) 98765-4321, mas exige 10 ou 11 dígitos
        if not value:
            return ''
        if len(re.sub(r'\D', '', value)) not in (10, 11):
            raise serializers.ValidationError("Formato de telefone inválido. Use apenas números (10 ou 11 dígitos)")
        return value


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField(
        error_messages={'required': 'Email é obrigatório', 'blank': 'Email é obrigatório', 'invalid': 'Email inválido'},
    )
    password = serializers.CharField(
        source='senha',
        trim_whitespace=False,
        error_messages={'required': 'Senha é obrigatória', 'blank': 'Senha é obrigatória'},
    )


class TokenSerializer(serializers.Serializer):
    default_error_messages = {'invalid': 'Token é obrigatório'}

    token = serializers.CharField(
        error_messages={'required': 'Token é obrigatório', 'blank': 'Token é obrigatório', 'null': 'Token é obrigatório'},
    )


# ====================================================================
# SERIALIZERS DE ENTRADA: CATÁLOGO E CARRINHO
# ====================================================================

class ProdutoEntradaSerializer(serializers.Serializer):
    """Criação (completa) e atualização (partial=True) de produtos."""
    name = serializers.CharField(
        source='nome',
        max_length=255,
        allow_blank=True,
        error_messages={'required': 'Nome do produto é obrigatório'},
    )
    description = serializers.CharField(source='descricao', required=False, allow_blank=True, allow_null=True)
    price = serializers.DecimalField(
        source='preco',
        max_digits=10,
        decimal_places=2,
        error_messages={
            'required': 'Preço do produto é obrigatório',
            'null': 'Preço do produto é obrigatório',
            'invalid': 'Preço deve ser um número válido maior que zero',
            'max_digits': 'Preço deve ter no máximo 10 dígitos',
            'max_whole_digits': 'Preço deve ter no máximo 8 dígitos antes da vírgula',
            'max_decimal_places': 'Preço deve ter no máximo 2 casas decimais',
        },
    )
    stock = serializers.IntegerField(
        source='estoque',
        required=False,
        allow_null=True,
        error_messages={'invalid': 'Estoque deve ser um número inteiro'},
    )
    image_url = serializers.URLField(
        max_length=1000, required=False, allow_blank=True, allow_null=True,
        error_messages={'invalid': 'URL da primeira imagem inválida'},
    )
    image_url1 = serializers.URLField(
        max_length=1000, required=False, allow_blank=True, allow_null=True,
        error_messages={'invalid': 'URL da segunda imagem inválida'},
    )


class EstoqueSerializer(serializers.Serializer):
    quantity = serializers.IntegerField(
        source='quantidade',
        error_messages={'required': 'Quantidade é obrigatória', 'invalid': 'Quantidade deve ser um número válido'},
    )


class AdicionarItemCarrinhoSerializer(serializers.Serializer):
    product_id = serializers.UUIDField(
        source='produto_id',
        error_messages={'required': 'ID do produto é obrigatório', 'invalid': 'ID do produto inválido'},
    )
    quantity = serializers.IntegerField(
        source='quantidade',
        default=1,
        error_messages={'invalid': 'Quantidade deve ser um número válido'},
    )


class QuantidadeSerializer(serializers.Serializer):
    quantity = serializers.IntegerField(
        source='quantidade',
        error_messages={'required': 'Quantidade é obrigatória', 'invalid': 'Quantidade deve ser um número válido'},
    )


# ====================================================================
# SERIALIZERS DE ENTRADA: ENDEREÇOS E PEDIDOS
# ====================================================================

class EnderecoEntradaSerializer(serializers.Serializer):
    """
    Apenas converte os nomes dos campos. Obrigatoriedade e tamanhos são
    validados pelo Core, que produz as mensagens do contrato.
    """
    street = serializers.CharField(source='rua', required=False, allow_blank=True, allow_null=True)
    number = serializers.CharField(source='numero', required=False, allow_blank=True, allow_null=True)
    complement = serializers.CharField(source='complemento', required=False, allow_blank=True, allow_null=True)
    neighborhood = serializers.CharField(source='bairro', required=False, allow_blank=True, allow_null=True)
    city = serializers.CharField(source='cidade', required=False, allow_blank=True, allow_null=True)
    state = serializers.CharField(source='estado', required=False, allow_blank=True, allow_null=True)
    postal_code = serializers.CharField(source='cep', required=False, allow_blank=True, allow_null=True)
    is_default = serializers.BooleanField(required=False)


class CriarPedidoSerializer(serializers.Serializer):
    address_id = serializers.UUIDField(
        source='endereco_id',
        error_messages={'required': 'O ID do endereço de entrega é obrigatório', 'invalid': 'ID do endereço inválido'},
    )
    shipping_price = serializers.DecimalField(
        source='frete',
        max_digits=10,
        decimal_places=2,
        default=0,
        error_messages={'invalid': 'Preço do frete deve ser um número válido'},
    )


class ItemPedidoEntradaSerializer(serializers.Serializer):
    product_id = serializers.UUIDField(
        source='produto_id',
        error_messages={'required': 'ID do produto é obrigatório', 'invalid': 'ID do produto inválido'},
    )
    quantity = serializers.IntegerField(
        source='quantidade',
        error_messages={'required': 'Quantidade é obrigatória', 'invalid': 'Quantidade deve ser um número válido'},
    )


class ClienteEntradaSerializer(serializers.Serializer):
    name = serializers.CharField(source='nome', error_messages={'required': 'Nome do cliente é obrigatório'})
    phone = serializers.CharField(source='telefone', error_messages={'required': 'Telefone do cliente é obrigatório'})


class PedidoAdminSerializer(serializers.Serializer):
    items = ItemPedidoEntradaSerializer(
        source='itens', many=True, allow_empty=False,
        error_messages={'required': 'Lista de itens é obrigatória', 'empty': 'Lista de itens é obrigatória'},
    )
    customer = ClienteEntradaSerializer(
        source='cliente', error_messages={'required': 'Dados do cliente são obrigatórios'}
    )
    shipping_price = serializers.DecimalField(
        source='frete',
        max_digits=10,
        decimal_places=2,
        default=0,
        error_messages={'invalid': 'Preço do frete deve ser um número válido'},
    )


class PedidoExternoSerializer(PedidoAdminSerializer):
    address = EnderecoEntradaSerializer(source='endereco', error_messages={'required': 'Endereço é obrigatório'})


class PedidoSimplesSerializer(serializers.Serializer):
    productId = serializers.UUIDField(
        source='produto_id',
        error_messages={'required': 'ID do produto é obrigatório', 'invalid': 'ID do produto inválido'},
    )
    username = serializers.CharField(source='nome', error_messages={'required': 'Nome do cliente é obrigatório'})
    phone = serializers.CharField(source='telefone', error_messages={'required': 'Telefone do cliente é obrigatório'})


class StatusSerializer(serializers.Serializer):
    status = serializers.CharField(error_messages={'required': 'Status é obrigatório', 'blank': 'Status é obrigatório'})


class ItemComPrecoSerializer(ItemPedidoEntradaSerializer):
    price = serializers.DecimalField(
        source='preco',
        max_digits=10,
        decimal_places=2,
        error_messages={'required': 'Preço é obrigatório', 'invalid': 'Preço deve ser um número válido'},
    )


class CriarItensPedidoSerializer(serializers.Serializer):
    order_id = serializers.UUIDField(
        source='pedido_id',
        error_messages={'required': 'ID do pedido é obrigatório', 'invalid': 'ID do pedido inválido'},
    )
    items = ItemComPrecoSerializer(
        source='itens', many=True, allow_empty=False,
        error_messages={'required': 'Lista de itens é obrigatória', 'empty': 'Lista de itens é obrigatória'},
    )


# ====================================================================
# SERIALIZERS DE QUERY STRING (paginação, filtros e ordenação)
# ====================================================================

MENSAGEM_PAGINA = 'Página deve ser um número válido maior que zero'
MENSAGEM_LIMITE = 'Limite deve ser um número válido'


class PaginacaoQuerySerializer(serializers.Serializer):
    page = serializers.IntegerField(source='pagina', default=1, error_messages={'invalid': MENSAGEM_PAGINA})
    limit = serializers.IntegerField(source='limite', default=10, error_messages={'invalid': MENSAGEM_LIMITE})


class OrdenacaoQuerySerializer(PaginacaoQuerySerializer):
    sortBy = serializers.CharField(source='ordenar_por', default='created_at')
    sortOrder = serializers.CharField(source='ordem', default='DESC')


class ProdutoQuerySerializer(OrdenacaoQuerySerializer):
    search = serializers.CharField(source='busca', required=False, allow_blank=True)


class MeusPedidosQuerySerializer(OrdenacaoQuerySerializer):
    status = serializers.CharField(required=False, allow_blank=True)


class PedidoQuerySerializer(MeusPedidosQuerySerializer):
    userId = serializers.UUIDField(
        source='usuario_id', required=False, error_messages={'invalid': 'ID do usuário inválido'}
    )


class EnderecoQuerySerializer(OrdenacaoQuerySerializer):
    limit = serializers.IntegerField(source='limite', default=20, error_messages={'invalid': MENSAGEM_LIMITE})
    city = serializers.CharField(source='cidade', required=False, allow_blank=True)
    state = serializers.CharField(source='estado', required=False, allow_blank=True)


class ItensPorProdutoQuerySerializer(serializers.Serializer):
    limit = serializers.IntegerField(source='limite', default=50, error_messages={'invalid': MENSAGEM_LIMITE})
    offset = serializers.IntegerField(default=0, error_messages={'invalid': 'Offset deve ser um número válido'})


class EstatisticasVendasQuerySerializer(serializers.Serializer):
    """Aceita product_id, start_date e end_date; productId, startDate e endDate são apelidos."""
    APELIDOS = {'productId': 'product_id', 'startDate': 'start_date', 'endDate': 'end_date'}

    product_id = serializers.UUIDField(
        source='produto_id', required=False, error_messages={'invalid': 'ID do produto inválido'}
    )
    start_date = serializers.DateTimeField(
        source='data_inicio', required=False, error_messages={'invalid': 'Data de início inválida'}
    )
    end_date = serializers.DateTimeField(
        source='data_fim', required=False, error_messages={'invalid': 'Data de fim inválida'}
    )
    limit = serializers.IntegerField(source='limite', default=10, error_messages={'invalid': MENSAGEM_LIMITE})

    def to_internal_value(self, data):
        dados = dict(data.items())
        for apelido, nome in self.APELIDOS.items():
            if apelido in dados:
                dados.setdefault(nome, dados.pop(apelido))
        return super().to_internal_value(dados)
