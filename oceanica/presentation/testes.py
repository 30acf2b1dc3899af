import uuid
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.cache import cache
from rest_framework import status
from rest_framework.test import APITestCase

from oceanica.catalog.models import Produto as ProdutoModel
from oceanica.core.entities import ROLE_ADMIN
from oceanica.infrastructure.mappers import UsuarioMapper
from oceanica.infrastructure.models import Endereco as EnderecoModel
from oceanica.infrastructure.tokens import JWTTokenService
from oceanica.pedidos.models import ItemPedido as ItemPedidoModel


class OceanicaAPITestCase(APITestCase):
    """
    Base dos testes de API: limpa o cache do rate limit e cria um cliente,
    um administrador e um produto.
    """

    def setUp(self):
        cache.clear()
        Usuario = get_user_model()
        self.cliente = Usuario.objects.create_user(
            email='cliente@oceanica.com', password='123456', nome='Cliente Teste'
        )
        self.admin = Usuario.objects.create_user(
            email='admin@oceanica.com', password='admin123', nome='Administrador', role=ROLE_ADMIN
        )
        self.produto = ProdutoModel.objects.create(
            nome='Filé de Salmão', descricao='Salmão chileno', preco=Decimal('89.90'), estoque=10
        )

    def autenticar(self, usuario):
        token = JWTTokenService().gerar_token(UsuarioMapper.to_entity(usuario))
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')

    def criar_endereco(self):
        response = self.client.post('/addresses', {
            'street': 'Rua do Porto',
            'number': '100',
            'city': 'Santos',
            'state': 'SP',
            'postal_code': '11010-000',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        return response.json()['data']['address']['id']

    def fazer_pedido(self, endereco_id, quantidade=2):
        """Coloca o produto no carrinho do usuário autenticado e fecha o pedido."""
        self.client.post('/cart', {'product_id': str(self.produto.id), 'quantity': quantidade}, format='json')
        response = self.client.post('/orders', {
            'address_id': endereco_id, 'shipping_price': '10.00',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        return response.json()['data']['order']


class HealthAPITestCase(OceanicaAPITestCase):

    def test_health_check(self):
        response = self.client.get('/health')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        corpo = response.json()
        self.assertTrue(corpo['success'])
        self.assertEqual(corpo['message'], 'API Oceanica Pescados')
        self.assertIn('uptime', corpo)

    def test_rota_inexistente_responde_em_json(self):
        response = self.client.get('/nao-existe')

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.json(), {
            'success': False,
            'message': 'Rota GET /nao-existe não encontrada',
        })


class AutenticacaoAPITestCase(OceanicaAPITestCase):

    def test_registro_com_sucesso(self):
        """
        Cenário: Cadastro devolve 201 com token e dados do usuário.
        """
        # ACT
        response = self.client.post('/auth/register', {
            'email': 'Novo@Oceanica.com',
            'password': 'segredo1',
            'name': 'Novo Cliente',
            'phone': '(13) 99999-0000',
        }, format='json')

        # ASSERT
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        dados = response.json()['data']
        self.assertTrue(dados['token'])
        self.assertEqual(dados['user']['email'], 'novo@oceanica.com')
        self.assertEqual(dados['user']['role'], 'cliente')

    def test_registro_email_duplicado(self):
        response = self.client.post('/auth/register', {
            'email': 'cliente@oceanica.com', 'password': '123456', 'name': 'Repetido',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.json()['message'], 'Email já cadastrado no sistema')

    def test_registro_senha_curta(self):
        response = self.client.post('/auth/register', {
            'email': 'curta@oceanica.com', 'password': '123', 'name': 'Senha Curta',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()['message'], 'Senha deve ter pelo menos 6 caracteres')

    def test_login_e_perfil(self):
        """
        Cenário: O token devolvido pelo login acessa a rota de perfil.
        """
        # ARRANGE
        login = self.client.post('/auth/login', {
            'email': 'cliente@oceanica.com', 'password': '123456',
        }, format='json')
        self.assertEqual(login.status_code, status.HTTP_200_OK)
        token = login.json()['data']['token']

        # ACT
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')
        response = self.client.get('/auth/profile')

        # ASSERT
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()['data']['user']['email'], 'cliente@oceanica.com')

    def test_login_senha_errada(self):
        response = self.client.post('/auth/login', {
            'email': 'cliente@oceanica.com', 'password': 'errada',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.json()['message'], 'Email ou senha incorretos')

    def test_verificar_token(self):
        token = JWTTokenService().gerar_token(UsuarioMapper.to_entity(self.cliente))

        response = self.client.post('/auth/verify-token', {'token': token}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()['data']['decoded']['email'], 'cliente@oceanica.com')

    def test_token_invalido(self):
        self.client.credentials(HTTP_AUTHORIZATION='Bearer token-invalido')

        response = self.client.get('/auth/profile')

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.json()['message'], 'Token inválido ou expirado')

    def test_rota_admin_negada_para_cliente(self):
        self.autenticar(self.cliente)

        response = self.client.get('/auth/admin')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_verificar_token_sem_token(self):
        response = self.client.post('/auth/verify-token', {}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()['message'], 'Token é obrigatório')

    def test_verificar_token_com_corpo_que_nao_e_objeto(self):
        """
        Cenário: Um JSON válido que não é objeto (lista) é rejeitado com 400.
        """
        response = self.client.post('/auth/verify-token', [1], format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()['success'], False)
        self.assertEqual(response.json()['message'], 'Token é obrigatório')

    def test_consultar_proprio_usuario(self):
        self.autenticar(self.cliente)

        response = self.client.get(f'/auth/user/{self.cliente.pk}')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()['data']['user']['email'], 'cliente@oceanica.com')

    def test_consultar_outro_usuario_como_cliente(self):
        """
        Cenário: Clientes não consultam o cadastro de outros usuários.
        """
        self.autenticar(self.cliente)

        response = self.client.get(f'/auth/user/{self.admin.pk}')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(
            response.json()['message'],
            'Acesso negado. Você só pode acessar seus próprios dados.'
        )

    def test_consultar_outro_usuario_como_admin(self):
        self.autenticar(self.admin)

        response = self.client.get(f'/auth/user/{self.cliente.pk}')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()['data']['user']['name'], 'Cliente Teste')

    def test_listar_clientes(self):
        """
        Cenário: A lista de clientes traz apenas nome e telefone de quem tem role cliente.
        """
        self.autenticar(self.admin)

        response = self.client.get('/auth/clients')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()['data']['clients'], [{'name': 'Cliente Teste', 'phone': ''}])

    def test_listar_clientes_como_cliente(self):
        self.autenticar(self.cliente)

        response = self.client.get('/auth/clients')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class ProdutoAPITestCase(OceanicaAPITestCase):

    def test_listar_produtos_publico(self):
        response = self.client.get('/products', {'search': 'salmão'})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        dados = response.json()['data']
        self.assertEqual(len(dados['products']), 1)
        self.assertEqual(dados['products'][0]['price'], '89.90')
        self.assertEqual(dados['pagination']['totalItems'], 1)

    def test_criar_produto_sem_token(self):
        response = self.client.post('/products', {'name': 'Polvo', 'price': '119.90'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.json()['message'], 'Token de acesso requerido')

    def test_criar_produto_como_cliente(self):
        """
        Cenário: Apenas administradores cadastram produtos.
        """
        self.autenticar(self.cliente)

        response = self.client.post('/products', {'name': 'Polvo', 'price': '119.90'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(
            response.json()['message'],
            'Acesso negado. Apenas administradores podem acessar este recurso.'
        )

    def test_criar_produto_como_admin(self):
        self.autenticar(self.admin)

        response = self.client.post('/products', {
            'name': 'Polvo Congelado', 'price': '119.90', 'stock': 4,
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.json()['data']['product']['stock'], 4)

    def test_criar_produto_com_preco_negativo(self):
        self.autenticar(self.admin)

        response = self.client.post('/products', {'name': 'Polvo', 'price': '-5.00'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()['message'], 'Preço deve ser maior que zero')

    def test_produto_inexistente(self):
        response = self.client.get(f'/products/{uuid.uuid4()}')

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.json(), {'success': False, 'message': 'Produto não encontrado'})

    def test_ajustar_estoque_para_negativo(self):
        self.autenticar(self.admin)

        response = self.client.patch(f'/products/{self.produto.id}/stock', {'quantity': -11}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.produto.refresh_from_db()
        self.assertEqual(self.produto.estoque, 10)

    def test_limite_de_produtos_acima_do_maximo(self):
        response = self.client.get('/products', {'limit': 101})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()['message'], 'Limite deve ser um número entre 1 e 100')

    def test_limite_de_produtos_no_maximo(self):
        response = self.client.get('/products', {'limit': 100})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()['data']['pagination']['itemsPerPage'], 100)

    def test_atualizar_apenas_nome_mantem_estoque(self):
        self.autenticar(self.admin)

        response = self.client.put(f'/products/{self.produto.id}', {'name': 'Salmão Fresco'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()['data']['product']['name'], 'Salmão Fresco')
        self.assertEqual(response.json()['data']['product']['stock'], 10)

    def test_criar_produto_com_preco_nulo(self):
        self.autenticar(self.admin)

        response = self.client.post('/products', {'name': 'Polvo', 'price': None}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()['message'], 'Preço do produto é obrigatório')

    def test_criar_produto_com_preco_de_tres_casas_decimais(self):
        self.autenticar(self.admin)

        response = self.client.post('/products', {'name': 'Polvo', 'price': '19.999'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()['message'], 'Preço deve ter no máximo 2 casas decimais')


class CheckoutAPITestCase(OceanicaAPITestCase):

    def setUp(self):
        super().setUp()
        self.autenticar(self.cliente)
        self.endereco_id = self.criar_endereco()

    def _fazer_pedido(self, quantidade=2):
        return self.fazer_pedido(self.endereco_id, quantidade)

    def test_fluxo_de_compra(self):
        """
        Cenário: Endereço, carrinho e checkout. O estoque é debitado e o carrinho esvaziado.
        """
        # ACT
        pedido = self._fazer_pedido(quantidade=2)

        # ASSERT
        self.assertEqual(pedido['status'], 'pendente')
        self.assertEqual(pedido['total_price'], '189.80')
        self.assertEqual(pedido['items'][0]['price'], '89.90')

        self.produto.refresh_from_db()
        self.assertEqual(self.produto.estoque, 8)

        carrinho = self.client.get('/cart').json()['data']['cart']
        self.assertEqual(carrinho['items'], [])

    def test_adicionar_ao_carrinho_acima_do_estoque(self):
        response = self.client.post('/cart', {'product_id': str(self.produto.id), 'quantity': 11}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_pedido_com_carrinho_vazio(self):
        response = self.client.post('/orders', {'address_id': self.endereco_id}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(
            response.json()['message'],
            'Carrinho vazio. Adicione produtos antes de criar um pedido.'
        )

    def test_cancelar_pedido_restaura_estoque(self):
        """
        Cenário: O cliente cancela o próprio pedido pendente.
        """
        # ARRANGE
        pedido = self._fazer_pedido(quantidade=3)

        # ACT
        response = self.client.patch(f"/orders/{pedido['id']}/cancel")

        # ASSERT
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()['data']['order']['status'], 'cancelado')
        self.produto.refresh_from_db()
        self.assertEqual(self.produto.estoque, 10)

    def test_pedido_de_outro_cliente_nao_e_encontrado(self):
        pedido = self._fazer_pedido()
        outro = get_user_model().objects.create_user(email='outro@oceanica.com', password='123456', nome='Outro')
        self.autenticar(outro)

        response = self.client.get(f"/orders/{pedido['id']}")

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_transicao_de_status_pelo_admin(self):
        """
        Cenário: pendente -> confirmado -> enviado; depois disso o status não muda mais.
        """
        # ARRANGE
        pedido = self._fazer_pedido()
        self.autenticar(self.admin)
        url = f"/orders/{pedido['id']}/status"

        # ACT
        confirmado = self.client.patch(url, {'status': 'confirmado'}, format='json')
        enviado = self.client.patch(url, {'status': 'enviado'}, format='json')
        invalido = self.client.patch(url, {'status': 'pendente'}, format='json')

        # ASSERT
        self.assertEqual(confirmado.status_code, status.HTTP_200_OK)
        self.assertEqual(enviado.status_code, status.HTTP_200_OK)
        self.assertEqual(invalido.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(
            invalido.json()['message'],
            'Não é possível alterar status de "enviado" para "pendente"'
        )

    def test_estatisticas_de_pedidos(self):
        self._fazer_pedido()
        self.autenticar(self.admin)

        response = self.client.get('/orders/statistics')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()['data']['statistics']['statusCounts']['pendente'], 1)


class EnderecoAPITestCase(OceanicaAPITestCase):

    def setUp(self):
        super().setUp()
        self.autenticar(self.cliente)

    def test_endereco_sem_rua(self):
        response = self.client.post('/addresses', {
            'city': 'Santos', 'state': 'SP', 'postal_code': '11010-000',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()['message'], 'Rua é obrigatória')

    def test_meus_enderecos(self):
        self.criar_endereco()

        response = self.client.get('/addresses/my')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.json()['data']['addresses']), 1)

    def test_atualizar_endereco(self):
        """
        Cenário: Atualização parcial altera só a cidade.
        """
        # ARRANGE
        endereco_id = self.criar_endereco()

        # ACT
        response = self.client.put(f'/addresses/{endereco_id}', {'city': 'Guarujá'}, format='json')

        # ASSERT
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        endereco = response.json()['data']['address']
        self.assertEqual(endereco['city'], 'Guarujá')
        self.assertEqual(endereco['street'], 'Rua do Porto')

    def test_atualizar_endereco_sem_campos(self):
        endereco_id = self.criar_endereco()

        response = self.client.put(f'/addresses/{endereco_id}', {}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()['message'], 'Nenhum campo para atualizar foi fornecido')

    def test_remover_endereco(self):
        endereco_id = self.criar_endereco()

        response = self.client.delete(f'/addresses/{endereco_id}')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(self.client.get(f'/addresses/{endereco_id}').status_code, status.HTTP_404_NOT_FOUND)

    def test_endereco_de_outro_cliente_nao_e_encontrado(self):
        endereco_id = self.criar_endereco()
        outro = get_user_model().objects.create_user(email='outro@oceanica.com', password='123456', nome='Outro')
        self.autenticar(outro)

        atualizar = self.client.put(f'/addresses/{endereco_id}', {'city': 'Guarujá'}, format='json')
        remover = self.client.delete(f'/addresses/{endereco_id}')

        self.assertEqual(atualizar.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(remover.status_code, status.HTTP_404_NOT_FOUND)
        self.assertTrue(EnderecoModel.objects.filter(pk=endereco_id).exists())

    def test_listagem_admin_paginada_com_20_por_pagina(self):
        self.criar_endereco()
        self.autenticar(self.admin)

        response = self.client.get('/addresses')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        dados = response.json()['data']
        self.assertEqual(len(dados['addresses']), 1)
        self.assertEqual(dados['pagination']['itemsPerPage'], 20)

    def test_estatisticas_de_enderecos(self):
        """
        Cenário: Estatísticas agrupam os endereços por estado e cidade.
        """
        # ARRANGE
        self.criar_endereco()
        self.autenticar(self.admin)

        # ACT
        response = self.client.get('/addresses/statistics')

        # ASSERT
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        estatisticas = response.json()['data']['statistics']
        self.assertEqual(estatisticas['totalAddresses'], 1)
        self.assertEqual(estatisticas['byState'], [{'state': 'SP', 'count': 1}])
        self.assertEqual(estatisticas['byCity'], [{'city': 'Santos', 'state': 'SP', 'count': 1}])
        self.assertEqual(
            estatisticas['usersWithMostAddresses'],
            [{'email': 'cliente@oceanica.com', 'address_count': 1}]
        )

    def test_estatisticas_de_enderecos_como_cliente(self):
        response = self.client.get('/addresses/statistics')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class PedidoPublicoAPITestCase(OceanicaAPITestCase):

    def test_pedido_simples(self):
        """
        Cenário: Pedido rápido sem autenticação cria um cliente temporário.
        """
        response = self.client.post('/orders/simple', {
            'productId': str(self.produto.id), 'username': 'Maria', 'phone': '13999990000',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.json()['data']['order']['total_price'], '89.90')
        self.assertTrue(
            get_user_model().objects.filter(email__endswith='@temp.oceanica.local', nome='Maria').exists()
        )
        self.produto.refresh_from_db()
        self.assertEqual(self.produto.estoque, 9)

    def test_pedido_admin(self):
        """
        Cenário: Pedido de balcão lançado pelo administrador para um cliente sem cadastro.
        """
        # ARRANGE
        self.autenticar(self.admin)

        # ACT
        response = self.client.post('/orders/admin', {
            'items': [{'product_id': str(self.produto.id), 'quantity': 2}],
            'customer': {'name': 'João Pescador', 'phone': '13988887777'},
            'shipping_price': '5.00',
        }, format='json')

        # ASSERT
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        pedido = response.json()['data']['order']
        self.assertEqual(pedido['total_price'], '184.80')
        self.assertEqual(pedido['customer_name'], 'João Pescador')
        self.produto.refresh_from_db()
        self.assertEqual(self.produto.estoque, 8)

    def test_pedido_admin_como_cliente(self):
        self.autenticar(self.cliente)

        response = self.client.post('/orders/admin', {
            'items': [{'product_id': str(self.produto.id), 'quantity': 1}],
            'customer': {'name': 'João', 'phone': '13988887777'},
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_pedido_externo_grava_endereco_padrao(self):
        """
        Cenário: Pedido externo sem login cria o cliente temporário com o endereço como padrão.
        """
        # ACT
        response = self.client.post('/orders/external', {
            'items': [{'product_id': str(self.produto.id), 'quantity': 1}],
            'customer': {'name': 'Ana', 'phone': '13977776666'},
            'address': {'street': 'Av. Beira Mar', 'city': 'Santos', 'state': 'SP', 'postal_code': '11015-000'},
        }, format='json')

        # ASSERT
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        pedido = response.json()['data']['order']
        self.assertEqual(pedido['total_price'], '89.90')
        endereco = EnderecoModel.objects.get(pk=pedido['address_id'])
        self.assertTrue(endereco.is_default)
        self.assertEqual(endereco.usuario.nome, 'Ana')

    def test_pedido_externo_sem_endereco(self):
        response = self.client.post('/orders/external', {
            'items': [{'product_id': str(self.produto.id), 'quantity': 1}],
            'customer': {'name': 'Ana', 'phone': '13977776666'},
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()['message'], 'Endereço é obrigatório')
        self.produto.refresh_from_db()
        self.assertEqual(self.produto.estoque, 10)


class PedidoListagemAPITestCase(OceanicaAPITestCase):
    """Cliente com um pedido pendente e um cancelado."""

    def setUp(self):
        super().setUp()
        self.autenticar(self.cliente)
        endereco_id = self.criar_endereco()
        self.pendente = self.fazer_pedido(endereco_id, quantidade=1)
        self.cancelado = self.fazer_pedido(endereco_id, quantidade=3)
        self.client.patch(f"/orders/{self.cancelado['id']}/cancel")

    def test_meus_pedidos_filtrados_por_status(self):
        response = self.client.get('/orders/my', {'status': 'cancelado'})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        pedidos = response.json()['data']['orders']
        self.assertEqual([p['id'] for p in pedidos], [self.cancelado['id']])
        self.assertEqual(response.json()['data']['pagination']['totalItems'], 1)

    def test_meus_pedidos_ordenados_por_total(self):
        response = self.client.get('/orders/my', {'sortBy': 'total_price', 'sortOrder': 'asc'})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        pedidos = response.json()['data']['orders']
        self.assertEqual([p['id'] for p in pedidos], [self.pendente['id'], self.cancelado['id']])

    def test_meus_pedidos_status_invalido(self):
        response = self.client.get('/orders/my', {'status': 'entregue'})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(
            response.json()['message'],
            'Status inválido. Use: pendente, confirmado, enviado, cancelado'
        )

    def test_meus_pedidos_limite(self):
        """
        Cenário: O cliente pagina com no máximo 50 pedidos por página.
        """
        no_maximo = self.client.get('/orders/my', {'limit': 50})
        acima = self.client.get('/orders/my', {'limit': 51})

        self.assertEqual(no_maximo.status_code, status.HTTP_200_OK)
        self.assertEqual(acima.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(acima.json()['message'], 'Limite deve ser um número entre 1 e 50')

    def test_meus_pedidos_nao_incluem_pedidos_de_outros(self):
        outro = get_user_model().objects.create_user(email='outro@oceanica.com', password='123456', nome='Outro')
        self.autenticar(outro)

        response = self.client.get('/orders/my')

        self.assertEqual(response.json()['data']['orders'], [])

    def test_listagem_admin_com_10_por_pagina(self):
        self.autenticar(self.admin)

        response = self.client.get('/orders', {'status': 'pendente'})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        dados = response.json()['data']
        self.assertEqual([p['id'] for p in dados['orders']], [self.pendente['id']])
        self.assertEqual(dados['pagination']['itemsPerPage'], 10)


class ItensPedidoAPITestCase(OceanicaAPITestCase):
    """Cliente com um pedido de 2 unidades do produto a R$ 89,90."""

    def setUp(self):
        super().setUp()
        self.autenticar(self.cliente)
        self.pedido = self.fazer_pedido(self.criar_endereco(), quantidade=2)
        self.item_id = self.pedido['items'][0]['id']

    def autenticar_outro_cliente(self):
        outro = get_user_model().objects.create_user(email='outro@oceanica.com', password='123456', nome='Outro')
        self.autenticar(outro)

    def test_itens_e_totais_do_pedido(self):
        itens = self.client.get(f"/order-items/order/{self.pedido['id']}")
        totais = self.client.get(f"/order-items/order/{self.pedido['id']}/total")

        self.assertEqual(itens.status_code, status.HTTP_200_OK)
        self.assertEqual(len(itens.json()['data']['items']), 1)
        self.assertEqual(totais.status_code, status.HTTP_200_OK)
        self.assertEqual(totais.json()['data']['totals'], {
            'totalItems': 1, 'totalQuantity': 2, 'totalAmount': '179.80',
        })

    def test_detalhe_do_item(self):
        response = self.client.get(f'/order-items/{self.item_id}')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        item = response.json()['data']['item']
        self.assertEqual(item['product_name'], 'Filé de Salmão')
        self.assertEqual(item['subtotal'], '179.80')

    def test_atualizar_quantidade_recalcula_subtotal(self):
        """
        Cenário: Alterar a quantidade do item recalcula o subtotal com o preço congelado.
        """
        # ACT
        response = self.client.put(f'/order-items/{self.item_id}/quantity', {'quantity': 3}, format='json')

        # ASSERT
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        item = response.json()['data']['item']
        self.assertEqual(item['quantity'], 3)
        self.assertEqual(item['subtotal'], '269.70')
        self.assertEqual(ItemPedidoModel.objects.get(pk=self.item_id).subtotal, Decimal('269.70'))

    def test_atualizar_quantidade_invalida(self):
        response = self.client.put(f'/order-items/{self.item_id}/quantity', {'quantity': 0}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()['message'], 'Quantidade deve ser um número válido maior que zero')

    def test_adicionar_itens_ao_pedido(self):
        response = self.client.post('/order-items', {
            'order_id': self.pedido['id'],
            'items': [{'product_id': str(self.produto.id), 'quantity': 1, 'price': '80.00'}],
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        itens = response.json()['data']['items']
        self.assertEqual(itens[0]['subtotal'], '80.00')
        self.assertEqual(ItemPedidoModel.objects.filter(pedido_id=self.pedido['id']).count(), 2)

    def test_remover_item(self):
        response = self.client.delete(f'/order-items/{self.item_id}')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(self.client.get(f'/order-items/{self.item_id}').status_code, status.HTTP_404_NOT_FOUND)

    def test_remover_itens_do_pedido(self):
        response = self.client.delete(f"/order-items/order/{self.pedido['id']}")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()['data']['deletedCount'], 1)
        self.assertFalse(ItemPedidoModel.objects.filter(pedido_id=self.pedido['id']).exists())

    def test_itens_de_pedido_de_outro_cliente_nao_sao_encontrados(self):
        """
        Cenário: Pedidos e itens de outro cliente respondem 404, como se não existissem.
        """
        # ARRANGE
        self.autenticar_outro_cliente()

        # ACT
        listar = self.client.get(f"/order-items/order/{self.pedido['id']}")
        adicionar = self.client.post('/order-items', {
            'order_id': self.pedido['id'],
            'items': [{'product_id': str(self.produto.id), 'quantity': 1, 'price': '1.00'}],
        }, format='json')
        alterar = self.client.put(f'/order-items/{self.item_id}/quantity', {'quantity': 5}, format='json')
        remover = self.client.delete(f'/order-items/{self.item_id}')

        # ASSERT
        self.assertEqual(listar.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(listar.json()['message'], 'Pedido não encontrado')
        self.assertEqual(adicionar.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(alterar.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(remover.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(ItemPedidoModel.objects.get(pk=self.item_id).quantidade, 2)

    def test_itens_por_produto(self):
        self.autenticar(self.admin)

        response = self.client.get(f'/order-items/product/{self.produto.id}')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([i['id'] for i in response.json()['data']['items']], [self.item_id])

    def test_itens_por_produto_como_cliente(self):
        response = self.client.get(f'/order-items/product/{self.produto.id}')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_estatisticas_de_vendas_filtradas_por_produto_e_data(self):
        """
        Cenário: product_id, start_date e end_date filtram as estatísticas; productId é aceito como apelido.
        """
        # ARRANGE
        self.autenticar(self.admin)
        url = '/order-items/statistics/sales'
        produto_id = str(self.produto.id)

        # ACT
        do_produto = self.client.get(url, {'product_id': produto_id, 'end_date': '2999-01-01T00:00:00Z'})
        outro_produto = self.client.get(url, {'product_id': str(uuid.uuid4())})
        depois_da_venda = self.client.get(url, {'start_date': '2999-01-01T00:00:00Z'})
        por_apelido = self.client.get(url, {'productId': str(uuid.uuid4())})

        # ASSERT
        self.assertEqual(do_produto.status_code, status.HTTP_200_OK)
        estatisticas = do_produto.json()['data']['statistics']
        self.assertEqual(len(estatisticas), 1)
        self.assertEqual(estatisticas[0]['product_id'], produto_id)
        self.assertEqual(estatisticas[0]['total_quantity_sold'], 2)
        self.assertEqual(outro_produto.json()['data']['statistics'], [])
        self.assertEqual(depois_da_venda.json()['data']['statistics'], [])
        self.assertEqual(por_apelido.json()['data']['statistics'], [])

    def test_estatisticas_de_vendas_com_data_invalida(self):
        self.autenticar(self.admin)

        response = self.client.get('/order-items/statistics/sales', {'start_date': 'ontem'})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()['message'], 'Data de início inválida')
