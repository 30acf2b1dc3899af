# oceanica/core/testes.py

import unittest
from unittest.mock import Mock, MagicMock, call
from decimal import Decimal

# Importamos as classes que queremos testar
from oceanica.core.use_cases import (
    CriarProdutoUseCase,
    AtualizarProdutoUseCase,
    GerenciarCarrinhoUseCase,
    CriarPedidoUseCase,
    CriarPedidoAdminUseCase,
    CancelarPedidoUseCase,
    AtualizarStatusPedidoUseCase,
    RegistrarUsuarioUseCase,
    AutenticarUsuarioUseCase,
    ListarProdutosUseCase,
    ListarPedidosUseCase,
    validar_dados_endereco,
)
from oceanica.core.entities import (
    Usuario, Produto, Carrinho, ItemCarrinho, Endereco, Pedido, ItemPedido, Paginacao,
    ROLE_ADMIN, STATUS_PENDENTE, STATUS_CONFIRMADO, STATUS_ENVIADO, STATUS_CANCELADO,
)
from oceanica.core.exceptions import (
    DadosInvalidosError,
    CredenciaisInvalidasError,
    EmailJaCadastradoError,
    ItemNaoEncontradoError,
    EstoqueInsuficienteError,
    CarrinhoVazioError,
    EnderecoInvalidoError,
    PedidoNaoEncontradoError,
    StatusInvalidoError,
    TransicaoStatusInvalidaError,
)


class TestCriarProduto(unittest.TestCase):

    def setUp(self):
        self.produto_repo_mock = Mock()
        self.produto_repo_mock.salvar.side_effect = lambda produto: produto
        self.use_case = CriarProdutoUseCase(produto_repo=self.produto_repo_mock)

    def test_criar_produto_com_sucesso(self):
        """
        Cenário: Criar um produto válido normaliza o nome e converte o preço para Decimal.
        """
        # ACT
        produto = self.use_case.executar(nome='  Filé de Salmão ', preco='89.90', estoque=5)

        # ASSERT
        self.assertEqual(produto.nome, 'Filé de Salmão')
        self.assertEqual(produto.preco, Decimal('89.90'))
        self.assertEqual(produto.estoque, 5)
        self.produto_repo_mock.salvar.assert_called_once()

    def test_criar_produto_com_preco_negativo_falha(self):
        """
        Cenário: Preço menor ou igual a zero é rejeitado antes de chegar ao repositório.
        """
        # ACT e ASSERT
        with self.assertRaises(DadosInvalidosError) as contexto:
            self.use_case.executar(nome='Tilápia', preco='-1.00', estoque=3)

        self.assertEqual(contexto.exception.message, "Preço deve ser maior que zero")
        self.produto_repo_mock.salvar.assert_not_called()

    def test_criar_produto_com_estoque_negativo_falha(self):
        """
        Cenário: Estoque negativo é rejeitado.
        """
        with self.assertRaises(DadosInvalidosError):
            self.use_case.executar(nome='Tilápia', preco='10.00', estoque=-2)


class TestAtualizarProduto(unittest.TestCase):

    def setUp(self):
        self.produto_repo_mock = Mock()
        self.produto_repo_mock.salvar.side_effect = lambda produto, campos=None: produto
        self.use_case = AtualizarProdutoUseCase(produto_repo=self.produto_repo_mock)

    def test_atualizacao_parcial_altera_apenas_campos_informados(self):
        """
        Cenário: Atualizar somente o preço mantém nome e estoque.
        """
        # ARRANGE
        self.produto_repo_mock.buscar_por_id.return_value = Produto(
            id='p-1', nome='Polvo', preco=Decimal('119.90'), estoque=4
        )

        # ACT
        produto = self.use_case.executar('p-1', {'preco': '99.90'})

        # ASSERT
        self.assertEqual(produto.preco, Decimal('99.90'))
        self.assertEqual(produto.nome, 'Polvo')
        self.assertEqual(produto.estoque, 4)
        self.produto_repo_mock.salvar.assert_called_once_with(produto, campos=['preco'])

    def test_atualizacao_sem_campos_falha(self):
        """
        Cenário: Corpo sem nenhum campo conhecido gera erro de validação.
        """
        self.produto_repo_mock.buscar_por_id.return_value = Produto(id='p-1', nome='Polvo', preco=Decimal('1'))

        with self.assertRaises(DadosInvalidosError):
            self.use_case.executar('p-1', {'cor': 'azul'})


class TestListarProdutos(unittest.TestCase):

    def test_ordenacao_invalida_falha(self):
        """
        Cenário: Campo de ordenação fora da lista permitida é rejeitado.
        """
        use_case = ListarProdutosUseCase(produto_repo=Mock())

        with self.assertRaises(DadosInvalidosError) as contexto:
            use_case.executar(ordenar_por='senha')

        self.assertEqual(contexto.exception.message, "Campo de ordenação inválido")

    def test_limite_acima_do_maximo_falha(self):
        use_case = ListarProdutosUseCase(produto_repo=Mock())

        with self.assertRaises(DadosInvalidosError):
            use_case.executar(limite=101)


class TestGerenciarCarrinho(unittest.TestCase):

    def setUp(self):
        """
        Prepara os mocks dos repositórios de carrinho e produto.
        """
        self.carrinho_repo_mock = Mock()
        self.produto_repo_mock = Mock()
        self.use_case = GerenciarCarrinhoUseCase(
            carrinho_repo=self.carrinho_repo_mock,
            produto_repo=self.produto_repo_mock
        )
        self.produto = Produto(id='p-1', nome='Camarão Cinza', preco=Decimal('69.90'), estoque=5)
        self.produto_repo_mock.buscar_por_id.return_value = self.produto

    def test_adicionar_item_em_carrinho_vazio(self):
        """
        Cenário: Adicionar um produto novo grava a quantidade solicitada.
        """
        # ARRANGE
        self.carrinho_repo_mock.buscar_por_usuario.return_value = Carrinho(usuario_id='u-1', itens=[])

        # ACT
        self.use_case.adicionar_item('u-1', 'p-1', 2)

        # ASSERT
        self.carrinho_repo_mock.salvar_item.assert_called_once_with('u-1', 'p-1', 2)

    def test_adicionar_item_existente_soma_quantidades(self):
        """
        Cenário: Adicionar um produto que já está no carrinho incrementa a quantidade.
        """
        # ARRANGE
        self.carrinho_repo_mock.buscar_por_usuario.return_value = Carrinho(
            usuario_id='u-1',
            itens=[ItemCarrinho(produto_id='p-1', quantidade=2, usuario_id='u-1', produto=self.produto)]
        )

        # ACT
        self.use_case.adicionar_item('u-1', 'p-1', 3)

        # ASSERT
        self.carrinho_repo_mock.salvar_item.assert_called_once_with('u-1', 'p-1', 5)

    def test_adicionar_item_acima_do_estoque_falha(self):
        """
        Cenário: A soma do que já está no carrinho com o novo pedido excede o estoque.
        """
        # ARRANGE
        self.carrinho_repo_mock.buscar_por_usuario.return_value = Carrinho(
            usuario_id='u-1',
            itens=[ItemCarrinho(produto_id='p-1', quantidade=4, usuario_id='u-1', produto=self.produto)]
        )

        # ACT e ASSERT
        with self.assertRaises(EstoqueInsuficienteError) as contexto:
            self.use_case.adicionar_item('u-1', 'p-1', 2)

        self.assertIn("Máximo possível: 1", contexto.exception.message)
        self.carrinho_repo_mock.salvar_item.assert_not_called()

    def test_quantidade_zero_falha(self):
        with self.assertRaises(DadosInvalidosError):
            self.use_case.adicionar_item('u-1', 'p-1', 0)

    def test_atualizar_quantidade_de_item_inexistente_falha(self):
        """
        Cenário: Atualizar um produto que não está no carrinho gera 404.
        """
        self.carrinho_repo_mock.buscar_por_usuario.return_value = Carrinho(usuario_id='u-1', itens=[])

        with self.assertRaises(ItemNaoEncontradoError) as contexto:
            self.use_case.atualizar_quantidade('u-1', 'p-1', 1)

        self.assertEqual(contexto.exception.status_code, 404)


class TestCriarPedido(unittest.TestCase):

    def setUp(self):
        """
        Monta um carrinho com dois produtos e um endereço do próprio usuário.
        """
        self.pedido_repo_mock = Mock()
        self.carrinho_repo_mock = Mock()
        self.produto_repo_mock = Mock()
        self.endereco_repo_mock = Mock()

        self.use_case = CriarPedidoUseCase(
            pedido_repo=self.pedido_repo_mock,
            carrinho_repo=self.carrinho_repo_mock,
            produto_repo=self.produto_repo_mock,
            endereco_repo=self.endereco_repo_mock,
        )

        self.salmao = Produto(id='p-1', nome='Filé de Salmão', preco=Decimal('89.90'), estoque=10)
        self.lula = Produto(id='p-2', nome='Lula em Anéis', preco=Decimal('34.90'), estoque=3)
        self.carrinho = Carrinho(usuario_id='u-1', itens=[
            ItemCarrinho(produto_id='p-1', quantidade=2, usuario_id='u-1', produto=self.salmao),
            ItemCarrinho(produto_id='p-2', quantidade=1, usuario_id='u-1', produto=self.lula),
        ])
        self.endereco = Endereco(
            id='e-1', usuario_id='u-1', rua='Rua do Porto', cidade='Santos', estado='SP', cep='11000-000'
        )

        self.carrinho_repo_mock.buscar_por_usuario.return_value = self.carrinho
        self.endereco_repo_mock.buscar_por_id.return_value = self.endereco
        self.produto_repo_mock.ajustar_estoque.return_value = True
        self.pedido_repo_mock.salvar.side_effect = lambda pedido: pedido

    def test_criar_pedido_com_sucesso(self):
        """
        Cenário: Checkout calcula o total, baixa o estoque e esvazia o carrinho.
        """
        # ACT
        pedido = self.use_case.executar('u-1', 'e-1', frete=Decimal('15.00'))

        # ASSERT
        # 1. Total = 2 x 89.90 + 1 x 34.90 + 15.00
        self.assertEqual(pedido.total, Decimal('229.70'))
        self.assertEqual(pedido.status, STATUS_PENDENTE)
        self.assertEqual(len(pedido.itens), 2)

        # 2. Estoque debitado item a item
        self.produto_repo_mock.ajustar_estoque.assert_has_calls([call('p-1', -2), call('p-2', -1)])

        # 3. Carrinho esvaziado
        self.carrinho_repo_mock.limpar.assert_called_once_with('u-1')

    def test_preco_congelado_no_item(self):
        """
        Cenário: O item do pedido guarda o preço do produto no momento da compra.
        """
        pedido = self.use_case.executar('u-1', 'e-1')

        self.salmao.preco = Decimal('150.00')
        self.assertEqual(pedido.itens[0].preco, Decimal('89.90'))

    def test_criar_pedido_com_carrinho_vazio_falha(self):
        """
        Cenário: Carrinho sem itens não pode virar pedido.
        """
        # ARRANGE
        self.carrinho_repo_mock.buscar_por_usuario.return_value = Carrinho(usuario_id='u-1', itens=[])

        # ACT e ASSERT
        with self.assertRaises(CarrinhoVazioError):
            self.use_case.executar('u-1', 'e-1')

        self.pedido_repo_mock.salvar.assert_not_called()

    def test_criar_pedido_com_endereco_de_outro_usuario_falha(self):
        """
        Cenário: O endereço informado pertence a outro usuário.
        """
        # ARRANGE
        self.endereco.usuario_id = 'u-2'

        # ACT e ASSERT
        with self.assertRaises(EnderecoInvalidoError):
            self.use_case.executar('u-1', 'e-1')

        self.produto_repo_mock.ajustar_estoque.assert_not_called()

    def test_criar_pedido_com_estoque_insuficiente_falha(self):
        """
        Cenário: Um item do carrinho excede o estoque atual do produto.
        """
        self.lula.estoque = 0

        with self.assertRaises(EstoqueInsuficienteError):
            self.use_case.executar('u-1', 'e-1')

        self.pedido_repo_mock.salvar.assert_not_called()
        self.carrinho_repo_mock.limpar.assert_not_called()

    def test_baixa_concorrente_de_estoque_falha(self):
        """
        Cenário: A atualização condicional do estoque falha (outra compra levou o produto).
        """
        self.produto_repo_mock.ajustar_estoque.return_value = False

        with self.assertRaises(EstoqueInsuficienteError):
            self.use_case.executar('u-1', 'e-1')

        self.carrinho_repo_mock.limpar.assert_not_called()

    def test_frete_negativo_falha(self):
        with self.assertRaises(DadosInvalidosError):
            self.use_case.executar('u-1', 'e-1', frete='-5')

    def test_operacao_executada_dentro_da_transacao(self):
        """
        Cenário: O checkout abre a transação recebida por injeção.
        """
        # ARRANGE
        transacao = MagicMock()
        self.use_case.transacao = transacao

        # ACT
        self.use_case.executar('u-1', 'e-1')

        # ASSERT
        transacao.assert_called_once_with()
        transacao.return_value.__enter__.assert_called_once()
        transacao.return_value.__exit__.assert_called_once()


class TestCriarPedidoAdmin(unittest.TestCase):

    def setUp(self):
        self.pedido_repo_mock = Mock()
        self.produto_repo_mock = Mock()
        self.usuario_repo_mock = Mock()
        self.endereco_repo_mock = Mock()

        self.use_case = CriarPedidoAdminUseCase(
            pedido_repo=self.pedido_repo_mock,
            produto_repo=self.produto_repo_mock,
            usuario_repo=self.usuario_repo_mock,
            endereco_repo=self.endereco_repo_mock,
        )

        self.produto = Produto(id='p-1', nome='Sardinha Fresca', preco=Decimal('16.90'), estoque=10)
        self.produto_repo_mock.buscar_por_ids.return_value = [self.produto]
        self.produto_repo_mock.ajustar_estoque.return_value = True
        self.usuario_repo_mock.criar.side_effect = lambda usuario, senha: Usuario(
            id='temp-1', email=usuario.email, nome=usuario.nome, telefone=usuario.telefone
        )
        self.endereco_repo_mock.salvar.side_effect = lambda endereco: Endereco(
            id='e-9', usuario_id=endereco.usuario_id, rua=endereco.rua,
            cidade=endereco.cidade, estado=endereco.estado, cep=endereco.cep, is_default=endereco.is_default
        )
        self.pedido_repo_mock.salvar.side_effect = lambda pedido: pedido

    def test_pedido_admin_cria_cliente_temporario(self):
        """
        Cenário: Pedido de balcão registra o cliente com email temporário e sem senha.
        """
        # ACT
        pedido = self.use_case.criar_pedido_admin(
            itens=[{'produto_id': 'p-1', 'quantidade': 3}],
            cliente_nome='Maria Souza',
            cliente_telefone='13999990000',
            frete=Decimal('10.00'),
        )

        # ASSERT
        usuario_criado, senha = self.usuario_repo_mock.criar.call_args[0]
        self.assertTrue(usuario_criado.email.startswith('temp_'))
        self.assertTrue(usuario_criado.email.endswith('@temp.oceanica.local'))
        self.assertIsNone(senha)
        self.assertEqual(pedido.usuario_id, 'temp-1')
        self.assertEqual(pedido.total, Decimal('60.70'))
        self.produto_repo_mock.ajustar_estoque.assert_called_once_with('p-1', -3)

    def test_pedido_com_produto_inexistente_falha(self):
        """
        Cenário: Um dos produtos informados não existe.
        """
        # ACT e ASSERT
        with self.assertRaises(DadosInvalidosError) as contexto:
            self.use_case.criar_pedido_admin(
                itens=[{'produto_id': 'p-1', 'quantidade': 1}, {'produto_id': 'p-x', 'quantidade': 1}],
                cliente_nome='Maria',
                cliente_telefone='13999990000',
            )

        self.assertEqual(contexto.exception.message, "Um ou mais produtos não foram encontrados")
        self.usuario_repo_mock.criar.assert_not_called()

    def test_pedido_externo_cria_endereco_padrao(self):
        """
        Cenário: Pedido externo grava o endereço informado como padrão do cliente temporário.
        """
        # ACT
        pedido = self.use_case.criar_pedido_externo(
            itens=[{'produto_id': 'p-1', 'quantidade': 1}],
            cliente_nome='João',
            cliente_telefone='13988887777',
            endereco={'rua': 'Av. da Praia', 'cidade': 'Guarujá', 'estado': 'SP', 'cep': '11400-000'},
        )

        # ASSERT
        endereco_salvo = self.endereco_repo_mock.salvar.call_args[0][0]
        self.assertTrue(endereco_salvo.is_default)
        self.assertEqual(endereco_salvo.usuario_id, 'temp-1')
        self.assertEqual(pedido.endereco_id, 'e-9')

    def test_pedido_simples_tem_uma_unidade_sem_frete(self):
        pedido = self.use_case.criar_pedido_simples('p-1', 'Ana', '13977776666')

        self.assertEqual(pedido.itens[0].quantidade, 1)
        self.assertEqual(pedido.frete, Decimal('0.00'))
        self.assertEqual(pedido.total, Decimal('16.90'))

    def test_pedido_sem_nome_do_cliente_falha(self):
        with self.assertRaises(DadosInvalidosError):
            self.use_case.criar_pedido_admin(
                itens=[{'produto_id': 'p-1', 'quantidade': 1}], cliente_nome=' ', cliente_telefone='1399999'
            )


class TestCancelarPedido(unittest.TestCase):

    def setUp(self):
        self.pedido_repo_mock = Mock()
        self.produto_repo_mock = Mock()
        self.use_case = CancelarPedidoUseCase(
            pedido_repo=self.pedido_repo_mock,
            produto_repo=self.produto_repo_mock,
        )
        self.cliente = Usuario(id='u-1', email='cliente@oceanica.com')
        self.pedido = Pedido(
            id='ped-1',
            usuario_id='u-1',
            status=STATUS_PENDENTE,
            itens=[
                ItemPedido(produto_id='p-1', quantidade=2, preco=Decimal('10.00')),
                ItemPedido(produto_id='p-2', quantidade=1, preco=Decimal('5.00')),
            ],
        )
        self.pedido_repo_mock.buscar_por_id.return_value = self.pedido
        self.pedido_repo_mock.atualizar_status.return_value = Pedido(
            id='ped-1', usuario_id='u-1', status=STATUS_CANCELADO
        )

    def test_cancelar_pedido_restaura_estoque(self):
        """
        Cenário: Cancelar um pedido pendente devolve cada item ao estoque.
        """
        # ACT
        pedido = self.use_case.executar('ped-1', self.cliente)

        # ASSERT
        self.assertEqual(pedido.status, STATUS_CANCELADO)
        self.pedido_repo_mock.atualizar_status.assert_called_once_with('ped-1', STATUS_CANCELADO, STATUS_PENDENTE)
        self.produto_repo_mock.ajustar_estoque.assert_has_calls([call('p-1', 2), call('p-2', 1)])

    def test_cancelar_pedido_enviado_falha(self):
        """
        Cenário: Pedidos enviados não podem ser cancelados.
        """
        # ARRANGE
        self.pedido.status = STATUS_ENVIADO

        # ACT e ASSERT
        with self.assertRaises(StatusInvalidoError) as contexto:
            self.use_case.executar('ped-1', self.cliente)

        self.assertEqual(contexto.exception.message, 'Não é possível cancelar pedido com status "enviado"')
        self.produto_repo_mock.ajustar_estoque.assert_not_called()

    def test_cancelar_pedido_de_outro_usuario_falha(self):
        """
        Cenário: Pedido de outro cliente é tratado como inexistente.
        """
        outro = Usuario(id='u-2', email='outro@oceanica.com')

        with self.assertRaises(PedidoNaoEncontradoError):
            self.use_case.executar('ped-1', outro)

    def test_admin_cancela_pedido_de_qualquer_cliente(self):
        admin = Usuario(id='adm', email='admin@oceanica.com', role=ROLE_ADMIN)

        self.use_case.executar('ped-1', admin)

        self.pedido_repo_mock.atualizar_status.assert_called_once()

    def test_cancelamento_concorrente_nao_restaura_estoque(self):
        """
        Cenário: O status mudou entre a leitura e a atualização condicional.
        """
        self.pedido_repo_mock.atualizar_status.return_value = None

        with self.assertRaises(StatusInvalidoError):
            self.use_case.executar('ped-1', self.cliente)

        self.produto_repo_mock.ajustar_estoque.assert_not_called()


class TestAtualizarStatusPedido(unittest.TestCase):

    def setUp(self):
        self.pedido_repo_mock = Mock()
        self.produto_repo_mock = Mock()
        self.use_case = AtualizarStatusPedidoUseCase(
            pedido_repo=self.pedido_repo_mock,
            produto_repo=self.produto_repo_mock,
        )
        self.pedido = Pedido(
            id='ped-1', usuario_id='u-1', status=STATUS_PENDENTE,
            itens=[ItemPedido(produto_id='p-1', quantidade=4, preco=Decimal('20.00'))],
        )
        self.pedido_repo_mock.buscar_por_id.return_value = self.pedido
        self.pedido_repo_mock.atualizar_status.side_effect = (
            lambda pedido_id, status, status_atual: Pedido(id=pedido_id, usuario_id='u-1', status=status)
        )

    def test_transicao_pendente_para_confirmado(self):
        """
        Cenário: Confirmar um pedido pendente.
        """
        # ACT
        pedido = self.use_case.executar('ped-1', 'confirmado')

        # ASSERT
        self.assertEqual(pedido.status, STATUS_CONFIRMADO)
        self.produto_repo_mock.ajustar_estoque.assert_not_called()

    def test_status_desconhecido_falha(self):
        with self.assertRaises(StatusInvalidoError) as contexto:
            self.use_case.executar('ped-1', 'entregue')

        self.assertEqual(
            contexto.exception.message,
            "Status inválido. Use: pendente, confirmado, enviado, cancelado"
        )

    def test_transicao_nao_permitida_falha(self):
        """
        Cenário: Um pedido pendente não pode ir direto para enviado.
        """
        # ACT e ASSERT
        with self.assertRaises(TransicaoStatusInvalidaError) as contexto:
            self.use_case.executar('ped-1', 'enviado')

        self.assertEqual(
            contexto.exception.message,
            'Não é possível alterar status de "pendente" para "enviado"'
        )
        self.pedido_repo_mock.atualizar_status.assert_not_called()

    def test_status_final_nao_pode_ser_alterado(self):
        """
        Cenário: Enviado e cancelado são estados finais.
        """
        for final in (STATUS_ENVIADO, STATUS_CANCELADO):
            with self.subTest(status=final):
                self.pedido.status = final
                with self.assertRaises(TransicaoStatusInvalidaError):
                    self.use_case.executar('ped-1', STATUS_PENDENTE)

    def test_cancelamento_pelo_status_restaura_estoque(self):
        """
        Cenário: Levar um pedido confirmado para cancelado devolve o estoque.
        """
        # ARRANGE
        self.pedido.status = STATUS_CONFIRMADO

        # ACT
        self.use_case.executar('ped-1', 'cancelado')

        # ASSERT
        self.produto_repo_mock.ajustar_estoque.assert_called_once_with('p-1', 4)


class TestRegistrarEAutenticarUsuario(unittest.TestCase):

    def setUp(self):
        self.usuario_repo_mock = Mock()
        self.token_service_mock = Mock()
        self.token_service_mock.gerar_token.return_value = 'token-jwt'

    def test_registrar_usuario_com_sucesso(self):
        """
        Cenário: Novo cadastro normaliza o email e devolve o token.
        """
        # ARRANGE
        self.usuario_repo_mock.buscar_por_email.return_value = None
        self.usuario_repo_mock.criar.side_effect = lambda usuario, senha: Usuario(
            id='u-1', email=usuario.email, nome=usuario.nome, role=usuario.role
        )
        use_case = RegistrarUsuarioUseCase(self.usuario_repo_mock, self.token_service_mock)

        # ACT
        usuario, token = use_case.executar(email=' Pescador@Oceanica.COM ', senha='123456', nome='Pescador')

        # ASSERT
        self.assertEqual(usuario.email, 'pescador@oceanica.com')
        self.assertEqual(usuario.role, 'cliente')
        self.assertEqual(token, 'token-jwt')

    def test_registrar_email_duplicado_falha(self):
        """
        Cenário: Email já cadastrado gera conflito.
        """
        # ARRANGE
        self.usuario_repo_mock.buscar_por_email.return_value = Usuario(id='u-1', email='pescador@oceanica.com')
        use_case = RegistrarUsuarioUseCase(self.usuario_repo_mock, self.token_service_mock)

        # ACT e ASSERT
        with self.assertRaises(EmailJaCadastradoError) as contexto:
            use_case.executar(email='pescador@oceanica.com', senha='123456', nome='Pescador')

        self.assertEqual(contexto.exception.status_code, 409)
        self.usuario_repo_mock.criar.assert_not_called()

    def test_registrar_role_invalida_falha(self):
        use_case = RegistrarUsuarioUseCase(self.usuario_repo_mock, self.token_service_mock)

        with self.assertRaises(DadosInvalidosError):
            use_case.executar(email='a@b.com', senha='123456', nome='Ana', role='gerente')

    def test_login_com_senha_errada_falha(self):
        """
        Cenário: Credenciais inválidas produzem erro 401 sem gerar token.
        """
        # ARRANGE
        self.usuario_repo_mock.verificar_credenciais.return_value = None
        use_case = AutenticarUsuarioUseCase(self.usuario_repo_mock, self.token_service_mock)

        # ACT e ASSERT
        with self.assertRaises(CredenciaisInvalidasError) as contexto:
            use_case.executar('pescador@oceanica.com', 'errada')

        self.assertEqual(contexto.exception.status_code, 401)
        self.token_service_mock.gerar_token.assert_not_called()


class TestValidacaoEndereco(unittest.TestCase):

    def test_campo_obrigatorio_ausente(self):
        """
        Cenário: Endereço sem rua informa o campo faltante.
        """
        with self.assertRaises(DadosInvalidosError) as contexto:
            validar_dados_endereco({'cidade': 'Santos', 'estado': 'SP', 'cep': '11000-000'})

        self.assertEqual(contexto.exception.message, "Rua é obrigatória")

    def test_cep_obrigatorio_ausente(self):
        with self.assertRaises(DadosInvalidosError) as contexto:
            validar_dados_endereco({'rua': 'Rua A', 'cidade': 'Santos', 'estado': 'SP'})

        self.assertEqual(contexto.exception.message, "CEP é obrigatório")

    def test_campo_acima_do_tamanho_maximo(self):
        with self.assertRaises(DadosInvalidosError) as contexto:
            validar_dados_endereco({'rua': 'R', 'cidade': 'C' * 101, 'estado': 'SP', 'cep': '1'})

        self.assertEqual(contexto.exception.message, "Cidade deve ter no máximo 100 caracteres")

    def test_validacao_parcial_ignora_campos_ausentes(self):
        validados = validar_dados_endereco({'numero': ' 12 '}, parcial=True)

        self.assertEqual(validados, {'numero': '12'})


class TestListarPedidos(unittest.TestCase):

    def setUp(self):
        self.pedido_repo_mock = Mock()
        self.pedido_repo_mock.listar.return_value = ([], 0)
        self.use_case = ListarPedidosUseCase(pedido_repo=self.pedido_repo_mock)

    def test_pedidos_do_usuario_repassam_filtros(self):
        """
        Cenário: O cliente filtra os próprios pedidos por status e ordena por total crescente.
        """
        # ACT
        self.use_case.listar_do_usuario('u-1', status=' Cancelado ', ordenar_por='total_price', ordem='asc')

        # ASSERT
        self.pedido_repo_mock.listar.assert_called_once_with(
            1, 10, usuario_id='u-1', status=STATUS_CANCELADO, ordenar_por='total_price', ordem='ASC'
        )

    def test_pedidos_do_usuario_com_status_invalido(self):
        with self.assertRaises(StatusInvalidoError):
            self.use_case.listar_do_usuario('u-1', status='entregue')

        self.pedido_repo_mock.listar.assert_not_called()

    def test_pedidos_do_usuario_limite_maximo_50(self):
        with self.assertRaises(DadosInvalidosError) as contexto:
            self.use_case.listar_do_usuario('u-1', limite=51)

        self.assertEqual(contexto.exception.message, "Limite deve ser um número entre 1 e 50")

    def test_listagem_administrativa_usa_10_por_pagina(self):
        _, paginacao = self.use_case.listar_todos()

        self.assertEqual(paginacao.limite, 10)
        self.pedido_repo_mock.listar.assert_called_once_with(
            1, 10, usuario_id=None, status=None, ordenar_por='created_at', ordem='DESC'
        )


class TestPaginacao(unittest.TestCase):

    def test_to_dict(self):
        """
        Cenário: 25 registros com limite 10, na página 2.
        """
        paginacao = Paginacao(pagina=2, limite=10, total=25)

        self.assertEqual(paginacao.to_dict(), {
            'currentPage': 2,
            'totalPages': 3,
            'totalItems': 25,
            'itemsPerPage': 10,
            'hasNextPage': True,
            'hasPreviousPage': True,
        })
        self.assertEqual(paginacao.offset, 10)

    def test_sem_registros(self):
        paginacao = Paginacao(pagina=1, limite=10, total=0)

        self.assertEqual(paginacao.total_paginas, 0)
        self.assertFalse(paginacao.to_dict()['hasNextPage'])
        self.assertFalse(paginacao.to_dict()['hasPreviousPage'])


if __name__ == '__main__':
    unittest.main()
