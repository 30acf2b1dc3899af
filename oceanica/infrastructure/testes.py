from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase

# Importamos as classes que queremos testar
from oceanica.catalog.models import Produto as ProdutoModel
from oceanica.pedidos.models import ItemPedido as ItemPedidoModel
from oceanica.infrastructure.models import Endereco as EnderecoModel
from oceanica.infrastructure.repositories import (
    UsuarioRepositoryDjango,
    ProdutoRepositoryDjango,
    CarrinhoRepositoryDjango,
    EnderecoRepositoryDjango,
    PedidoRepositoryDjango,
)
from oceanica.core.entities import (
    Usuario, Produto as ProdutoEntity, Endereco as EnderecoEntity, Pedido, ItemPedido,
    STATUS_PENDENTE, STATUS_CONFIRMADO, STATUS_CANCELADO,
)
from oceanica.core.exceptions import EmailJaCadastradoError, DadosInvalidosError
from oceanica.core.use_cases import AtualizarProdutoUseCase


class UsuarioRepositoryTestCase(TestCase):

    def setUp(self):
        self.repository = UsuarioRepositoryDjango()

    def test_criar_e_verificar_credenciais(self):
        """
        Cenário: Usuário criado pelo repositório consegue se autenticar com a senha informada.
        """
        # ARRANGE
        self.repository.criar(Usuario(email='marinheiro@oceanica.com', nome='Marinheiro'), '123456')

        # ACT
        usuario = self.repository.verificar_credenciais('marinheiro@oceanica.com', '123456')

        # ASSERT
        self.assertIsNotNone(usuario)
        self.assertEqual(usuario.nome, 'Marinheiro')
        self.assertIsNone(self.repository.verificar_credenciais('marinheiro@oceanica.com', 'errada'))

    def test_criar_email_duplicado_falha(self):
        self.repository.criar(Usuario(email='dup@oceanica.com', nome='Dup'), '123456')

        with self.assertRaises(EmailJaCadastradoError):
            self.repository.criar(Usuario(email='dup@oceanica.com', nome='Outro'), '123456')

    def test_cliente_temporario_sem_senha_nao_autentica(self):
        """
        Cenário: Clientes criados sem senha recebem uma senha inutilizável.
        """
        usuario = self.repository.criar(Usuario(email='temp_1@temp.oceanica.local', nome='Temp'), None)

        model = get_user_model().objects.get(pk=usuario.id)
        self.assertFalse(model.has_usable_password())

    def test_buscar_por_id_invalido_retorna_none(self):
        self.assertIsNone(self.repository.buscar_por_id('nao-e-uuid'))


class ProdutoRepositoryTestCase(TestCase):

    def setUp(self):
        """
        Cria um repositório e três produtos reais no banco de teste.
        """
        self.repository = ProdutoRepositoryDjango()
        self.salmao = ProdutoModel.objects.create(
            nome='Filé de Salmão', descricao='Salmão chileno', preco=Decimal('89.90'), estoque=10
        )
        self.camarao = ProdutoModel.objects.create(
            nome='Camarão Cinza', descricao='Camarão limpo', preco=Decimal('69.90'), estoque=2
        )
        self.tilapia = ProdutoModel.objects.create(
            nome='Tilápia Inteira', descricao='Peixe de água doce', preco=Decimal('24.90'), estoque=0
        )

    def test_ajustar_estoque_debito_com_sucesso(self):
        """
        Cenário: Débito menor ou igual ao estoque é aplicado.
        """
        # ACT
        resultado = self.repository.ajustar_estoque(str(self.salmao.id), -4)

        # ASSERT
        self.assertTrue(resultado)
        self.salmao.refresh_from_db()
        self.assertEqual(self.salmao.estoque, 6)

    def test_ajustar_estoque_debito_maior_que_estoque_nao_altera(self):
        """
        Cenário: A atualização condicional impede estoque negativo.
        """
        # ACT
        resultado = self.repository.ajustar_estoque(str(self.camarao.id), -3)

        # ASSERT
        self.assertFalse(resultado)
        self.camarao.refresh_from_db()
        self.assertEqual(self.camarao.estoque, 2)

    def test_ajustar_estoque_credito(self):
        self.assertTrue(self.repository.ajustar_estoque(str(self.tilapia.id), 5))

        self.tilapia.refresh_from_db()
        self.assertEqual(self.tilapia.estoque, 5)

    def test_listar_com_busca_por_nome_ou_descricao(self):
        """
        Cenário: A busca é feita em nome e descrição, sem diferenciar maiúsculas.
        """
        # ACT
        por_nome, total_nome = self.repository.listar(1, 10, busca='salmão')
        por_descricao, total_descricao = self.repository.listar(1, 10, busca='DOCE')

        # ASSERT
        self.assertEqual(total_nome, 1)
        self.assertEqual(por_nome[0].nome, 'Filé de Salmão')
        self.assertEqual(total_descricao, 1)
        self.assertEqual(por_descricao[0].nome, 'Tilápia Inteira')

    def test_listar_paginado_e_ordenado_por_preco(self):
        """
        Cenário: Segunda página com limite 2, ordenada por preço crescente.
        """
        # ACT
        produtos, total = self.repository.listar(2, 2, ordenar_por='price', ordem='ASC')

        # ASSERT
        self.assertEqual(total, 3)
        self.assertEqual([p.nome for p in produtos], ['Filé de Salmão'])

    def test_salvar_com_campos_preserva_estoque_debitado_apos_leitura(self):
        """
        Cenário: Uma venda debita o estoque entre a leitura e a gravação de uma alteração de nome.
        """
        # ARRANGE
        produto = self.repository.buscar_por_id(str(self.salmao.id))
        self.repository.ajustar_estoque(str(self.salmao.id), -4)

        # ACT
        produto.nome = 'Filé de Salmão Premium'
        atualizado = self.repository.salvar(produto, campos=['nome'])

        # ASSERT
        self.assertEqual(atualizado.nome, 'Filé de Salmão Premium')
        self.assertEqual(atualizado.estoque, 6)
        self.salmao.refresh_from_db()
        self.assertEqual(self.salmao.estoque, 6)

    def test_atualizar_produto_sem_estoque_nao_desfaz_venda_concorrente(self):
        """
        Cenário: PUT só com o nome, com uma venda de 4 unidades concluída depois da leitura.
        """
        # ARRANGE
        class RepositorioComVendaAposLeitura(ProdutoRepositoryDjango):
            def buscar_por_id(self, produto_id):
                produto = super().buscar_por_id(produto_id)
                self.ajustar_estoque(produto_id, -4)
                return produto

        use_case = AtualizarProdutoUseCase(produto_repo=RepositorioComVendaAposLeitura())

        # ACT
        use_case.executar(str(self.salmao.id), {'nome': 'Salmão Fresco'})

        # ASSERT
        self.salmao.refresh_from_db()
        self.assertEqual(self.salmao.nome, 'Salmão Fresco')
        self.assertEqual(self.salmao.estoque, 6)

    def test_salvar_novo_produto(self):
        produto = self.repository.salvar(ProdutoEntity(nome='Polvo', preco=Decimal('119.90'), estoque=3))

        self.assertIsNotNone(produto.id)
        self.assertTrue(ProdutoModel.objects.filter(pk=produto.id).exists())


class EnderecoRepositoryTestCase(TestCase):

    def setUp(self):
        self.repository = EnderecoRepositoryDjango()
        self.usuario = get_user_model().objects.create_user(
            email='cliente@oceanica.com', password='123456', nome='Cliente'
        )

    def _endereco(self, rua, is_default=False):
        return EnderecoEntity(
            usuario_id=str(self.usuario.pk), rua=rua, cidade='Santos', estado='SP',
            cep='11000-000', is_default=is_default,
        )

    def test_novo_endereco_padrao_desmarca_os_demais(self):
        """
        Cenário: Gravar um endereço padrão remove a marcação do endereço padrão anterior.
        """
        # ARRANGE
        primeiro = self.repository.salvar(self._endereco('Rua A', is_default=True))

        # ACT
        segundo = self.repository.salvar(self._endereco('Rua B', is_default=True))

        # ASSERT
        self.assertFalse(EnderecoModel.objects.get(pk=primeiro.id).is_default)
        self.assertTrue(EnderecoModel.objects.get(pk=segundo.id).is_default)

    def test_listar_filtrando_por_cidade(self):
        self.repository.salvar(self._endereco('Rua A'))
        outro = self._endereco('Rua C')
        outro.cidade = 'Guarujá'
        self.repository.salvar(outro)

        enderecos, total = self.repository.listar(1, 10, cidade='guaru')

        self.assertEqual(total, 1)
        self.assertEqual(enderecos[0].rua, 'Rua C')


class PedidoRepositoryTestCase(TestCase):

    def setUp(self):
        self.repository = PedidoRepositoryDjango()
        self.usuario = get_user_model().objects.create_user(
            email='comprador@oceanica.com', password='123456', nome='Comprador'
        )
        self.produto = ProdutoModel.objects.create(nome='Lula em Anéis', preco=Decimal('34.90'), estoque=10)

    def _salvar_pedido(self):
        return self.repository.salvar(Pedido(
            usuario_id=str(self.usuario.pk),
            frete=Decimal('12.00'),
            itens=[ItemPedido(produto_id=str(self.produto.pk), quantidade=3, preco=Decimal('34.90'))],
        ))

    def test_salvar_pedido_grava_itens_e_total(self):
        """
        Cenário: O pedido é gravado com total e subtotais calculados.
        """
        # ACT
        pedido = self._salvar_pedido()

        # ASSERT
        self.assertEqual(pedido.status, STATUS_PENDENTE)
        self.assertEqual(pedido.total, Decimal('116.70'))
        self.assertEqual(len(pedido.itens), 1)
        self.assertEqual(pedido.cliente_email, 'comprador@oceanica.com')

        item_model = ItemPedidoModel.objects.get(pedido_id=pedido.id)
        self.assertEqual(item_model.subtotal, Decimal('104.70'))

    def test_atualizar_status_condicional(self):
        """
        Cenário: A troca de status só acontece se o pedido ainda estiver no status esperado.
        """
        # ARRANGE
        pedido = self._salvar_pedido()

        # ACT
        sem_efeito = self.repository.atualizar_status(pedido.id, STATUS_CANCELADO, STATUS_CONFIRMADO)
        atualizado = self.repository.atualizar_status(pedido.id, STATUS_CONFIRMADO, STATUS_PENDENTE)

        # ASSERT
        self.assertIsNone(sem_efeito)
        self.assertEqual(atualizado.status, STATUS_CONFIRMADO)

    def test_produto_com_pedido_nao_pode_ser_removido(self):
        """
        Cenário: Produtos referenciados por itens de pedido são protegidos.
        """
        self._salvar_pedido()

        with self.assertRaises(DadosInvalidosError):
            ProdutoRepositoryDjango().deletar(str(self.produto.pk))

    def test_estatisticas_excluem_cancelados_da_receita(self):
        # ARRANGE
        self._salvar_pedido()
        cancelado = self._salvar_pedido()
        self.repository.atualizar_status(cancelado.id, STATUS_CANCELADO)

        # ACT
        estatisticas = self.repository.estatisticas()

        # ASSERT
        self.assertEqual(estatisticas['statusCounts'][STATUS_PENDENTE], 1)
        self.assertEqual(estatisticas['statusCounts'][STATUS_CANCELADO], 1)
        self.assertEqual(estatisticas['revenue']['count'], 1)
        self.assertEqual(estatisticas['revenue']['total'], Decimal('116.70'))
        self.assertEqual(estatisticas['topProducts'][0]['quantity'], 3)


class CarrinhoRepositoryTestCase(TestCase):

    def setUp(self):
        self.repository = CarrinhoRepositoryDjango()
        self.usuario = get_user_model().objects.create_user(
            email='carrinho@oceanica.com', password='123456', nome='Carrinho'
        )
        self.produto = ProdutoModel.objects.create(nome='Sardinha', preco=Decimal('16.90'), estoque=50)

    def test_salvar_item_grava_quantidade_absoluta(self):
        """
        Cenário: Gravar duas vezes o mesmo produto mantém uma única linha com a última quantidade.
        """
        usuario_id = str(self.usuario.pk)
        produto_id = str(self.produto.pk)

        self.repository.salvar_item(usuario_id, produto_id, 2)
        self.repository.salvar_item(usuario_id, produto_id, 5)

        carrinho = self.repository.buscar_por_usuario(usuario_id)
        self.assertEqual(carrinho.quantidade_linhas, 1)
        self.assertEqual(carrinho.total_itens, 5)
        self.assertEqual(carrinho.valor_total, Decimal('84.50'))

    def test_limpar_retorna_quantidade_removida(self):
        usuario_id = str(self.usuario.pk)
        self.repository.salvar_item(usuario_id, str(self.produto.pk), 1)

        self.assertEqual(self.repository.limpar(usuario_id), 1)
        self.assertEqual(self.repository.buscar_por_usuario(usuario_id).itens, [])
