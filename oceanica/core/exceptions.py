class BaseErroCore(Exception):
    """Classe base para todas as exceções da Camada Core."""
    status_code = 400

    def __init__(self, message="Erro ao processar a requisição."):
        self.message = message
        super().__init__(self.message)


class DadosInvalidosError(BaseErroCore):
    """Erro levantado quando dados inválidos são fornecidos."""
    def __init__(self, message="Os dados fornecidos são inválidos."):
        self.message = message
        super().__init__(self.message)

# ===============================================
# ERROS DE AUTENTICAÇÃO E ACESSO
# ===============================================

class CredenciaisInvalidasError(BaseErroCore):
    """Erro levantado quando email ou senha não conferem."""
    status_code = 401

    def __init__(self, message="Email ou senha incorretos"):
        self.message = message
        super().__init__(self.message)

class TokenInvalidoError(BaseErroCore):
    status_code = 401

    def __init__(self, message="Token inválido ou expirado"):
        self.message = message
        super().__init__(self.message)

class AcessoNegadoError(BaseErroCore):
    """Erro levantado quando o usuário não tem permissão sobre o recurso."""
    status_code = 403

    def __init__(self, message="Acesso negado. Você só pode acessar seus próprios dados."):
        self.message = message
        super().__init__(self.message)

class EmailJaCadastradoError(BaseErroCore):
    status_code = 409

    def __init__(self, message="Email já cadastrado no sistema"):
        self.message = message
        super().__init__(self.message)

# ===============================================
# ERROS DE PERSISTÊNCIA E ENTIDADE
# ===============================================

class ItemNaoEncontradoError(BaseErroCore):
    """Erro levantado quando um item (genérico) não é encontrado."""
    status_code = 404

    def __init__(self, message="O item solicitado não foi encontrado."):
        self.message = message
        super().__init__(self.message)

class ProdutoNaoEncontradoError(ItemNaoEncontradoError):
    """Erro levantado quando um produto específico não é encontrado."""
    def __init__(self, message="Produto não encontrado"):
        super().__init__(message)

class PedidoNaoEncontradoError(ItemNaoEncontradoError):
    """Erro específico para Pedidos não encontrados."""
    def __init__(self, message="Pedido não encontrado"):
        super().__init__(message)

class UsuarioNaoEncontradoError(ItemNaoEncontradoError):
    """Erro específico para Usuários não encontrados."""
    def __init__(self, message="Usuário não encontrado"):
        super().__init__(message)

class EnderecoNaoEncontradoError(ItemNaoEncontradoError):
    def __init__(self, message="Endereço não encontrado"):
        super().__init__(message)

class EnderecoInvalidoError(BaseErroCore):
    """Erro levantado quando um endereço de entrega é inválido ou não pertence ao usuário."""
    def __init__(self, message="Endereço não encontrado ou não pertence ao usuário"):
        self.message = message
        super().__init__(self.message)

class EstoqueInsuficienteError(BaseErroCore):
    """Erro levantado quando a quantidade solicitada excede o estoque."""
    def __init__(self, produto_nome: str, estoque_atual: int, quantidade_solicitada: int, message=None):
        self.produto_nome = produto_nome
        self.estoque_atual = estoque_atual
        self.quantidade_solicitada = quantidade_solicitada
        if message is None:
            message = (f"Estoque insuficiente para {produto_nome}. "
                       f"Disponível: {estoque_atual}, Solicitado: {quantidade_solicitada}")
        super().__init__(message)

# ===============================================
# ERROS DE FLUXO DE COMPRA
# ===============================================

class CarrinhoVazioError(BaseErroCore):
    """Erro levantado ao tentar fazer checkout com carrinho vazio."""
    def __init__(self, message="Carrinho vazio. Adicione produtos antes de criar um pedido."):
        self.message = message
        super().__init__(self.message)

class StatusInvalidoError(BaseErroCore):
    """Erro levantado ao tentar definir um status de pedido inválido."""
    def __init__(self, message="O status fornecido não é válido para um pedido."):
        self.message = message
        super().__init__(self.message)

class TransicaoStatusInvalidaError(StatusInvalidoError):
    """Erro levantado quando a mudança de status não é permitida pela tabela de transições."""
    def __init__(self, status_atual: str, novo_status: str):
        self.status_atual = status_atual
        self.novo_status = novo_status
        super().__init__(f'Não é possível alterar status de "{status_atual}" para "{novo_status}"')
