# oceanica/presentation/views_auth.py
"""
Views de autenticação e consulta de usuários (API REST com JWT).
"""
from django.utils import timezone
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.views import APIView

from oceanica.core.dependency_injection import (
    get_registrar_usuario_use_case,
    get_autenticar_usuario_use_case,
    get_verificar_token_use_case,
    get_consultar_usuarios_use_case,
)
from oceanica.infrastructure.mappers import UsuarioMapper

from .handlers import resposta
from .permissions import IsAdminRole
from .serializers import (
    UsuarioSerializer,
    ClienteSerializer,
    RegistroSerializer,
    LoginSerializer,
    TokenSerializer,
)


def usuario_atual(request):
    """Entidade de domínio do usuário autenticado na requisição."""
    return UsuarioMapper.to_entity(request.user)


class RegistroAPIView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        serializer = RegistroSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dados = serializer.validated_data

        usuario, token = get_registrar_usuario_use_case().executar(
            email=dados['email'],
            senha=dados['senha'],
            nome=dados['nome'],
            telefone=dados.get('telefone'),
            role=dados.get('role'),
        )
        return resposta(
            'Usuário criado com sucesso',
            {'token': token, 'user': UsuarioSerializer(usuario).data},
            status_code=status.HTTP_201_CREATED,
        )


class LoginAPIView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        usuario, token = get_autenticar_usuario_use_case().executar(
            serializer.validated_data['email'],
            serializer.validated_data['senha'],
        )
        return resposta('Login realizado com sucesso', {'token': token, 'user': UsuarioSerializer(usuario).data})


class VerificarTokenAPIView(APIView):
    """Valida um token recebido no corpo da requisição (não usa o cabeçalho Authorization)."""
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        serializer = TokenSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        usuario = get_verificar_token_use_case().executar(serializer.validated_data['token'])
        decoded = {'user_id': usuario.id, 'email': usuario.email, 'role': usuario.role}
        return resposta('Token válido', {'decoded': decoded, 'user': UsuarioSerializer(usuario).data})


class PerfilAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        usuario = get_consultar_usuarios_use_case().buscar_perfil(request.user.pk)
        return resposta('Perfil obtido com sucesso', {'user': UsuarioSerializer(usuario).data})


class RotaProtegidaAPIView(APIView):
    permission_classes = [IsAuthenticated]
    mensagem = 'Rota protegida acessada com sucesso'

    def get(self, request):
        return resposta(self.mensagem, {
            'user': UsuarioSerializer(usuario_atual(request)).data,
            'timestamp': timezone.now().isoformat(),
        })


class RotaAdminAPIView(RotaProtegidaAPIView):
    permission_classes = [IsAuthenticated, IsAdminRole]
    mensagem = 'Acesso de administrador concedido'


class UsuarioDetalheAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, pk):
        usuario = get_consultar_usuarios_use_case().buscar_usuario(str(pk), usuario_atual(request))
        return resposta('Usuário encontrado com sucesso', {'user': UsuarioSerializer(usuario).data})


class ClientesAPIView(APIView):
    permission_classes = [IsAuthenticated, IsAdminRole]

    def get(self, request):
        clientes = get_consultar_usuarios_use_case().listar_clientes()
        return resposta('Clientes listados com sucesso', {'clients': ClienteSerializer(clientes, many=True).data})
