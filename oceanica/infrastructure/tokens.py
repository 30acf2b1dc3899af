"""
Serviço de tokens JWT sobre o djangorestframework-simplejwt.

Os tokens de acesso carregam o id, o email e o perfil (role) do usuário.
Tempo de vida e emissor (issuer) vêm de settings.SIMPLE_JWT.
"""
from typing import Dict

from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.settings import api_settings
from rest_framework_simplejwt.tokens import AccessToken

from oceanica.core.entities import Usuario
from oceanica.core.exceptions import TokenInvalidoError
from oceanica.core.ports import ITokenService


class JWTTokenService(ITokenService):

    def gerar_token(self, usuario: Usuario) -> str:
        token = AccessToken()
        token[api_settings.USER_ID_CLAIM] = str(usuario.id)
        token['email'] = usuario.email
        token['role'] = usuario.role
        return str(token)

    def validar_token(self, token: str) -> Dict:
        try:
            acesso = AccessToken(token)
        except TokenError:
            raise TokenInvalidoError()
        return dict(acesso.payload)
