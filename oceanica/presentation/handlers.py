# oceanica/presentation/handlers.py
"""
Formato padrão das respostas da API e tratamento centralizado de exceções.

Toda resposta segue o envelope {"success": bool, "message": str, "data": ...}.
O `api_exception_handler` é registrado em REST_FRAMEWORK['EXCEPTION_HANDLER'].
"""
import logging

from django.http import Http404, JsonResponse
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import set_rollback

from oceanica.core.exceptions import BaseErroCore

logger = logging.getLogger('oceanica.presentation')

MENSAGEM_ERRO_INTERNO = "Erro interno do servidor"
MENSAGEM_RATE_LIMIT = "Muitas tentativas. Tente novamente em alguns minutos."


def resposta(message, data=None, status_code=status.HTTP_200_OK, success=True, **extras):
    """Monta a Response no envelope padrão. Campos extras vão para o nível raiz."""
    corpo = {'success': success, 'message': message}
    if data is not None:
        corpo['data'] = data
    corpo.update(extras)
    return Response(corpo, status=status_code)


def _primeira_mensagem(detalhe):
    """Extrai a primeira mensagem legível de um `detail` de ValidationError."""
    if isinstance(detalhe, dict):
        for valor in detalhe.values():
            return _primeira_mensagem(valor)
    if isinstance(detalhe, (list, tuple)):
        for valor in detalhe:
            return _primeira_mensagem(valor)
    return str(detalhe) if detalhe else "Dados inválidos"


def api_exception_handler(exc, context):
    """
    Converte exceções em respostas no envelope padrão.

    - Erros do Core usam o status_code da própria exceção.
    - Erros do DRF (validação, autenticação, permissão, rate limit) mantêm o status do DRF.
    - Qualquer outra exceção vira 500 e é registrada com stack trace.
    """
    if isinstance(exc, BaseErroCore):
        set_rollback()
        return resposta(exc.message, status_code=exc.status_code, success=False)

    if isinstance(exc, Http404):
        return resposta("Recurso não encontrado", status_code=status.HTTP_404_NOT_FOUND, success=False)

    if isinstance(exc, exceptions.ValidationError):
        return resposta(
            _primeira_mensagem(exc.detail),
            status_code=exc.status_code,
            success=False,
            errors=exc.detail,
        )

    if isinstance(exc, exceptions.NotAuthenticated):
        return resposta("Token de acesso requerido", status_code=status.HTTP_401_UNAUTHORIZED, success=False)

    if isinstance(exc, exceptions.AuthenticationFailed):
        return resposta("Token inválido ou expirado", status_code=status.HTTP_401_UNAUTHORIZED, success=False)

    if isinstance(exc, exceptions.ParseError):
        return resposta("JSON inválido no corpo da requisição", status_code=exc.status_code, success=False)

    if isinstance(exc, exceptions.Throttled):
        return resposta(
            MENSAGEM_RATE_LIMIT,
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            success=False,
            retryAfter=exc.wait,
        )

    if isinstance(exc, exceptions.APIException):
        # PermissionDenied, MethodNotAllowed, NotFound...
        return resposta(_primeira_mensagem(exc.detail), status_code=exc.status_code, success=False)

    request = context.get('request')
    logger.error(
        "Erro não tratado em %s %s",
        getattr(request, 'method', '-'),
        getattr(request, 'path', '-'),
        exc_info=exc,
    )
    set_rollback()
    return resposta(MENSAGEM_ERRO_INTERNO, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, success=False)


def rota_nao_encontrada(request, exception=None):
    """handler404 do projeto: rotas inexistentes também respondem no envelope JSON."""
    return JsonResponse(
        {'success': False, 'message': f"Rota {request.method} {request.path} não encontrada"},
        status=status.HTTP_404_NOT_FOUND,
    )
