# oceanica/presentation/middleware.py
"""
Middleware de log das requisições HTTP.

Registra uma linha por requisição no logger 'oceanica.requests' com método, caminho,
status, duração, IP do cliente e user agent. Respostas com erro (status >= 400)
são registradas como WARNING.
"""
import logging
import time

logger = logging.getLogger('oceanica.requests')


def ip_do_cliente(request):
    encaminhado = request.META.get('HTTP_X_FORWARDED_FOR')
    if encaminhado:
        return encaminhado.split(',')[0].strip()
    return request.META.get('REMOTE_ADDR', '-')


class RequestLoggingMiddleware:

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        inicio = time.monotonic()
        response = self.get_response(request)
        duracao_ms = (time.monotonic() - inicio) * 1000

        nivel = logging.WARNING if response.status_code >= 400 else logging.INFO
        logger.log(
            nivel,
            "%s %s %s %.0fms ip=%s ua=%s",
            request.method,
            request.get_full_path(),
            response.status_code,
            duracao_ms,
            ip_do_cliente(request),
            request.META.get('HTTP_USER_AGENT', '-'),
        )
        return response
