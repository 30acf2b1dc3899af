from rest_framework.permissions import BasePermission

from oceanica.core.entities import ROLE_ADMIN


class IsAdminRole(BasePermission):
    """Permite acesso apenas a usuários autenticados com role 'admin'."""
    message = "Acesso negado. Apenas administradores podem acessar este recurso."

    def has_permission(self, request, view):
        usuario = request.user
        return bool(usuario and usuario.is_authenticated and getattr(usuario, 'role', None) == ROLE_ADMIN)
