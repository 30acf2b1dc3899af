# oceanica/core/apps.py

from django.apps import AppConfig

class CoreConfig(AppConfig):
    # O nome completo do path da aplicação
    name = 'oceanica.core'
    # Define o label curto para referência (ex: no shell ou migrações)
    label = 'core'
    verbose_name = 'Camada de Entidades e Lógica (Core)'

    # Esta camada não possui modelos; apenas comandos de gerenciamento e regras de negócio.
    default_auto_field = 'django.db.models.BigAutoField'
