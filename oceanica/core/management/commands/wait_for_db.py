"""
Management command para aguardar o banco de dados estar disponível.
"""
import time
from django.db import connections
from django.db.utils import OperationalError
from django.core.management.base import BaseCommand, CommandError


class Command(BaseCommand):
    """Django command para pausar a execução até o banco de dados estar disponível."""
    help = 'Aguarda até que a conexão padrão com o banco de dados seja estabelecida'

    def add_arguments(self, parser):
        parser.add_argument('--tentativas', type=int, default=30,
                            help='Número máximo de tentativas (padrão: 30)')
        parser.add_argument('--intervalo', type=float, default=1.0,
                            help='Segundos entre tentativas (padrão: 1)')

    def handle(self, *args, **options):
        self.stdout.write('Aguardando pelo banco de dados...')
        tentativas = options['tentativas']
        intervalo = options['intervalo']

        for tentativa in range(1, tentativas + 1):
            try:
                connections['default'].ensure_connection()
            except OperationalError:
                self.stdout.write(
                    f'Banco de dados indisponível ({tentativa}/{tentativas}), aguardando {intervalo:g} segundo(s)...'
                )
                time.sleep(intervalo)
            else:
                self.stdout.write(self.style.SUCCESS('Banco de dados disponível!'))
                return

        raise CommandError('Banco de dados não ficou disponível a tempo.')
