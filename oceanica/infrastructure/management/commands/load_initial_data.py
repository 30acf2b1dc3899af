from decimal import Decimal

from decouple import config
from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction

from oceanica.catalog.models import Produto
from oceanica.core.entities import ROLE_ADMIN


class Command(BaseCommand):
    help = 'Carrega dados iniciais: usuário administrador e catálogo de pescados'

    produtos = [
        ('Filé de Salmão', 'Filé de salmão chileno resfriado, sem pele (kg)', Decimal('89.90'), 25),
        ('Camarão Cinza Médio', 'Camarão cinza limpo e congelado, pacote de 1 kg', Decimal('69.90'), 40),
        ('Tilápia Inteira', 'Tilápia inteira limpa e eviscerada (kg)', Decimal('24.90'), 30),
        ('Polvo Congelado', 'Polvo inteiro congelado, aproximadamente 2 kg', Decimal('119.90'), 10),
        ('Lula em Anéis', 'Anéis de lula empanados, pacote de 500 g', Decimal('34.90'), 20),
        ('Bacalhau do Porto', 'Lombo de bacalhau dessalgado, porção de 1 kg', Decimal('149.90'), 8),
        ('Sardinha Fresca', 'Sardinha fresca inteira (kg)', Decimal('16.90'), 50),
        ('Mexilhão Cozido', 'Mexilhão sem casca cozido e congelado, 500 g', Decimal('29.90'), 15),
    ]

    def add_arguments(self, parser):
        parser.add_argument('--admin-email', default=config('ADMIN_EMAIL', default='admin@oceanica.com'))
        parser.add_argument('--admin-password', default=config('ADMIN_PASSWORD', default='admin123'))

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write('Criando dados iniciais...')

        Usuario = get_user_model()
        email = options['admin_email'].lower()
        if not Usuario.objects.filter(email=email).exists():
            Usuario.objects.create_user(
                email=email,
                password=options['admin_password'],
                nome='Administrador',
                role=ROLE_ADMIN,
            )
            self.stdout.write(self.style.SUCCESS(f'Criado administrador "{email}"'))

        for nome, descricao, preco, estoque in self.produtos:
            produto, created = Produto.objects.get_or_create(
                nome=nome,
                defaults={
                    'descricao': descricao,
                    'preco': preco,
                    'estoque': estoque,
                }
            )
            if created:
                self.stdout.write(self.style.SUCCESS(f'Criado produto "{produto.nome}"'))

        self.stdout.write(self.style.SUCCESS('Dados iniciais carregados com sucesso!'))
