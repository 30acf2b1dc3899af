# Define os modelos do banco de dados para a camada de infraestrutura (autenticação e endereços).
import uuid

from django.db import models
from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.conf import settings

from oceanica.core.entities import ROLE_ADMIN, ROLE_CLIENTE

# ====================================================================
# GERENCIADOR DE USUÁRIOS PERSONALIZADO (Para usar email como login)
# ====================================================================

class CustomUserManager(BaseUserManager):
    """
    Gerenciador de modelos de usuário onde o email é o identificador único
    para autenticação, em vez dos nomes de usuário.
    """
    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError('O e-mail deve ser definido')
        email = self.normalize_email(email).lower()
        user = self.model(email=email, **extra_fields)
        # Sem senha, a conta recebe uma senha inutilizável (clientes temporários)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        """
        Cria e salva um Superusuário com o e-mail e senha fornecidos.
        """
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('is_active', True)
        extra_fields.setdefault('role', ROLE_ADMIN)

        if extra_fields.get('is_staff') is not True:
            raise ValueError('Superuser must have is_staff=True.')
        if extra_fields.get('is_superuser') is not True:
            raise ValueError('Superuser must have is_superuser=True.')

        return self.create_user(email, password, **extra_fields)


# ====================================================================
# MODELO DE USUÁRIO
# ====================================================================

class Usuario(AbstractUser):
    """
    Modelo de Usuário Personalizado que utiliza o campo 'email' como identificador
    principal para login, em vez de 'username'.
    """
    ROLE_CHOICES = [
        (ROLE_CLIENTE, 'Cliente'),
        (ROLE_ADMIN, 'Administrador'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # Remove o campo username padrão
    username = None

    # Define o email como único e obrigatório
    email = models.EmailField('Endereço de E-mail', unique=True)

    # Campos adicionais do perfil
    nome = models.CharField('Nome', max_length=255, blank=True, default='')
    telefone = models.CharField('Telefone', max_length=50, blank=True, default='')
    role = models.CharField('Perfil', max_length=50, choices=ROLE_CHOICES, default=ROLE_CLIENTE)

    criado_em = models.DateTimeField(auto_now_add=True)
    atualizado_em = models.DateTimeField(auto_now=True)

    # Campos necessários para login/autenticação
    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['nome']

    # Utiliza o gerenciador de usuários personalizado
    objects = CustomUserManager()

    class Meta:
        verbose_name = 'Usuário'
        verbose_name_plural = 'Usuários'
        db_table = 'infra_usuario'
        ordering = ['nome']

    def __str__(self):
        return self.email

    def save(self, *args, **kwargs):
        # Administradores da loja também acessam o Django Admin
        if self.role == ROLE_ADMIN:
            self.is_staff = True
        super().save(*args, **kwargs)


class Endereco(models.Model):
    """
    Modelo para armazenar endereços de entrega do usuário.
    Ligado a um usuário.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    # Usamos settings.AUTH_USER_MODEL que será o modelo Usuario
    usuario = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='enderecos')
    rua = models.CharField(max_length=255, verbose_name="Rua")
    numero = models.CharField(max_length=20, blank=True, null=True, verbose_name="Número")
    complemento = models.CharField(max_length=255, blank=True, null=True, verbose_name="Complemento")
    bairro = models.CharField(max_length=100, blank=True, null=True, verbose_name="Bairro")
    cidade = models.CharField(max_length=100, verbose_name="Cidade")
    estado = models.CharField(max_length=50, verbose_name="Estado")
    cep = models.CharField(max_length=20, verbose_name="CEP")
    is_default = models.BooleanField(default=False, verbose_name="Endereço Principal")
    criado_em = models.DateTimeField(auto_now_add=True)
    atualizado_em = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = 'Endereço do Usuário'
        verbose_name_plural = 'Endereços do Usuário'
        db_table = 'usuario_endereco'
        ordering = ['-criado_em']

    def __str__(self):
        return f"{self.usuario} - {self.formatar_endereco_texto()}"

    def formatar_endereco_texto(self):
        """Retorna o endereço completo como string."""
        numero_str = f", {self.numero}" if self.numero else ""
        complemento_str = f", {self.complemento}" if self.complemento else ""
        bairro_str = f" - {self.bairro}" if self.bairro else ""
        return f"{self.rua}{numero_str}{complemento_str}{bairro_str} - {self.cidade}/{self.estado} - CEP: {self.cep}"
