from django.apps import AppConfig


class AuthUserConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'auth_user'
    verbose_name = 'Authentication'
