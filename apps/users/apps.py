from django.apps import AppConfig

class UsersConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.users'   # <-- full dotted path including the 'apps' folder

    def ready(self):
        from . import signals  # noqa: F401
