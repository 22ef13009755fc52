from django.apps import AppConfig


class MedinfoConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'medinfo'
