from django.apps import AppConfig


class LinkArchitectConfig(AppConfig):
    """Configuration for the linkarchitect Django app."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'linkarchitect'
    verbose_name = 'Internal Link Architect'
