"""Django app configuration for Shelfman."""

from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class ShelfmanConfig(AppConfig):
    """Configuration for Shelfman app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "shelfman"
    verbose_name = _("Estoque por Áreas")
