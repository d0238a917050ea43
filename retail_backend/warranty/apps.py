# warranty/apps.py

from django.apps import AppConfig


class WarrantyConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "warranty"
    verbose_name = "Warranty"
