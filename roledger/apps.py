"""Django app configuration for RO Ledger."""

from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class RoLedgerConfig(AppConfig):
    """Configuration for RO Ledger app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "roledger"
    verbose_name = _("Quản lý kho máy lọc nước RO")
