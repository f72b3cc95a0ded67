"""
Enums for RO Ledger records.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class UnitStatus(models.TextChoices):
    """
    Lifecycle status of a serialized unit.

    NEW:        On shelf in a warehouse.
    SOLD:       Left the warehouses (location is OUT).
    WARRANTY / EXHIBITION: reserved, never set by the ledger.
    """
    NEW = 'NEW', _('Tồn kho')
    SOLD = 'SOLD', _('Đã bán')
    WARRANTY = 'WARRANTY', _('Bảo hành')
    EXHIBITION = 'EXHIBITION', _('Trưng bày')


class TransactionType(models.TextChoices):
    """Kind of ledger movement."""
    INBOUND = 'INBOUND', _('Nhập kho')
    OUTBOUND = 'OUTBOUND', _('Xuất kho')
    TRANSFER = 'TRANSFER', _('Điều chuyển')


class CustomerType(models.TextChoices):
    DEALER = 'DEALER', _('Đại lý')
    RETAIL = 'RETAIL', _('Khách lẻ')


class SalesOrderType(models.TextChoices):
    SALE = 'SALE', _('Xuất bán')
    TRANSFER = 'TRANSFER', _('Điều chuyển')


class SalesOrderStatus(models.TextChoices):
    PENDING = 'PENDING', _('Chờ xử lý')
    COMPLETED = 'COMPLETED', _('Hoàn thành')
