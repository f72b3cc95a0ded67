"""
Management command to wipe the ledger and start from the default catalog.

Usage:
    python manage.py reset_ledger
    python manage.py reset_ledger --dry-run
"""

from django.core.management.base import BaseCommand

from roledger.service import build_ledger


class Command(BaseCommand):
    """Reset ledger command."""

    help = 'Xóa sạch dữ liệu sổ kho và khởi tạo lại danh mục mặc định'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Hiển thị dữ liệu sẽ bị xóa mà không thực hiện'
        )

    def handle(self, *args, **options):
        ledger = build_ledger()

        if options['dry_run']:
            self.stdout.write(
                f'{len(ledger.get_units())} máy, '
                f'{len(ledger.get_transactions())} giao dịch sẽ bị xóa'
            )
            return

        ledger.reset_database()
        self.stdout.write(
            self.style.SUCCESS(
                f'Đã khởi tạo lại sổ kho ({len(ledger.get_warehouses())} kho mặc định)'
            )
        )
