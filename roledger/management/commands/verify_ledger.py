"""
Management command to audit the ledger.

Usage:
    python manage.py verify_ledger

Exits with an error when the unit projection disagrees with the
transaction log.
"""

from django.core.management.base import BaseCommand, CommandError

from roledger.service import build_ledger


class Command(BaseCommand):
    """Verify ledger command."""

    help = 'Kiểm tra tính nhất quán giữa trạng thái máy và lịch sử giao dịch'

    def handle(self, *args, **options):
        violations = build_ledger().verify()

        if violations:
            for violation in violations:
                self.stderr.write(violation)
            raise CommandError(f'{len(violations)} lỗi nhất quán')

        self.stdout.write(self.style.SUCCESS('Sổ kho nhất quán'))
