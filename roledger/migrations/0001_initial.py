"""
Initial migration for RO Ledger models.
"""

from django.db import migrations, models


class Migration(migrations.Migration):
    """Create RO Ledger models: LedgerSnapshot."""

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='LedgerSnapshot',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('key', models.CharField(help_text='Khóa lưu trữ (ex: RO_MASTER_DB_V3_FINAL)', max_length=100, unique=True, verbose_name='Khóa')),
                ('data', models.JSONField(blank=True, default=dict, verbose_name='Dữ liệu')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Bản lưu sổ kho',
                'verbose_name_plural': 'Bản lưu sổ kho',
                'ordering': ['key'],
            },
        ),
    ]
