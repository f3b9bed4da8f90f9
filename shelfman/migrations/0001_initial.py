"""
Initial migration for Shelfman models.
"""

from decimal import Decimal
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    """Create Shelfman models: Item, Batch, Move."""

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Item',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('code', models.CharField(help_text='Código do item (ex: código de barras ou SKU)', max_length=50, unique=True, verbose_name='Código')),
                ('name', models.CharField(max_length=200, verbose_name='Nome')),
                ('unit_price', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=12, verbose_name='Preço unitário')),
                ('restock_level', models.PositiveIntegerField(blank=True, help_text='Vazio = usa o nível padrão configurado (50).', null=True, verbose_name='Nível de reposição')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Item',
                'verbose_name_plural': 'Itens',
                'ordering': ['code'],
            },
        ),
        migrations.CreateModel(
            name='Batch',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('expiry_date', models.DateField(blank=True, db_index=True, help_text='Vazio = sem validade (consumido por último)', null=True, verbose_name='Data de Validade')),
                ('qty_on_shelf', models.PositiveIntegerField(default=0, verbose_name='Na prateleira')),
                ('qty_in_store', models.PositiveIntegerField(default=0, verbose_name='No depósito')),
                ('qty_in_main', models.PositiveIntegerField(default=0, verbose_name='No armazém')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Criado em')),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('item', models.ForeignKey(db_column='item_code', on_delete=django.db.models.deletion.PROTECT, related_name='batches', to='shelfman.item', to_field='code', verbose_name='Item')),
            ],
            options={
                'verbose_name': 'Lote',
                'verbose_name_plural': 'Lotes',
                'ordering': ['expiry_date', 'id'],
                'indexes': [models.Index(fields=['item', 'expiry_date'], name='shelfman_ba_item_co_4e1b2c_idx')],
                'constraints': [models.CheckConstraint(condition=models.Q(('qty_on_shelf__gte', 0), ('qty_in_store__gte', 0), ('qty_in_main__gte', 0)), name='batch_tier_quantities_non_negative')],
            },
        ),
        migrations.CreateModel(
            name='Move',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('tier', models.CharField(choices=[('shelf', 'Prateleira'), ('store', 'Depósito da loja'), ('main', 'Armazém central')], max_length=10, verbose_name='Área')),
                ('delta', models.IntegerField(help_text='Positivo = entrada, Negativo = saída', verbose_name='Variação')),
                ('reason', models.CharField(help_text='Obrigatório. Ex: "Venda", "Reposição do armazém"', max_length=255, verbose_name='Motivo')),
                ('reference', models.CharField(blank=True, default='', help_text='Ex: número da conta ou pedido', max_length=100, verbose_name='Referência')),
                ('timestamp', models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name='Data/Hora')),
                ('batch', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='moves', to='shelfman.batch', verbose_name='Lote')),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to=settings.AUTH_USER_MODEL, verbose_name='Usuário')),
            ],
            options={
                'verbose_name': 'Movimento',
                'verbose_name_plural': 'Movimentos',
                'ordering': ['timestamp', 'id'],
                'indexes': [
                    models.Index(fields=['batch', 'timestamp'], name='shelfman_mo_batch_i_7a3d91_idx'),
                    models.Index(fields=['timestamp'], name='shelfman_mo_timesta_c25f08_idx'),
                ],
            },
        ),
    ]
