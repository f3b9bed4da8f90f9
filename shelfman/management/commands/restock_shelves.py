"""
Management command to top up shelves from the store.

Usage:
    python manage.py restock_shelves
    python manage.py restock_shelves --item SKU1 --threshold 10
    python manage.py restock_shelves --quantity 12 --dry-run
"""

from django.core.management.base import BaseCommand, CommandError

from shelfman.exceptions import StockError
from shelfman.models.enums import Tier
from shelfman.service import Inventory


class Command(BaseCommand):
    """Restock shelves command."""

    help = 'Repõe as prateleiras a partir do depósito'

    def add_arguments(self, parser):
        parser.add_argument(
            '--item',
            help='Código do item (padrão: todos)'
        )
        parser.add_argument(
            '--threshold',
            type=int,
            help='Nível da prateleira que dispara a reposição (padrão: nível do item)'
        )
        parser.add_argument(
            '--quantity',
            type=int,
            help='Quantidade fixa a mover por item'
        )
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Mostra o que seria reposto sem executar'
        )

    def handle(self, *args, **options):
        inventory = Inventory()
        threshold = options['threshold']
        fixed_qty = options['quantity']

        if options['item']:
            item_codes = [options['item']]
        else:
            item_codes = inventory.ledger.item_codes()

        if options['dry_run']:
            pending = 0
            for code in item_codes:
                if inventory.item(code) is None:
                    raise CommandError(f'Item não encontrado: {code}')
                shelf = inventory.tier_quantity(code, Tier.SHELF)
                limit = threshold if threshold is not None else inventory.restock_level(code)
                if inventory.restocker.policy.needs_restock(shelf, limit):
                    pending += 1
                    self.stdout.write(f'{code}: prateleira {shelf} < {limit}')
            self.stdout.write(f'{pending} item(ns) seria(m) reposto(s)')
            return

        try:
            if options['item']:
                moved = inventory.restock_if_below(
                    options['item'], threshold=threshold, fixed_qty=fixed_qty,
                )
                result = {options['item']: moved} if moved else {}
            else:
                result = inventory.restock_all(threshold=threshold, fixed_qty=fixed_qty)
        except StockError as e:
            raise CommandError(e.message) from e

        for code, moved in result.items():
            self.stdout.write(f'{code}: {moved} unidade(s)')
        self.stdout.write(
            self.style.SUCCESS(f'{len(result)} item(ns) reposto(s)')
        )
