"""
Management command to cancel delivery orders nobody finished.

Usage:
    python manage.py cancel_stale_orders --hours 24
    python manage.py cancel_stale_orders --hours 24 --dry-run
"""

from datetime import timedelta

from django.core.management.base import BaseCommand

from apps.deliveries.services import cancel_stale_orders


class Command(BaseCommand):
    help = 'Cancel pending or processing delivery orders older than the given age'

    def add_arguments(self, parser):
        parser.add_argument(
            '--hours',
            type=int,
            default=24,
            help='Cancel orders opened more than this many hours ago',
        )
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would be updated without making changes',
        )

    def handle(self, *args, **options):
        dry_run = options['dry_run']
        hours = options['hours']

        orders = cancel_stale_orders(
            older_than=timedelta(hours=hours),
            reason=f'No courier finished the order within {hours} hours',
            dry_run=dry_run,
        )

        if not orders:
            self.stdout.write(
                self.style.SUCCESS('No stale delivery orders. All good!')
            )
            return

        self.stdout.write(f'\nFound {len(orders)} stale delivery order(s):\n')

        for order in orders:
            self.stdout.write(
                f'  - {order.room.name} | {order.buyer_name} | {order.status} | '
                f'Courier: {order.courier_name or "-"} | Opened: {order.created_at:%Y-%m-%d %H:%M}'
            )

        if dry_run:
            self.stdout.write(
                self.style.WARNING('\n--dry-run mode: No changes made.')
            )
            return

        self.stdout.write(
            self.style.SUCCESS(f'\n✓ Cancelled {len(orders)} delivery order(s).')
        )
