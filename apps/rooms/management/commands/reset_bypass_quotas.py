"""
Management command to refill monthly bypass quotas.

Meant to run from a scheduler early each month. Members already reset
for the current month are left untouched, so repeated runs are safe.

Usage:
    python manage.py reset_bypass_quotas
    python manage.py reset_bypass_quotas --dry-run
"""

from django.core.management.base import BaseCommand
from django.db.models import Q

from apps.rooms.models import Member
from apps.rooms.services import current_quota_period, reconcile_all_quotas


class Command(BaseCommand):
    help = 'Reset bypass quota to its maximum for members not yet reset this month'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would be updated without making changes',
        )

    def handle(self, *args, **options):
        dry_run = options['dry_run']
        period = current_quota_period()

        stale = (
            Member.objects
            .filter(~Q(last_quota_reset_period=period))
            .select_related('user', 'room')
            .order_by('room__name', 'turn_order')
        )
        count = stale.count()

        if count == 0:
            self.stdout.write(
                self.style.SUCCESS(f'All bypass quotas are current for {period}.')
            )
            return

        self.stdout.write(f'\nFound {count} member(s) to reset for {period}:\n')

        for member in stale:
            self.stdout.write(
                f'  - {member.room.name} | {member.display_name} | '
                f'quota {member.bypass_quota}/{member.max_bypass_quota} | '
                f'last reset: {member.last_quota_reset_period or "never"}'
            )

        if dry_run:
            self.stdout.write(
                self.style.WARNING('\n--dry-run mode: No changes made.')
            )
            return

        updated = reconcile_all_quotas()

        self.stdout.write(
            self.style.SUCCESS(f'\n✓ Reset bypass quota for {updated} member(s).')
        )
