# ==========================================
# apps/rooms/models.py
# ==========================================

from django.conf import settings
from django.db import models
import uuid


class MemberStatus(models.TextChoices):
    ACTIVE = 'active', 'Active'
    ON_LEAVE = 'on_leave', 'On leave'


def default_max_bypass_quota():
    return settings.DEFAULT_MAX_BYPASS_QUOTA


class Room(models.Model):
    """Dormitory room sharing one water container rotation."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100, unique=True)

    # Index into the roster sorted by turn_order
    current_turn_index = models.PositiveIntegerField(default=0)

    # Set while a bypass substitution is unresolved (the member who handed off)
    last_bypasser = models.ForeignKey(
        'rooms.Member',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+'
    )

    cycle_count = models.PositiveIntegerField(default=0)

    # Bumped on every scheduling write; guards conditional updates
    version = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'rooms'
        ordering = ['name']

    def __str__(self):
        return self.name

    def get_roster(self):
        """Members ordered by rotation rank; storage order is never trusted."""
        return list(
            self.members
            .select_related('user')
            .order_by('turn_order', 'id')
        )

    @property
    def has_pending_bypass(self):
        return self.last_bypasser_id is not None


class Member(models.Model):
    """Roster entry of a resident in a room, with obligation-ledger counters."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.OneToOneField(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='membership'
    )
    room = models.ForeignKey(Room, on_delete=models.CASCADE, related_name='members')

    # Rotation rank, unique within a room
    turn_order = models.IntegerField()

    # Obligation ledger
    bypass_quota = models.PositiveSmallIntegerField(default=default_max_bypass_quota)
    max_bypass_quota = models.PositiveSmallIntegerField(default=default_max_bypass_quota)
    skip_credits = models.PositiveIntegerField(default=0)
    bypass_debt = models.PositiveIntegerField(default=0)

    status = models.CharField(
        max_length=20,
        choices=MemberStatus.choices,
        default=MemberStatus.ACTIVE
    )

    # Year-month (YYYY-MM) of the last monthly quota refill
    last_quota_reset_period = models.CharField(max_length=7, blank=True)

    joined_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'room_members'
        unique_together = [['room', 'turn_order']]
        ordering = ['room', 'turn_order']

    def __str__(self):
        return f"{self.display_name} in {self.room.name} (#{self.turn_order})"

    @property
    def display_name(self):
        return self.user.get_display_name()

    @property
    def is_on_leave(self):
        return self.status == MemberStatus.ON_LEAVE

    @property
    def helped_by(self):
        """Members this member substituted for: {helpee_id: {name, count, last_at}}."""
        return {
            str(record.helpee_id): {
                'name': record.helpee.display_name,
                'count': record.count,
                'last_at': record.last_bypassed_at,
            }
            for record in self.help_given.select_related('helpee__user')
        }

    @property
    def borrowed_from(self):
        """Members who substituted for this member: {helper_id: {name, count, last_at}}."""
        return {
            str(record.helper_id): {
                'name': record.helper.display_name,
                'count': record.count,
                'last_at': record.last_bypassed_at,
            }
            for record in self.help_received.select_related('helper__user')
        }


class BypassRecord(models.Model):
    """How many times one member has taken another member's turn."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    helpee = models.ForeignKey(Member, on_delete=models.CASCADE, related_name='help_received')
    helper = models.ForeignKey(Member, on_delete=models.CASCADE, related_name='help_given')
    count = models.PositiveIntegerField(default=0)
    last_bypassed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'bypass_records'
        unique_together = [['helpee', 'helper']]
        ordering = ['-last_bypassed_at']

    def __str__(self):
        return f"{self.helper.display_name} helped {self.helpee.display_name} x{self.count}"
