"""Statistics service - Room dashboard aggregations."""

from decimal import Decimal
from typing import Optional
from uuid import UUID

from django.db.models import Count, Sum
from django.utils import timezone

from apps.rooms.models import BypassRecord
from apps.purchases.models import Purchase

from .roster import get_room, get_current_member
from .exceptions import EmptyRosterError


def _top_member(queryset, member_field: str) -> Optional[dict]:
    """Member with the highest summed bypass count on one side of the ledger."""
    row = (
        queryset
        .values(member_field)
        .annotate(total=Sum('count'))
        .order_by('-total')
        .first()
    )
    if not row or not row['total']:
        return None
    return {'member_id': str(row[member_field]), 'count': row['total']}


def get_room_statistics(*, room_id: UUID) -> dict:
    """
    Calculate dashboard statistics for a room.

    Args:
        room_id: UUID of the room

    Returns:
        Dictionary with:
        - cycle_count: int - Completed rotations
        - current_member_id: str or None - Member responsible now
        - purchase_count: int - All purchases in the room
        - total_spend: Decimal - All-time spend
        - month_spend: Decimal - Spend in the current month
        - top_buyer: dict or None - {user_id, name, count}
        - top_helper: dict or None - {member_id, name, count}
        - most_helped: dict or None - {member_id, name, count}

    Raises:
        RoomNotFoundError: If room doesn't exist
    """
    room = get_room(room_id=room_id)
    roster = room.get_roster()
    names = {str(member.id): member.display_name for member in roster}

    purchases = Purchase.objects.filter(room=room)
    today = timezone.localdate()

    total_spend = purchases.aggregate(total=Sum('cost'))['total'] or Decimal('0.00')
    month_spend = purchases.filter(
        created_at__year=today.year,
        created_at__month=today.month,
    ).aggregate(total=Sum('cost'))['total'] or Decimal('0.00')

    top_buyer = (
        purchases
        .exclude(buyer__isnull=True)
        .values('buyer_id', 'buyer_name')
        .annotate(count=Count('id'))
        .order_by('-count')
        .first()
    )

    records = BypassRecord.objects.filter(helper__room=room)
    top_helper = _top_member(records, 'helper_id')
    most_helped = _top_member(records, 'helpee_id')
    for entry in (top_helper, most_helped):
        if entry:
            entry['name'] = names.get(entry['member_id'], '')

    try:
        current_member_id = str(get_current_member(room=room, roster=roster).id)
    except EmptyRosterError:
        current_member_id = None

    return {
        'cycle_count': room.cycle_count,
        'current_member_id': current_member_id,
        'purchase_count': purchases.count(),
        'total_spend': total_spend,
        'month_spend': month_spend,
        'top_buyer': {
            'user_id': str(top_buyer['buyer_id']),
            'name': top_buyer['buyer_name'],
            'count': top_buyer['count'],
        } if top_buyer else None,
        'top_helper': top_helper,
        'most_helped': most_helped,
    }
