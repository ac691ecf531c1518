# ==========================================
# apps/deliveries/models.py
# ==========================================

from django.core.validators import MinValueValidator
from django.db import models
from decimal import Decimal
import uuid


class DeliveryStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    PROCESSING = 'processing', 'Processing'
    DELIVERED = 'delivered', 'Delivered'
    CANCELLED = 'cancelled', 'Cancelled'


class DispatchMode(models.TextChoices):
    # Open to any online courier
    BROADCAST = 'broadcast', 'Broadcast'
    # Pinned to one courier
    ASSIGNED = 'assigned', 'Assigned'


ALLOWED_TRANSITIONS = {
    DeliveryStatus.PENDING.value: {DeliveryStatus.PROCESSING.value, DeliveryStatus.CANCELLED.value},
    DeliveryStatus.PROCESSING.value: {DeliveryStatus.DELIVERED.value, DeliveryStatus.CANCELLED.value},
    DeliveryStatus.DELIVERED.value: set(),
    DeliveryStatus.CANCELLED.value: set(),
}


def can_transition(current: str, target: str) -> bool:
    return str(target) in ALLOWED_TRANSITIONS.get(str(current), set())


class DeliveryOrder(models.Model):
    """Courier fulfillment of a purchase."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    room = models.ForeignKey(
        'rooms.Room',
        on_delete=models.CASCADE,
        related_name='delivery_orders'
    )
    purchase = models.OneToOneField(
        'purchases.Purchase',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='delivery_order'
    )

    buyer = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        related_name='delivery_orders'
    )
    buyer_name = models.CharField(max_length=100)

    cost = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    description = models.TextField(blank=True)

    # Purchase proof, copied from the purchase at creation
    photo_refs = models.JSONField(default=list)

    status = models.CharField(
        max_length=20,
        choices=DeliveryStatus.choices,
        default=DeliveryStatus.PENDING
    )
    dispatch = models.CharField(
        max_length=20,
        choices=DispatchMode.choices,
        default=DispatchMode.BROADCAST
    )

    courier = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='courier_orders'
    )
    courier_name = models.CharField(max_length=100, blank=True)

    claimed_at = models.DateTimeField(null=True, blank=True)
    delivered_at = models.DateTimeField(null=True, blank=True)
    delivery_proof_refs = models.JSONField(default=list, blank=True)

    cancelled_at = models.DateTimeField(null=True, blank=True)
    cancel_reason = models.CharField(max_length=255, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'delivery_orders'
        indexes = [
            models.Index(fields=['room', 'status'], name='delivery_or_room_id_5f0c1e_idx'),
            models.Index(fields=['courier', 'status'], name='delivery_or_courier_8a2d4b_idx'),
            models.Index(fields=['status', 'created_at'], name='delivery_or_status_3b9e70_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.room.name} - {self.buyer_name} ({self.status})"

    def can_transition_to(self, target):
        return can_transition(self.status, target)
