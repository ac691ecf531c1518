from django.db import models
from django.core.validators import MinValueValidator
from decimal import Decimal
import uuid


class Fulfillment(models.TextChoices):
    SELF_PICKUP = 'self_pickup', 'Self pickup'
    COURIER = 'courier', 'Courier'


class Purchase(models.Model):
    """Completed water container purchase that discharged a turn."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    room = models.ForeignKey(
        'rooms.Room',
        on_delete=models.CASCADE,
        related_name='purchases'
    )

    # Buyer (name snapshot survives later profile changes)
    buyer = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        related_name='water_purchases'
    )
    buyer_name = models.CharField(max_length=100)

    # Financial details
    cost = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    currency = models.CharField(max_length=3, default='IDR')
    description = models.TextField(blank=True)

    # Proof of purchase, and of delivery once a courier completes it
    photo_refs = models.JSONField(default=list)
    delivery_proof_refs = models.JSONField(default=list, blank=True)

    # Scheduling context at filing time
    is_bypass_task = models.BooleanField(default=False)
    is_debt_payment = models.BooleanField(default=False)

    fulfillment = models.CharField(
        max_length=20,
        choices=Fulfillment.choices,
        default=Fulfillment.SELF_PICKUP
    )

    # Client-generated idempotency key; one purchase per submission
    submission_key = models.CharField(max_length=64, unique=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'purchases'
        indexes = [
            models.Index(fields=['room', 'created_at'], name='purchases_room_c3d1a8_idx'),
            models.Index(fields=['buyer', 'created_at'], name='purchases_buyer_7e52b0_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.buyer_name} - {self.cost} {self.currency} ({self.room.name})"

    @property
    def uses_courier(self):
        return self.fulfillment == Fulfillment.COURIER
