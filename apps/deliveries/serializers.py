from rest_framework import serializers
from .models import DeliveryOrder, DeliveryStatus
from apps.accounts.serializers import UserMinimalSerializer


# =============================================================================
# Input Serializers
# =============================================================================

class DeliveryFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for delivery order filtering.

    Query Parameters:
        status (str): Filter by order status
    """

    status = serializers.ChoiceField(
        choices=DeliveryStatus.choices,
        required=False
    )


class CompleteDeliverySerializer(serializers.Serializer):
    """Delivery proof submitted by the courier."""

    proof_refs = serializers.ListField(
        child=serializers.CharField(max_length=500),
        allow_empty=False
    )


class CancelDeliverySerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')


# =============================================================================
# Output Serializers
# =============================================================================

class DeliveryOrderSerializer(serializers.ModelSerializer):
    """Full delivery order details."""

    buyer = UserMinimalSerializer(read_only=True)
    courier = UserMinimalSerializer(read_only=True)
    room_name = serializers.CharField(source='room.name', read_only=True)

    class Meta:
        model = DeliveryOrder
        fields = [
            'id',
            'room',
            'room_name',
            'purchase',
            'buyer',
            'buyer_name',
            'cost',
            'description',
            'photo_refs',
            'status',
            'dispatch',
            'courier',
            'courier_name',
            'claimed_at',
            'delivered_at',
            'delivery_proof_refs',
            'cancelled_at',
            'cancel_reason',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields
