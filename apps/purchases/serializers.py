from decimal import Decimal
from rest_framework import serializers
from .models import Purchase
from apps.accounts.serializers import UserMinimalSerializer


# =============================================================================
# Input Serializers
# =============================================================================

class PurchaseFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for purchase filtering.

    Query Parameters:
        room (UUID): Filter by room ID
    """

    room = serializers.UUIDField(required=False)


class DeliveryInputSerializer(serializers.Serializer):
    """Courier target; a null courier broadcasts to every online courier."""

    courier_id = serializers.UUIDField(required=False, allow_null=True, default=None)


class PurchaseCreateSerializer(serializers.Serializer):
    """
    Validate input for filing a purchase.

    Fields:
        room (UUID): Room whose turn is discharged
        cost (Decimal): Amount paid
        photo_refs (list): Purchase proof photo references
        submission_key (str): Client-generated idempotency key
        description (str): Optional note
        delivery (dict): Optional courier request
        expected_version (int): Room version the client last saw
    """

    room = serializers.UUIDField()
    cost = serializers.DecimalField(
        max_digits=10,
        decimal_places=2,
        min_value=Decimal('0.00')
    )
    photo_refs = serializers.ListField(
        child=serializers.CharField(max_length=500),
        allow_empty=False
    )
    submission_key = serializers.CharField(max_length=64)
    description = serializers.CharField(required=False, allow_blank=True, default='')
    delivery = DeliveryInputSerializer(required=False, allow_null=True, default=None)
    expected_version = serializers.IntegerField(required=False, min_value=0)


# =============================================================================
# Output Serializers
# =============================================================================

class PurchaseSerializer(serializers.ModelSerializer):
    """Full purchase details."""

    buyer = UserMinimalSerializer(read_only=True)
    room_name = serializers.CharField(source='room.name', read_only=True)
    delivery_order_id = serializers.SerializerMethodField()

    class Meta:
        model = Purchase
        fields = [
            'id',
            'room',
            'room_name',
            'buyer',
            'buyer_name',
            'cost',
            'currency',
            'description',
            'photo_refs',
            'delivery_proof_refs',
            'is_bypass_task',
            'is_debt_payment',
            'fulfillment',
            'delivery_order_id',
            'submission_key',
            'created_at',
        ]
        read_only_fields = fields

    def get_delivery_order_id(self, obj):
        if not obj.uses_courier:
            return None
        order = getattr(obj, 'delivery_order', None)
        return str(order.id) if order else None


class PurchaseListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for list views."""

    class Meta:
        model = Purchase
        fields = [
            'id',
            'room',
            'buyer_name',
            'cost',
            'currency',
            'is_bypass_task',
            'is_debt_payment',
            'fulfillment',
            'created_at',
        ]
        read_only_fields = fields
