# ==========================================
# apps/deliveries/admin.py
# ==========================================

from django.contrib import admin, messages
from django.utils.html import format_html
from .models import DeliveryOrder, DeliveryStatus
from .services import (
    cancel_delivery_order,
    InvalidOrderTransitionError,
    CancellationNotAllowedError,
)


@admin.register(DeliveryOrder)
class DeliveryOrderAdmin(admin.ModelAdmin):
    """
    Admin interface for Delivery Orders.

    Provides order tracking including:
    - Order listing with status and courier
    - Filtering by status, dispatch mode and room
    - Cancellation of stuck orders
    """

    list_display = [
        'buyer_name',
        'room',
        'cost',
        'status_badge',
        'dispatch',
        'courier_name',
        'created_at',
        'delivered_at',
    ]
    list_filter = ['status', 'dispatch', 'room', 'created_at']
    search_fields = ['buyer_name', 'courier_name', 'room__name']
    readonly_fields = [
        'purchase', 'status', 'courier', 'courier_name', 'claimed_at',
        'delivered_at', 'delivery_proof_refs', 'cancelled_at', 'cancel_reason',
        'created_at', 'updated_at',
    ]
    date_hierarchy = 'created_at'
    ordering = ['-created_at']

    STATUS_COLORS = {
        DeliveryStatus.PENDING: ('#E5C49A', '#2C1810'),
        DeliveryStatus.PROCESSING: ('#4A7FB5', 'white'),
        DeliveryStatus.DELIVERED: ('#6B8E5E', 'white'),
        DeliveryStatus.CANCELLED: ('#B85C5C', 'white'),
    }

    def status_badge(self, obj):
        """Display order status as colored badge."""
        bg, fg = self.STATUS_COLORS.get(obj.status, ('#ccc', '#666'))
        return format_html(
            '<span style="background: {}; color: {}; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            bg, fg, obj.get_status_display()
        )
    status_badge.short_description = 'Status'
    status_badge.admin_order_field = 'status'

    def has_add_permission(self, request):
        """Orders are opened by purchases, not by hand."""
        return False

    def get_queryset(self, request):
        """Optimize query."""
        qs = super().get_queryset(request)
        return qs.select_related('room', 'courier', 'buyer')

    actions = ['cancel_orders']

    @admin.action(description='Cancel selected open orders')
    def cancel_orders(self, request, queryset):
        cancelled = 0
        for order in queryset:
            try:
                cancel_delivery_order(
                    order_id=order.id,
                    cancelled_by=request.user,
                    reason='Cancelled by administrator',
                )
                cancelled += 1
            except InvalidOrderTransitionError:
                continue
            except CancellationNotAllowedError as e:
                self.message_user(request, str(e), level=messages.ERROR)
                return
        self.message_user(request, f'{cancelled} order(s) cancelled.')
