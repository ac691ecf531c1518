# ==========================================
# apps/purchases/admin.py
# ==========================================

from django.contrib import admin
from django.utils.html import format_html
from .models import Purchase, Fulfillment


@admin.register(Purchase)
class PurchaseAdmin(admin.ModelAdmin):
    """
    Admin interface for Purchases.

    Purchases are append-only records of discharged turns, so every
    field is read-only here.
    """

    list_display = [
        'buyer_name',
        'room',
        'cost',
        'fulfillment_badge',
        'is_debt_payment',
        'is_bypass_task',
        'created_at',
    ]
    list_filter = ['fulfillment', 'is_debt_payment', 'is_bypass_task', 'room', 'created_at']
    search_fields = ['buyer_name', 'buyer__email', 'room__name', 'submission_key']
    date_hierarchy = 'created_at'
    ordering = ['-created_at']

    fieldsets = (
        ('Purchase', {
            'fields': ('room', 'buyer', 'buyer_name', 'cost', 'currency', 'description')
        }),
        ('Rotation Context', {
            'fields': ('is_debt_payment', 'is_bypass_task', 'fulfillment')
        }),
        ('Proof', {
            'fields': ('photo_refs', 'delivery_proof_refs')
        }),
        ('Metadata', {
            'fields': ('submission_key', 'created_at'),
            'classes': ('collapse',)
        }),
    )

    FULFILLMENT_COLORS = {
        Fulfillment.SELF_PICKUP: '#4A7FB5',
        Fulfillment.COURIER: '#A47449',
    }

    def get_readonly_fields(self, request, obj=None):
        return [field.name for field in self.model._meta.fields]

    def has_add_permission(self, request):
        """Purchases are filed through the rotation, not by hand."""
        return False

    def fulfillment_badge(self, obj):
        """Display fulfillment as colored badge."""
        return format_html(
            '<span style="background: {}; color: white; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            self.FULFILLMENT_COLORS.get(obj.fulfillment, '#ccc'),
            obj.get_fulfillment_display(),
        )
    fulfillment_badge.short_description = 'Fulfillment'

    def get_queryset(self, request):
        """Optimize query."""
        qs = super().get_queryset(request)
        return qs.select_related('room', 'buyer')
