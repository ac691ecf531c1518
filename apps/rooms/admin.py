# ==========================================
# apps/rooms/admin.py
# ==========================================

from django.contrib import admin
from django.utils.html import format_html
from apps.rooms.models import Room, Member, BypassRecord, MemberStatus
from apps.rooms.services import reconcile_bypass_quota


class MemberInline(admin.TabularInline):
    """Inline admin for room roster."""
    model = Member
    extra = 0
    fields = [
        'user',
        'turn_order',
        'status',
        'bypass_quota',
        'max_bypass_quota',
        'skip_credits',
        'bypass_debt',
    ]
    readonly_fields = ['bypass_quota', 'skip_credits', 'bypass_debt']
    ordering = ['turn_order']


@admin.register(Room)
class RoomAdmin(admin.ModelAdmin):
    """Admin interface for Rooms."""

    list_display = [
        'name',
        'member_count',
        'current_member',
        'cycle_count',
        'pending_bypass',
        'updated_at',
    ]
    search_fields = ['name']
    readonly_fields = ['current_turn_index', 'last_bypasser', 'cycle_count', 'version', 'created_at', 'updated_at']
    inlines = [MemberInline]
    ordering = ['name']

    fieldsets = (
        ('Basic Information', {
            'fields': ('name',)
        }),
        ('Rotation', {
            'fields': ('current_turn_index', 'last_bypasser', 'cycle_count', 'version')
        }),
        ('Metadata', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    def member_count(self, obj):
        """Show number of members."""
        return obj.members.count()
    member_count.short_description = 'Members'

    def current_member(self, obj):
        roster = obj.get_roster()
        if not roster:
            return '-'
        return roster[obj.current_turn_index % len(roster)].display_name
    current_member.short_description = 'Current turn'

    def pending_bypass(self, obj):
        return obj.has_pending_bypass
    pending_bypass.boolean = True
    pending_bypass.short_description = 'Bypass active'


@admin.register(Member)
class MemberAdmin(admin.ModelAdmin):
    """Admin interface for roster members."""

    list_display = [
        'user',
        'room',
        'turn_order',
        'status_badge',
        'bypass_quota',
        'skip_credits',
        'bypass_debt',
        'last_quota_reset_period',
    ]
    list_filter = ['status', 'room']
    search_fields = ['user__email', 'user__display_name', 'room__name']
    readonly_fields = ['joined_at', 'updated_at']
    ordering = ['room__name', 'turn_order']

    STATUS_COLORS = {
        MemberStatus.ACTIVE: '#6B8E5E',
        MemberStatus.ON_LEAVE: '#E5A94A',
    }

    def status_badge(self, obj):
        """Display status as colored badge."""
        return format_html(
            '<span style="background: {}; color: white; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            self.STATUS_COLORS.get(obj.status, '#ccc'),
            obj.get_status_display(),
        )
    status_badge.short_description = 'Status'
    status_badge.admin_order_field = 'status'

    def get_queryset(self, request):
        """Optimize query."""
        qs = super().get_queryset(request)
        return qs.select_related('user', 'room')

    actions = ['refill_bypass_quota']

    @admin.action(description='Refill bypass quota if a new month started')
    def refill_bypass_quota(self, request, queryset):
        count = sum(1 for member in queryset if reconcile_bypass_quota(member=member))
        self.message_user(request, f'Refilled bypass quota for {count} member(s).')


@admin.register(BypassRecord)
class BypassRecordAdmin(admin.ModelAdmin):
    """Admin interface for bypass history."""

    list_display = ['helper', 'helpee', 'count', 'last_bypassed_at']
    search_fields = ['helper__user__email', 'helpee__user__email']
    readonly_fields = ['helper', 'helpee', 'count', 'last_bypassed_at']
    ordering = ['-last_bypassed_at']

    def get_queryset(self, request):
        """Optimize query."""
        qs = super().get_queryset(request)
        return qs.select_related('helper__user', 'helpee__user')
