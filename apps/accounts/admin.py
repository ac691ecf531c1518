# ==========================================
# apps/accounts/admin.py
# ==========================================

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.html import format_html
from .models import User, UserRole


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """
    Custom admin interface for User model.

    Provides user management including:
    - User listing with role and courier availability
    - Filtering by role and status
    - Search by email, display name and phone number
    """

    list_display = [
        'email',
        'display_name',
        'role_badge',
        'phone_number',
        'is_online',
        'is_active',
        'created_at',
    ]

    list_filter = [
        'role',
        'is_online',
        'is_active',
        'is_staff',
    ]

    search_fields = [
        'email',
        'display_name',
        'phone_number',
    ]

    ordering = ['-created_at']

    # Remove username field references from BaseUserAdmin
    fieldsets = (
        ('Basic Information', {
            'fields': ('email', 'display_name', 'password')
        }),
        ('Dormitory', {
            'fields': ('role', 'phone_number', 'is_online'),
        }),
        ('Permissions', {
            'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions'),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'last_login'),
            'classes': ('collapse',),
        }),
    )

    add_fieldsets = (
        ('Create User', {
            'classes': ('wide',),
            'fields': ('email', 'display_name', 'role', 'phone_number', 'password1', 'password2'),
        }),
    )

    readonly_fields = ['created_at', 'last_login']

    filter_horizontal = ['groups', 'user_permissions']

    ROLE_COLORS = {
        UserRole.ADMIN: '#A47449',
        UserRole.RESIDENT: '#4A7FB5',
        UserRole.COURIER: '#6B8E5E',
    }

    def role_badge(self, obj):
        """Display role as colored badge."""
        return format_html(
            '<span style="background: {}; color: white; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            self.ROLE_COLORS.get(obj.role, '#ccc'),
            obj.get_role_display(),
        )
    role_badge.short_description = 'Role'
    role_badge.admin_order_field = 'role'

    actions = ['set_couriers_offline']

    @admin.action(description='Set selected couriers offline')
    def set_couriers_offline(self, request, queryset):
        """Take couriers out of the broadcast pool."""
        count = queryset.filter(role=UserRole.COURIER).update(is_online=False)
        self.message_user(request, f'{count} courier(s) set offline.')
