from rest_framework import serializers
from .models import User


class UserSerializer(serializers.ModelSerializer):
    """Basic user serializer for profile display."""

    class Meta:
        model = User
        fields = [
            'id',
            'email',
            'display_name',
            'role',
            'phone_number',
            'is_online',
            'created_at',
            'last_login',
        ]
        read_only_fields = ['id', 'email', 'role', 'is_online', 'created_at', 'last_login']


class UserMinimalSerializer(serializers.ModelSerializer):
    """Minimal user info for nested serialization."""

    display_name = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ['id', 'display_name']
        read_only_fields = fields

    def get_display_name(self, obj):
        return obj.get_display_name()


class UserLoginSerializer(serializers.Serializer):
    """Serializer for user login."""

    email = serializers.EmailField(required=True)
    password = serializers.CharField(
        required=True,
        write_only=True,
        style={'input_type': 'password'}
    )


class CourierAvailabilitySerializer(serializers.Serializer):
    """Input for courier online/offline switch; omit to toggle."""

    is_online = serializers.BooleanField(required=False)
