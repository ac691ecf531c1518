from rest_framework import serializers
from .models import Room, Member
from apps.accounts.serializers import UserMinimalSerializer


class MemberSerializer(serializers.ModelSerializer):
    """Roster entry with obligation-ledger counters."""

    user = UserMinimalSerializer(read_only=True)
    display_name = serializers.CharField(read_only=True)
    is_current = serializers.SerializerMethodField()

    class Meta:
        model = Member
        fields = [
            'id',
            'user',
            'display_name',
            'turn_order',
            'status',
            'bypass_quota',
            'max_bypass_quota',
            'skip_credits',
            'bypass_debt',
            'is_current',
            'joined_at',
        ]
        read_only_fields = fields

    def get_is_current(self, obj):
        current_id = self.context.get('current_member_id')
        return current_id is not None and obj.id == current_id


class MemberDetailSerializer(MemberSerializer):
    """Roster entry including who helped whom."""

    helped_by = serializers.DictField(read_only=True)
    borrowed_from = serializers.DictField(read_only=True)

    class Meta(MemberSerializer.Meta):
        fields = MemberSerializer.Meta.fields + ['helped_by', 'borrowed_from']
        read_only_fields = fields


class RoomSerializer(serializers.ModelSerializer):
    """Room with its rotation state."""

    current_member = serializers.SerializerMethodField()
    member_count = serializers.SerializerMethodField()
    has_pending_bypass = serializers.BooleanField(read_only=True)

    class Meta:
        model = Room
        fields = [
            'id',
            'name',
            'current_turn_index',
            'current_member',
            'last_bypasser',
            'has_pending_bypass',
            'cycle_count',
            'version',
            'member_count',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

    def get_current_member(self, obj):
        roster = obj.get_roster()
        if not roster:
            return None
        member = roster[obj.current_turn_index % len(roster)]
        return MemberSerializer(member, context={'current_member_id': member.id}).data

    def get_member_count(self, obj):
        return obj.members.count()


class RoomListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for list views."""

    class Meta:
        model = Room
        fields = ['id', 'name', 'current_turn_index', 'cycle_count', 'version']
        read_only_fields = fields


class BypassInputSerializer(serializers.Serializer):
    """Input for handing the current turn to another member."""

    helper_id = serializers.UUIDField()
    expected_version = serializers.IntegerField(required=False, min_value=0)


class RankedMemberSerializer(serializers.Serializer):
    member_id = serializers.CharField()
    name = serializers.CharField()
    count = serializers.IntegerField()


class TopBuyerSerializer(serializers.Serializer):
    user_id = serializers.CharField()
    name = serializers.CharField()
    count = serializers.IntegerField()


class RoomStatisticsSerializer(serializers.Serializer):
    """Dashboard statistics for a room."""

    cycle_count = serializers.IntegerField()
    current_member_id = serializers.CharField(allow_null=True)
    purchase_count = serializers.IntegerField()
    total_spend = serializers.DecimalField(max_digits=12, decimal_places=2)
    month_spend = serializers.DecimalField(max_digits=12, decimal_places=2)
    top_buyer = TopBuyerSerializer(allow_null=True)
    top_helper = RankedMemberSerializer(allow_null=True)
    most_helped = RankedMemberSerializer(allow_null=True)
