from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from .models import Room
from .serializers import (
    RoomSerializer,
    RoomListSerializer,
    MemberDetailSerializer,
    MemberSerializer,
    BypassInputSerializer,
    RoomStatisticsSerializer,
)
from .permissions import IsRoomMember

from apps.rooms.services import (
    get_sorted_roster,
    get_current_member,
    bypass_turn,
    toggle_leave,
    get_room_statistics,
    # Exceptions
    RoomNotFoundError,
    MemberNotFoundError,
    NotRoomMemberError,
    EmptyRosterError,
    NotYourTurnError,
    BypassQuotaExhaustedError,
    BypassAlreadyActiveError,
    OutstandingDebtError,
    InvalidHelperError,
    MemberHoldsTurnError,
    ConcurrentUpdateError,
)


class RoomViewSet(viewsets.ReadOnlyModelViewSet):
    """
    ViewSet for rooms and their rotation.

    All business logic is handled by services.
    Views are thin HTTP handlers only.

    list: Get rooms (own room, or all for administrators)
    retrieve: Get a room with its rotation state
    roster: Get members in rotation order
    statistics: Get dashboard statistics
    bypass: Hand the current turn to another member
    leave: Toggle the caller's leave status
    """

    queryset = Room.objects.all()
    serializer_class = RoomSerializer
    permission_classes = [IsAuthenticated, IsRoomMember]

    def get_queryset(self):
        """Administrators see all rooms; residents only their own."""
        user = self.request.user
        if user.is_dorm_admin:
            return Room.objects.all()
        return Room.objects.filter(members__user=user).distinct()

    def get_serializer_class(self):
        if self.action == 'list':
            return RoomListSerializer
        return RoomSerializer

    @extend_schema(responses={200: MemberDetailSerializer(many=True)})
    @action(detail=True, methods=['get'])
    def roster(self, request, pk=None):
        """Get members sorted by turn order."""
        room = self.get_object()
        roster = get_sorted_roster(room_id=room.id)

        current_id = None
        if roster:
            current_id = get_current_member(room=room, roster=roster).id

        serializer = MemberDetailSerializer(
            roster,
            many=True,
            context={'current_member_id': current_id}
        )
        return Response(serializer.data)

    @extend_schema(responses={200: RoomStatisticsSerializer})
    @action(detail=True, methods=['get'])
    def statistics(self, request, pk=None):
        """Get purchase and bypass statistics for the room."""
        room = self.get_object()
        stats = get_room_statistics(room_id=room.id)
        return Response(RoomStatisticsSerializer(stats).data)

    @extend_schema(request=BypassInputSerializer, responses={200: RoomSerializer})
    @action(detail=True, methods=['post'])
    def bypass(self, request, pk=None):
        """Hand the current turn to another member."""
        room = self.get_object()
        serializer = BypassInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            room = bypass_turn(
                room_id=room.id,
                helpee=request.user,
                helper_member_id=serializer.validated_data['helper_id'],
                expected_version=serializer.validated_data.get('expected_version'),
            )
        except (RoomNotFoundError, MemberNotFoundError) as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except (NotRoomMemberError, NotYourTurnError) as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except (
            BypassQuotaExhaustedError,
            BypassAlreadyActiveError,
            OutstandingDebtError,
            InvalidHelperError,
            EmptyRosterError,
        ) as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        except ConcurrentUpdateError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)

        return Response(RoomSerializer(room, context={'request': request}).data)

    @extend_schema(request=None, responses={200: MemberSerializer})
    @action(detail=False, methods=['post'], url_path='me/leave', url_name='leave')
    def leave(self, request):
        """Toggle the caller's leave status."""
        try:
            member = toggle_leave(user=request.user)
        except NotRoomMemberError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except MemberHoldsTurnError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        except ConcurrentUpdateError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)

        return Response(MemberSerializer(member).data)
