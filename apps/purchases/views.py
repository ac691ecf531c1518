from rest_framework import viewsets, status
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema

from .models import Purchase
from .serializers import (
    PurchaseSerializer,
    PurchaseListSerializer,
    PurchaseCreateSerializer,
    PurchaseFilterSerializer,
)
from .services import (
    record_purchase,
    get_visible_purchases,
    get_purchase_for_user,
    # Exceptions
    PurchaseNotFoundError,
    MissingProofError,
    DuplicateSubmissionError,
)
from apps.rooms.services import (
    RoomNotFoundError,
    NotRoomMemberError,
    NotYourTurnError,
    EmptyRosterError,
    ConcurrentUpdateError,
)
from apps.deliveries.services import DeliveryRequest, InvalidCourierError


class PurchasePagination(PageNumberPagination):
    """Custom pagination for purchases."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class PurchaseViewSet(viewsets.ReadOnlyModelViewSet):
    """
    ViewSet for purchases.

    list: Get purchases of the caller's room (filterable by room)
    create: File a purchase, advancing the turn
    retrieve: Get a specific purchase
    """

    queryset = Purchase.objects.all()
    serializer_class = PurchaseSerializer
    pagination_class = PurchasePagination
    lookup_value_regex = '[0-9a-fA-F-]{36}'

    def get_queryset(self):
        """Filter purchases using input serializer validation."""
        filter_serializer = PurchaseFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)

        return get_visible_purchases(
            user=self.request.user,
            room_id=filter_serializer.validated_data.get('room'),
        )

    def get_serializer_class(self):
        """Use different serializers for different actions."""
        if self.action == 'list':
            return PurchaseListSerializer
        elif self.action == 'create':
            return PurchaseCreateSerializer
        return PurchaseSerializer

    def retrieve(self, request, *args, **kwargs):
        """Get a purchase visible to the caller."""
        try:
            purchase = get_purchase_for_user(purchase_id=kwargs['pk'], user=request.user)
        except PurchaseNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        return Response(PurchaseSerializer(purchase).data)

    @extend_schema(request=PurchaseCreateSerializer, responses={201: PurchaseSerializer})
    def create(self, request, *args, **kwargs):
        """File a purchase for the current turn."""
        serializer = PurchaseCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        delivery = None
        if data.get('delivery') is not None:
            delivery = DeliveryRequest(courier_id=data['delivery'].get('courier_id'))

        try:
            purchase = record_purchase(
                room_id=data['room'],
                buyer=request.user,
                cost=data['cost'],
                photo_refs=data['photo_refs'],
                submission_key=data['submission_key'],
                description=data.get('description', ''),
                delivery=delivery,
                expected_version=data.get('expected_version'),
            )
        except RoomNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except (NotRoomMemberError, NotYourTurnError) as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except (MissingProofError, InvalidCourierError, EmptyRosterError) as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        except DuplicateSubmissionError as e:
            return Response({
                'error': str(e),
                'purchase': PurchaseSerializer(e.purchase).data,
            }, status=status.HTTP_409_CONFLICT)
        except ConcurrentUpdateError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)

        purchase = Purchase.objects.select_related('room', 'buyer').get(id=purchase.id)
        return Response(PurchaseSerializer(purchase).data, status=status.HTTP_201_CREATED)
