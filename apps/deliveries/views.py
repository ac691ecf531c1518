from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema

from .models import DeliveryOrder
from .serializers import (
    DeliveryOrderSerializer,
    DeliveryFilterSerializer,
    CompleteDeliverySerializer,
    CancelDeliverySerializer,
)
from .services import (
    get_visible_orders,
    get_order_for_user,
    claim_delivery_order,
    complete_delivery_order,
    cancel_delivery_order,
    # Exceptions
    DeliveryOrderNotFoundError,
    OrderAlreadyClaimedError,
    NotAssignedCourierError,
    InvalidOrderTransitionError,
    MissingDeliveryProofError,
    CancellationNotAllowedError,
)
from apps.accounts.services import NotCourierError
from apps.rooms.permissions import IsDormAdmin


class DeliveryPagination(PageNumberPagination):
    """Custom pagination for delivery orders."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class DeliveryOrderViewSet(viewsets.ReadOnlyModelViewSet):
    """
    ViewSet for delivery orders.

    State changes go through services; the order id in the URL is passed
    straight to them so a lost race reports a conflict rather than 404.

    list: Get visible orders (filterable by status)
    retrieve: Get a specific order
    claim: Claim a pending order (courier)
    complete: Attach delivery proof (courier)
    cancel: Cancel an open order (admin)
    """

    queryset = DeliveryOrder.objects.all()
    serializer_class = DeliveryOrderSerializer
    pagination_class = DeliveryPagination
    lookup_value_regex = '[0-9a-fA-F-]{36}'

    def get_queryset(self):
        """Filter orders using input serializer validation."""
        filter_serializer = DeliveryFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)

        queryset = get_visible_orders(user=self.request.user)
        order_status = filter_serializer.validated_data.get('status')
        if order_status:
            queryset = queryset.filter(status=order_status)
        return queryset

    def retrieve(self, request, *args, **kwargs):
        """Get an order visible to the caller."""
        try:
            order = get_order_for_user(order_id=kwargs['pk'], user=request.user)
        except DeliveryOrderNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        return Response(DeliveryOrderSerializer(order).data)

    @extend_schema(request=None, responses={200: DeliveryOrderSerializer})
    @action(detail=True, methods=['post'])
    def claim(self, request, pk=None):
        """Claim a pending order."""
        try:
            order = claim_delivery_order(order_id=pk, courier=request.user)
        except DeliveryOrderNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except (NotCourierError, NotAssignedCourierError) as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except (OrderAlreadyClaimedError, InvalidOrderTransitionError) as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)

        return Response(DeliveryOrderSerializer(order).data)

    @extend_schema(request=CompleteDeliverySerializer, responses={200: DeliveryOrderSerializer})
    @action(detail=True, methods=['post'])
    def complete(self, request, pk=None):
        """Mark an order delivered with proof photos."""
        serializer = CompleteDeliverySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            order = complete_delivery_order(
                order_id=pk,
                courier=request.user,
                proof_refs=serializer.validated_data['proof_refs'],
            )
        except DeliveryOrderNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except NotAssignedCourierError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except MissingDeliveryProofError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        except InvalidOrderTransitionError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)

        return Response(DeliveryOrderSerializer(order).data)

    @extend_schema(request=CancelDeliverySerializer, responses={200: DeliveryOrderSerializer})
    @action(detail=True, methods=['post'], permission_classes=[IsAuthenticated, IsDormAdmin])
    def cancel(self, request, pk=None):
        """Cancel an open order (admin only)."""
        serializer = CancelDeliverySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            order = cancel_delivery_order(
                order_id=pk,
                cancelled_by=request.user,
                reason=serializer.validated_data.get('reason', ''),
            )
        except DeliveryOrderNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except CancellationNotAllowedError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except InvalidOrderTransitionError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)

        return Response(DeliveryOrderSerializer(order).data)
