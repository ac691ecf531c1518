from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'deliveries'

# Router for ViewSets
router = DefaultRouter()
router.register(r'', views.DeliveryOrderViewSet, basename='delivery')

urlpatterns = [
    # Delivery ViewSet routes
    # GET    /api/deliveries/                 - List visible orders
    # GET    /api/deliveries/{id}/            - Get order details
    # POST   /api/deliveries/{id}/claim/      - Claim order (courier)
    # POST   /api/deliveries/{id}/complete/   - Attach proof, mark delivered (courier)
    # POST   /api/deliveries/{id}/cancel/     - Cancel order (admin)

    # Include router URLs
    path('', include(router.urls)),
]
