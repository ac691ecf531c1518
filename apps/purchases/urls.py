from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'purchases'

# Router for ViewSets
router = DefaultRouter()
router.register(r'', views.PurchaseViewSet, basename='purchase')

urlpatterns = [
    # Purchase ViewSet routes
    # GET    /api/purchases/?room=<id>   - List purchases, newest first
    # POST   /api/purchases/             - File a purchase and advance the turn
    # GET    /api/purchases/{id}/        - Get purchase details

    # Include router URLs
    path('', include(router.urls)),
]
