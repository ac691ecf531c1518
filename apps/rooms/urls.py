from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'rooms'

# Router for ViewSets
router = DefaultRouter()
router.register(r'', views.RoomViewSet, basename='room')

urlpatterns = [
    # Room ViewSet routes
    # GET    /api/rooms/                   - List rooms
    # GET    /api/rooms/{id}/              - Get room with rotation state
    # GET    /api/rooms/{id}/roster/       - Members in turn order
    # GET    /api/rooms/{id}/statistics/   - Dashboard statistics
    # POST   /api/rooms/{id}/bypass/       - Hand the turn to another member
    # POST   /api/rooms/me/leave/          - Toggle own leave status

    # Include router URLs
    path('', include(router.urls)),
]
