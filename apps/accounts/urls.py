from django.urls import path
from . import views

app_name = 'users'

urlpatterns = [
    # Authentication
    path('login/', views.login, name='login'),

    # User profile
    path('user/', views.get_current_user, name='current-user'),
    path('courier/availability/', views.courier_availability, name='courier-availability'),
]
