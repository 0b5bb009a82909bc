from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView
from drf_spectacular.views import SpectacularAPIView, SpectacularRedocView, SpectacularSwaggerView

from . import views

urlpatterns = [
    # =============== API DOCUMENTATION ===============
    path('schema/', SpectacularAPIView.as_view(), name='schema'),
    path('docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
    path('redoc/', SpectacularRedocView.as_view(url_name='schema'), name='redoc'),

    # =============== AUTHENTICATION ===============
    path('auth/login/', views.CustomTokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('auth/refresh/', TokenRefreshView.as_view(), name='token_refresh'),

    # =============== USER PROFILE ===============
    path('profile/', views.MyProfileView.as_view(), name='my_profile'),
    path('profile/role/', views.my_role, name='my_role'),

    # =============== STAFF MANAGEMENT ===============
    path('staff/', views.StaffListCreateView.as_view(), name='staff_list_create'),
    path('staff/<uuid:pk>/', views.StaffDetailView.as_view(), name='staff_detail'),

    # =============== SYSTEM ===============
    path('health/', views.health_check, name='health_check'),
]
