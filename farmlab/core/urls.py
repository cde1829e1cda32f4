from django.urls import path
from .views import (
    CustomTokenObtainPairView, CustomTokenRefreshView, user_me, check_role,
    user_list, user_detail, user_role_update,
    audit_log_list, health_check
)

urlpatterns = [
    # Auth endpoints
    path('auth/login/', CustomTokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('auth/refresh/', CustomTokenRefreshView.as_view(), name='token_refresh'),
    path('auth/me/', user_me, name='user-me'),
    path('auth/check-role/', check_role, name='check-role'),

    # User endpoints
    path('users/', user_list, name='user-list'),
    path('users/<int:pk>/', user_detail, name='user-detail'),
    path('users/<int:pk>/role/', user_role_update, name='user-role-update'),

    # AuditLog endpoints
    path('audit-logs/', audit_log_list, name='audit-log-list'),

    path('health-check/', health_check, name='health-check'),
]
