import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, AllowAny
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer, TokenRefreshSerializer
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError, AuthenticationFailed
from django.contrib.auth import get_user_model
from django.core.exceptions import ObjectDoesNotExist
from django.db import connection
from django.db.models import Q
from django.shortcuts import get_object_or_404

from .filters import AuditLogFilter, apply_filters
from .models import AuditLog
from .pagination import paginated_response
from .permissions import IsAdminRole, get_user_role
from .serializers import UserSerializer, UserRoleSerializer, AuditLogSerializer
from .utils import create_audit_log, field_changes

logger = logging.getLogger(__name__)

User = get_user_model()


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    def validate(self, attrs):
        data = super().validate(attrs)
        if not self.user.is_active:
            raise AuthenticationFailed('User account is disabled.')
        data['user'] = UserSerializer(self.user).data
        return data

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token['username'] = user.username
        token['email'] = user.email
        token['role'] = get_user_role(user)
        return token


class CustomTokenObtainPairView(TokenObtainPairView):
    serializer_class = CustomTokenObtainPairSerializer


class CustomTokenRefreshSerializer(TokenRefreshSerializer):
    """Token refresh that reports deleted users as an invalid token"""
    def validate(self, attrs):
        try:
            return super().validate(attrs)
        except (InvalidToken, TokenError):
            raise InvalidToken('Token is invalid or expired.')
        except (ObjectDoesNotExist, User.DoesNotExist):
            raise InvalidToken('Token is invalid. User no longer exists.')


class CustomTokenRefreshView(TokenRefreshView):
    serializer_class = CustomTokenRefreshSerializer


def issue_tokens(user):
    """Access/refresh pair carrying the custom claims"""
    refresh = CustomTokenObtainPairSerializer.get_token(user)
    return {
        'access': str(refresh.access_token),
        'refresh': str(refresh),
    }


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def user_me(request):
    """Get current user with role"""
    data = UserSerializer(request.user).data
    data['role'] = get_user_role(request.user)
    return Response(data)


@api_view(['GET'])
@permission_classes([IsAdminRole])
def check_role(request):
    """Look up the role of a user by email"""
    email = request.query_params.get('email', '').strip()
    if not email:
        return Response({'error': 'Email is required'}, status=status.HTTP_400_BAD_REQUEST)
    user = User.objects.filter(email__iexact=email).first()
    if not user:
        return Response({'error': 'User not found'}, status=status.HTTP_404_NOT_FOUND)
    return Response({'email': user.email, 'role': get_user_role(user)})


# User views
@api_view(['GET'])
@permission_classes([IsAdminRole])
def user_list(request):
    """List users, optionally filtered by role or a search term"""
    queryset = User.objects.all().order_by('-created_at')

    role = request.query_params.get('role')
    if role:
        queryset = queryset.filter(role=role)

    search = request.query_params.get('search')
    if search:
        queryset = queryset.filter(
            Q(username__icontains=search) |
            Q(email__icontains=search) |
            Q(first_name__icontains=search) |
            Q(last_name__icontains=search)
        )

    serializer = UserSerializer(queryset, many=True)
    return Response(serializer.data)


@api_view(['GET', 'PATCH', 'DELETE'])
@permission_classes([IsAdminRole])
def user_detail(request, pk):
    """Retrieve, update or delete a user"""
    user = get_object_or_404(User, pk=pk)

    if request.method == 'GET':
        serializer = UserSerializer(user)
        return Response(serializer.data)
    elif request.method == 'PATCH':
        serializer = UserSerializer(user, data=request.data, partial=True)
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        if user.pk == request.user.pk:
            return Response({'error': 'You cannot delete your own account'}, status=status.HTTP_400_BAD_REQUEST)
        create_audit_log(request, 'delete', 'User', user.pk, object_name=user.username)
        user.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['PATCH'])
@permission_classes([IsAdminRole])
def user_role_update(request, pk):
    """Change the role of a user"""
    user = get_object_or_404(User, pk=pk)
    serializer = UserRoleSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    old_role = user.role
    changes = field_changes(user, serializer.validated_data)
    user.role = serializer.validated_data['role']
    user.save(update_fields=['role', 'updated_at'])
    create_audit_log(
        request, 'role_change', 'User', user.pk,
        changes=changes,
        object_name=user.username
    )
    logger.info(f"Role of user {user.username} changed from {old_role} to {user.role} by {request.user.username}")
    return Response(UserSerializer(user).data)


# AuditLog views
@api_view(['GET'])
@permission_classes([IsAdminRole])
def audit_log_list(request):
    """List audit logs with filtering"""
    queryset = apply_filters(AuditLogFilter, request, AuditLog.objects.select_related('user'))
    return paginated_response(request, queryset.order_by('-created_at'), AuditLogSerializer, default_limit=50)


@api_view(['GET'])
@permission_classes([AllowAny])
def health_check(request):
    """Liveness check with a database round trip"""
    database = 'ok'
    try:
        with connection.cursor() as cursor:
            cursor.execute('SELECT 1')
    except Exception as e:
        logger.error(f"Health check database error: {str(e)}", exc_info=True)
        database = 'error'
    http_status = status.HTTP_200_OK if database == 'ok' else status.HTTP_503_SERVICE_UNAVAILABLE
    return Response({'status': 'ok' if database == 'ok' else 'degraded', 'database': database}, status=http_status)
