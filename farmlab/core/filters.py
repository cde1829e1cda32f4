import django_filters
from django_filters.utils import translate_validation

from .models import AuditLog

TRUE_VALUES = ('true', '1', 'yes')


def apply_filters(filterset_class, request, queryset):
    """Filtered queryset; malformed query parameters raise a 400 with field errors"""
    filterset = filterset_class(request.query_params, queryset=queryset, request=request)
    if not filterset.is_valid():
        raise translate_validation(filterset.errors)
    return filterset.qs


def is_truthy(value):
    return value.strip().lower() in TRUE_VALUES


class AuditLogFilter(django_filters.FilterSet):
    date_from = django_filters.DateFilter(field_name='created_at', lookup_expr='date__gte')
    date_to = django_filters.DateFilter(field_name='created_at', lookup_expr='date__lte')

    class Meta:
        model = AuditLog
        fields = ['action', 'model_name', 'date_from', 'date_to']
