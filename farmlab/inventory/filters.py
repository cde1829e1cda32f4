import django_filters
from django.utils import timezone

from farmlab.core.filters import is_truthy
from .models import FoodStock, MedicalStock, MedicineUnit, PlantStock


class FoodStockFilter(django_filters.FilterSet):
    product = django_filters.NumberFilter(field_name='product_id')

    class Meta:
        model = FoodStock
        fields = ['product']


class MedicalStockFilter(django_filters.FilterSet):
    product = django_filters.NumberFilter(field_name='product_id')

    class Meta:
        model = MedicalStock
        fields = ['product']


class PlantStockFilter(django_filters.FilterSet):
    product = django_filters.NumberFilter(field_name='product_id')
    category = django_filters.ChoiceFilter(
        field_name='product__category',
        choices=[(c, c) for c in PlantStock.PLANT_CATEGORIES]
    )

    class Meta:
        model = PlantStock
        fields = ['product', 'category']


class MedicineUnitFilter(django_filters.FilterSet):
    """Product, usage and expiry of medicine units"""

    product = django_filters.NumberFilter(field_name='product_id')
    is_used = django_filters.CharFilter(method='filter_is_used')
    expired = django_filters.CharFilter(method='filter_expired')

    class Meta:
        model = MedicineUnit
        fields = ['product', 'is_used', 'expired']

    def filter_is_used(self, queryset, name, value):
        return queryset.filter(is_used=is_truthy(value))

    def filter_expired(self, queryset, name, value):
        today = timezone.localdate()
        if is_truthy(value):
            return queryset.filter(expiration_date__lt=today)
        return queryset.filter(expiration_date__gte=today)
