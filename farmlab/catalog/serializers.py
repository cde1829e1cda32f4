import json

from rest_framework import serializers
from .models import Product

FEED_FIELDS = ('kilogram_quantity', 'kg_per_unit', 'unit_count')
MEDICINE_FIELDS = ('unit', 'amount_per_unit', 'good_for', 'usage_description')
PLANT_FIELDS = ('seed_type', 'planting_instructions', 'harvest_time', 'growth_conditions')


class StringListField(serializers.ListField):
    """List of strings that also accepts a JSON-encoded list"""
    child = serializers.CharField()

    def to_internal_value(self, data):
        if isinstance(data, str):
            try:
                data = json.loads(data) if data.strip() else []
            except ValueError:
                raise serializers.ValidationError('Expected a list or a JSON-encoded list.')
        return super().to_internal_value(data)


class ProductSerializer(serializers.ModelSerializer):
    category_display = serializers.CharField(source='get_category_display', read_only=True)
    good_for = StringListField(required=False)

    class Meta:
        model = Product
        fields = [
            'id', 'name', 'category', 'category_display', 'description', 'price',
            'kilogram_quantity', 'kg_per_unit', 'unit_count', 'unit_price', 'total',
            'unit', 'amount_per_unit', 'good_for', 'usage_description',
            'seed_type', 'planting_instructions', 'harvest_time', 'growth_conditions',
            'created_at', 'updated_at'
        ]
        read_only_fields = ['unit_price', 'total', 'created_at', 'updated_at']
        # Duplicate (name, category) is reported by validate() with its own message
        validators = []

    def validate_kg_per_unit(self, value):
        if value is not None and value <= 0:
            raise serializers.ValidationError('Kilogram per unit must be a positive number')
        return value

    def validate_price(self, value):
        if value is not None and value < 0:
            raise serializers.ValidationError('Price cannot be negative')
        return value

    def validate(self, attrs):
        category = attrs.get('category', getattr(self.instance, 'category', None))
        name = attrs.get('name', getattr(self.instance, 'name', None))

        duplicates = Product.objects.filter(name=name, category=category)
        if self.instance is not None:
            duplicates = duplicates.exclude(pk=self.instance.pk)
        if duplicates.exists():
            raise serializers.ValidationError({'error': 'Product already exists'})

        # Only keep the attributes that apply to the category
        if category != 'animal_feed':
            for field in FEED_FIELDS:
                attrs.pop(field, None)
        if category != 'animal_medicine':
            for field in MEDICINE_FIELDS:
                attrs.pop(field, None)
        if not category or not category.startswith('plant_'):
            for field in PLANT_FIELDS:
                attrs.pop(field, None)
        return attrs
