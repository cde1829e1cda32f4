from rest_framework import serializers
from farmlab.catalog.serializers import StringListField
from .models import FoodStock, MedicalStock, MedicineUnit, PlantStock, PlantStockUnit


class FoodStockSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source='product.name', read_only=True)

    class Meta:
        model = FoodStock
        fields = [
            'id', 'product', 'product_name', 'quantity', 'unit_price', 'reorder_level',
            'expiry_date', 'feed_type', 'category', 'created_at', 'updated_at'
        ]
        read_only_fields = ['created_at', 'updated_at']

    def validate_product(self, value):
        if value.category != 'animal_feed':
            raise serializers.ValidationError('Food stock requires an animal feed product.')
        return value


class MedicalStockSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source='product.name', read_only=True)

    class Meta:
        model = MedicalStock
        fields = [
            'id', 'product', 'product_name', 'quantity', 'unit_price', 'reorder_level',
            'expiry_date', 'medicine_type', 'category', 'created_at', 'updated_at'
        ]
        read_only_fields = ['created_at', 'updated_at']

    def validate_product(self, value):
        if value.category != 'animal_medicine':
            raise serializers.ValidationError('Medical stock requires an animal medicine product.')
        return value


class StockAdjustSerializer(serializers.Serializer):
    product = serializers.IntegerField()
    action = serializers.CharField()

    def validate_action(self, value):
        if value not in ('increment', 'decrement'):
            raise serializers.ValidationError('Action must be increment or decrement.')
        return value


class MedicineUnitSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source='product.name', read_only=True)
    good_for = StringListField(required=False)

    class Meta:
        model = MedicineUnit
        fields = [
            'id', 'product', 'product_name', 'custom_id', 'category', 'expiration_date',
            'first_usage_date', 'usage_description', 'good_for', 'is_used', 'is_expired',
            'invoice', 'created_at', 'updated_at'
        ]
        read_only_fields = ['is_expired', 'created_at', 'updated_at']

    def validate_product(self, value):
        if value.category != 'animal_medicine':
            raise serializers.ValidationError('Medicine units require an animal medicine product.')
        return value


class PlantStockUnitSerializer(serializers.ModelSerializer):
    class Meta:
        model = PlantStockUnit
        fields = ['id', 'stock', 'location', 'status', 'planted_at', 'harvested_at', 'created_at', 'updated_at']
        read_only_fields = ['stock', 'harvested_at', 'created_at', 'updated_at']


class PlantStockSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source='product.name', read_only=True)
    product_category = serializers.CharField(source='product.category', read_only=True)
    units = PlantStockUnitSerializer(many=True, read_only=True)

    class Meta:
        model = PlantStock
        fields = ['id', 'product', 'product_name', 'product_category', 'quantity', 'units', 'created_at', 'updated_at']
        read_only_fields = ['product', 'created_at', 'updated_at']


class PlantStockAddSerializer(serializers.Serializer):
    """Stock added for a plant product, optionally planted at a location"""
    MAX_QUANTITY = 10000

    product = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1, max_value=MAX_QUANTITY)
    location = serializers.CharField(required=False, allow_blank=True, max_length=255)
