from rest_framework import serializers
from .models import Supplier


class SupplierSerializer(serializers.ModelSerializer):
    phones = serializers.ListField(child=serializers.CharField(allow_blank=True), required=False)

    class Meta:
        model = Supplier
        fields = [
            'id', 'name', 'enterprise_name', 'address', 'description', 'phones',
            'email', 'city', 'category', 'notes', 'created_at', 'updated_at'
        ]
        read_only_fields = ['created_at', 'updated_at']

    def validate_phones(self, value):
        # Drop empty phone inputs
        return [phone.strip() for phone in value if phone and phone.strip()]

    def validate_enterprise_name(self, value):
        if not value.strip():
            raise serializers.ValidationError("Company name is required.")
        return value.strip()
