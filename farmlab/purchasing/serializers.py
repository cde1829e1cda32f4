from django.db import transaction
from rest_framework import serializers

from farmlab.core.cache_signals import suspend_cache_signals
from .models import SupplierInvoice, InvoiceLine


class InvoiceLineSerializer(serializers.ModelSerializer):
    class Meta:
        model = InvoiceLine
        fields = [
            'id', 'product', 'name', 'category', 'description', 'quantity', 'price',
            'unit', 'kg_per_unit', 'price_per_kilogram', 'total_price'
        ]
        read_only_fields = ['price_per_kilogram', 'total_price']

    def validate_quantity(self, value):
        if value <= 0:
            raise serializers.ValidationError('Quantity must be greater than zero.')
        return value

    def validate_price(self, value):
        if value < 0:
            raise serializers.ValidationError('Price cannot be negative.')
        return value


class SupplierInvoiceSerializer(serializers.ModelSerializer):
    lines = InvoiceLineSerializer(many=True)
    created_by_username = serializers.CharField(source='created_by.username', read_only=True, default=None)

    class Meta:
        model = SupplierInvoice
        fields = [
            'id', 'invoice_number', 'supplier', 'supplier_name', 'supplier_enterprise',
            'invoice_date', 'grand_total', 'notes', 'lines',
            'created_by', 'created_by_username', 'created_at'
        ]
        read_only_fields = ['grand_total', 'created_by', 'created_at']
        extra_kwargs = {
            'invoice_number': {'required': False, 'validators': []},
            'supplier': {'required': True, 'allow_null': False},
        }

    def validate_invoice_number(self, value):
        if value and SupplierInvoice.objects.filter(invoice_number=value).exists():
            raise serializers.ValidationError('Invoice number already exists')
        return value

    def validate_lines(self, value):
        if not value:
            raise serializers.ValidationError('At least one product line is required.')
        return value

    @transaction.atomic
    def create(self, validated_data):
        lines_data = validated_data.pop('lines')
        with suspend_cache_signals():
            invoice = SupplierInvoice.objects.create(**validated_data)
            for line_data in lines_data:
                InvoiceLine.objects.create(invoice=invoice, **line_data)
            invoice.grand_total = invoice.calculate_grand_total()
            invoice.save(update_fields=['grand_total'])
        return invoice
