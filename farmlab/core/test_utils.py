"""
Test utilities and factories for creating test data
"""
from datetime import timedelta
from decimal import Decimal
import random
import string

from django.contrib.auth import get_user_model
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from farmlab.catalog.models import Product
from farmlab.hydroponics.models import BarleyPlate
from farmlab.inventory.models import FoodStock, MedicalStock, MedicineUnit
from farmlab.purchasing.models import SupplierInvoice, InvoiceLine
from farmlab.sensors.models import SensorReading
from farmlab.suppliers.models import Supplier

User = get_user_model()


class TestDataFactory:
    """Factory class for creating test data"""

    @staticmethod
    def random_string(length=10):
        """Generate a random string"""
        return ''.join(random.choices(string.ascii_letters + string.digits, k=length))

    @staticmethod
    def create_user(username=None, email=None, password='testpass123', role='user', is_superuser=False):
        """Create a test user with a farm role"""
        if not username:
            username = f'testuser_{TestDataFactory.random_string(6)}'
        if not email:
            email = f'{username}@test.com'
        return User.objects.create_user(
            username=username,
            email=email,
            password=password,
            role=role,
            is_superuser=is_superuser
        )

    @staticmethod
    def create_supplier(enterprise_name=None, category='feed', **kwargs):
        if not enterprise_name:
            enterprise_name = f'Supplier_{TestDataFactory.random_string(6)}'
        return Supplier.objects.create(
            name=kwargs.pop('name', 'Contact Person'),
            enterprise_name=enterprise_name,
            address=kwargs.pop('address', f'Test Address {enterprise_name}'),
            category=category,
            **kwargs
        )

    @staticmethod
    def create_product(name=None, category='animal_feed', price=None, **kwargs):
        if not name:
            name = f'Product_{TestDataFactory.random_string(6)}'
        if price is None:
            price = Decimal('100.00')
        return Product.objects.create(name=name, category=category, price=price, **kwargs)

    @staticmethod
    def create_food_stock(product=None, quantity=100, unit_price=None, **kwargs):
        if not product:
            product = TestDataFactory.create_product(category='animal_feed')
        return FoodStock.objects.create(
            product=product,
            quantity=quantity,
            unit_price=unit_price if unit_price is not None else Decimal('2.50'),
            **kwargs
        )

    @staticmethod
    def create_medical_stock(product=None, quantity=20, unit_price=None, **kwargs):
        if not product:
            product = TestDataFactory.create_product(category='animal_medicine')
        return MedicalStock.objects.create(
            product=product,
            quantity=quantity,
            unit_price=unit_price if unit_price is not None else Decimal('12.00'),
            **kwargs
        )

    @staticmethod
    def create_medicine_unit(product=None, expiration_date=None, **kwargs):
        if not product:
            product = TestDataFactory.create_product(category='animal_medicine')
        if not expiration_date:
            expiration_date = timezone.localdate() + timedelta(days=180)
        return MedicineUnit.objects.create(
            product=product,
            custom_id=kwargs.pop('custom_id', f'MED-{TestDataFactory.random_string(8).upper()}'),
            expiration_date=expiration_date,
            **kwargs
        )

    @staticmethod
    def create_invoice(supplier=None, lines=None, invoice_date=None, user=None):
        """
        Create an invoice with its lines.
        ``lines`` is a list of (name, category, quantity, price) tuples.
        """
        if not supplier:
            supplier = TestDataFactory.create_supplier()
        if lines is None:
            lines = [('Barley Feed', 'animal_feed', Decimal('10'), Decimal('25.00'))]
        invoice = SupplierInvoice.objects.create(
            supplier=supplier,
            invoice_date=invoice_date or timezone.localdate(),
            created_by=user
        )
        for name, category, quantity, price in lines:
            InvoiceLine.objects.create(
                invoice=invoice, name=name, category=category,
                quantity=Decimal(quantity), price=Decimal(price)
            )
        invoice.grand_total = invoice.calculate_grand_total()
        invoice.save(update_fields=['grand_total'])
        return invoice

    @staticmethod
    def create_plate(plate_number=None, start_date=None, expected_harvest_date=None, **kwargs):
        if not plate_number:
            plate_number = f'P-{TestDataFactory.random_string(5).upper()}'
        start_date = start_date or timezone.localdate()
        return BarleyPlate.objects.create(
            plate_number=plate_number,
            start_date=start_date,
            expected_harvest_date=expected_harvest_date or start_date + timedelta(days=7),
            seed_weight=kwargs.pop('seed_weight', Decimal('1.500')),
            **kwargs
        )

    @staticmethod
    def create_reading(station_id='sensorstation1', recorded_at=None, **metrics):
        values = {
            'air_temp_c': 22.5,
            'air_humidity_percent': 60.0,
            'water_temp_c': 19.0,
            'water_tds_ppm': 450.0,
            'gas_ppm': 400.0,
        }
        values.update(metrics)
        return SensorReading.objects.create(
            station_id=station_id,
            recorded_at=recorded_at or timezone.now(),
            **values
        )


class AuthenticatedAPIClient(APIClient):
    """APIClient with authentication helper"""

    def authenticate_user(self, user):
        """Authenticate the client with a user"""
        refresh = RefreshToken.for_user(user)
        self.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        return self

    def logout(self):
        """Remove authentication"""
        self.credentials()
