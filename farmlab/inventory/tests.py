"""
Test suite for Inventory module
Tests: feed, medical and plant stock, one-unit adjustments, medicine units
"""
from datetime import timedelta

from django.test import TestCase
from django.utils import timezone
from rest_framework import status

from farmlab.core.models import AuditLog
from farmlab.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from farmlab.inventory.models import FoodStock, MedicalStock, MedicineUnit, PlantStock, PlantStockUnit


class StockAdjustTests(TestCase):
    """Increment and decrement by one unit"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.feed = TestDataFactory.create_product(category='animal_feed')
        self.medicine = TestDataFactory.create_product(category='animal_medicine')

    def test_increment_creates_missing_stock(self):
        response = self.client.patch('/api/v1/food-stock/adjust/', {
            'product': self.feed.id, 'action': 'increment'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {'success': True, 'quantity': 1})
        self.assertEqual(FoodStock.objects.get(product=self.feed).quantity, 1)

    def test_increment_existing_stock(self):
        TestDataFactory.create_medical_stock(product=self.medicine, quantity=4)
        response = self.client.patch('/api/v1/medical-stock/adjust/', {
            'product': self.medicine.id, 'action': 'increment'
        }, format='json')
        self.assertEqual(response.data['quantity'], 5)
        self.assertTrue(AuditLog.objects.filter(action='stock_adjust', model_name='MedicalStock').exists())

    def test_decrement(self):
        TestDataFactory.create_food_stock(product=self.feed, quantity=2)
        response = self.client.patch('/api/v1/food-stock/adjust/', {
            'product': self.feed.id, 'action': 'decrement'
        }, format='json')
        self.assertEqual(response.data['quantity'], 1)

    def test_decrement_never_goes_below_zero(self):
        TestDataFactory.create_food_stock(product=self.feed, quantity=0)
        response = self.client.patch('/api/v1/food-stock/adjust/', {
            'product': self.feed.id, 'action': 'decrement'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(FoodStock.objects.get(product=self.feed).quantity, 0)

    def test_decrement_without_stock(self):
        response = self.client.patch('/api/v1/food-stock/adjust/', {
            'product': self.feed.id, 'action': 'decrement'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_unknown_action(self):
        response = self.client.patch('/api/v1/food-stock/adjust/', {
            'product': self.feed.id, 'action': 'double'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_unknown_product(self):
        response = self.client.patch('/api/v1/food-stock/adjust/', {
            'product': 999999, 'action': 'increment'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class StockAPITests(TestCase):
    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_food_stock_requires_feed_product(self):
        medicine = TestDataFactory.create_product(category='animal_medicine')
        response = self.client.post('/api/v1/food-stock/', {'product': medicine.id, 'quantity': 5}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('product', response.data)

    def test_create_food_stock_defaults_reorder_level(self):
        feed = TestDataFactory.create_product(category='animal_feed', name='Hay')
        response = self.client.post('/api/v1/food-stock/', {'product': feed.id, 'quantity': 5}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['reorder_level'], FoodStock.DEFAULT_REORDER_LEVEL)
        self.assertEqual(response.data['product_name'], 'Hay')

    def test_medical_stock_requires_medicine_product(self):
        feed = TestDataFactory.create_product(category='animal_feed')
        response = self.client.post('/api/v1/medical-stock/', {'product': feed.id, 'quantity': 5}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_list_medical_stock(self):
        TestDataFactory.create_medical_stock()
        response = self.client.get('/api/v1/medical-stock/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['reorder_level'], MedicalStock.DEFAULT_REORDER_LEVEL)


class MedicineUnitTests(TestCase):
    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.medicine = TestDataFactory.create_product(category='animal_medicine')

    def test_expired_flag_is_derived(self):
        unit = TestDataFactory.create_medicine_unit(
            product=self.medicine, expiration_date=timezone.localdate() - timedelta(days=1)
        )
        self.assertTrue(unit.is_expired)

    def test_create_unit(self):
        response = self.client.post('/api/v1/medicine-units/', {
            'product': self.medicine.id,
            'custom_id': 'MED-001',
            'expiration_date': (timezone.localdate() + timedelta(days=30)).isoformat(),
            'good_for': ['cattle'],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertFalse(response.data['is_expired'])

    def test_duplicate_custom_id(self):
        TestDataFactory.create_medicine_unit(product=self.medicine, custom_id='MED-001')
        response = self.client.post('/api/v1/medicine-units/', {
            'product': self.medicine.id,
            'custom_id': 'MED-001',
            'expiration_date': timezone.localdate().isoformat(),
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_filters(self):
        TestDataFactory.create_medicine_unit(product=self.medicine, is_used=True)
        TestDataFactory.create_medicine_unit(
            product=self.medicine, expiration_date=timezone.localdate() - timedelta(days=3)
        )
        response = self.client.get('/api/v1/medicine-units/?is_used=true')
        self.assertEqual(len(response.data), 1)
        response = self.client.get('/api/v1/medicine-units/?expired=true')
        self.assertEqual(len(response.data), 1)
        response = self.client.get('/api/v1/medicine-units/?expired=false')
        self.assertEqual(len(response.data), 1)

    def test_malformed_product_filter(self):
        response = self.client.get('/api/v1/medicine-units/?product=abc')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('product', response.data)

        response = self.client.get('/api/v1/food-stock/?product=abc')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_first_use_is_stamped_once(self):
        unit = TestDataFactory.create_medicine_unit(product=self.medicine)
        response = self.client.patch(f'/api/v1/medicine-units/{unit.id}/', {'is_used': True}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['first_usage_date'], timezone.localdate().isoformat())

    def test_delete_unit(self):
        unit = TestDataFactory.create_medicine_unit(product=self.medicine)
        response = self.client.delete(f'/api/v1/medicine-units/{unit.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(MedicineUnit.objects.filter(pk=unit.id).exists())


class PlantStockTests(TestCase):
    """Stock for seeds, seedlings and plant supplies"""

    def setUp(self):
        self.client = AuthenticatedAPIClient().authenticate_user(TestDataFactory.create_user())
        self.seeds = TestDataFactory.create_product(name='Basil Seeds', category='plant_seeds')

    def test_add_creates_stock_with_planted_units(self):
        response = self.client.post('/api/v1/plant-stock/', {
            'product': self.seeds.id, 'quantity': 3, 'location': ' Greenhouse A '
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['quantity'], 3)
        self.assertEqual(response.data['product_name'], 'Basil Seeds')
        self.assertEqual(len(response.data['units']), 3)
        unit = response.data['units'][0]
        self.assertEqual((unit['location'], unit['status']), ('Greenhouse A', 'planted'))
        self.assertEqual(unit['planted_at'], timezone.localdate().isoformat())
        self.assertTrue(AuditLog.objects.filter(model_name='PlantStock', action='create').exists())

    def test_add_to_existing_stock(self):
        self.client.post('/api/v1/plant-stock/', {'product': self.seeds.id, 'quantity': 2}, format='json')
        response = self.client.post('/api/v1/plant-stock/', {
            'product': self.seeds.id, 'quantity': 5, 'location': 'Field 2'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        stock = PlantStock.objects.get(product=self.seeds)
        self.assertEqual(stock.quantity, 7)
        self.assertEqual(stock.units.count(), 5)

    def test_non_plant_product(self):
        feed = TestDataFactory.create_product(category='animal_feed')
        response = self.client.post('/api/v1/plant-stock/', {'product': feed.id, 'quantity': 1}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data, {'error': 'Product is not a plant product'})

    def test_unknown_product(self):
        response = self.client.post('/api/v1/plant-stock/', {'product': 999999, 'quantity': 1}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_quantity_must_be_positive(self):
        response = self.client.post('/api/v1/plant-stock/', {'product': self.seeds.id, 'quantity': 0}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('quantity', response.data)
        self.assertFalse(PlantStock.objects.exists())

    def test_list_filters_by_category(self):
        nutrients = TestDataFactory.create_product(category='plant_nutrition')
        PlantStock.objects.create(product=self.seeds, quantity=4)
        PlantStock.objects.create(product=nutrients, quantity=9)
        response = self.client.get('/api/v1/plant-stock/?category=plant_nutrition')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([s['quantity'] for s in response.data], [9])

        response = self.client.get('/api/v1/plant-stock/?category=animal_feed')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_correct_quantity_and_delete(self):
        stock = PlantStock.objects.create(product=self.seeds, quantity=4)
        response = self.client.patch(f'/api/v1/plant-stock/{stock.id}/', {'quantity': 2}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['quantity'], 2)

        response = self.client.delete(f'/api/v1/plant-stock/{stock.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(PlantStock.objects.exists())

    def test_unit_status_stamps_harvest(self):
        stock = PlantStock.objects.create(product=self.seeds, quantity=1)
        unit = PlantStockUnit.objects.create(stock=stock, location='Bed 1')

        response = self.client.patch(f'/api/v1/plant-stock/units/{unit.id}/', {'status': 'harvested'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['harvested_at'], timezone.localdate().isoformat())
        self.assertTrue(AuditLog.objects.filter(model_name='PlantStockUnit', action='harvest').exists())

        response = self.client.patch(f'/api/v1/plant-stock/units/{unit.id}/', {'status': 'failed'}, format='json')
        self.assertIsNone(response.data['harvested_at'])

        response = self.client.patch(f'/api/v1/plant-stock/units/{unit.id}/', {'status': 'wilted'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
