"""
Test suite for Catalog module
Tests: product CRUD, category specific attributes, feed pricing, filters
"""
from decimal import Decimal

from django.test import TestCase
from rest_framework import status

from farmlab.catalog.models import Product
from farmlab.core.test_utils import TestDataFactory, AuthenticatedAPIClient


class ProductModelTests(TestCase):
    def test_feed_pricing(self):
        product = Product.objects.create(
            name='Barley', category='animal_feed', price=Decimal('30.00'),
            kg_per_unit=Decimal('25'), unit_count=4
        )
        self.assertEqual(product.unit_price, Decimal('1.2000'))
        self.assertEqual(product.total, Decimal('120.00'))

    def test_pricing_skipped_for_medicine(self):
        product = Product.objects.create(name='Ivermectin', category='animal_medicine', price=Decimal('9.00'))
        self.assertIsNone(product.unit_price)
        self.assertIsNone(product.total)

    def test_group(self):
        self.assertEqual(Product(category='plant_seeds').group, 'plant')


class ProductAPITests(TestCase):
    """Test Product API endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_product(self):
        data = {'name': 'Barley', 'category': 'animal_feed', 'price': '30.00', 'kg_per_unit': '25'}
        response = self.client.post('/api/v1/products/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['unit_price'], '1.2000')

    def test_create_requires_name_and_category(self):
        response = self.client.post('/api/v1/products/', {'name': 'Barley'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Name and category are required')

    def test_duplicate_product(self):
        TestDataFactory.create_product(name='Barley', category='animal_feed')
        response = self.client.post('/api/v1/products/', {'name': 'Barley', 'category': 'animal_feed'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Product already exists')

    def test_same_name_in_other_category_is_allowed(self):
        TestDataFactory.create_product(name='Neem', category='plant_medicine')
        response = self.client.post('/api/v1/products/', {'name': 'Neem', 'category': 'animal_medicine'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

    def test_attributes_of_other_categories_are_dropped(self):
        data = {
            'name': 'Tomato seeds', 'category': 'plant_seeds',
            'seed_type': 'Heirloom', 'kg_per_unit': '2', 'good_for': ['cattle'],
        }
        response = self.client.post('/api/v1/products/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['seed_type'], 'Heirloom')
        self.assertIsNone(response.data['kg_per_unit'])
        self.assertEqual(response.data['good_for'], [])

    def test_good_for_accepts_json_string(self):
        data = {'name': 'Penicillin', 'category': 'animal_medicine', 'good_for': '["cattle", "sheep"]'}
        response = self.client.post('/api/v1/products/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['good_for'], ['cattle', 'sheep'])

    def test_negative_price(self):
        response = self.client.post('/api/v1/products/', {'name': 'X', 'category': 'animal_feed', 'price': '-1'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_filters(self):
        TestDataFactory.create_product(name='Barley', category='animal_feed', price=Decimal('30'))
        TestDataFactory.create_product(name='Lettuce', category='plant_seeds', price=Decimal('5'))

        response = self.client.get('/api/v1/products/?group=plant')
        self.assertEqual([p['name'] for p in response.data], ['Lettuce'])

        response = self.client.get('/api/v1/products/?min_price=10')
        self.assertEqual([p['name'] for p in response.data], ['Barley'])

        response = self.client.get('/api/v1/products/?search=lett')
        self.assertEqual(len(response.data), 1)

    def test_invalid_category_filter(self):
        response = self.client.get('/api/v1/products/?category=rocks')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_categories(self):
        response = self.client.get('/api/v1/products/categories/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 6)
        self.assertEqual(response.data[0], {'value': 'animal_feed', 'label': 'Animal Feed', 'group': 'animal'})

    def test_update_and_delete(self):
        product = TestDataFactory.create_product(name='Barley')
        response = self.client.patch(f'/api/v1/products/{product.id}/', {'description': 'Sprouted'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['description'], 'Sprouted')

        response = self.client.delete(f'/api/v1/products/{product.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
