"""
Test suite for Suppliers module
"""
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from farmlab.core.models import AuditLog
from farmlab.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from farmlab.suppliers.models import Supplier


class SupplierAPITests(TestCase):
    """Test Supplier API endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_requires_authentication(self):
        response = APIClient().get('/api/v1/suppliers/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_create_supplier_drops_empty_phones(self):
        data = {
            'name': 'Jane Doe',
            'enterprise_name': '  Green Feed Ltd  ',
            'address': '1 Mill Road',
            'phones': ['+38970123456', '', '  '],
            'category': 'feed',
        }
        response = self.client.post('/api/v1/suppliers/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['enterprise_name'], 'Green Feed Ltd')
        self.assertEqual(response.data['phones'], ['+38970123456'])
        self.assertTrue(AuditLog.objects.filter(action='create', model_name='Supplier').exists())

    def test_create_supplier_without_company_name(self):
        response = self.client.post('/api/v1/suppliers/', {'enterprise_name': ' ', 'address': 'x'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('enterprise_name', response.data)

    def test_search_and_category_filter(self):
        TestDataFactory.create_supplier(enterprise_name='Vet Supply', category='medicine', city='Skopje')
        TestDataFactory.create_supplier(enterprise_name='Grain House', category='feed')

        response = self.client.get('/api/v1/suppliers/?search=skopje')
        self.assertEqual([s['enterprise_name'] for s in response.data], ['Vet Supply'])

        response = self.client.get('/api/v1/suppliers/?category=feed')
        self.assertEqual([s['enterprise_name'] for s in response.data], ['Grain House'])

    def test_update_and_delete(self):
        supplier = TestDataFactory.create_supplier()
        response = self.client.patch(f'/api/v1/suppliers/{supplier.id}/', {'city': 'Bitola'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['city'], 'Bitola')

        response = self.client.delete(f'/api/v1/suppliers/{supplier.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Supplier.objects.filter(pk=supplier.id).exists())

    def test_missing_supplier(self):
        response = self.client.get('/api/v1/suppliers/999999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
