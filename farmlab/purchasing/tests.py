"""
Test suite for Purchasing module
Tests: invoice numbering, line totals, supplier snapshot, API
"""
from datetime import date
from decimal import Decimal

from django.test import TestCase
from django.utils import timezone
from rest_framework import status

from farmlab.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from farmlab.purchasing.models import SupplierInvoice, InvoiceLine, FIRST_INVOICE_NUMBER


class InvoiceModelTests(TestCase):
    """Test SupplierInvoice and InvoiceLine model methods"""

    def setUp(self):
        self.supplier = TestDataFactory.create_supplier(enterprise_name='Green Feed Ltd')

    def test_invoice_numbers_start_at_first_number(self):
        invoice = TestDataFactory.create_invoice(supplier=self.supplier)
        self.assertEqual(invoice.invoice_number, FIRST_INVOICE_NUMBER)
        second = TestDataFactory.create_invoice(supplier=self.supplier)
        self.assertEqual(second.invoice_number, FIRST_INVOICE_NUMBER + 1)

    def test_supplier_snapshot(self):
        invoice = TestDataFactory.create_invoice(supplier=self.supplier)
        self.supplier.enterprise_name = 'Renamed Ltd'
        self.supplier.save()
        invoice.refresh_from_db()
        self.assertEqual(invoice.supplier_enterprise, 'Green Feed Ltd')
        self.assertEqual(str(invoice), f'INV-{invoice.invoice_number}')

    def test_grand_total(self):
        invoice = TestDataFactory.create_invoice(supplier=self.supplier, lines=[
            ('Barley', 'animal_feed', '10', '25.00'),
            ('Ivermectin', 'animal_medicine', '3', '9.99'),
        ])
        self.assertEqual(invoice.grand_total, Decimal('279.97'))

    def test_feed_line_price_per_kilogram(self):
        invoice = TestDataFactory.create_invoice(supplier=self.supplier)
        line = InvoiceLine.objects.create(
            invoice=invoice, name='Barley', category='animal_feed',
            quantity=Decimal('2'), price=Decimal('30.00'), kg_per_unit=Decimal('25')
        )
        self.assertEqual(line.price_per_kilogram, Decimal('1.2000'))
        self.assertEqual(line.total_price, Decimal('60.00'))

    def test_kg_per_unit_dropped_for_other_categories(self):
        invoice = TestDataFactory.create_invoice(supplier=self.supplier)
        line = InvoiceLine.objects.create(
            invoice=invoice, name='Penicillin', category='animal_medicine',
            quantity=Decimal('1'), price=Decimal('5.00'), kg_per_unit=Decimal('1')
        )
        self.assertIsNone(line.kg_per_unit)
        self.assertIsNone(line.price_per_kilogram)


class InvoiceAPITests(TestCase):
    """Test invoice API endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.supplier = TestDataFactory.create_supplier(enterprise_name='Green Feed Ltd')

    def test_create_invoice(self):
        data = {
            'supplier': self.supplier.id,
            'invoice_date': timezone.localdate().isoformat(),
            'lines': [
                {'name': 'Barley', 'category': 'animal_feed', 'quantity': '4', 'price': '25.00', 'kg_per_unit': '25'},
                {'name': 'Vitamins', 'category': 'animal_medicine', 'quantity': '2', 'price': '7.50'},
            ]
        }
        response = self.client.post('/api/v1/invoices/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['grand_total'], '115.00')
        self.assertEqual(response.data['supplier_enterprise'], 'Green Feed Ltd')
        self.assertEqual(response.data['created_by'], self.user.id)
        self.assertEqual(len(response.data['lines']), 2)

    def test_create_invoice_without_lines(self):
        response = self.client.post('/api/v1/invoices/', {'supplier': self.supplier.id, 'lines': []}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('lines', response.data)

    def test_create_invoice_with_zero_quantity(self):
        data = {'supplier': self.supplier.id, 'lines': [{'name': 'Barley', 'quantity': '0', 'price': '1'}]}
        response = self.client.post('/api/v1/invoices/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_duplicate_invoice_number(self):
        invoice = TestDataFactory.create_invoice(supplier=self.supplier)
        data = {
            'supplier': self.supplier.id,
            'invoice_number': invoice.invoice_number,
            'lines': [{'name': 'Barley', 'quantity': '1', 'price': '1'}],
        }
        response = self.client.post('/api/v1/invoices/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('invoice_number', response.data)

    def test_list_is_paginated(self):
        for _ in range(3):
            TestDataFactory.create_invoice(supplier=self.supplier)
        response = self.client.get('/api/v1/invoices/?limit=2')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 3)
        self.assertEqual(len(response.data['results']), 2)
        self.assertEqual(response.data['total_pages'], 2)

    def test_filter_by_date(self):
        TestDataFactory.create_invoice(supplier=self.supplier, invoice_date=date(2023, 6, 1))
        TestDataFactory.create_invoice(supplier=self.supplier)
        response = self.client.get('/api/v1/invoices/?date_to=2023-12-31')
        self.assertEqual(response.data['count'], 1)

    def test_filter_by_supplier(self):
        other = TestDataFactory.create_supplier()
        TestDataFactory.create_invoice(supplier=self.supplier)
        TestDataFactory.create_invoice(supplier=other)
        response = self.client.get(f'/api/v1/invoices/?supplier={other.id}')
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['results'][0]['supplier'], other.id)

    def test_malformed_filters_are_rejected(self):
        response = self.client.get('/api/v1/invoices/?date_from=notadate')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('date_from', response.data)

        response = self.client.get('/api/v1/invoices/?supplier=abc')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('supplier', response.data)

    def test_delete_invoice(self):
        invoice = TestDataFactory.create_invoice(supplier=self.supplier)
        response = self.client.delete(f'/api/v1/invoices/{invoice.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(SupplierInvoice.objects.filter(pk=invoice.id).exists())
