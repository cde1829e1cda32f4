"""
Test suite for Hydroponics module
Tests: plate lifecycle, per-farm plate numbers, harvest readiness, summary
"""
from datetime import timedelta

from django.test import TestCase
from django.utils import timezone
from rest_framework import status

from farmlab.core.models import AuditLog
from farmlab.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from farmlab.hydroponics.models import BarleyPlate


class BarleyPlateModelTests(TestCase):
    def test_days_and_readiness(self):
        today = timezone.localdate()
        plate = TestDataFactory.create_plate(
            start_date=today - timedelta(days=5), expected_harvest_date=today + timedelta(days=2)
        )
        self.assertEqual(plate.days_growing(), 5)
        self.assertEqual(plate.days_until_harvest(), 2)
        self.assertTrue(plate.is_ready_for_harvest())

    def test_harvested_plate_is_never_ready(self):
        today = timezone.localdate()
        plate = TestDataFactory.create_plate(start_date=today - timedelta(days=9), expected_harvest_date=today)
        plate.apply_status('harvested')
        self.assertEqual(plate.actual_harvest_date, today)
        self.assertFalse(plate.is_ready_for_harvest())

    def test_leaving_harvested_clears_harvest_date(self):
        plate = TestDataFactory.create_plate()
        plate.apply_status('harvested')
        plate.apply_status('growing')
        self.assertIsNone(plate.actual_harvest_date)


class BarleyPlateAPITests(TestCase):
    """Test plate API endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.today = timezone.localdate()

    def plate_data(self, **overrides):
        data = {
            'plate_number': 'A1',
            'start_date': self.today.isoformat(),
            'expected_harvest_date': (self.today + timedelta(days=7)).isoformat(),
            'seed_weight': '1.250',
        }
        data.update(overrides)
        return data

    def test_create_plate(self):
        response = self.client.post('/api/v1/hydroponic-barley/', self.plate_data(), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], 'growing')
        self.assertEqual(response.data['farm_id'], 'default-farm')
        self.assertEqual(response.data['days_until_harvest'], 7)
        self.assertEqual(response.data['created_by'], self.user.id)

    def test_duplicate_plate_number_in_same_farm(self):
        self.client.post('/api/v1/hydroponic-barley/', self.plate_data(), format='json')
        response = self.client.post('/api/v1/hydroponic-barley/', self.plate_data(), format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data['error'], 'Plate number A1 already exists for this farm')

    def test_same_plate_number_in_other_farm(self):
        self.client.post('/api/v1/hydroponic-barley/', self.plate_data(), format='json')
        response = self.client.post('/api/v1/hydroponic-barley/', self.plate_data(farm_id='north-farm'), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

    def test_harvest_date_before_start(self):
        data = self.plate_data(expected_harvest_date=(self.today - timedelta(days=1)).isoformat())
        response = self.client.post('/api/v1/hydroponic-barley/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('expected_harvest_date', response.data)

    def test_non_positive_seed_weight(self):
        response = self.client.post('/api/v1/hydroponic-barley/', self.plate_data(seed_weight='0'), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_harvest_is_audited(self):
        plate = TestDataFactory.create_plate()
        response = self.client.patch(f'/api/v1/hydroponic-barley/{plate.id}/', {'status': 'harvested'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['actual_harvest_date'], self.today.isoformat())
        log = AuditLog.objects.get(action='harvest')
        self.assertEqual(log.changes['status'], {'old': 'growing', 'new': 'harvested'})

    def test_rename_to_taken_number(self):
        TestDataFactory.create_plate(plate_number='A1')
        plate = TestDataFactory.create_plate(plate_number='A2')
        response = self.client.patch(f'/api/v1/hydroponic-barley/{plate.id}/', {'plate_number': 'A1'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_list_filters_by_status(self):
        TestDataFactory.create_plate(status='growing')
        TestDataFactory.create_plate(status='ready')
        response = self.client.get('/api/v1/hydroponic-barley/?status=ready')
        self.assertEqual(len(response.data), 1)
        response = self.client.get('/api/v1/hydroponic-barley/?status=all')
        self.assertEqual(len(response.data), 2)

    def test_delete_plate(self):
        plate = TestDataFactory.create_plate()
        response = self.client.delete(f'/api/v1/hydroponic-barley/{plate.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(BarleyPlate.objects.filter(pk=plate.id).exists())

    def test_summary(self):
        TestDataFactory.create_plate(expected_harvest_date=self.today + timedelta(days=1))
        TestDataFactory.create_plate(
            start_date=self.today - timedelta(days=8),
            expected_harvest_date=self.today - timedelta(days=1),
            status='harvested',
            actual_harvest_date=self.today - timedelta(days=1),
        )
        response = self.client.get('/api/v1/hydroponic-barley/summary/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total_plates'], 2)
        self.assertEqual(response.data['by_status'], {'growing': 1, 'ready': 0, 'harvested': 1})
        self.assertEqual(response.data['ready_for_harvest'], 1)
        self.assertEqual(response.data['average_growing_days'], 7.0)

    def test_summary_rounds_average_half_up(self):
        for days in (7, 7, 7, 8):
            TestDataFactory.create_plate(
                start_date=self.today - timedelta(days=days + 1),
                expected_harvest_date=self.today - timedelta(days=1),
                status='harvested',
                actual_harvest_date=self.today - timedelta(days=1),
            )
        response = self.client.get('/api/v1/hydroponic-barley/summary/')
        # 29 / 4 = 7.25
        self.assertEqual(response.data['average_growing_days'], 7.3)
