"""
Test suite for Sensors module
Tests: reading windows, hourly comparison, summaries, microclimate indicators
"""
from datetime import timedelta
from unittest import mock

from django.test import TestCase, SimpleTestCase
from django.utils import timezone
from rest_framework import status

from farmlab.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from farmlab.sensors.microclimate import compute_microclimate_metrics, crop_vpd_status, insulation_performance
from farmlab.sensors.models import SensorReading
from farmlab.sensors.timeseries import (
    select_station_window, hourly_nearest, filter_range, metric_summary,
    data_range, reported_metrics, iso_from_timestamp
)


def record(timestamp, **metrics):
    return {'timestamp': timestamp, **metrics}


class TimeseriesTests(SimpleTestCase):
    def test_recent_window_is_kept_when_large_enough(self):
        recent = [record(t) for t in range(5)]
        self.assertEqual(select_station_window(recent, [record(-1)], minimum=3, limit=10), recent)

    def test_sparse_window_is_backfilled_chronologically(self):
        recent = [record(30), record(40)]
        older = [record(20), record(10), record(0)]
        window = select_station_window(recent, older, minimum=5, limit=3)
        self.assertEqual([r['timestamp'] for r in window], [20, 30, 40])

    def test_empty_window_falls_back_to_older(self):
        window = select_station_window([], [record(20), record(10), record(0)], limit=2)
        self.assertEqual([r['timestamp'] for r in window], [10, 20])

    def test_hourly_nearest_skips_marks_without_close_reading(self):
        now = 1_700_000_000
        hourly = hourly_nearest([record(now, air_temp_c=21.0)], now, hours=4)
        self.assertEqual([p['hour'] for p in hourly], [3, 4])
        self.assertEqual(hourly[-1]['timestamp'], now)
        self.assertEqual(hourly[0]['air_temp_c'], 21.0)
        self.assertIsNone(hourly[0]['gas_ppm'])

    def test_filter_range_is_inclusive(self):
        readings = [record(t) for t in (1, 2, 3, 4)]
        self.assertEqual([r['timestamp'] for r in filter_range(readings, 2, 3)], [2, 3])
        self.assertEqual(len(filter_range(readings)), 4)

    def test_metric_summary(self):
        readings = [record(1, air_temp_c=20.0), record(2, air_temp_c=23.0), record(3, air_temp_c=None)]
        summary = metric_summary(readings, ['air_temp_c', 'gas_ppm'])
        self.assertEqual(summary['air_temp_c'], {'min': 20.0, 'max': 23.0, 'avg': 21.5, 'count': 2})
        self.assertEqual(summary['gas_ppm'], {'min': None, 'max': None, 'avg': None, 'count': 0})

    def test_data_range(self):
        self.assertEqual(data_range([]), {'from': None, 'to': None, 'count': 0})
        result = data_range([record(0), record(60)])
        self.assertEqual(result['from'], '1970-01-01T00:00:00Z')
        self.assertEqual(result['to'], iso_from_timestamp(60))
        self.assertEqual(result['count'], 2)

    def test_reported_metrics(self):
        readings = [record(1, gas_ppm=5.0, air_temp_c=None), record(2, water_temp_c=18.0)]
        self.assertEqual(reported_metrics(readings), ['water_temp_c', 'gas_ppm'])


class MicroclimateTests(SimpleTestCase):
    def test_indicators(self):
        metrics = compute_microclimate_metrics(25, 60, 15, 80)
        self.assertEqual(metrics['delta_t'], 10)
        self.assertEqual(metrics['heating_degree_hours'], 0)
        self.assertEqual(metrics['cooling_degree_hours'], 1)
        self.assertEqual(metrics['humidity_gradient'], -20)
        self.assertAlmostEqual(metrics['temperature_humidity_index'], 22.69, places=2)
        self.assertAlmostEqual(metrics['dew_point_inside'], 16.69, delta=0.05)
        self.assertFalse(metrics['condensation_risk'])
        self.assertEqual(metrics['crop_vpd_status'], 'optimal')
        self.assertEqual(metrics['insulation_performance'], 'good')
        self.assertEqual(metrics['ventilation_efficiency'], 'moderate')
        self.assertIsNone(metrics['thermal_lag'])

    def test_saturated_air_dew_point_equals_temperature(self):
        metrics = compute_microclimate_metrics(20, 100, 20, 100)
        self.assertAlmostEqual(metrics['dew_point_inside'], 20.0, places=2)
        self.assertEqual(metrics['insulation_performance'], 'poor')
        self.assertEqual(metrics['ventilation_efficiency'], 'poor')

    def test_bands(self):
        self.assertEqual(crop_vpd_status(0.2), 'too low')
        self.assertEqual(crop_vpd_status(2.0), 'too high')
        self.assertEqual(insulation_performance(-3), 'moderate')


class SensorAPITests(TestCase):
    """Test sensor station endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.now = timezone.now()

    def test_ingest_single_and_batch(self):
        response = self.client.post('/api/v1/sensors/readings/', {
            'station_id': 'SensorStation1', 'recorded_at': self.now.isoformat(), 'air_temp_c': 21.5
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['station_id'], 'sensorstation1')

        response = self.client.post('/api/v1/sensors/readings/', [
            {'station_id': 'sensorstation2', 'recorded_at': self.now.isoformat(), 'gas_ppm': 410},
            {'station_id': 'sensorstation2', 'recorded_at': self.now.isoformat(), 'gas_ppm': 415},
        ], format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(SensorReading.objects.count(), 3)

    def test_ingest_rejects_bad_station_and_humidity(self):
        response = self.client.post('/api/v1/sensors/readings/', {
            'station_id': 'weather1', 'recorded_at': self.now.isoformat(), 'air_humidity_percent': 120
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('station_id', response.data)
        self.assertIn('air_humidity_percent', response.data)

    def test_station_list_returns_latest_reading(self):
        TestDataFactory.create_reading('sensorstation1', self.now - timedelta(hours=2), air_temp_c=18.0)
        TestDataFactory.create_reading('sensorstation1', self.now, air_temp_c=24.0)
        TestDataFactory.create_reading('sensorstation2', self.now)
        response = self.client.get('/api/v1/sensorstations/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        stations = response.data['sensor_stations']
        self.assertEqual([s['station_id'] for s in stations], ['sensorstation1', 'sensorstation2'])
        self.assertEqual(stations[0]['air_temp_c'], 24.0)

    def test_station_detail_backfills_sparse_window(self):
        TestDataFactory.create_reading(recorded_at=self.now - timedelta(days=10))
        TestDataFactory.create_reading(recorded_at=self.now - timedelta(hours=1))
        response = self.client.get('/api/v1/sensorstations/sensorstation1/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data_range']['count'], 2)
        timestamps = [r['timestamp'] for r in response.data['readings']]
        self.assertEqual(timestamps, sorted(timestamps))
        self.assertIn('air_temp_c', response.data['metrics'])

    def test_unknown_station_has_empty_window(self):
        response = self.client.get('/api/v1/sensorstations/sensorstation9/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['readings'], [])
        self.assertEqual(response.data['data_range']['count'], 0)

    def test_station_summary(self):
        TestDataFactory.create_reading(recorded_at=self.now - timedelta(hours=30), air_temp_c=5.0)
        TestDataFactory.create_reading(recorded_at=self.now - timedelta(hours=2), air_temp_c=20.0)
        TestDataFactory.create_reading(recorded_at=self.now - timedelta(hours=1), air_temp_c=22.0)
        response = self.client.get('/api/v1/sensorstations/sensorstation1/summary/?hours=24&metrics=air_temp_c')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['labels'], {'air_temp_c': 'Air Temp (°C)'})
        self.assertEqual(response.data['statistics']['air_temp_c']['min'], 20.0)
        self.assertEqual(response.data['statistics']['air_temp_c']['avg'], 21.0)
        self.assertNotIn('gas_ppm', response.data['readings'][0])

    def test_station_summary_only_loads_the_window(self):
        TestDataFactory.create_reading(recorded_at=self.now - timedelta(days=40), air_temp_c=5.0)
        TestDataFactory.create_reading(recorded_at=self.now - timedelta(hours=1), air_temp_c=22.0)
        with mock.patch('farmlab.sensors.views.filter_range', wraps=filter_range) as narrowed:
            response = self.client.get('/api/v1/sensorstations/sensorstation1/summary/?hours=24')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        loaded = narrowed.call_args[0][0]
        self.assertEqual([r['air_temp_c'] for r in loaded], [22.0])

    def test_station_summary_validation(self):
        response = self.client.get('/api/v1/sensorstations/sensorstation1/summary/?hours=abc')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.get('/api/v1/sensorstations/sensorstation1/summary/?hours=0')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.get(f'/api/v1/sensorstations/sensorstation1/summary/?hours={10 ** 9}')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.get('/api/v1/sensorstations/sensorstation1/summary/?metrics=rain_mm')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Unknown metrics: rain_mm')

    def test_comparison(self):
        TestDataFactory.create_reading('sensorstation1', self.now - timedelta(minutes=5))
        TestDataFactory.create_reading('sensorstation2', self.now - timedelta(days=3))
        response = self.client.get('/api/v1/sensorstations/comparison/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        by_station = {s['station_id']: s['hourly_data'] for s in response.data['station_data']}
        self.assertTrue(by_station['sensorstation1'])
        self.assertEqual(by_station['sensorstation2'], [])

    def test_microclimate(self):
        response = self.client.get('/api/v1/sensorstations/microclimate/?ti=25&hi=60&to=15&ho=80')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['crop_vpd_status'], 'optimal')

    def test_microclimate_validation(self):
        response = self.client.get('/api/v1/sensorstations/microclimate/?ti=25&hi=0&to=15')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('hi', response.data)
        self.assertIn('ho', response.data)
