"""
Test suite for sponsor analytics
Tests: period keys, rounding, every aggregation, sponsor metrics and ranges, endpoint access and caching
"""
from datetime import date, datetime, timedelta, timezone as dt_timezone
from unittest import mock

from django.core.cache import cache
from django.test import TestCase, SimpleTestCase
from rest_framework import status
from rest_framework.test import APIClient

from farmlab.analytics.farm_insights import calculate_farm_insights
from farmlab.analytics.inventory_monitor import calculate_inventory_analytics
from farmlab.analytics.invoice_analytics import calculate_invoice_analytics
from farmlab.analytics.periods import month_key, quarter_key, week_key, sunday_weekday, shift_month, trailing_months
from farmlab.analytics.registration import calculate_registration_analytics
from farmlab.analytics.rounding import round_half_up, percentage, plain_number
from farmlab.analytics.sponsor_analytics import calculate_sponsor_analytics
from farmlab.analytics.sponsor_metrics import calculate_sponsor_metrics
from farmlab.analytics.stock_availability import calculate_stock_availability
from farmlab.analytics.stock_impact import calculate_stock_impact
from farmlab.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from farmlab.onboarding.models import RegistrationResponse, WaitlistEntry
from farmlab.onboarding.questionnaire import ROLE_FARMER, ROLE_INVESTOR, ROLE_TECHNOLOGIST

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=dt_timezone.utc)
TODAY = NOW.date()


class PeriodAndRoundingTests(SimpleTestCase):
    def test_period_keys(self):
        self.assertEqual(month_key(date(2024, 3, 9)), '2024-03')
        self.assertEqual(quarter_key(date(2024, 11, 2)), '2024-Q4')
        self.assertEqual(sunday_weekday(date(2024, 6, 16)), 0)

    def test_week_starts_on_sunday(self):
        self.assertEqual(week_key(date(2024, 1, 1)), '2024-W01')
        self.assertEqual(week_key(date(2024, 1, 6)), '2024-W01')
        self.assertEqual(week_key(date(2024, 1, 7)), '2024-W02')

    def test_month_shifts_cross_years(self):
        self.assertEqual(shift_month(date(2024, 1, 31), -1), date(2023, 12, 1))
        self.assertEqual(shift_month(date(2024, 11, 15), 2), date(2025, 1, 1))
        self.assertEqual(
            trailing_months(date(2024, 2, 29), 3),
            [date(2023, 12, 1), date(2024, 1, 1), date(2024, 2, 1)]
        )

    def test_round_half_up(self):
        self.assertEqual(round_half_up(2.5), 3)
        self.assertEqual(round_half_up(-2.5), -2)
        self.assertEqual(round_half_up(0.125, 2), 0.13)
        self.assertIsNone(round_half_up(None))

    def test_percentage(self):
        self.assertEqual(percentage(1, 3), 33)
        self.assertEqual(percentage(5, 0), 0)

    def test_plain_number(self):
        self.assertEqual(str(plain_number(150.0)), '150')
        self.assertEqual(plain_number(12.5), 12.5)


class InventoryMonitorTests(SimpleTestCase):
    def setUp(self):
        self.invoices = [
            {
                'id': 1, 'supplier_id': 1, 'supplier_name': 'Green Feed', 'grand_total': 300.0,
                'invoice_date': TODAY - timedelta(days=10), 'created_at': NOW - timedelta(days=10),
                'lines': [{'name': 'Barley', 'category': 'animal_feed', 'quantity': 10, 'price': 30, 'total_price': 300.0}],
            },
            {
                'id': 2, 'supplier_id': 2, 'supplier_name': 'Vet Supply', 'grand_total': 100.0,
                'invoice_date': TODAY - timedelta(days=200), 'created_at': NOW - timedelta(days=200),
                'lines': [{'name': 'Ivermectin', 'category': 'animal_medicine', 'quantity': 4, 'price': 25, 'total_price': 100.0}],
            },
        ]
        self.medical = [{
            'family': 'medical', 'name': 'Ivermectin', 'quantity': 5, 'unit_price': 10.0,
            'reorder_level': 10, 'expiry_date': TODAY + timedelta(days=10), 'created_at': NOW - timedelta(days=1),
        }]
        self.food = [{
            'family': 'food', 'name': 'Barley', 'quantity': 100, 'unit_price': 2.0,
            'reorder_level': 50, 'expiry_date': None, 'created_at': NOW - timedelta(days=2),
        }]
        self.result = calculate_inventory_analytics(
            suppliers=[{'id': 1}, {'id': 2}, {'id': 3}],
            products=[{'id': 1}],
            medical_stock=self.medical,
            food_stock=self.food,
            invoices=self.invoices,
            medicine_units=[{'category': 'Antiparasitic'}],
            now=NOW,
        )

    def test_summary(self):
        summary = self.result['summary']
        self.assertEqual(summary['total_suppliers'], 3)
        self.assertEqual(summary['active_suppliers'], 1)
        self.assertEqual(summary['total_invoices'], 2)
        self.assertEqual(summary['inventory_value'], 250.0)

    def test_supplier_metrics(self):
        metrics = self.result['suppliers']['metrics']
        self.assertEqual(metrics['concentration'], 75)
        self.assertEqual(metrics['average_order_value'], 200)
        self.assertEqual(metrics['diversity_score'], 38)
        self.assertEqual(self.result['suppliers']['top'][0]['name'], 'Green Feed')

    def test_health(self):
        health = self.result['health']
        self.assertEqual(health['overall_score'], 73)
        self.assertEqual(health['stock_levels'], {'good': 1, 'low': 0, 'critical': 1})
        self.assertEqual(health['expiry'], {'fresh': 1, 'expiring_soon': 1, 'expired': 0})
        self.assertEqual(len(health['recommendations']), 2)

    def test_empty_health_is_perfect(self):
        result = calculate_inventory_analytics([], [], [], [], [], [], NOW)
        self.assertEqual(result['health']['overall_score'], 100)
        self.assertEqual(result['alerts'], [])
        self.assertIsNone(result['timestamps']['last_invoice'])

    def test_alerts(self):
        titles = [alert['title'] for alert in self.result['alerts']]
        self.assertEqual(titles, ['Low Medical Stock', 'Items Expiring Soon', 'Inactive Suppliers'])

    def test_activity_is_newest_first(self):
        activity = self.result['activity']
        self.assertEqual(activity[0]['title'], 'Stock added: Ivermectin')
        invoice_entry = next(a for a in activity if a['type'] == 'invoice')
        self.assertEqual(invoice_entry['description'], '1 items - $300')

    def test_products(self):
        products = self.result['products']
        self.assertEqual(products['metrics']['total_products'], 2)
        self.assertEqual(products['metrics']['active_products'], 1)
        self.assertEqual(products['top']['by_spending'][0]['name'], 'Barley')


class InvoiceAnalyticsTests(SimpleTestCase):
    def setUp(self):
        self.invoices = [
            {
                'id': 1, 'supplier_id': 1, 'supplier_name': 'Green Feed', 'grand_total': 600.0,
                'invoice_date': date(2024, 5, 10),
                'lines': [{'name': 'Barley', 'category': 'animal_feed', 'quantity': 20, 'price': 30, 'total_price': 600.0}],
            },
            {
                'id': 2, 'supplier_id': 1, 'supplier_name': 'Green Feed', 'grand_total': 200.0,
                'invoice_date': date(2024, 6, 3),
                'lines': [{'name': 'Barley', 'category': 'animal_feed', 'quantity': 5, 'price': 40, 'total_price': 200.0}],
            },
            {
                'id': 3, 'supplier_id': 2, 'supplier_name': 'Vet Supply', 'grand_total': 50.0,
                'invoice_date': date(2024, 6, 5),
                'lines': [{'name': 'Vitamins', 'category': 'animal_medicine', 'quantity': 2, 'price': 25, 'total_price': 50.0}],
            },
        ]
        self.result = calculate_invoice_analytics(self.invoices)

    def test_empty(self):
        self.assertEqual(calculate_invoice_analytics([]), {
            'total_invoices': 0, 'summary': {}, 'spending': {}, 'trends': {}, 'suppliers': {}, 'insights': [],
        })

    def test_summary(self):
        self.assertEqual(self.result['summary'], {
            'total_amount': 850,
            'average_invoice_value': 283,
            'largest_invoice': 600,
            'smallest_invoice': 50,
            'average_items_per_invoice': 9,
            'total_unique_products': 2,
            'active_suppliers': 2,
            'total_quantity_purchased': 27,
        })

    def test_monthly_trends_and_growth(self):
        months = self.result['spending']['monthly_trends']
        self.assertEqual([m['period'] for m in months], ['2024-05', '2024-06'])
        self.assertEqual(months[1]['amount'], 250)
        self.assertEqual(months[1]['average_invoice_value'], 125)
        growth = self.result['spending']['growth_analysis']
        self.assertEqual(growth['month_over_month'], -58)
        self.assertEqual(growth['trend'], 'decreasing')
        self.assertEqual(growth['quarter_over_quarter'], 0)

    def test_quarterly_spending(self):
        quarterly = self.result['spending']['time_based_spending']['quarterly']
        self.assertEqual(quarterly, [{'period': '2024-Q2', 'amount': 850}])

    def test_size_distribution(self):
        sizes = self.result['spending']['spending_patterns']['size_distribution']
        self.assertEqual([s['count'] for s in sizes], [1, 1, 1, 0])
        self.assertIsNone(sizes[-1]['max'])

    def test_suppliers(self):
        analysis = self.result['suppliers']['analysis']
        self.assertEqual(analysis[0]['supplier_name'], 'Green Feed')
        self.assertEqual(analysis[0]['percentage'], 94)
        self.assertEqual(self.result['suppliers']['performance'][0]['reliability'], 'Low')

    def test_products(self):
        products = self.result['products']
        self.assertEqual(products['top_products'][0]['product_name'], 'Barley')
        self.assertEqual(products['price_analysis'], {
            'average_price': 29,
            'median_price': 32,
            'price_range': {'min': 25, 'max': 32},
        })

    def test_insights(self):
        self.assertEqual([i['type'] for i in self.result['insights']], ['risk', 'opportunity'])


class StockAvailabilityTests(SimpleTestCase):
    def setUp(self):
        self.medical = [{
            'name': 'Ivermectin', 'quantity': 3, 'unit_price': 10.0, 'reorder_level': 10,
            'expiry_date': date(2024, 6, 1), 'category': 'Antiparasitic',
        }]
        self.food = [{
            'name': 'Barley', 'quantity': 60, 'unit_price': 2.0, 'reorder_level': None,
            'expiry_date': date(2024, 7, 30), 'category': '', 'feed_type': '',
        }]
        self.result = calculate_stock_availability(self.medical, self.food, [{'category': None}], NOW)

    def test_medicine_item(self):
        item = self.result['medicine']['items'][0]
        self.assertTrue(item['is_expired'])
        self.assertTrue(item['is_critical_stock'])
        self.assertEqual(item['availability_score'], 10)
        self.assertEqual(item['status'], 'expired')
        self.assertEqual(self.result['medicine']['categories'][0]['health_score'], 10)

    def test_feed_item_uses_feed_defaults(self):
        item = self.result['feed']['items'][0]
        self.assertEqual(item['reorder_level'], 50)
        self.assertTrue(item['is_expiring_soon'])
        self.assertEqual(item['availability_score'], 50)
        self.assertEqual(item['status'], 'expiring-soon')
        self.assertEqual(self.result['feed']['categories'][0]['name'], 'General Feed')
        self.assertEqual(self.result['feed']['feed_types'][0]['name'], 'Mixed Feed')

    def test_availability(self):
        availability = self.result['availability']
        self.assertEqual(availability['medicine']['status'], 'critical')
        self.assertEqual(availability['feed']['status'], 'fair')
        self.assertEqual(availability['overall'], {'score': 30, 'status': 'poor'})

    def test_alerts_and_insights(self):
        titles = [a['title'] for a in self.result['medicine']['alerts']]
        self.assertEqual(titles, ['Critical Medicine Stock', 'Expired Medicines'])
        insight_titles = [i['title'] for i in self.result['overall']]
        self.assertIn('Critical Stock Levels', insight_titles)
        self.assertIn('Medicine Inventory Health', insight_titles)
        distribution = next(i for i in self.result['overall'] if i['title'] == 'Inventory Value Distribution')
        self.assertEqual(distribution['description'], '20% medicine, 80% feed')

    def test_units_without_category(self):
        self.assertEqual(self.result['medicine']['medicine_units']['by_category'][0]['name'], 'General')

    def test_empty(self):
        result = calculate_stock_availability([], [], [], NOW)
        self.assertEqual(result['availability']['overall'], {'score': 100, 'status': 'excellent'})
        self.assertEqual(result['summary']['combined_value'], 0)


class StockImpactTests(SimpleTestCase):
    def test_impact(self):
        invoices = [{
            'id': 7, 'invoice_date': date(2024, 6, 1), 'grand_total': 200.0,
            'lines': [{'name': 'Barley', 'quantity': 10}],
        }]
        result = calculate_stock_impact(
            invoices,
            food_stock=[{'quantity': 100}, {'quantity': 40}],
            medical_stock=[{'quantity': 10}],
            medicine_units=[{'is_used': True}, {'is_used': False}],
        )
        self.assertEqual(result['total_items'], 150)
        feed, medical = result['category_breakdown']
        self.assertEqual((feed['contributed'], feed['utilized'], feed['percentage']), (100, 42, 93))
        self.assertEqual((medical['contributed'], medical['utilized'], medical['percentage']), (2, 1, 7))
        self.assertEqual(result['utilization_stats']['total_utilized'], 43)
        self.assertEqual(result['utilization_stats']['utilization_rate'], 42)
        self.assertEqual(result['impact_metrics'], {
            'animals_supported': 225,
            'days_of_supply': 8,
            'cost_savings': 30,
            'sustainability': 89,
        })
        self.assertEqual(
            result['recent_contributions'][0]['impact'],
            'Supported farm operations with 10 items, benefiting approximately 20 animals'
        )

    def test_no_stock(self):
        result = calculate_stock_impact([], [], [], [])
        self.assertEqual(result['total_items'], 0)
        self.assertEqual(result['category_breakdown'][0]['percentage'], 0)
        self.assertEqual(result['impact_metrics']['sustainability'], 85)


class FarmInsightsTests(SimpleTestCase):
    def setUp(self):
        now_ts = int(NOW.timestamp())
        self.latest = [
            {'station_id': 'sensorstation1', 'timestamp': now_ts - 60, 'datetime': 'a',
             'air_temp_c': 31.0, 'air_humidity_percent': 50.0},
            {'station_id': 'sensorstation2', 'timestamp': now_ts - 3600, 'datetime': 'b',
             'air_temp_c': 20.0, 'air_humidity_percent': 70.0},
        ]
        self.day_old = [
            {'air_temp_c': 25.0, 'air_humidity_percent': 55.0},
            {'air_temp_c': 19.0, 'air_humidity_percent': 65.0},
        ]
        self.plates = [
            {'status': 'growing', 'expected_harvest_date': TODAY + timedelta(days=1)},
            {'status': 'harvested', 'expected_harvest_date': TODAY - timedelta(days=3)},
        ]
        self.result = calculate_farm_insights(
            self.latest, self.day_old, [{'quantity': 200}], [{'quantity': 25}], self.plates, NOW
        )

    def test_devices(self):
        self.assertEqual(self.result['device_metrics'], {
            'total_devices': 2, 'online_devices': 1, 'uptime_percentage': 50, 'data_collection_rate': 48,
        })
        self.assertEqual(self.result['operational_efficiency'], {
            'resource_utilization': 45, 'productivity_index': 83, 'automation_level': 10,
        })

    def test_environment(self):
        env = self.result['environmental_data']
        self.assertEqual(env['average_temperature'], 25.5)
        self.assertEqual(env['humidity'], 60.0)
        self.assertIsNone(env['water_temperature'])
        self.assertEqual(env['trends'], {'temperature': 4, 'humidity': 0})

    def test_animal_welfare(self):
        self.assertEqual(self.result['animal_welfare'], {
            'total_animals': 20, 'health_score': 90, 'feeding_efficiency': 85,
        })

    def test_plates(self):
        self.assertEqual(self.result['plates'], {
            'total_plates': 2, 'by_status': {'growing': 1, 'harvested': 1}, 'ready_for_harvest': 1,
        })

    def test_alerts(self):
        alerts = self.result['alerts']
        self.assertEqual([a['id'] for a in alerts], ['temperature-sensorstation1', 'offline-sensorstation2'])
        self.assertEqual([a['type'] for a in alerts], ['warning', 'critical'])

    def test_no_stations(self):
        result = calculate_farm_insights([], [], [], [], [], NOW)
        self.assertEqual(result['device_metrics']['uptime_percentage'], 0)
        self.assertIsNone(result['environmental_data']['average_temperature'])
        self.assertEqual(result['alerts'], [])


class RegistrationAnalyticsTests(SimpleTestCase):
    def setUp(self):
        self.responses = [
            {
                'roles': [ROLE_FARMER], 'country': 'North Macedonia', 'farm_size': '1–5 ha',
                'challenges': ['Labor shortages', 'Climate unpredictability'],
                'pricing_model': 'Monthly subscription',
                'submitted_at': datetime(2024, 5, 2, 9, 0, tzinfo=dt_timezone.utc),
            },
            {
                'roles': [ROLE_INVESTOR, ROLE_FARMER], 'country': 'Germany', 'farm_size': '1–5 ha',
                'investment_focus': 'AgriTech',
                'submitted_at': datetime(2024, 6, 1, 9, 0, tzinfo=dt_timezone.utc),
            },
            {
                'roles': [ROLE_TECHNOLOGIST], 'country': '', 'experience_level': 'expert',
                'submitted_at': datetime(2024, 6, 3, 9, 0, tzinfo=dt_timezone.utc),
            },
        ]
        self.result = calculate_registration_analytics(self.responses)

    def test_empty(self):
        result = calculate_registration_analytics([])
        self.assertEqual(result['total_responses'], 0)
        self.assertEqual(result['insights'], [])

    def test_roles_share_all_responses(self):
        roles = self.result['demographics']['roles']
        self.assertEqual(roles[0], {'category': ROLE_FARMER, 'count': 2, 'percentage': 67})
        self.assertEqual(len(roles), 3)

    def test_summary(self):
        summary = self.result['summary']
        self.assertEqual(summary['most_common_farm_size'], '1–5 ha')
        self.assertEqual(summary['avg_tech_experience'], 4.0)
        self.assertIn({'category': 'Unknown', 'count': 1, 'percentage': 33}, summary['top_countries'])

    def test_single_choice_shares_answered_responses(self):
        self.assertEqual(self.result['demographics']['farm_sizes'], [
            {'category': '1–5 ha', 'count': 2, 'percentage': 100},
        ])

    def test_trends(self):
        self.assertEqual(self.result['trends']['monthly'], [
            {'period': '2024-05', 'count': 1},
            {'period': '2024-06', 'count': 2},
        ])

    def test_insights(self):
        insights = {i['type']: i for i in self.result['insights']}
        self.assertEqual(
            insights['investment_opportunity']['description'],
            '1 potential investors, primarily interested in AgriTech'
        )
        self.assertEqual(
            insights['technology_adoption']['description'],
            '100% of users have advanced/expert tech experience'
        )


class SponsorMetricsTests(SimpleTestCase):
    def setUp(self):
        def invoice(pk, grand_total, days_ago, *names):
            return {
                'id': pk, 'invoice_number': f'INV-{pk}', 'supplier_id': 1, 'supplier_name': 'Green Feed',
                'grand_total': grand_total, 'invoice_date': TODAY - timedelta(days=days_ago),
                'created_at': NOW - timedelta(days=days_ago),
                'lines': [{'name': name, 'category': 'animal_feed', 'quantity': 1, 'price': 1, 'total_price': 1.0}
                          for name in names],
            }

        self.invoices = [
            invoice(4, 250.4, 5, 'Barley', 'Hay'),
            invoice(3, 100.0, 20, 'Barley'),
            invoice(2, 50.0, 30, 'Vitamins'),
            invoice(1, 10.0, 60, 'Salt'),
        ]
        self.food = [
            {'id': 1, 'family': 'food', 'quantity': 120,
             'created_at': NOW - timedelta(days=40), 'updated_at': NOW - timedelta(days=1)},
            {'id': 2, 'family': 'food', 'quantity': 30,
             'created_at': NOW - timedelta(days=3), 'updated_at': None},
        ]
        self.medical = [
            {'id': 5, 'family': 'medical', 'quantity': 15,
             'created_at': NOW - timedelta(days=90), 'updated_at': NOW - timedelta(hours=2)},
        ]

    def test_totals(self):
        result = calculate_sponsor_metrics(self.invoices, self.food, self.medical)
        self.assertEqual(result['total_contribution'], 410)
        self.assertEqual(result['items_sponsored'], 4)
        self.assertEqual(result['farm_impact'], 17)
        self.assertEqual(result['community_reach'], 375)

    def test_recent_activities(self):
        activities = calculate_sponsor_metrics(self.invoices, self.food, self.medical)['recent_activities']
        self.assertEqual(
            [a['id'] for a in activities],
            ['invoice-4', 'invoice-3', 'invoice-2', 'medical-stock-5', 'food-stock-1']
        )
        self.assertEqual(activities[0]['description'], 'New invoice: INV-4 (2 items)')
        self.assertEqual(activities[0]['date'], '2024-06-10')
        self.assertEqual(activities[0]['value'], 250.4)
        self.assertEqual(activities[3]['description'], 'Stock updated: 15 units available')
        self.assertEqual(activities[3]['date'], '2024-06-15')

    def test_default_goals(self):
        goals = calculate_sponsor_metrics(self.invoices, self.food, self.medical)['goal_progress']
        self.assertEqual(
            [(g['category'], g['current'], g['target']) for g in goals],
            [('Sponsorship Value', 410, 5000), ('Items Sponsored', 4, 50)]
        )

    def test_goals_follow_interests_and_expectations(self):
        goals = calculate_sponsor_metrics(
            self.invoices, self.food, self.medical,
            interests=['sustainability', 'collaboration'], expectations=['improve_quality'],
        )['goal_progress']
        self.assertEqual(
            [(g['category'], g['current'], g['target']) for g in goals],
            [('Cost Efficiency', 410, 10000), ('Quality Impact', 17, 100), ('Community Reach', 375, 1000)]
        )

    def test_empty_data(self):
        result = calculate_sponsor_metrics([], [], [])
        self.assertEqual(result['total_contribution'], 0)
        self.assertEqual(result['recent_activities'], [])
        self.assertEqual(len(result['goal_progress']), 2)


class SponsorRangeAnalyticsTests(SimpleTestCase):
    def setUp(self):
        now_ts = int(NOW.timestamp())
        self.invoices = [
            {
                'id': 3, 'supplier_name': 'Green Feed', 'grand_total': 200.0, 'invoice_date': date(2024, 6, 3),
                'lines': [{'name': 'Barley', 'category': 'animal_feed', 'quantity': 5, 'price': 40, 'total_price': 200.0}],
            },
            {
                'id': 2, 'supplier_name': None, 'grand_total': 50.0, 'invoice_date': date(2024, 4, 20),
                'lines': [{'name': 'Vitamins', 'category': 'animal_medicine', 'quantity': 2, 'price': 25, 'total_price': None}],
            },
            {
                'id': 1, 'supplier_name': 'Old Supplier', 'grand_total': 999.0, 'invoice_date': date(2024, 2, 10),
                'lines': [{'name': 'Hay', 'category': 'animal_feed', 'quantity': 1, 'price': 999, 'total_price': 999.0}],
            },
        ]
        self.food = [
            {'quantity': 100, 'created_at': datetime(2024, 3, 20, tzinfo=dt_timezone.utc)},
            {'quantity': 40, 'created_at': datetime(2024, 5, 2, tzinfo=dt_timezone.utc)},
        ]
        self.medical = [{'quantity': 10, 'created_at': datetime(2024, 6, 1, tzinfo=dt_timezone.utc)}]
        self.latest = [
            {'station_id': 'sensorstation1', 'timestamp': now_ts - 60, 'datetime': 'a', 'air_temp_c': 31.0},
            {'station_id': 'sensorstation2', 'timestamp': now_ts - 3600, 'datetime': 'b', 'air_temp_c': 20.0},
        ]
        self.result = calculate_sponsor_analytics(
            self.invoices, self.food, self.medical, self.latest, NOW, range_name='3months'
        )

    def test_stock_trends_rebuild_month_end_levels(self):
        self.assertEqual(self.result['stock_trends'], [
            {'month': '2024-04', 'label': 'Apr', 'food': 100, 'medical': 0, 'total': 100},
            {'month': '2024-05', 'label': 'May', 'food': 140, 'medical': 0, 'total': 140},
            {'month': '2024-06', 'label': 'Jun', 'food': 140, 'medical': 10, 'total': 150},
        ])

    def test_device_activity_counts_alerts(self):
        self.assertEqual(self.result['device_activity'], {
            'total_devices': 2, 'online_devices': 1, 'uptime_average': 50, 'alerts_today': 2,
        })

    def test_invoices_outside_range_are_ignored(self):
        invoices = self.result['invoice_analytics']
        self.assertEqual(invoices['monthly_spending'], [
            {'month': '2024-04', 'amount': 50},
            {'month': '2024-05', 'amount': 0},
            {'month': '2024-06', 'amount': 200},
        ])
        self.assertEqual(invoices['category_breakdown'], [
            {'category': 'animal_feed', 'amount': 200, 'percentage': 80},
            {'category': 'animal_medicine', 'amount': 50, 'percentage': 20},
        ])
        self.assertEqual(invoices['supplier_distribution'], [
            {'supplier': 'Green Feed', 'amount': 200},
            {'supplier': 'Unknown Supplier', 'amount': 50},
        ])

    def test_impact_metrics(self):
        self.assertEqual(self.result['impact_metrics'], {
            'animals_helped': 330,
            'resources_saved': 40,
            'efficiency_gain': 35,
            'sustainability_score': 79,
        })

    def test_one_year_range(self):
        result = calculate_sponsor_analytics(
            self.invoices, self.food, self.medical, self.latest, NOW, range_name='1year'
        )
        self.assertEqual(result['range'], '1year')
        self.assertEqual(len(result['stock_trends']), 12)
        self.assertEqual(result['stock_trends'][0]['month'], '2023-07')
        self.assertEqual(result['impact_metrics']['sustainability_score'], 81)

    def test_sustainability_score_is_capped(self):
        invoices = [dict(self.invoices[0], id=n) for n in range(20)]
        result = calculate_sponsor_analytics(invoices, [], [], [], NOW)
        self.assertEqual(result['impact_metrics']['sustainability_score'], 100)
        self.assertEqual(result['device_activity']['uptime_average'], 0)


class SponsorAnalyticsAPITests(TestCase):
    """Access control, payloads and caching of the sponsor endpoints"""

    ENDPOINTS = [
        '/api/v1/sponsor/inventory-monitor/',
        '/api/v1/sponsor/invoice-analytics/',
        '/api/v1/sponsor/stock-availability/',
        '/api/v1/sponsor/stock-impact/',
        '/api/v1/sponsor/registration-analytics/',
        '/api/v1/sponsor/farm-insights/',
        '/api/v1/sponsor/metrics/',
        '/api/v1/sponsor/analytics/',
    ]

    def setUp(self):
        cache.clear()
        self.sponsor = TestDataFactory.create_user(role='sponsor')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.sponsor)

    def test_anonymous_is_unauthorized(self):
        for url in self.ENDPOINTS:
            response = APIClient().get(url)
            self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED, url)

    def test_other_roles_are_forbidden(self):
        client = AuthenticatedAPIClient().authenticate_user(TestDataFactory.create_user(role='manager'))
        for url in self.ENDPOINTS:
            response = client.get(url)
            self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN, url)

    def test_sponsor_and_admin_can_read_empty_data(self):
        admin_client = AuthenticatedAPIClient().authenticate_user(TestDataFactory.create_user(role='admin'))
        for client in (self.client, admin_client):
            for url in self.ENDPOINTS:
                response = client.get(url)
                self.assertEqual(response.status_code, status.HTTP_200_OK, url)

    def test_inventory_monitor(self):
        supplier = TestDataFactory.create_supplier(enterprise_name='Green Feed')
        TestDataFactory.create_invoice(supplier=supplier)
        TestDataFactory.create_food_stock(quantity=10)
        response = self.client.get('/api/v1/sponsor/inventory-monitor/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['summary']['total_invoices'], 1)
        self.assertEqual(response.data['summary']['food_items'], 1)
        self.assertEqual(response.data['suppliers']['top'][0]['name'], 'Green Feed')

    def test_invoice_analytics(self):
        TestDataFactory.create_invoice(lines=[('Barley', 'animal_feed', '4', '25.00')])
        response = self.client.get('/api/v1/sponsor/invoice-analytics/')
        self.assertEqual(response.data['total_invoices'], 1)
        self.assertEqual(response.data['summary']['total_amount'], 100)

    def test_registration_analytics(self):
        user = TestDataFactory.create_user(role='waiting_list')
        RegistrationResponse.objects.create(user=user, roles=[ROLE_FARMER], country='Germany', answers={
            'full_name': 'Ada Farmer', 'farm_size': '5–20 ha',
        })
        response = self.client.get('/api/v1/sponsor/registration-analytics/')
        self.assertEqual(response.data['total_responses'], 1)
        self.assertEqual(response.data['summary']['most_common_farm_size'], '5–20 ha')

    def test_farm_insights(self):
        TestDataFactory.create_reading('sensorstation1', air_temp_c=24.0)
        TestDataFactory.create_plate()
        response = self.client.get('/api/v1/sponsor/farm-insights/')
        self.assertEqual(response.data['device_metrics']['online_devices'], 1)
        self.assertEqual(response.data['environmental_data']['average_temperature'], 24.0)
        self.assertEqual(response.data['plates']['total_plates'], 1)

    def test_writes_invalidate_cached_payload(self):
        TestDataFactory.create_food_stock(quantity=10)
        first = self.client.get('/api/v1/sponsor/stock-impact/')
        self.assertEqual(first.data['total_items'], 10)

        with mock.patch('farmlab.analytics.records.food_stock_records') as records:
            cached = self.client.get('/api/v1/sponsor/stock-impact/')
            records.assert_not_called()
        self.assertEqual(cached.data['total_items'], 10)

        TestDataFactory.create_food_stock(quantity=5)
        fresh = self.client.get('/api/v1/sponsor/stock-impact/')
        self.assertEqual(fresh.data['total_items'], 15)

    def test_failure_is_reported_as_500(self):
        with mock.patch('farmlab.analytics.records.invoice_records', side_effect=RuntimeError('db down')):
            response = self.client.get('/api/v1/sponsor/invoice-analytics/')
        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.data, {'error': 'Failed to fetch invoice analytics'})

    def test_sponsor_metrics_goals_follow_waitlist_entry(self):
        WaitlistEntry.objects.create(
            user_type='investor', tech_experience='advanced', name='Sam Sponsor',
            email=self.sponsor.email.upper(), location='Berlin', interests=['monitoring'],
        )
        TestDataFactory.create_invoice(lines=[('Barley', 'animal_feed', '4', '25.00')])
        response = self.client.get('/api/v1/sponsor/metrics/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total_contribution'], 100)
        self.assertEqual([g['category'] for g in response.data['goal_progress']], ['Quality Impact'])

        admin_client = AuthenticatedAPIClient().authenticate_user(TestDataFactory.create_user(role='admin'))
        response = admin_client.get('/api/v1/sponsor/metrics/')
        self.assertEqual(
            [g['category'] for g in response.data['goal_progress']],
            ['Sponsorship Value', 'Items Sponsored']
        )

    def test_sponsor_analytics_range(self):
        TestDataFactory.create_reading('sensorstation1', air_temp_c=24.0)
        response = self.client.get('/api/v1/sponsor/analytics/')
        self.assertEqual(response.data['range'], '6months')
        self.assertEqual(len(response.data['stock_trends']), 6)
        self.assertEqual(response.data['device_activity']['online_devices'], 1)

        response = self.client.get('/api/v1/sponsor/analytics/', {'range': '1year'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['stock_trends']), 12)

    def test_sponsor_analytics_rejects_unknown_range(self):
        response = self.client.get('/api/v1/sponsor/analytics/', {'range': '2weeks'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('error', response.data)
