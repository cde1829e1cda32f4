"""
Test suite for Core module
Tests: JWT login, roles, user administration, audit logs, health check, analytics cache
"""
from django.core.cache import cache
from django.test import TestCase, SimpleTestCase, RequestFactory
from rest_framework import status
from rest_framework.test import APIClient

from farmlab.core.cache_signals import suspend_cache_signals, invalidate_analytics
from farmlab.core.cache_utils import get_cached_analytics, cache_analytics, bump_generation, get_generation, make_cache_key
from farmlab.core.models import AuditLog
from farmlab.core.permissions import get_user_role, has_role
from farmlab.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from farmlab.core.utils import field_changes, get_client_ip
from farmlab.suppliers.models import Supplier


class AuthTests(TestCase):
    """Login, refresh and the current user"""

    def setUp(self):
        self.user = TestDataFactory.create_user(username='farmer', password='testpass123', role='manager')
        self.client = APIClient()

    def test_login_returns_tokens_and_user(self):
        response = self.client.post('/api/v1/auth/login/', {
            'username': 'farmer', 'password': 'testpass123'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)
        self.assertIn('refresh', response.data)
        self.assertEqual(response.data['user']['role'], 'manager')

    def test_login_with_wrong_password(self):
        response = self.client.post('/api/v1/auth/login/', {
            'username': 'farmer', 'password': 'wrong'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_refresh_token(self):
        login = self.client.post('/api/v1/auth/login/', {
            'username': 'farmer', 'password': 'testpass123'
        }, format='json')
        response = self.client.post('/api/v1/auth/refresh/', {'refresh': login.data['refresh']}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)

    def test_refresh_with_garbage_token(self):
        response = self.client.post('/api/v1/auth/refresh/', {'refresh': 'not-a-token'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_me_requires_authentication(self):
        response = self.client.get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_me(self):
        client = AuthenticatedAPIClient().authenticate_user(self.user)
        response = client.get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['username'], 'farmer')
        self.assertEqual(response.data['role'], 'manager')

    def test_superuser_is_admin(self):
        root = TestDataFactory.create_user(role='visitor', is_superuser=True)
        client = AuthenticatedAPIClient().authenticate_user(root)
        response = client.get('/api/v1/auth/me/')
        self.assertEqual(response.data['role'], 'admin')


class RoleHelperTests(TestCase):
    def test_anonymous_has_no_role(self):
        self.assertIsNone(get_user_role(None))

    def test_has_role(self):
        sponsor = TestDataFactory.create_user(role='sponsor')
        self.assertTrue(has_role(sponsor, 'admin', 'sponsor'))
        self.assertFalse(has_role(sponsor, 'admin'))


class UserAdministrationTests(TestCase):
    """Admin-only user endpoints"""

    def setUp(self):
        self.admin = TestDataFactory.create_user(role='admin')
        self.member = TestDataFactory.create_user(role='user', email='member@farm.test')
        self.client = AuthenticatedAPIClient().authenticate_user(self.admin)

    def test_list_users(self):
        response = self.client.get('/api/v1/users/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 2)

    def test_list_users_filtered_by_role(self):
        response = self.client.get('/api/v1/users/?role=admin')
        self.assertEqual([u['id'] for u in response.data], [self.admin.id])

    def test_non_admin_is_forbidden(self):
        client = AuthenticatedAPIClient().authenticate_user(self.member)
        response = client.get('/api/v1/users/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_anonymous_is_unauthorized(self):
        response = APIClient().get('/api/v1/users/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_role_update_is_audited(self):
        response = self.client.patch(f'/api/v1/users/{self.member.id}/role/', {'role': 'sponsor'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['role'], 'sponsor')
        log = AuditLog.objects.get(action='role_change')
        self.assertEqual(log.changes, {'role': {'old': 'user', 'new': 'sponsor'}})
        self.assertEqual(log.user, self.admin)

    def test_role_update_rejects_unknown_role(self):
        response = self.client.patch(f'/api/v1/users/{self.member.id}/role/', {'role': 'overlord'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_role_is_read_only_on_profile_update(self):
        response = self.client.patch(f'/api/v1/users/{self.member.id}/', {'role': 'admin', 'first_name': 'Ada'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.member.refresh_from_db()
        self.assertEqual(self.member.role, 'user')
        self.assertEqual(self.member.first_name, 'Ada')

    def test_cannot_delete_self(self):
        response = self.client.delete(f'/api/v1/users/{self.admin.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_check_role(self):
        response = self.client.get('/api/v1/auth/check-role/?email=MEMBER@farm.test')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['role'], 'user')

    def test_check_role_unknown_email(self):
        response = self.client.get('/api/v1/auth/check-role/?email=nobody@farm.test')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class AuditLogTests(TestCase):
    def setUp(self):
        self.admin = TestDataFactory.create_user(role='admin')
        self.client = AuthenticatedAPIClient().authenticate_user(self.admin)

    def test_list_is_paginated_and_filterable(self):
        AuditLog.objects.create(action='create', model_name='Supplier', object_id='1')
        AuditLog.objects.create(action='delete', model_name='Product', object_id='2')
        response = self.client.get('/api/v1/audit-logs/?model_name=Product')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['results'][0]['action'], 'delete')
        self.assertEqual(response.data['total_pages'], 1)

    def test_malformed_date_is_rejected(self):
        response = self.client.get('/api/v1/audit-logs/?date_from=yesterday')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('date_from', response.data)


class HealthCheckTests(TestCase):
    def test_health_check_is_public(self):
        response = APIClient().get('/api/v1/health-check/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {'status': 'ok', 'database': 'ok'})


class AnalyticsCacheTests(SimpleTestCase):
    def setUp(self):
        cache.clear()

    def test_cache_key_is_stable(self):
        self.assertEqual(make_cache_key('analytics:x', 1, a=1), make_cache_key('analytics:x', 1, a=1))
        self.assertNotEqual(make_cache_key('analytics:x', 1), make_cache_key('analytics:x', 2))

    def test_bump_generation_invalidates(self):
        data, key = get_cached_analytics('stock-impact')
        self.assertIsNone(data)
        cache_analytics(key, {'total_items': 3})
        self.assertEqual(get_cached_analytics('stock-impact')[0], {'total_items': 3})
        bump_generation()
        self.assertIsNone(get_cached_analytics('stock-impact')[0])

    def test_suspended_signals_bump_once(self):
        start = get_generation()
        with suspend_cache_signals():
            invalidate_analytics(Supplier)
            invalidate_analytics(Supplier)
            self.assertEqual(get_generation(), start)
        self.assertEqual(get_generation(), start + 1)


class AuditHelperTests(SimpleTestCase):
    def test_field_changes_only_reports_differences(self):
        supplier = Supplier(enterprise_name='Green Feed', city='Bitola')
        self.assertEqual(
            field_changes(supplier, {'enterprise_name': 'Green Feed', 'city': 'Ohrid'}),
            {'city': {'old': 'Bitola', 'new': 'Ohrid'}}
        )

    def test_client_ip_prefers_forwarded_header(self):
        request = RequestFactory().get('/', HTTP_X_FORWARDED_FOR='10.0.0.7, 172.16.0.1')
        self.assertEqual(get_client_ip(request), '10.0.0.7')
        self.assertEqual(get_client_ip(RequestFactory().get('/')), '127.0.0.1')
        self.assertIsNone(get_client_ip(None))
