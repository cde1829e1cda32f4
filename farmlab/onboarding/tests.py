"""
Test suite for Onboarding module
Tests: contact triage, waitlist signups, registration wizard and account creation
"""
from django.contrib.auth import get_user_model
from django.test import TestCase, SimpleTestCase
from rest_framework import status
from rest_framework.test import APIClient

from farmlab.core.models import AuditLog
from farmlab.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from farmlab.onboarding import questionnaire
from farmlab.onboarding.models import ContactMessage, WaitlistEntry, RegistrationResponse
from farmlab.onboarding.questionnaire import ROLE_FARMER, ROLE_RESEARCHER, ROLE_STUDENT
from farmlab.onboarding.utils import classify_priority, derive_tags

User = get_user_model()


class ContactTriageTests(SimpleTestCase):
    def test_priority(self):
        self.assertEqual(classify_priority('URGENT', 'The sensors are offline'), 'high')
        self.assertEqual(classify_priority('Pricing', 'How much is a plan?'), 'low')
        self.assertEqual(classify_priority('Hello', 'Nice project you have'), 'medium')

    def test_tags(self):
        self.assertEqual(derive_tags('Sensor help', 'Our farm needs a demo'), ['iot', 'farming', 'demo', 'support'])
        self.assertEqual(derive_tags('Hello', 'Nice project'), [])


class ContactAPITests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.admin = TestDataFactory.create_user(role='admin')

    def contact_data(self, **overrides):
        data = {
            'email': '  Grower@Example.com ',
            'subject': 'Sensor setup',
            'message': 'Our IoT sensor is not working since yesterday.',
        }
        data.update(overrides)
        return data

    def test_submit_is_public(self):
        response = self.client.post('/api/v1/contact/', self.contact_data(), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['message'], "Message sent successfully! We'll get back to you within 24 hours.")

        contact = ContactMessage.objects.get(pk=response.data['id'])
        self.assertEqual(contact.email, 'grower@example.com')
        self.assertEqual(contact.priority, 'high')
        self.assertEqual(contact.tags, ['iot'])
        self.assertEqual(contact.status, 'new')

    def test_short_message(self):
        response = self.client.post('/api/v1/contact/', self.contact_data(message='Hi'), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'][0], 'Message must be at least 10 characters long')

    def test_long_subject(self):
        response = self.client.post('/api/v1/contact/', self.contact_data(subject='x' * 201), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('subject', response.data)

    def test_invalid_email_and_phone(self):
        response = self.client.post('/api/v1/contact/', self.contact_data(email='nobody', phone='12ab'), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('email', response.data)
        self.assertEqual(response.data['phone'][0], 'Please enter a valid phone number')

    def test_valid_phone(self):
        response = self.client.post('/api/v1/contact/', self.contact_data(phone='+389 70 123 456'), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

    def test_listing_requires_admin(self):
        response = self.client.get('/api/v1/contact/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        member = AuthenticatedAPIClient().authenticate_user(TestDataFactory.create_user())
        response = member.get('/api/v1/contact/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_admin_lists_and_filters(self):
        self.client.post('/api/v1/contact/', self.contact_data(), format='json')
        self.client.post('/api/v1/contact/', self.contact_data(subject='Question', message='What does a demo include?'), format='json')
        admin = AuthenticatedAPIClient().authenticate_user(self.admin)

        response = admin.get('/api/v1/contact/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 2)

        response = admin.get('/api/v1/contact/?priority=low')
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['results'][0]['subject'], 'Question')

    def test_admin_triage(self):
        contact = ContactMessage.objects.create(email='a@b.co', subject='Hi', message='Just saying hello there')
        admin = AuthenticatedAPIClient().authenticate_user(self.admin)
        response = admin.patch(f'/api/v1/contact/{contact.id}/', {
            'status': 'resolved', 'subject': 'Changed', 'tags': ['support']
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        contact.refresh_from_db()
        self.assertEqual(contact.status, 'resolved')
        self.assertEqual(contact.subject, 'Hi')
        self.assertEqual(contact.tags, ['support'])
        self.assertTrue(AuditLog.objects.filter(model_name='ContactMessage', action='update').exists())

    def test_triage_rejects_unknown_status(self):
        contact = ContactMessage.objects.create(email='a@b.co', subject='Hi', message='Just saying hello there')
        admin = AuthenticatedAPIClient().authenticate_user(self.admin)
        response = admin.patch(f'/api/v1/contact/{contact.id}/', {'status': 'archived'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class WaitlistAPITests(TestCase):
    def setUp(self):
        self.client = APIClient()

    def signup_data(self, **overrides):
        data = {
            'user_type': 'farmer',
            'farm_size': 'small',
            'tech_experience': 'beginner',
            'interests': ['automation', 'monitoring'],
            'name': 'Ada Grower',
            'email': 'Ada@Example.com',
            'location': 'Skopje',
        }
        data.update(overrides)
        return data

    def test_join(self):
        response = self.client.post('/api/v1/waitlist/', self.signup_data(), format='json', HTTP_USER_AGENT='pytest-agent')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['success'], True)
        self.assertEqual(response.data['message'], 'Successfully joined the waitlist!')

        entry = WaitlistEntry.objects.get(pk=response.data['id'])
        self.assertEqual(entry.email, 'ada@example.com')
        self.assertEqual(entry.user_agent, 'pytest-agent')
        self.assertEqual(entry.ip_address, '127.0.0.1')
        self.assertEqual(entry.source, 'immersive_waitlist')

    def test_duplicate_email_is_a_conflict(self):
        self.client.post('/api/v1/waitlist/', self.signup_data(), format='json')
        response = self.client.post('/api/v1/waitlist/', self.signup_data(email='ADA@example.com'), format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data, {'error': 'Email already registered'})

    def test_missing_required_fields(self):
        response = self.client.post('/api/v1/waitlist/', {'email': 'x@example.com'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        for field in ('user_type', 'tech_experience', 'name', 'location'):
            self.assertIn(field, response.data)

    def test_stats(self):
        self.client.post('/api/v1/waitlist/', self.signup_data(), format='json')
        self.client.post('/api/v1/waitlist/', self.signup_data(email='b@example.com'), format='json')
        self.client.post('/api/v1/waitlist/', self.signup_data(email='c@example.com', user_type='investor'), format='json')

        admin = AuthenticatedAPIClient().authenticate_user(TestDataFactory.create_user(role='admin'))
        response = admin.get('/api/v1/waitlist/stats/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total_signups'], 3)
        self.assertEqual(response.data['user_type_breakdown'], [
            {'category': 'farmer', 'count': 2},
            {'category': 'investor', 'count': 1},
        ])

    def test_stats_require_admin(self):
        response = self.client.get('/api/v1/waitlist/stats/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class QuestionnaireTests(SimpleTestCase):
    def test_steps_follow_role_order_without_duplicates(self):
        steps = questionnaire.resolve_steps([ROLE_STUDENT, ROLE_FARMER, ROLE_STUDENT, 'Astronaut'])
        self.assertEqual(
            [s['id'] for s in steps],
            ['basic_info', 'user_type', 'branch_student', 'branch_farmer', 'final_section']
        )

    def test_no_roles(self):
        self.assertEqual(
            [s['id'] for s in questionnaire.resolve_steps([])],
            ['basic_info', 'user_type', 'final_section']
        )

    def test_validate_question(self):
        email = {'id': 'email', 'type': 'email', 'required': True}
        self.assertEqual(questionnaire.validate_question(email, ''), 'Required')
        self.assertEqual(questionnaire.validate_question(email, 'nope'), 'Invalid email')
        self.assertIsNone(questionnaire.validate_question(email, 'a@b.co'))
        self.assertEqual(questionnaire.validate_question(email, 42), 'Expected text')

        password = questionnaire.BASE_STEPS[0]['questions'][2]
        self.assertEqual(
            questionnaire.validate_question(password, 'short'),
            'Password must be at least 8 characters'
        )

        select = {'id': 'x', 'type': 'multi-select', 'required': False, 'options': ['a', 'b']}
        self.assertIsNone(questionnaire.validate_question(select, []))
        self.assertEqual(questionnaire.validate_question(select, 'a'), 'Expected a list of choices')
        self.assertEqual(questionnaire.validate_question(select, ['a', 'c']), 'Invalid choice')

    def test_next_step(self):
        self.assertEqual(questionnaire.next_step_id('user_type', [ROLE_FARMER]), 'branch_farmer')
        self.assertEqual(questionnaire.next_step_id('branch_farmer', [ROLE_FARMER]), 'final_section')
        self.assertIsNone(questionnaire.next_step_id('final_section', [ROLE_FARMER]))

    def test_branch_required_question(self):
        errors = questionnaire.validate_answers({'roles': [ROLE_RESEARCHER]})
        self.assertEqual(errors['research_field'], 'Required')
        self.assertEqual(errors['email'], 'Required')

    def test_public_answers_drop_password_and_unknown_keys(self):
        answers = {'email': 'a@b.co', 'password': 'secret123', 'roles': [ROLE_FARMER], 'is_admin': True, 'farm_size': '< 1 ha'}
        self.assertEqual(
            questionnaire.public_answers(answers),
            {'email': 'a@b.co', 'roles': [ROLE_FARMER], 'farm_size': '< 1 ha'}
        )


class RegistrationAPITests(TestCase):
    def setUp(self):
        self.client = APIClient()

    def answers(self, **overrides):
        data = {
            'full_name': 'Ada Grower Lovelace',
            'email': 'Ada@Example.com',
            'password': 'growmore123',
            'country': 'North Macedonia',
            'organization': 'Green Valley Farm',
            'roles': [ROLE_FARMER],
            'farm_size': '1–5 ha',
            'challenges': ['Labor shortages'],
            'pricing_model': 'Monthly subscription',
        }
        data.update(overrides)
        return data

    def test_form(self):
        response = self.client.get('/api/v1/registration/form/', {'roles': [ROLE_FARMER, ROLE_STUDENT]})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['title'], questionnaire.FORM_TITLE)
        self.assertEqual(
            [s['id'] for s in response.data['steps']],
            ['basic_info', 'user_type', 'branch_farmer', 'branch_student', 'final_section']
        )

    def test_validate_step(self):
        response = self.client.post('/api/v1/registration/validate-step/', {
            'step_id': 'user_type', 'answers': {'roles': [ROLE_FARMER]}
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {'valid': True, 'errors': {}, 'next_step': 'branch_farmer'})

    def test_validate_step_with_errors(self):
        response = self.client.post('/api/v1/registration/validate-step/', {
            'step_id': 'basic_info', 'answers': {'email': 'nope', 'password': '123'}
        }, format='json')
        self.assertFalse(response.data['valid'])
        self.assertEqual(response.data['errors']['email'], 'Invalid email')
        self.assertEqual(response.data['errors']['full_name'], 'Required')
        self.assertIsNone(response.data['next_step'])

    def test_validate_unknown_step(self):
        response = self.client.post('/api/v1/registration/validate-step/', {
            'step_id': 'branch_pilot', 'answers': {}
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_register(self):
        response = self.client.post('/api/v1/auth/register/', self.answers(), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertIn('access', response.data)
        self.assertIn('refresh', response.data)
        self.assertEqual(response.data['user']['role'], 'waiting_list')

        user = User.objects.get(email='ada@example.com')
        self.assertEqual(user.username, 'ada@example.com')
        self.assertEqual((user.first_name, user.last_name), ('Ada', 'Grower Lovelace'))
        self.assertEqual(user.organization, 'Green Valley Farm')
        self.assertTrue(user.check_password('growmore123'))

        stored = RegistrationResponse.objects.get(user=user)
        self.assertEqual(stored.roles, [ROLE_FARMER])
        self.assertEqual(stored.country, 'North Macedonia')
        self.assertNotIn('password', stored.answers)
        self.assertEqual(stored.answers['farm_size'], '1–5 ha')

    def test_registered_user_can_log_in(self):
        self.client.post('/api/v1/auth/register/', self.answers(), format='json')
        response = self.client.post('/api/v1/auth/login/', {
            'username': 'ada@example.com', 'password': 'growmore123'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_register_validation(self):
        response = self.client.post('/api/v1/auth/register/', self.answers(password='short', roles=[]), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['details']['password'], 'Password must be at least 8 characters')
        self.assertEqual(response.data['details']['roles'], 'Required')
        self.assertFalse(User.objects.exists())

    def test_register_existing_email(self):
        TestDataFactory.create_user(email='ada@example.com')
        response = self.client.post('/api/v1/auth/register/', self.answers(), format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_register_rejects_non_text_answers(self):
        response = self.client.post(
            '/api/v1/auth/register/', self.answers(country=123, password=12345678, organization=7), format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['details']['country'], 'Expected text')
        self.assertEqual(response.data['details']['password'], 'Expected text')
        self.assertEqual(response.data['details']['organization'], 'Expected text')
        self.assertFalse(User.objects.exists())
