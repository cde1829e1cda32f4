import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import AllowAny
from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import Count
from django.shortcuts import get_object_or_404

from farmlab.core.pagination import paginated_response
from farmlab.core.permissions import IsAdminRole, IsAdminOrCreateOnly
from farmlab.core.serializers import UserSerializer
from farmlab.core.utils import get_client_ip, create_audit_log, field_changes
from farmlab.core.views import issue_tokens
from . import questionnaire
from .models import ContactMessage, WaitlistEntry, RegistrationResponse
from .serializers import (
    ContactMessageSerializer, ContactUpdateSerializer,
    WaitlistEntrySerializer, StepValidationSerializer
)

logger = logging.getLogger(__name__)

User = get_user_model()


# Contact views
@api_view(['GET', 'POST'])
@permission_classes([IsAdminOrCreateOnly])
def contact_list_create(request):
    """Submit a contact message, or list messages (admin)"""
    if request.method == 'GET':
        messages = ContactMessage.objects.all()

        status_filter = request.query_params.get('status', None)
        if status_filter:
            messages = messages.filter(status=status_filter)

        priority = request.query_params.get('priority', None)
        if priority:
            messages = messages.filter(priority=priority)

        return paginated_response(request, messages.order_by('-created_at'), ContactMessageSerializer, default_limit=10)
    else:
        serializer = ContactMessageSerializer(data=request.data)
        if serializer.is_valid():
            contact = serializer.save()
            logger.info(f"New contact submission from {contact.email} with subject: {contact.subject}")
            return Response({
                'message': "Message sent successfully! We'll get back to you within 24 hours.",
                'id': contact.pk,
            }, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PATCH'])
@permission_classes([IsAdminRole])
def contact_detail(request, pk):
    """Retrieve or triage a contact message"""
    contact = get_object_or_404(ContactMessage, pk=pk)

    if request.method == 'GET':
        return Response(ContactUpdateSerializer(contact).data)

    serializer = ContactUpdateSerializer(contact, data=request.data, partial=True)
    if serializer.is_valid():
        changes = field_changes(contact, serializer.validated_data)
        serializer.save()
        create_audit_log(
            request, 'update', 'ContactMessage', contact.pk,
            changes=changes, object_name=contact.subject
        )
        return Response(serializer.data)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


# Waitlist views
@api_view(['POST'])
@permission_classes([AllowAny])
def waitlist_join(request):
    """Join the waitlist"""
    serializer = WaitlistEntrySerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    if WaitlistEntry.objects.filter(email__iexact=serializer.validated_data['email']).exists():
        return Response({'error': 'Email already registered'}, status=status.HTTP_409_CONFLICT)

    entry = serializer.save(
        ip_address=get_client_ip(request) or 'unknown',
        user_agent=request.META.get('HTTP_USER_AGENT') or 'unknown',
    )
    logger.info(f"New waitlist signup: {entry.email} ({entry.user_type})")
    return Response({
        'success': True,
        'message': 'Successfully joined the waitlist!',
        'id': entry.pk,
    }, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAdminRole])
def waitlist_stats(request):
    """Signup totals by user type and tech experience"""
    def breakdown(field):
        rows = WaitlistEntry.objects.values(field).annotate(count=Count('id')).order_by('-count', field)
        return [{'category': row[field], 'count': row['count']} for row in rows]

    return Response({
        'total_signups': WaitlistEntry.objects.count(),
        'user_type_breakdown': breakdown('user_type'),
        'tech_experience_breakdown': breakdown('tech_experience'),
    })


# Registration wizard views
@api_view(['GET'])
@permission_classes([AllowAny])
def registration_form(request):
    """Wizard steps for the selected roles (?roles=a&roles=b or comma separated)"""
    roles = request.query_params.getlist('roles')
    if len(roles) == 1 and ',' in roles[0] and roles[0] not in questionnaire.ROLES:
        roles = [role.strip() for role in roles[0].split(',') if role.strip()]

    return Response({
        'title': questionnaire.FORM_TITLE,
        'roles': questionnaire.ROLES,
        'steps': questionnaire.resolve_steps(roles),
    })


@api_view(['POST'])
@permission_classes([AllowAny])
def registration_validate_step(request):
    """Validate the answers of one wizard step"""
    serializer = StepValidationSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    step_id = serializer.validated_data['step_id']
    answers = serializer.validated_data['answers']
    roles = answers.get('roles') if isinstance(answers.get('roles'), list) else None

    step = questionnaire.get_step(step_id, roles)
    if step is None:
        return Response({'error': f"Unknown step: {step_id}"}, status=status.HTTP_400_BAD_REQUEST)

    errors = questionnaire.validate_step(step, answers)
    return Response({
        'valid': not errors,
        'errors': errors,
        'next_step': questionnaire.next_step_id(step_id, roles) if not errors else None,
    })


@api_view(['POST'])
@permission_classes([AllowAny])
def register(request):
    """
    Create an account from the full wizard submission.

    New accounts start on the waiting list; the answers without the
    password are stored for registration analytics.
    """
    answers = request.data
    if not isinstance(answers, dict):
        return Response({'error': 'Expected an object of answers'}, status=status.HTTP_400_BAD_REQUEST)

    errors = questionnaire.validate_answers(answers)
    if errors:
        return Response({'error': 'Validation failed', 'details': errors}, status=status.HTTP_400_BAD_REQUEST)

    email = answers['email'].strip().lower()
    if User.objects.filter(email__iexact=email).exists() or User.objects.filter(username__iexact=email).exists():
        return Response({'error': 'A user with this email already exists'}, status=status.HTTP_409_CONFLICT)

    full_name = answers['full_name'].strip()
    first_name, _, last_name = full_name.partition(' ')

    with transaction.atomic():
        user = User.objects.create_user(
            username=email,
            email=email,
            password=answers['password'],
            first_name=first_name,
            last_name=last_name.strip(),
            country=answers.get('country', '').strip(),
            organization=(answers.get('organization') or '').strip(),
            role='waiting_list',
        )
        RegistrationResponse.objects.create(
            user=user,
            roles=answers.get('roles', []),
            country=user.country,
            answers=questionnaire.public_answers(answers),
        )

    create_audit_log(request, 'create', 'User', user.pk, user=user, object_name=user.username)
    logger.info(f"User registered: {user.email} ({', '.join(answers.get('roles', []))})")
    return Response({
        'message': 'User registered successfully',
        'user': UserSerializer(user).data,
        **issue_tokens(user),
    }, status=status.HTTP_201_CREATED)
