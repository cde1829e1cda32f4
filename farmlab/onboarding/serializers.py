import re

from rest_framework import serializers

from .models import ContactMessage, WaitlistEntry
from .utils import classify_priority, derive_tags

PHONE_RE = re.compile(r'^[\+]?[1-9][\d\s\-\(\)]{8,20}$')


class ContactMessageSerializer(serializers.ModelSerializer):
    """Public contact form submission"""
    message = serializers.CharField(min_length=10, max_length=2000, error_messages={
        'min_length': 'Message must be at least 10 characters long',
        'max_length': 'Message must be less than 2000 characters',
    })
    subject = serializers.CharField(max_length=200, error_messages={
        'max_length': 'Subject must be less than 200 characters',
    })
    phone = serializers.CharField(required=False, allow_blank=True)

    class Meta:
        model = ContactMessage
        fields = ['id', 'email', 'subject', 'message', 'phone', 'status', 'priority', 'tags', 'created_at', 'updated_at']
        read_only_fields = ['status', 'priority', 'tags', 'created_at', 'updated_at']
        extra_kwargs = {
            'email': {'error_messages': {'invalid': 'Please enter a valid email address'}},
        }

    def validate_email(self, value):
        return value.strip().lower()

    def validate_phone(self, value):
        value = (value or '').strip()
        if value and not PHONE_RE.match(value):
            raise serializers.ValidationError('Please enter a valid phone number')
        return value

    def create(self, validated_data):
        subject = validated_data['subject'].strip()
        message = validated_data['message'].strip()
        validated_data.update({
            'subject': subject,
            'message': message,
            'priority': classify_priority(subject, message),
            'tags': derive_tags(subject, message),
        })
        return super().create(validated_data)


class ContactUpdateSerializer(serializers.ModelSerializer):
    """Admin triage of a contact message"""
    tags = serializers.ListField(child=serializers.CharField(), required=False)

    class Meta:
        model = ContactMessage
        fields = ['id', 'email', 'subject', 'message', 'phone', 'status', 'priority', 'tags', 'created_at', 'updated_at']
        read_only_fields = ['email', 'subject', 'message', 'phone', 'created_at', 'updated_at']


class WaitlistEntrySerializer(serializers.ModelSerializer):
    interests = serializers.ListField(child=serializers.CharField(), required=False)
    expectations = serializers.ListField(child=serializers.CharField(), required=False)

    class Meta:
        model = WaitlistEntry
        fields = [
            'id', 'user_type', 'farm_size', 'tech_experience', 'interests', 'expectations',
            'name', 'email', 'location', 'organization', 'role', 'experience',
            'challenges', 'goals', 'source', 'created_at'
        ]
        read_only_fields = ['source', 'created_at']
        # Duplicate emails are answered with 409 by the view
        extra_kwargs = {'email': {'validators': []}}

    def validate_email(self, value):
        return value.strip().lower()


class StepValidationSerializer(serializers.Serializer):
    step_id = serializers.CharField()
    answers = serializers.DictField()
