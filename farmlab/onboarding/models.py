from django.conf import settings
from django.db import models


class ContactMessage(models.Model):
    """Message sent through the public contact form"""
    STATUS_CHOICES = [
        ('new', 'New'),
        ('read', 'Read'),
        ('responded', 'Responded'),
        ('resolved', 'Resolved'),
    ]
    PRIORITY_CHOICES = [
        ('low', 'Low'),
        ('medium', 'Medium'),
        ('high', 'High'),
    ]

    email = models.EmailField()
    subject = models.CharField(max_length=200)
    message = models.TextField(max_length=2000)
    phone = models.CharField(max_length=30, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='new')
    priority = models.CharField(max_length=10, choices=PRIORITY_CHOICES, default='medium')
    tags = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'contact_messages'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['email', '-created_at'], name='contact_mes_email_2f6b1d_idx'),
            models.Index(fields=['status', 'priority', '-created_at'], name='contact_mes_status_8a3e5c_idx'),
        ]

    def __str__(self):
        return f"{self.email}: {self.subject}"


class WaitlistEntry(models.Model):
    """Signup collected by the waitlist form"""
    user_type = models.CharField(max_length=100)
    farm_size = models.CharField(max_length=100, blank=True)
    tech_experience = models.CharField(max_length=100)
    interests = models.JSONField(default=list, blank=True)
    expectations = models.JSONField(default=list, blank=True)
    name = models.CharField(max_length=255)
    email = models.EmailField(unique=True)
    location = models.CharField(max_length=255)
    organization = models.CharField(max_length=255, blank=True)
    role = models.CharField(max_length=255, blank=True)
    experience = models.TextField(blank=True)
    challenges = models.TextField(blank=True)
    goals = models.TextField(blank=True)
    ip_address = models.CharField(max_length=100, default='unknown')
    user_agent = models.TextField(default='unknown')
    source = models.CharField(max_length=100, default='immersive_waitlist')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'waitlist'
        ordering = ['-created_at']
        verbose_name_plural = 'waitlist entries'

    def __str__(self):
        return f"{self.name} <{self.email}>"


class RegistrationResponse(models.Model):
    """Answers a user gave in the registration wizard, without the password"""
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='registration_responses')
    roles = models.JSONField(default=list)
    country = models.CharField(max_length=100, blank=True)
    answers = models.JSONField(default=dict)
    submitted_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'registration_responses'
        ordering = ['-submitted_at']

    def __str__(self):
        return f"Registration of {self.user}"
