from django.contrib import admin
from .models import ContactMessage, WaitlistEntry, RegistrationResponse


@admin.register(ContactMessage)
class ContactMessageAdmin(admin.ModelAdmin):
    list_display = ['email', 'subject', 'status', 'priority', 'created_at']
    list_filter = ['status', 'priority']
    search_fields = ['email', 'subject', 'message']
    ordering = ['-created_at']


@admin.register(WaitlistEntry)
class WaitlistEntryAdmin(admin.ModelAdmin):
    list_display = ['name', 'email', 'user_type', 'tech_experience', 'location', 'created_at']
    list_filter = ['user_type', 'tech_experience', 'source']
    search_fields = ['name', 'email', 'organization']
    readonly_fields = ['ip_address', 'user_agent', 'created_at']


@admin.register(RegistrationResponse)
class RegistrationResponseAdmin(admin.ModelAdmin):
    list_display = ['user', 'country', 'submitted_at']
    search_fields = ['user__email', 'country']
    readonly_fields = ['submitted_at']
