from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from .models import User, AuditLog


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ['username', 'email', 'role', 'country', 'is_active', 'is_staff', 'date_joined']
    list_filter = ['role', 'is_active', 'is_staff', 'is_superuser', 'date_joined']
    search_fields = ['username', 'email', 'first_name', 'last_name', 'organization']
    ordering = ['username']
    fieldsets = BaseUserAdmin.fieldsets + (
        ('Farm Profile', {'fields': ('role', 'phone', 'country', 'organization')}),
    )
    add_fieldsets = BaseUserAdmin.add_fieldsets + (
        ('Farm Profile', {'fields': ('role', 'phone', 'country', 'organization')}),
    )


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ['user', 'action', 'model_name', 'object_id', 'object_name', 'ip_address', 'created_at']
    list_filter = ['action', 'model_name', 'created_at']
    search_fields = ['object_id', 'object_name', 'user__username']
    ordering = ['-created_at']
    readonly_fields = ['created_at']
