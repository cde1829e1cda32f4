from django.db import models


class Supplier(models.Model):
    """Suppliers of feed, medicine and plant inputs"""
    name = models.CharField(max_length=255, blank=True, help_text="Contact person")
    enterprise_name = models.CharField(max_length=255)
    address = models.TextField()
    description = models.TextField(blank=True)
    phones = models.JSONField(default=list, blank=True)
    email = models.EmailField(blank=True)
    city = models.CharField(max_length=100, blank=True)
    category = models.CharField(max_length=100, blank=True)
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.enterprise_name

    class Meta:
        db_table = 'suppliers'
        ordering = ['-created_at']
