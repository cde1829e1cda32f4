from django.conf import settings
from django.db import models
from django.utils import timezone


def default_farm_id():
    return settings.DEFAULT_FARM_ID


class BarleyPlate(models.Model):
    """A hydroponic barley fodder plate from seeding to harvest"""
    STATUS_CHOICES = [
        ('growing', 'Growing'),
        ('ready', 'Ready'),
        ('harvested', 'Harvested'),
    ]
    # Plates this close to the expected date are flagged for harvest
    HARVEST_WINDOW_DAYS = 2

    plate_number = models.CharField(max_length=50)
    start_date = models.DateField()
    expected_harvest_date = models.DateField()
    actual_harvest_date = models.DateField(null=True, blank=True)
    seed_weight = models.DecimalField(max_digits=8, decimal_places=3, help_text="Seed weight in kilograms")
    plate_units = models.PositiveIntegerField(default=1)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='growing')
    notes = models.TextField(blank=True)
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='barley_plates')
    farm_id = models.CharField(max_length=100, default=default_farm_id)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'hydroponic_barley'
        ordering = ['-created_at']
        constraints = [
            models.UniqueConstraint(fields=['farm_id', 'plate_number'], name='unique_plate_per_farm'),
        ]
        indexes = [
            models.Index(fields=['farm_id', 'status'], name='hydroponic__farm_id_7e2d4a_idx'),
        ]

    def __str__(self):
        return f"Plate {self.plate_number} ({self.farm_id})"

    def days_growing(self, today=None):
        today = today or timezone.localdate()
        return (today - self.start_date).days

    def days_until_harvest(self, today=None):
        today = today or timezone.localdate()
        return (self.expected_harvest_date - today).days

    def is_ready_for_harvest(self, today=None):
        return self.status != 'harvested' and self.days_until_harvest(today) <= self.HARVEST_WINDOW_DAYS

    def apply_status(self, status, harvest_date=None):
        """Keep the harvest date consistent with the status"""
        self.status = status
        if status == 'harvested':
            self.actual_harvest_date = harvest_date or self.actual_harvest_date or timezone.localdate()
        else:
            self.actual_harvest_date = None
