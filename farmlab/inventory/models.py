from django.db import models
from django.utils import timezone

from farmlab.catalog.models import Product


class FoodStock(models.Model):
    """Animal feed on hand"""
    DEFAULT_REORDER_LEVEL = 50

    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name='food_stocks')
    quantity = models.PositiveIntegerField(default=0)
    unit_price = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    reorder_level = models.PositiveIntegerField(default=DEFAULT_REORDER_LEVEL)
    expiry_date = models.DateField(null=True, blank=True)
    feed_type = models.CharField(max_length=100, blank=True)
    category = models.CharField(max_length=100, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'food_stock'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.product.name} - {self.quantity}"


class MedicalStock(models.Model):
    """Animal medicine on hand, one row per product"""
    DEFAULT_REORDER_LEVEL = 10

    product = models.OneToOneField(Product, on_delete=models.CASCADE, related_name='medical_stock')
    quantity = models.PositiveIntegerField(default=0)
    unit_price = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    reorder_level = models.PositiveIntegerField(default=DEFAULT_REORDER_LEVEL)
    expiry_date = models.DateField(null=True, blank=True)
    medicine_type = models.CharField(max_length=100, blank=True)
    category = models.CharField(max_length=100, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'medical_stock'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.product.name} - {self.quantity}"


class MedicineUnit(models.Model):
    """Individually tracked medicine package"""
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name='medicine_units')
    custom_id = models.CharField(max_length=100, unique=True)
    category = models.CharField(max_length=100, blank=True)
    expiration_date = models.DateField()
    first_usage_date = models.DateField(null=True, blank=True)
    usage_description = models.TextField(blank=True)
    good_for = models.JSONField(default=list, blank=True)
    is_used = models.BooleanField(default=False)
    is_expired = models.BooleanField(default=False)
    invoice = models.ForeignKey('purchasing.SupplierInvoice', on_delete=models.SET_NULL, null=True, blank=True, related_name='medicine_units')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'medicine_units'
        ordering = ['-created_at']

    def __str__(self):
        return self.custom_id

    def save(self, *args, **kwargs):
        if self.expiration_date:
            self.is_expired = self.expiration_date < timezone.localdate()
        super().save(*args, **kwargs)


class PlantStock(models.Model):
    """Seeds, seedlings and plant supplies on hand, one row per product"""
    PLANT_CATEGORIES = ('plant_seeds', 'plant_seedlings', 'plant_nutrition', 'plant_medicine')

    product = models.OneToOneField(Product, on_delete=models.CASCADE, related_name='plant_stock')
    quantity = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'plant_stock'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.product.name} - {self.quantity}"


class PlantStockUnit(models.Model):
    """A planted unit of a plant stock and where it grows"""
    STATUS_CHOICES = [
        ('planted', 'Planted'),
        ('growing', 'Growing'),
        ('harvested', 'Harvested'),
        ('failed', 'Failed'),
    ]

    stock = models.ForeignKey(PlantStock, on_delete=models.CASCADE, related_name='units')
    location = models.CharField(max_length=255, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='planted')
    planted_at = models.DateField(null=True, blank=True)
    harvested_at = models.DateField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'plant_stock_units'
        ordering = ['created_at']

    def __str__(self):
        return f"{self.stock.product.name} @ {self.location or 'unassigned'} ({self.status})"

    def save(self, *args, **kwargs):
        if self.status == 'harvested' and not self.harvested_at:
            self.harvested_at = timezone.localdate()
        elif self.status != 'harvested':
            self.harvested_at = None
        super().save(*args, **kwargs)
