from decimal import Decimal, ROUND_HALF_UP

from django.db import models


class Product(models.Model):
    """Products bought for the farm: animal feed and medicine, plant inputs"""
    CATEGORY_CHOICES = [
        ('animal_feed', 'Animal Feed'),
        ('animal_medicine', 'Animal Medicine'),
        ('plant_seeds', 'Plant Seeds'),
        ('plant_seedlings', 'Plant Seedlings'),
        ('plant_nutrition', 'Plant Nutrition'),
        ('plant_medicine', 'Plant Medicine'),
    ]

    name = models.CharField(max_length=255)
    category = models.CharField(max_length=30, choices=CATEGORY_CHOICES)
    description = models.TextField(blank=True)
    price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)

    # Animal feed
    kilogram_quantity = models.DecimalField(max_digits=10, decimal_places=3, null=True, blank=True, help_text="Deprecated, use kg_per_unit")
    kg_per_unit = models.DecimalField(max_digits=10, decimal_places=3, null=True, blank=True, help_text="Kilograms per unit/package")
    unit_count = models.PositiveIntegerField(null=True, blank=True)
    unit_price = models.DecimalField(max_digits=12, decimal_places=4, null=True, blank=True, help_text="Price per kilogram")
    total = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)

    # Animal medicine
    unit = models.CharField(max_length=50, blank=True)
    amount_per_unit = models.DecimalField(max_digits=10, decimal_places=3, null=True, blank=True)
    good_for = models.JSONField(default=list, blank=True)
    usage_description = models.TextField(blank=True)

    # Plant products
    seed_type = models.CharField(max_length=100, blank=True)
    planting_instructions = models.TextField(blank=True)
    harvest_time = models.CharField(max_length=100, blank=True)
    growth_conditions = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'products'
        ordering = ['name']
        constraints = [
            models.UniqueConstraint(fields=['name', 'category'], name='unique_product_name_category'),
        ]

    def __str__(self):
        return f"{self.name} ({self.get_category_display()})"

    @property
    def is_feed(self):
        return self.category == 'animal_feed'

    @property
    def group(self):
        return self.category.split('_', 1)[0]

    def calculate_feed_pricing(self):
        """Derive price per kilogram and package total for animal feed"""
        if not self.is_feed:
            return
        kg = self.kg_per_unit or self.kilogram_quantity
        if kg and self.price:
            self.unit_price = (Decimal(self.price) / Decimal(kg)).quantize(Decimal('0.0001'), rounding=ROUND_HALF_UP)
        if self.unit_count and self.price:
            self.total = Decimal(self.price) * self.unit_count
        elif self.price:
            self.total = Decimal(self.price)

    def save(self, *args, **kwargs):
        self.calculate_feed_pricing()
        super().save(*args, **kwargs)
