from decimal import Decimal, ROUND_HALF_UP

from django.conf import settings
from django.db import models
from django.db.models import Max
from django.utils import timezone

from farmlab.catalog.models import Product
from farmlab.suppliers.models import Supplier

FIRST_INVOICE_NUMBER = 1001


class SupplierInvoice(models.Model):
    """Purchase invoice received from a supplier"""
    invoice_number = models.PositiveIntegerField(unique=True)
    supplier = models.ForeignKey(Supplier, on_delete=models.SET_NULL, null=True, blank=True, related_name='invoices')
    # Snapshot of the supplier at the time of purchase
    supplier_name = models.CharField(max_length=255, blank=True)
    supplier_enterprise = models.CharField(max_length=255, blank=True)
    invoice_date = models.DateField(default=timezone.localdate)
    grand_total = models.DecimalField(max_digits=14, decimal_places=2, default=0)
    notes = models.TextField(blank=True)
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='supplier_invoices')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'supplier_invoices'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['invoice_date'], name='supplier_in_invoice_3a7c1e_idx'),
        ]

    def __str__(self):
        return f"INV-{self.invoice_number}"

    @staticmethod
    def next_invoice_number():
        last = SupplierInvoice.objects.aggregate(last=Max('invoice_number'))['last']
        return last + 1 if last else FIRST_INVOICE_NUMBER

    def calculate_grand_total(self):
        return sum((line.total_price or Decimal('0') for line in self.lines.all()), Decimal('0'))

    def save(self, *args, **kwargs):
        if not self.invoice_number:
            self.invoice_number = self.next_invoice_number()
        if self.supplier_id and not self.supplier_enterprise:
            self.supplier_name = self.supplier.name
            self.supplier_enterprise = self.supplier.enterprise_name
        super().save(*args, **kwargs)


class InvoiceLine(models.Model):
    """A product line on a supplier invoice"""
    invoice = models.ForeignKey(SupplierInvoice, on_delete=models.CASCADE, related_name='lines')
    product = models.ForeignKey(Product, on_delete=models.SET_NULL, null=True, blank=True, related_name='invoice_lines')
    name = models.CharField(max_length=255)
    category = models.CharField(max_length=30, blank=True)
    description = models.TextField(blank=True)
    quantity = models.DecimalField(max_digits=12, decimal_places=3)
    price = models.DecimalField(max_digits=12, decimal_places=2)
    unit = models.CharField(max_length=50, blank=True)
    kg_per_unit = models.DecimalField(max_digits=10, decimal_places=3, null=True, blank=True)
    price_per_kilogram = models.DecimalField(max_digits=12, decimal_places=4, null=True, blank=True)
    total_price = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)

    class Meta:
        db_table = 'supplier_invoice_lines'
        ordering = ['id']

    def __str__(self):
        return f"{self.name} x {self.quantity}"

    def calculate_totals(self):
        if self.quantity and self.price:
            self.total_price = (Decimal(self.quantity) * Decimal(self.price)).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)
        else:
            self.total_price = None
        if self.category == 'animal_feed' and self.kg_per_unit and self.price:
            self.price_per_kilogram = (Decimal(self.price) / Decimal(self.kg_per_unit)).quantize(Decimal('0.0001'), rounding=ROUND_HALF_UP)
        else:
            self.price_per_kilogram = None
        if self.category != 'animal_feed':
            self.kg_per_unit = None

    def save(self, *args, **kwargs):
        self.calculate_totals()
        super().save(*args, **kwargs)
