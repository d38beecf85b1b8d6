"""
Orders app models:
  - Order      : one per checkout, PENDING until the shopper places it
  - OrderNote  : audit notes attached to an order
"""
from django.db import models
from django.utils import timezone
from apps.core.models import BaseModel, UUIDModel


class OrderStatus(models.TextChoices):
    PENDING   = 'PENDING',   'Pending'
    PLACED    = 'PLACED',    'Placed'
    CANCELLED = 'CANCELLED', 'Cancelled'


class Order(BaseModel):
    """
    Created as PENDING when the checkout wizard completes (or when a cart
    without bookable items is checked out), PLACED at checkout.
    Wizard data is a snapshot: it never changes once the order is placed.
    """
    session_key = models.CharField(max_length=40, db_index=True)
    status = models.CharField(
        max_length=10, choices=OrderStatus.choices,
        default=OrderStatus.PENDING, db_index=True,
    )
    form_data = models.JSONField(default=dict, blank=True)
    signature_data = models.JSONField(default=dict, blank=True)
    wizard_version = models.CharField(max_length=20, blank=True)
    placed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        verbose_name = 'Order'
        verbose_name_plural = 'Orders'
        ordering = ['-created_at']

    def __str__(self):
        return f"#{self.id_short} [{self.status}]"

    @property
    def id_short(self):
        """Returns the first 8 chars of UUID in uppercase."""
        return str(self.id)[:8].upper()

    @property
    def has_wizard_data(self):
        return bool(self.form_data or self.signature_data)

    def add_note(self, note: str) -> 'OrderNote':
        return OrderNote.objects.create(order=self, note=note)

    def place(self):
        self.status = OrderStatus.PLACED
        self.placed_at = timezone.now()
        self.save(update_fields=['status', 'placed_at', 'updated_at'])


class OrderNote(UUIDModel):
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name='notes')
    note = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = 'Order Note'
        verbose_name_plural = 'Order Notes'
        ordering = ['created_at']

    def __str__(self):
        return f"Order {str(self.order_id)[:8]}: {self.note[:40]}"
