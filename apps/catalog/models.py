"""
Product model: anything that can be put in the cart.

Only BOOKING products (date/resource bookings) send the shopper through the
checkout wizard; SIMPLE products go straight to the generic checkout.
"""
from django.db import models
from django.core.validators import MinValueValidator
from apps.core.models import BaseModel


class ProductType(models.TextChoices):
    SIMPLE  = 'SIMPLE',  'Simple'
    BOOKING = 'BOOKING', 'Bookable'


class ActiveQuerySet(models.QuerySet):
    def active(self):
        return self.filter(is_active=True)


class Product(BaseModel):
    name = models.CharField(max_length=150)
    slug = models.SlugField(max_length=150, unique=True)
    description = models.TextField(blank=True)
    product_type = models.CharField(
        max_length=10, choices=ProductType.choices,
        default=ProductType.SIMPLE, db_index=True,
    )
    price = models.DecimalField(
        max_digits=8, decimal_places=2, default=0,
        validators=[MinValueValidator(0)],
    )
    is_active = models.BooleanField(default=True, db_index=True)

    objects = ActiveQuerySet.as_manager()

    class Meta:
        verbose_name = 'Product'
        verbose_name_plural = 'Products'
        ordering = ['name']

    def __str__(self):
        return f"{self.name} ({self.get_product_type_display()})"

    @property
    def is_bookable(self):
        return self.product_type == ProductType.BOOKING
