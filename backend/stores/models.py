from django.conf import settings
from django.db import models

from common.regions import REGION_CHOICES
from common.utils import Coordinates

User = settings.AUTH_USER_MODEL


class StoreAvailability(models.Model):
    """Registered store's service region, open/closed flag and pickup location"""
    ACTIVE = 'ACTIVE'
    INACTIVE = 'INACTIVE'
    STATUS_CHOICES = [
        (ACTIVE, 'Active'),
        (INACTIVE, 'Inactive'),
    ]

    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='store_availability')

    store_name = models.CharField(max_length=120)
    address = models.TextField(blank=True)
    region = models.CharField(max_length=20, choices=REGION_CHOICES, null=True, blank=True)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=INACTIVE)

    # Pickup point for fare estimation
    location_url = models.URLField(max_length=500, null=True, blank=True)
    latitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    longitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'store_availability'
        verbose_name_plural = 'store availability'

    def __str__(self):
        return f"{self.store_name} - {self.region or 'no region'} ({self.status})"

    @property
    def coordinates(self):
        return Coordinates.from_values(self.latitude, self.longitude)


class MenuItem(models.Model):
    """Catalog entry referenced by registered-store orders (managed elsewhere)"""

    store = models.ForeignKey(User, on_delete=models.CASCADE, related_name='menu_items')
    name = models.CharField(max_length=120)
    price = models.PositiveIntegerField()
    promo_price = models.PositiveIntegerField(null=True, blank=True)
    is_available = models.BooleanField(default=True)
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = 'menu_items'
        ordering = ['name']

    def __str__(self):
        return f"{self.name} ({self.store})"

    @property
    def effective_price(self):
        return self.promo_price if self.promo_price is not None else self.price
