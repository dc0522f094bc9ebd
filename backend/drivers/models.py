from django.db import models
from django.conf import settings

from common.regions import REGION_CHOICES
from common.utils import Coordinates

User = settings.AUTH_USER_MODEL

class DriverAvailability(models.Model):
    """Driver's declared service region and active/inactive flag"""
    ACTIVE = 'ACTIVE'
    INACTIVE = 'INACTIVE'
    STATUS_CHOICES = [
        (ACTIVE, 'Active'),
        (INACTIVE, 'Inactive'),
    ]
    
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='driver_availability')
    
    # Declared service area, matched against each order's relevant region
    region = models.CharField(max_length=20, choices=REGION_CHOICES, null=True, blank=True)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=INACTIVE)

    # Optional base location (map link or raw coordinates)
    location_url = models.URLField(max_length=500, null=True, blank=True)
    latitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    longitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    note = models.CharField(max_length=255, blank=True)

    updated_at = models.DateTimeField(auto_now=True)
    
    class Meta:
        db_table = 'driver_availability'
        verbose_name_plural = 'driver availability'
        
    def __str__(self):
        return f"{self.user} - {self.region or 'no region'} ({self.status})"

    @property
    def is_active(self):
        return self.status == self.ACTIVE

    @property
    def coordinates(self):
        return Coordinates.from_values(self.latitude, self.longitude)
