from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.db.models import Q

from common.regions import REGION_CHOICES
from common.utils import Coordinates


class Order(models.Model):
    """Customer order: registered-store food, external-store food or a ride"""

    # Order types
    FOOD_REGISTERED_STORE = 'FOOD_REGISTERED_STORE'
    FOOD_EXTERNAL_STORE = 'FOOD_EXTERNAL_STORE'
    RIDE = 'RIDE'

    TYPE_CHOICES = [
        (FOOD_REGISTERED_STORE, 'Food from registered store'),
        (FOOD_EXTERNAL_STORE, 'Food from external store'),
        (RIDE, 'Ride'),
    ]

    # Statuses (transitions live in orders.state_machine)
    WAITING_STORE_CONFIRM = 'WAITING_STORE_CONFIRM'
    REJECTED = 'REJECTED'
    CONFIRMED_COOKING = 'CONFIRMED_COOKING'
    SEARCHING_DRIVER = 'SEARCHING_DRIVER'
    DRIVER_ASSIGNED = 'DRIVER_ASSIGNED'
    ON_DELIVERY = 'ON_DELIVERY'
    COMPLETED = 'COMPLETED'
    CANCELLED = 'CANCELLED'

    STATUS_CHOICES = [
        (WAITING_STORE_CONFIRM, 'Waiting for store confirmation'),
        (REJECTED, 'Rejected by store'),
        (CONFIRMED_COOKING, 'Confirmed, cooking'),
        (SEARCHING_DRIVER, 'Searching for driver'),
        (DRIVER_ASSIGNED, 'Driver assigned'),
        (ON_DELIVERY, 'On delivery'),
        (COMPLETED, 'Completed'),
        (CANCELLED, 'Cancelled'),
    ]

    TERMINAL_STATUSES = (COMPLETED, CANCELLED, REJECTED)
    ACTIVE_STATUSES = (
        WAITING_STORE_CONFIRM,
        CONFIRMED_COOKING,
        SEARCHING_DRIVER,
        DRIVER_ASSIGNED,
        ON_DELIVERY,
    )
    DRIVER_ACTIVE_STATUSES = (DRIVER_ASSIGNED, ON_DELIVERY)

    CASH = 'CASH'
    QRIS = 'QRIS'
    PAYMENT_CHOICES = [
        (CASH, 'Cash'),
        (QRIS, 'QRIS'),
    ]

    # Driver cancellation reasons (external-store orders only)
    REASON_STORE_NOT_FOUND = 'STORE_NOT_FOUND'
    REASON_STORE_CLOSED = 'STORE_CLOSED'
    REASON_DRIVER_QUOTA_INSUFFICIENT = 'DRIVER_QUOTA_INSUFFICIENT'
    REASON_CUSTOMER_REQUESTED = 'CUSTOMER_REQUESTED'
    REASON_DRIVER_UNAVAILABLE = 'DRIVER_UNAVAILABLE'
    REASON_OTHER = 'OTHER'
    REASON_CUSTOMER_CANCELLED = 'CUSTOMER_CANCELLED'

    DRIVER_CANCEL_REASONS = [
        (REASON_STORE_NOT_FOUND, 'Store not found'),
        (REASON_STORE_CLOSED, 'Store closed'),
        (REASON_DRIVER_QUOTA_INSUFFICIENT, "Driver's ticket quota insufficient"),
        (REASON_CUSTOMER_REQUESTED, 'Customer requested cancellation'),
        (REASON_DRIVER_UNAVAILABLE, 'Driver unavailable'),
        (REASON_OTHER, 'Other'),
    ]
    CANCEL_REASON_CHOICES = DRIVER_CANCEL_REASONS + [
        (REASON_CUSTOMER_CANCELLED, 'Cancelled by customer'),
    ]

    order_type = models.CharField(max_length=25, choices=TYPE_CHOICES)
    status = models.CharField(max_length=25, choices=STATUS_CHOICES, db_index=True)

    # Parties
    customer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='customer_orders'
    )
    driver = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='driver_orders'
    )
    store = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='store_orders'
    )

    # Registered-store item
    menu_item = models.ForeignKey(
        'stores.MenuItem',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='orders'
    )
    quantity = models.PositiveIntegerField(null=True, blank=True)
    payment_method = models.CharField(max_length=10, choices=PAYMENT_CHOICES, default=CASH)
    note = models.CharField(max_length=255, blank=True)

    # External store
    external_store_name = models.CharField(max_length=120, blank=True)
    external_store_address = models.TextField(blank=True)
    external_map_link = models.URLField(max_length=500, null=True, blank=True)

    # Pickup (external store location for external-store orders)
    pickup_address = models.TextField(blank=True)
    pickup_map_link = models.URLField(max_length=500, null=True, blank=True)
    pickup_latitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    pickup_longitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    pickup_region = models.CharField(max_length=20, choices=REGION_CHOICES, null=True, blank=True)

    # Dropoff
    dropoff_address = models.TextField(blank=True)
    dropoff_map_link = models.URLField(max_length=500, null=True, blank=True)
    dropoff_latitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    dropoff_longitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    dropoff_region = models.CharField(max_length=20, choices=REGION_CHOICES, null=True, blank=True)

    # Estimate snapshot at creation
    estimated_distance_km = models.DecimalField(max_digits=8, decimal_places=2, null=True, blank=True)
    estimated_fare = models.PositiveIntegerField(null=True, blank=True)

    # Evidence (blob-store references)
    pickup_proof_refs = models.JSONField(default=list, blank=True)
    delivery_proof_refs = models.JSONField(default=list, blank=True)

    cancel_reason = models.CharField(max_length=30, choices=CANCEL_REASON_CHOICES, null=True, blank=True)
    cancel_note = models.CharField(max_length=255, blank=True)
    rejection_reason = models.CharField(max_length=255, blank=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    confirmed_at = models.DateTimeField(null=True, blank=True)
    assigned_at = models.DateTimeField(null=True, blank=True)
    picked_up_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'orders'
        ordering = ['-created_at', '-id']
        constraints = [
            models.UniqueConstraint(
                fields=['customer'],
                condition=Q(status__in=[
                    'WAITING_STORE_CONFIRM',
                    'CONFIRMED_COOKING',
                    'SEARCHING_DRIVER',
                    'DRIVER_ASSIGNED',
                    'ON_DELIVERY',
                ]),
                name='one_active_order_per_customer',
            ),
            models.UniqueConstraint(
                fields=['driver'],
                condition=Q(status__in=['DRIVER_ASSIGNED', 'ON_DELIVERY']),
                name='one_active_order_per_driver',
            ),
        ]

    def __str__(self):
        return f"Order #{self.id} - {self.order_type} - {self.status}"

    @property
    def is_terminal(self):
        return self.status in self.TERMINAL_STATUSES

    @property
    def relevant_region(self):
        """Region used for driver matching."""
        if self.order_type == self.FOOD_REGISTERED_STORE:
            availability = getattr(self.store, 'store_availability', None) if self.store_id else None
            return availability.region if availability else None
        return self.pickup_region

    @property
    def pickup_coordinates(self):
        if self.order_type == self.FOOD_REGISTERED_STORE:
            availability = getattr(self.store, 'store_availability', None) if self.store_id else None
            return availability.coordinates if availability else None
        return Coordinates.from_values(self.pickup_latitude, self.pickup_longitude)

    @property
    def dropoff_coordinates(self):
        return Coordinates.from_values(self.dropoff_latitude, self.dropoff_longitude)

    def is_party(self, user) -> bool:
        return user.id in (self.customer_id, self.driver_id, self.store_id)


class DeliveryPricing(models.Model):
    """Tiered fare table; the most recent record is the one in force"""

    under_1km = models.PositiveIntegerField(default=5000)
    km_1_to_1_5 = models.PositiveIntegerField(default=6000)
    km_1_5_to_2 = models.PositiveIntegerField(default=7000)
    km_2_to_2_5 = models.PositiveIntegerField(default=8000)
    km_2_5_to_3 = models.PositiveIntegerField(default=9000)
    above_3_per_km = models.PositiveIntegerField(default=2000)

    created_at = models.DateTimeField(auto_now_add=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+'
    )

    class Meta:
        db_table = 'delivery_pricing'
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"Pricing #{self.id} ({self.created_at:%Y-%m-%d})"

    @classmethod
    def current(cls):
        return cls.objects.order_by('-created_at', '-id').first()


class OrderRating(models.Model):
    """Customer's 1-5 rating of a completed order; at most one per order"""

    order = models.OneToOneField(Order, on_delete=models.CASCADE, related_name='rating')
    customer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='ratings_given'
    )
    driver = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='driver_ratings'
    )
    store = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='store_ratings'
    )
    driver_rating = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(5)])
    store_rating = models.PositiveSmallIntegerField(
        null=True,
        blank=True,
        validators=[MinValueValidator(1), MaxValueValidator(5)]
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'order_ratings'
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"Rating for order #{self.order_id}: driver {self.driver_rating}"
