from django.conf import settings
from django.db import models


class TransactionReport(models.Model):
    """Dispute filed by a party of an order. Never changes the order itself."""

    DRIVER = 'DRIVER'
    CUSTOMER = 'CUSTOMER'
    STORE = 'STORE'
    CATEGORY_CHOICES = [
        (DRIVER, 'Driver fault'),
        (CUSTOMER, 'Customer fault'),
        (STORE, 'Store fault'),
    ]

    PENDING = 'PENDING'
    IN_PROGRESS = 'IN_PROGRESS'
    REJECTED = 'REJECTED'
    RESOLVED = 'RESOLVED'
    STATUS_CHOICES = [
        (PENDING, 'Pending'),
        (IN_PROGRESS, 'In progress'),
        (REJECTED, 'Rejected'),
        (RESOLVED, 'Resolved'),
    ]

    order = models.ForeignKey('orders.Order', on_delete=models.CASCADE, related_name='reports')
    reporter = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='filed_reports')
    category = models.CharField(max_length=10, choices=CATEGORY_CHOICES)
    detail = models.TextField()
    proof_ref = models.CharField(max_length=255, blank=True)
    status = models.CharField(max_length=12, choices=STATUS_CHOICES, default=PENDING)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'transaction_reports'
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"Report #{self.id} on order {self.order_id} by {self.reporter} ({self.status})"
