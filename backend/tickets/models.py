from django.conf import settings
from django.db import models

User = settings.AUTH_USER_MODEL


class TicketBalance(models.Model):
    """Denormalised ticket count per driver/store; may go negative after completions"""

    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='ticket_balance')
    balance = models.IntegerField(default=0)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'ticket_balances'

    def __str__(self):
        return f"{self.user} - {self.balance} tickets"


class TicketTransaction(models.Model):
    """Append-only ledger entry. Never updated or deleted."""

    GRANT = 'GRANT'
    PURCHASE = 'PURCHASE'
    CONSUME = 'CONSUME'
    ADJUSTMENT = 'ADJUSTMENT'
    TYPE_CHOICES = [
        (GRANT, 'Grant'),
        (PURCHASE, 'Purchase'),
        (CONSUME, 'Consume'),
        (ADJUSTMENT, 'Adjustment'),
    ]

    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='ticket_transactions')
    type = models.CharField(max_length=12, choices=TYPE_CHOICES)
    amount = models.IntegerField()
    description = models.CharField(max_length=255, blank=True)
    reference_id = models.CharField(max_length=64, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'ticket_transactions'
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['user', 'created_at'], name='ticket_tx_user_created_idx'),
        ]

    def __str__(self):
        return f"{self.type} {self.amount:+d} for {self.user}"


class TicketOrder(models.Model):
    """Ticket purchase request, confirmed by an admin once paid"""

    PENDING = 'PENDING'
    PAID = 'PAID'
    CANCELLED = 'CANCELLED'
    STATUS_CHOICES = [
        (PENDING, 'Pending'),
        (PAID, 'Paid'),
        (CANCELLED, 'Cancelled'),
    ]

    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='ticket_orders')
    quantity = models.PositiveIntegerField()
    price_per_ticket = models.PositiveIntegerField()
    total_amount = models.PositiveIntegerField()
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=PENDING)
    payment_method = models.CharField(max_length=10, default='QRIS')
    payment_payload = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    paid_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'ticket_orders'
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"Ticket order #{self.id} - {self.user} x{self.quantity} ({self.status})"
