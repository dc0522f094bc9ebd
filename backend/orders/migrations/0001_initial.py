import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models

REGIONS = [('CAMPUS_SUTOMO', 'Campus Sutomo'), ('CAMPUS_TUNTUNGAN', 'Campus Tuntungan'), ('CAMPUS_PANCING', 'Campus Pancing'), ('OTHER', 'Other area')]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('stores', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Order',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('order_type', models.CharField(choices=[('FOOD_REGISTERED_STORE', 'Food from registered store'), ('FOOD_EXTERNAL_STORE', 'Food from external store'), ('RIDE', 'Ride')], max_length=25)),
                ('status', models.CharField(choices=[('WAITING_STORE_CONFIRM', 'Waiting for store confirmation'), ('REJECTED', 'Rejected by store'), ('CONFIRMED_COOKING', 'Confirmed, cooking'), ('SEARCHING_DRIVER', 'Searching for driver'), ('DRIVER_ASSIGNED', 'Driver assigned'), ('ON_DELIVERY', 'On delivery'), ('COMPLETED', 'Completed'), ('CANCELLED', 'Cancelled')], db_index=True, max_length=25)),
                ('quantity', models.PositiveIntegerField(blank=True, null=True)),
                ('payment_method', models.CharField(choices=[('CASH', 'Cash'), ('QRIS', 'QRIS')], default='CASH', max_length=10)),
                ('note', models.CharField(blank=True, max_length=255)),
                ('external_store_name', models.CharField(blank=True, max_length=120)),
                ('external_store_address', models.TextField(blank=True)),
                ('external_map_link', models.URLField(blank=True, max_length=500, null=True)),
                ('pickup_address', models.TextField(blank=True)),
                ('pickup_map_link', models.URLField(blank=True, max_length=500, null=True)),
                ('pickup_latitude', models.DecimalField(blank=True, decimal_places=6, max_digits=9, null=True)),
                ('pickup_longitude', models.DecimalField(blank=True, decimal_places=6, max_digits=9, null=True)),
                ('pickup_region', models.CharField(blank=True, choices=REGIONS, max_length=20, null=True)),
                ('dropoff_address', models.TextField(blank=True)),
                ('dropoff_map_link', models.URLField(blank=True, max_length=500, null=True)),
                ('dropoff_latitude', models.DecimalField(blank=True, decimal_places=6, max_digits=9, null=True)),
                ('dropoff_longitude', models.DecimalField(blank=True, decimal_places=6, max_digits=9, null=True)),
                ('dropoff_region', models.CharField(blank=True, choices=REGIONS, max_length=20, null=True)),
                ('estimated_distance_km', models.DecimalField(blank=True, decimal_places=2, max_digits=8, null=True)),
                ('estimated_fare', models.PositiveIntegerField(blank=True, null=True)),
                ('pickup_proof_refs', models.JSONField(blank=True, default=list)),
                ('delivery_proof_refs', models.JSONField(blank=True, default=list)),
                ('cancel_reason', models.CharField(blank=True, choices=[('STORE_NOT_FOUND', 'Store not found'), ('STORE_CLOSED', 'Store closed'), ('DRIVER_QUOTA_INSUFFICIENT', "Driver's ticket quota insufficient"), ('CUSTOMER_REQUESTED', 'Customer requested cancellation'), ('DRIVER_UNAVAILABLE', 'Driver unavailable'), ('OTHER', 'Other'), ('CUSTOMER_CANCELLED', 'Cancelled by customer')], max_length=30, null=True)),
                ('cancel_note', models.CharField(blank=True, max_length=255)),
                ('rejection_reason', models.CharField(blank=True, max_length=255)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('confirmed_at', models.DateTimeField(blank=True, null=True)),
                ('assigned_at', models.DateTimeField(blank=True, null=True)),
                ('picked_up_at', models.DateTimeField(blank=True, null=True)),
                ('completed_at', models.DateTimeField(blank=True, null=True)),
                ('cancelled_at', models.DateTimeField(blank=True, null=True)),
                ('customer', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='customer_orders', to=settings.AUTH_USER_MODEL)),
                ('driver', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='driver_orders', to=settings.AUTH_USER_MODEL)),
                ('store', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='store_orders', to=settings.AUTH_USER_MODEL)),
                ('menu_item', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='orders', to='stores.menuitem')),
            ],
            options={
                'db_table': 'orders',
                'ordering': ['-created_at', '-id'],
            },
        ),
        migrations.CreateModel(
            name='DeliveryPricing',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('under_1km', models.PositiveIntegerField(default=5000)),
                ('km_1_to_1_5', models.PositiveIntegerField(default=6000)),
                ('km_1_5_to_2', models.PositiveIntegerField(default=7000)),
                ('km_2_to_2_5', models.PositiveIntegerField(default=8000)),
                ('km_2_5_to_3', models.PositiveIntegerField(default=9000)),
                ('above_3_per_km', models.PositiveIntegerField(default=2000)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'delivery_pricing',
                'ordering': ['-created_at', '-id'],
            },
        ),
        migrations.AddConstraint(
            model_name='order',
            constraint=models.UniqueConstraint(condition=models.Q(('status__in', ['WAITING_STORE_CONFIRM', 'CONFIRMED_COOKING', 'SEARCHING_DRIVER', 'DRIVER_ASSIGNED', 'ON_DELIVERY'])), fields=('customer',), name='one_active_order_per_customer'),
        ),
        migrations.AddConstraint(
            model_name='order',
            constraint=models.UniqueConstraint(condition=models.Q(('status__in', ['DRIVER_ASSIGNED', 'ON_DELIVERY'])), fields=('driver',), name='one_active_order_per_driver'),
        ),
    ]
