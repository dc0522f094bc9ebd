import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models

RATING_VALIDATORS = [django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(5)]


class Migration(migrations.Migration):

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('orders', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='OrderRating',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('driver_rating', models.PositiveSmallIntegerField(validators=RATING_VALIDATORS)),
                ('store_rating', models.PositiveSmallIntegerField(blank=True, null=True, validators=RATING_VALIDATORS)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('order', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='rating', to='orders.order')),
                ('customer', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='ratings_given', to=settings.AUTH_USER_MODEL)),
                ('driver', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='driver_ratings', to=settings.AUTH_USER_MODEL)),
                ('store', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='store_ratings', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'order_ratings',
                'ordering': ['-created_at', '-id'],
            },
        ),
    ]
