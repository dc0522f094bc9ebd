"""Shared builders for the test suites."""

import io

from django.core.files.uploadedfile import SimpleUploadedFile
from PIL import Image

from accounts.models import User
from common.regions import CAMPUS_SUTOMO
from drivers.models import DriverAvailability
from orders.models import Order
from stores.models import MenuItem, StoreAvailability
from tickets.models import TicketBalance, TicketTransaction


def make_user(username, role=User.CUSTOMER, **extra):
    return User.objects.create_user(
        username=username,
        password='pass1234',
        role=role,
        phone_number=extra.pop('phone_number', '0812000000'),
        **extra
    )


def make_driver(username, region=CAMPUS_SUTOMO, status=DriverAvailability.ACTIVE, tickets=0):
    driver = make_user(username, role=User.DRIVER)
    DriverAvailability.objects.create(user=driver, region=region, status=status)
    if tickets:
        give_tickets(driver, tickets)
    return driver


def make_store(username, region=CAMPUS_SUTOMO, status=StoreAvailability.ACTIVE, tickets=0, lat=None, lng=None):
    store = make_user(username, role=User.STORE)
    StoreAvailability.objects.create(
        user=store,
        store_name=f"{username} kitchen",
        address='Jl. Dr. Mansyur',
        region=region,
        status=status,
        latitude=lat,
        longitude=lng,
    )
    if tickets:
        give_tickets(store, tickets)
    return store


def make_menu_item(store, name='Nasi goreng', price=15000, **extra):
    return MenuItem.objects.create(store=store, name=name, price=price, **extra)


def give_tickets(user, amount):
    """Seed a balance with its matching ledger entry."""
    balance, _ = TicketBalance.objects.get_or_create(user=user)
    balance.balance += amount
    balance.save(update_fields=['balance'])
    TicketTransaction.objects.create(user=user, type=TicketTransaction.GRANT, amount=amount, description='seed')


def make_order(customer, order_type=Order.RIDE, status=None, **fields):
    """Insert an order directly in a given status, bypassing the service layer."""
    defaults = {
        'pickup_address': 'Gerbang kampus',
        'dropoff_address': 'Asrama putra',
        'pickup_region': CAMPUS_SUTOMO,
    }
    if order_type == Order.FOOD_EXTERNAL_STORE:
        defaults.update(external_store_name='Warung Bu Tini', external_store_address='Jl. Setia Budi', quantity=1)
    defaults.update(fields)
    if status is None:
        status = Order.WAITING_STORE_CONFIRM if order_type == Order.FOOD_REGISTERED_STORE else Order.SEARCHING_DRIVER
    return Order.objects.create(customer=customer, order_type=order_type, status=status, **defaults)


def make_image(name='proof.png', size=(8, 8), fmt='PNG', content_type='image/png'):
    buffer = io.BytesIO()
    Image.new('RGB', size, color=(200, 30, 30)).save(buffer, format=fmt)
    return SimpleUploadedFile(name, buffer.getvalue(), content_type=content_type)
