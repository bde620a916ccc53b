from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

SHIPPERS = [
    ("Fast Delivery", 101),
    ("Express Logistics", 102),
    ("Global Transport", 103),
    ("Quick Ship", 104),
    ("Reliable Shipping", 105),
]

PRODUCTS = [
    ("Apple iPhone 15 Pro Max", "1199.99", 1001, 45),
    ("Canon EOS R5", "3699.99", 1002, 12),
    ("Sony PlayStation 5 Pro", "599.99", 1003, 20),
    ("Samsung Galaxy Z Fold 5", "1799.99", 1004, 15),
    ("Apple Vision Pro", "3499.99", 1005, 8),
    ("Bose QuietComfort Ultra Headphones", "429.99", 1006, 30),
    ("ASUS ROG Zephyrus G14", "1899.99", 1007, 18),
    ("Dyson Airwrap Complete", "599.99", 1008, 25),
    ('LG C3 OLED 65" TV', "1999.99", 1009, 10),
    ("Sonos Arc Soundbar", "899.99", 1010, 22),
    ("Apple Watch Ultra 2", "799.99", 1011, 35),
    ("Microsoft Xbox Series X", "499.99", 1012, 28),
    ("Samsung Odyssey G9 Monitor", "1299.99", 1013, 15),
    ("DJI Mavic 3 Pro", "2199.99", 1014, 10),
    ("Garmin Fenix 7 Sapphire", "899.99", 1015, 20),
    ("Keychron Q1 Pro Keyboard", "199.99", 1016, 40),
    ("Oura Ring Gen 3", "349.99", 1017, 25),
    ("Remarkable 2 Tablet", "399.99", 1018, 30),
    ("Theragun Pro", "599.99", 1019, 15),
    ("Philips Hue Gradient Lightstrip", "229.99", 1020, 40),
]


class Command(BaseCommand):
    help = "Insert the reference shippers and products (safe to run repeatedly)"

    def handle(self, *args, **options):
        from apps.catalog.models import Product
        from apps.orders.models import Shipper

        created = 0
        with transaction.atomic():
            for name, code in SHIPPERS:
                _, was_created = Shipper.objects.get_or_create(shipper_code=code, defaults={"name": name})
                created += was_created
            # existing products keep their current stock
            for name, price, code, quantity in PRODUCTS:
                _, was_created = Product.objects.get_or_create(
                    product_code=code,
                    defaults={"name": name, "unit_price": Decimal(price), "quantity": quantity},
                )
                created += was_created

        self.stdout.write(self.style.SUCCESS(f"Catalog seeded ({created} new rows)"))
