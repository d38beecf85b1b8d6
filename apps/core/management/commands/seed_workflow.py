"""
Seed management command.

Populates the database with demo data for the checkout wizard:
  - the 4 published wizard step pages from WIZARD_WORKFLOW_PAGES
  - 4 products (2 bookable, 2 simple)

Usage:
    python manage.py seed_workflow
    python manage.py seed_workflow --flush   # wipe and re-seed
"""
from decimal import Decimal

from django.core.management.base import BaseCommand

from apps.catalog.models import Product, ProductType
from apps.pages.models import ContentPage
from apps.workflow import conf

STEP_PAGE_BODIES = {
    1: 'Review the bookings in your cart before continuing.',
    2: 'Tell us who the booking is for.',
    3: 'Read the rental contract and accept it to continue.',
    4: 'Check your details one last time, then confirm.',
}


class Command(BaseCommand):
    help = 'Seed the checkout wizard pages and demo products'

    def add_arguments(self, parser):
        parser.add_argument(
            '--flush', action='store_true',
            help='Delete existing pages and products before creating fresh records',
        )

    def handle(self, *args, **options):
        if options['flush']:
            self.stdout.write('Flushing existing data...')
            ContentPage.objects.all().delete()
            Product.objects.all().delete()

        # ── Wizard pages ──────────────────────────────────────────────────────
        self.stdout.write('Seeding wizard pages...')
        pages = conf.workflow_pages()
        for step in conf.STEPS:
            slug = pages.get(conf.step_key(step))
            if not slug:
                self.stdout.write(self.style.WARNING(f'  ! step {step} has no slug configured, skipped'))
                continue
            ContentPage.objects.update_or_create(
                slug=slug,
                defaults={
                    'title': f'Step {step}: {conf.STEP_LABELS[step]}',
                    'body': STEP_PAGE_BODIES[step],
                    'is_published': True,
                },
            )
        self.stdout.write(self.style.SUCCESS('  ✔ wizard pages created'))

        # ── Products ──────────────────────────────────────────────────────────
        self.stdout.write('Seeding products...')
        products_data = [
            {'slug': 'studio-day-rental', 'name': 'Studio Day Rental', 'product_type': ProductType.BOOKING, 'price': Decimal('4500.00'), 'description': 'A full day in the photo studio, lighting kit included.'},
            {'slug': 'meeting-room-half-day', 'name': 'Meeting Room (Half Day)', 'product_type': ProductType.BOOKING, 'price': Decimal('1800.00'), 'description': 'Four hours in the 8-seat meeting room.'},
            {'slug': 'gift-card', 'name': 'Gift Card', 'product_type': ProductType.SIMPLE, 'price': Decimal('1000.00'), 'description': 'Redeemable against any booking.'},
            {'slug': 'tote-bag', 'name': 'Tote Bag', 'product_type': ProductType.SIMPLE, 'price': Decimal('350.00'), 'description': 'Canvas tote bag.'},
        ]
        for data in products_data:
            Product.objects.get_or_create(slug=data.pop('slug'), defaults=data)
        self.stdout.write(self.style.SUCCESS(f'  ✔ {len(products_data)} products created'))

        self.stdout.write(self.style.SUCCESS('\nSeed complete! Run check_workflow_config to verify the setup.'))
