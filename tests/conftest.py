"""Pytest configuration and fixtures for the checkout wizard tests.

Unit tests drive the engine through in-memory fakes; view and middleware
tests use the Django test client against the published step pages below.
"""
import uuid
from decimal import Decimal

import pytest

from apps.workflow.exceptions import PersistenceUnavailable
from apps.workflow.engine import WorkflowEngine
from apps.workflow.session import SessionState
from apps.workflow.validators import StepValidator

START = 1_760_000_000
TTL = 1200
CLIENT_IP = '203.0.113.7'

STEP_SLUGS = {
    1: 'booking-selection',
    2: 'booking-information',
    3: 'booking-signature',
    4: 'booking-confirmation',
}


# ── Fakes ────────────────────────────────────────────────────────

class ManualClock:
    """Epoch clock the test moves by hand."""

    def __init__(self, now=START):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class FakeStore:
    """Session store adapter backed by a plain attribute."""

    def __init__(self):
        self.blob = None
        self.available = True
        self.fail_reads = False
        self.fail_writes = False
        self.writes = 0

    @property
    def session_id(self):
        return 'test-session'

    def is_available(self):
        return self.available

    def get(self):
        if not self.available or self.fail_reads:
            raise PersistenceUnavailable('store offline')
        return self.blob

    def set(self, blob):
        if not self.available or self.fail_writes:
            raise PersistenceUnavailable('store offline')
        self.writes += 1
        self.blob = blob

    def delete(self):
        if not self.available:
            raise PersistenceUnavailable('store offline')
        self.blob = None


class FakeCart:

    def __init__(self, empty=False, bookable=True):
        self.empty = empty
        self.bookable = bookable

    def cart_is_empty(self):
        return self.empty

    def cart_has_bookable_item(self):
        return not self.empty and self.bookable


class FakePages:
    """Resolves step N to /step-N/; steps in `missing` have no page."""

    def __init__(self, missing=()):
        self.missing = set(missing)

    def resolve_url(self, step):
        if step in self.missing:
            return None
        return f'/step-{step}/'

    def step_for_page(self, slug):
        for step, candidate in STEP_SLUGS.items():
            if candidate == slug:
                return step
        return 0


class FakeOrders:
    """Order pipeline that records every attach call."""

    def __init__(self):
        self.order = object()
        self.attached = []
        self.fail = False

    def pending_order(self):
        return self.order

    def attach_metadata(self, order, metadata):
        if self.fail:
            raise PersistenceUnavailable('orders table locked')
        self.attached.append((order, metadata))


# ── Unit fixtures ────────────────────────────────────────────────

@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def state(store, clock):
    return SessionState(store, ttl=TTL, wizard_version='1.0', clock=clock)


@pytest.fixture
def cart():
    return FakeCart()


@pytest.fixture
def validator(cart):
    return StepValidator(cart, required_fields=('field_1', 'field_2'))


@pytest.fixture
def pages():
    return FakePages()


@pytest.fixture
def orders():
    return FakeOrders()


@pytest.fixture
def engine(state, validator, pages, orders):
    return WorkflowEngine(
        state=state,
        validator=validator,
        pages=pages,
        orders=orders,
        client_ip=CLIENT_IP,
        checkout_url='/checkout/',
        cart_url='/shop/cart/',
    )


@pytest.fixture
def engine_at_step():
    """Walk `engine` forward with valid data until `step` is current."""
    valid = {
        1: {},
        2: {'field_1': 'Jane', 'field_2': 'Doe'},
        3: {'signature_accepted': '1'},
    }

    def walk(engine, step):
        assert engine.on_bookable_item_added()
        for completed in range(1, step):
            result = engine.advance(completed, valid[completed])
            assert result['success'], result
        return engine

    return walk


# ── Database fixtures ────────────────────────────────────────────

@pytest.fixture
def workflow_pages(db):
    from apps.pages.models import ContentPage

    return {
        step: ContentPage.objects.create(
            title=f'Step {step}', slug=slug, body='', is_published=True,
        )
        for step, slug in STEP_SLUGS.items()
    }


@pytest.fixture
def bookable_product(db):
    from apps.catalog.models import Product, ProductType

    return Product.objects.create(
        name='Studio Day Rental', slug=f'studio-{uuid.uuid4().hex[:8]}',
        product_type=ProductType.BOOKING, price=Decimal('4500.00'),
    )


@pytest.fixture
def simple_product(db):
    from apps.catalog.models import Product, ProductType

    return Product.objects.create(
        name='Tote Bag', slug=f'tote-{uuid.uuid4().hex[:8]}',
        product_type=ProductType.SIMPLE, price=Decimal('350.00'),
    )


@pytest.fixture
def shopper(client, workflow_pages, bookable_product):
    """Test client with a bookable product in the cart and a wizard at step 1."""
    response = client.post(f'/shop/cart/add/{bookable_product.id}/', {'quantity': 1})
    assert response.status_code == 302
    return client
