"""
Wiring for the checkout wizard. build_workflow() assembles one engine per
request from the request's session, cart and settings; WorkflowMiddleware
exposes it lazily as request.workflow.
"""
from django.urls import reverse

from apps.catalog.cart import SessionCart
from apps.orders.pipeline import OrderPipeline
from apps.pages.resolver import PageResolver

from . import conf
from .engine import WorkflowEngine
from .session import SessionState, SessionStoreAdapter
from .validators import StepValidator


def client_ip(request) -> str:
    forwarded = request.META.get('HTTP_X_FORWARDED_FOR', '')
    if forwarded:
        return forwarded.split(',')[0].strip() or 'unknown'
    return request.META.get('REMOTE_ADDR') or 'unknown'


def build_workflow(request) -> WorkflowEngine:
    session = getattr(request, 'session', None)
    state = SessionState(
        SessionStoreAdapter(session),
        ttl=conf.session_ttl(),
        wizard_version=conf.wizard_version(),
    )
    validator = StepValidator(SessionCart(request), required_fields=conf.required_fields())
    return WorkflowEngine(
        state=state,
        validator=validator,
        pages=PageResolver(conf.workflow_pages()),
        orders=OrderPipeline(session),
        client_ip=client_ip(request),
        checkout_url=reverse('orders:checkout'),
        cart_url=reverse('catalog:cart'),
    )
