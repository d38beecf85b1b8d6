"""
Checkout wizard middleware.

WorkflowMiddleware       attaches request.workflow (built lazily, once per request)
WorkflowGuardMiddleware  page-protection and checkout-entry guards

Both must run after SessionMiddleware and MessageMiddleware.
"""
import logging

from django.contrib import messages
from django.shortcuts import redirect
from django.utils.functional import SimpleLazyObject

from . import conf
from .exceptions import PersistenceUnavailable
from .services import build_workflow

logger = logging.getLogger(__name__)

REDIRECT_NOTICE = 'You have been redirected to the appropriate step of the process.'

PAGE_VIEW = 'pages:detail'
CHECKOUT_VIEW = 'orders:checkout'


class WorkflowMiddleware:

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request.workflow = SimpleLazyObject(lambda: build_workflow(request))
        return self.get_response(request)


class WorkflowGuardMiddleware:

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        return self.get_response(request)

    def process_view(self, request, view_func, view_args, view_kwargs):
        match = request.resolver_match
        if match is None:
            return None
        if match.view_name == PAGE_VIEW:
            return self.protect_page(request, view_kwargs.get('slug'))
        if match.view_name == CHECKOUT_VIEW and request.method in ('GET', 'HEAD'):
            return self.guard_checkout(request)
        return None

    def protect_page(self, request, slug):
        """Keep the shopper on the step they are allowed to act on."""
        engine = request.workflow
        step = engine.pages.step_for_page(slug)
        if not step:
            return None

        try:
            allowed = engine.reconcile()
        except PersistenceUnavailable as exc:
            logger.error('Page guard skipped for step %s, session unreadable: %s', step, exc)
            return None
        if step == allowed:
            return None

        url = engine.url_for_step(allowed)
        if not url:
            logger.error('Guard cannot redirect step %s -> %s: no target URL', step, allowed)
            return None

        logger.info(
            'Workflow page guard redirect: from_step=%s to_step=%s (session %s)',
            step, allowed, engine.state.session_id,
        )
        messages.info(request, REDIRECT_NOTICE)
        return redirect(url)

    def guard_checkout(self, request):
        """Send bookable carts through the wizard before the generic checkout."""
        if not conf.redirect_checkout():
            return None

        engine = request.workflow
        if not engine.cart_has_bookable_item() or engine.is_complete():
            return None

        step_1_url = engine.url_for_step(1)
        if not step_1_url:
            return None

        if not engine.ensure_session():
            logger.error('Checkout guard could not start a wizard session')
            return None

        logger.info('Checkout redirected to wizard step 1 (session %s)', engine.state.session_id)
        return redirect(step_1_url)
