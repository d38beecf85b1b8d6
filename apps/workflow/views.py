"""
Wizard action endpoints. Step pages themselves are ordinary content pages
(see apps.pages); these views only move the session forward or back.

Each action answers JSON for AJAX/JSON callers and a redirect with a
flash message for plain form posts.
"""
import logging

from django.contrib import messages
from django.http import JsonResponse
from django.shortcuts import redirect
from django.utils.http import url_has_allowed_host_and_scheme
from django.views.decorators.http import require_GET, require_POST

from .forms import is_json_request, parse_action

logger = logging.getLogger(__name__)

INVALID_REQUEST_MESSAGE = 'Invalid request.'


def wants_json(request) -> bool:
    return (
        is_json_request(request)
        or request.headers.get('x-requested-with') == 'XMLHttpRequest'
        or 'application/json' in request.headers.get('accept', '')
    )


def _fallback_url(request):
    """The referring page when it is on this site, else the cart."""
    referer = request.META.get('HTTP_REFERER')
    if referer and url_has_allowed_host_and_scheme(
        referer, allowed_hosts={request.get_host()}, require_https=request.is_secure(),
    ):
        return referer
    return request.workflow.cart_url


def _respond(request, result: dict):
    if wants_json(request):
        return JsonResponse(result, status=200 if result['success'] else 400)

    if result['success']:
        messages.success(request, result['message'])
    else:
        messages.error(request, result['message'])
    return redirect(result.get('redirect_url') or _fallback_url(request))


def _invalid(request, detail: str):
    logger.info('Rejected wizard action: %s', detail)
    return _respond(request, {'success': False, 'message': INVALID_REQUEST_MESSAGE, 'redirect_url': ''})


@require_POST
def next_step(request):
    try:
        form, step_data = parse_action(request)
    except ValueError as exc:
        return _invalid(request, str(exc))
    if not form.is_valid():
        return _invalid(request, form.errors.as_json())

    result = request.workflow.advance(form.cleaned_data['current_step'], step_data)
    return _respond(request, result)


@require_POST
def previous_step(request):
    try:
        form, _ = parse_action(request)
    except ValueError as exc:
        return _invalid(request, str(exc))
    if not form.is_valid():
        return _invalid(request, form.errors.as_json())

    result = request.workflow.go_back(form.cleaned_data['current_step'])
    return _respond(request, result)


@require_GET
def progress(request):
    engine = request.workflow
    data = engine.progress()
    data['is_complete'] = engine.is_complete()
    return JsonResponse(data)
