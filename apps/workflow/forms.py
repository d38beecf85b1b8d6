"""
Boundary sanitizing for wizard actions. Everything the engine receives from
a request goes through here once.

Accepted payloads:
  form POST   current_step=2&step_data[field_1]=...   (plain field_1=... also works)
  JSON body   {"current_step": 2, "step_data": {"field_1": "..."}}
"""
import json
import re

from django import forms
from django.utils.html import strip_tags

from .conf import TOTAL_STEPS

RESERVED_FIELDS = {'csrfmiddlewaretoken', 'current_step', 'step_data', 'action', 'nonce'}
STEP_DATA_KEY = re.compile(r'^step_data\[([^\]]+)\]$')
UNSAFE_KEY_CHARS = re.compile(r'[^a-z0-9_\-]')


class StepActionForm(forms.Form):
    current_step = forms.IntegerField(min_value=1, max_value=TOTAL_STEPS)


def sanitize_key(key) -> str:
    return UNSAFE_KEY_CHARS.sub('', str(key).lower())


def sanitize_value(value):
    if isinstance(value, dict):
        return sanitize_step_data(value)
    if isinstance(value, (list, tuple)):
        return [sanitize_value(v) for v in value]
    if isinstance(value, str):
        # Drop markup and collapse newlines/tabs/runs of spaces
        return ' '.join(strip_tags(value).split())
    return value


def sanitize_step_data(data: dict) -> dict:
    sanitized = {}
    for key, value in data.items():
        clean_key = sanitize_key(key)
        if clean_key:
            sanitized[clean_key] = sanitize_value(value)
    return sanitized


def is_json_request(request) -> bool:
    return request.content_type == 'application/json'


def parse_action(request):
    """
    Returns (form, step_data) for a wizard action request.
    Raises ValueError if a JSON body cannot be decoded.
    """
    if is_json_request(request):
        try:
            payload = json.loads(request.body or b'{}')
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise ValueError(f'Invalid JSON body: {exc}') from exc
        if not isinstance(payload, dict):
            raise ValueError('JSON body must be an object')
        raw_data = payload.get('step_data') or {}
        if not isinstance(raw_data, dict):
            raise ValueError('step_data must be an object')
        form = StepActionForm({'current_step': payload.get('current_step')})
        return form, sanitize_step_data(raw_data)

    raw_data = {}
    for key in request.POST:
        match = STEP_DATA_KEY.match(key)
        if match:
            name = match.group(1)
        elif key in RESERVED_FIELDS:
            continue
        else:
            name = key
        values = request.POST.getlist(key)
        raw_data[name] = values if len(values) > 1 else values[0]

    form = StepActionForm({'current_step': request.POST.get('current_step')})
    return form, sanitize_step_data(raw_data)
