"""
Wizard settings, read from django.conf.settings with defaults.

  WIZARD_WORKFLOW_PAGES     {"step_1": "<page slug>", ... "step_4": ...}
  WIZARD_SESSION_TTL        seconds, clamped to [300, 3600]
  WIZARD_VERSION            contract/version tag snapshotted at session start
  WIZARD_REQUIRED_FIELDS    field names step 2 must supply
  WIZARD_REDIRECT_CHECKOUT  send bookable carts from checkout to step 1
"""
from django.conf import settings

TOTAL_STEPS = 4
STEPS = range(1, TOTAL_STEPS + 1)

STEP_LABELS = {
    1: 'Selection',
    2: 'Information',
    3: 'Signature',
    4: 'Validation',
}

DEFAULT_SESSION_TTL = 1200      # 20 minutes
MIN_SESSION_TTL = 300
MAX_SESSION_TTL = 3600

DEFAULT_WIZARD_VERSION = '1.0'
DEFAULT_REQUIRED_FIELDS = ('field_1', 'field_2')


def step_key(step: int) -> str:
    return f'step_{step}'


def workflow_pages() -> dict:
    return dict(getattr(settings, 'WIZARD_WORKFLOW_PAGES', {}))


def raw_session_ttl() -> int:
    return int(getattr(settings, 'WIZARD_SESSION_TTL', DEFAULT_SESSION_TTL))


def session_ttl() -> int:
    """Configured TTL in seconds, forced into the supported 5-60 minute range."""
    return max(MIN_SESSION_TTL, min(MAX_SESSION_TTL, raw_session_ttl()))


def wizard_version() -> str:
    return str(getattr(settings, 'WIZARD_VERSION', DEFAULT_WIZARD_VERSION)) or DEFAULT_WIZARD_VERSION


def required_fields() -> tuple:
    fields = getattr(settings, 'WIZARD_REQUIRED_FIELDS', DEFAULT_REQUIRED_FIELDS)
    return tuple(f.strip() for f in fields if f and f.strip())


def redirect_checkout() -> bool:
    return bool(getattr(settings, 'WIZARD_REDIRECT_CHECKOUT', True))
