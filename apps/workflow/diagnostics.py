"""
Configuration checks for the checkout wizard, used by the
check_workflow_config management command.
"""
from apps.pages.resolver import PageResolver

from . import conf
from .exceptions import ConfigurationMissing


def validate_configuration() -> list:
    """Return a list of human-readable problems; empty means the wizard is usable."""
    problems = []

    resolver = PageResolver(conf.workflow_pages())
    for step in conf.STEPS:
        try:
            resolver.page_for_step(step)
        except ConfigurationMissing as exc:
            problems.append(str(exc))

    ttl = conf.raw_session_ttl()
    if not conf.MIN_SESSION_TTL <= ttl <= conf.MAX_SESSION_TTL:
        problems.append(
            f'Session TTL must be between {conf.MIN_SESSION_TTL} and {conf.MAX_SESSION_TTL} '
            f'seconds (got {ttl}; {conf.session_ttl()} will be used).'
        )

    if not conf.required_fields():
        problems.append('No required fields are configured for step 2.')

    return problems
