"""
Page resolver: wizard step number <-> published content page and its URL.

The step -> slug map comes from settings.WIZARD_WORKFLOW_PAGES
({"step_1": "<slug>", ...}). A step whose page is missing or unpublished
resolves to no URL at all.
"""
import logging

from apps.workflow.conf import STEPS, step_key
from apps.workflow.exceptions import ConfigurationMissing

from .models import ContentPage

logger = logging.getLogger(__name__)


class PageResolver:

    def __init__(self, page_map: dict):
        self.page_map = dict(page_map)

    def slug_for_step(self, step: int):
        return self.page_map.get(step_key(step)) or None

    def page_for_step(self, step: int) -> ContentPage:
        """Published page for `step`. Raises ConfigurationMissing otherwise."""
        slug = self.slug_for_step(step)
        if not slug:
            raise ConfigurationMissing(step, 'No page slug is mapped to it.')
        page = ContentPage.objects.published().filter(slug=slug).first()
        if page is None:
            raise ConfigurationMissing(step, f"Page '{slug}' does not exist or is a draft.")
        return page

    def resolve_url(self, step: int):
        try:
            return self.page_for_step(step).get_absolute_url()
        except ConfigurationMissing as exc:
            logger.error('Wizard page lookup failed: %s', exc)
            return None

    def step_for_page(self, slug) -> int:
        """Wizard step hosted by the page `slug`, or 0 for ordinary pages."""
        if not slug:
            return 0
        for step in STEPS:
            if self.slug_for_step(step) == slug:
                return step
        return 0
