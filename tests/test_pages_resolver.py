"""Page resolver tests against real ContentPage rows."""

import pytest

from apps.pages.models import ContentPage
from apps.pages.resolver import PageResolver
from apps.workflow.exceptions import ConfigurationMissing

from .conftest import STEP_SLUGS

PAGE_MAP = {f'step_{step}': slug for step, slug in STEP_SLUGS.items()}


@pytest.mark.django_db
class TestPageResolver:

    def test_resolves_published_pages(self, workflow_pages):
        resolver = PageResolver(PAGE_MAP)
        assert resolver.resolve_url(1) == '/booking-selection/'
        assert resolver.page_for_step(4) == workflow_pages[4]

    def test_draft_page_is_not_resolved(self, workflow_pages):
        workflow_pages[2].is_published = False
        workflow_pages[2].save()

        resolver = PageResolver(PAGE_MAP)
        assert resolver.resolve_url(2) is None
        with pytest.raises(ConfigurationMissing, match='draft'):
            resolver.page_for_step(2)

    def test_unmapped_step(self, workflow_pages):
        resolver = PageResolver({'step_1': 'booking-selection'})
        assert resolver.resolve_url(3) is None
        with pytest.raises(ConfigurationMissing, match='Step 3'):
            resolver.page_for_step(3)

    def test_missing_page_row(self, db):
        assert PageResolver(PAGE_MAP).resolve_url(1) is None

    def test_step_for_page(self):
        resolver = PageResolver(PAGE_MAP)
        assert resolver.step_for_page('booking-signature') == 3
        assert resolver.step_for_page('about') == 0
        assert resolver.step_for_page(None) == 0

    def test_published_manager(self, db):
        ContentPage.objects.create(title='Draft', slug='draft')
        ContentPage.objects.create(title='Live', slug='live', is_published=True)
        assert list(ContentPage.objects.published().values_list('slug', flat=True)) == ['live']
