"""Page-protection and checkout-entry guard tests."""

from unittest import mock

import pytest
from django.test import override_settings

from apps.pages.models import ContentPage
from apps.pages.views import STEP_LOCKED_MESSAGE
from apps.workflow.exceptions import PersistenceUnavailable
from apps.workflow.middleware import REDIRECT_NOTICE
from apps.workflow.session import SESSION_KEY, SessionStoreAdapter


@pytest.mark.django_db
class TestPageGuard:

    def test_current_step_page_renders(self, shopper):
        response = shopper.get('/booking-selection/')
        assert response.status_code == 200
        assert response.context['workflow_step'] == 1
        assert response.context['step_accessible']
        assert 'class="wizard-step"' in response.content.decode()

    def test_skipping_ahead_redirects_to_step_one(self, shopper):
        response = shopper.get('/booking-signature/')
        assert response.status_code == 302
        assert response.url == '/booking-selection/'

    def test_redirect_carries_notice(self, shopper):
        response = shopper.get('/booking-signature/', follow=True)
        assert response.redirect_chain == [('/booking-selection/', 302)]
        assert REDIRECT_NOTICE in response.content.decode()

    def test_visiting_earlier_step_redirects_to_current(self, shopper):
        shopper.post('/checkout-wizard/next/', {'current_step': 1})
        response = shopper.get('/booking-selection/')
        assert response.url == '/booking-information/'

    def test_no_session_redirects_to_cart(self, client, workflow_pages):
        response = client.get('/booking-information/')
        assert response.status_code == 302
        assert response.url == '/shop/cart/'

    def test_ordinary_page_is_not_guarded(self, client, db):
        ContentPage.objects.create(title='About', slug='about', is_published=True)
        response = client.get('/about/')
        assert response.status_code == 200
        assert response.context['workflow_step'] == 0

    def test_incoherent_session_is_restarted(self, shopper):
        session = shopper.session
        blob = session[SESSION_KEY]
        blob.update({'current_step': 3, 'completed_steps': [1]})
        session[SESSION_KEY] = blob
        session.save()

        response = shopper.get('/booking-signature/')
        assert response.url == '/booking-selection/'
        restarted = shopper.session[SESSION_KEY]
        assert restarted['current_step'] == 1
        assert restarted['completed_steps'] == []

    def test_missing_target_page_does_not_redirect(self, shopper, workflow_pages):
        workflow_pages[1].is_published = False
        workflow_pages[1].save()

        response = shopper.get('/booking-signature/')
        assert response.status_code == 200
        content = response.content.decode()
        assert not response.context['step_accessible']
        assert STEP_LOCKED_MESSAGE in content
        assert 'class="wizard-step"' not in content

    def test_unreadable_session_lets_request_through_locked(self, shopper):
        with mock.patch.object(SessionStoreAdapter, 'get', side_effect=PersistenceUnavailable('session table locked')):
            response = shopper.get('/booking-information/')
        assert response.status_code == 200
        assert STEP_LOCKED_MESSAGE in response.content.decode()


@pytest.mark.django_db
class TestCheckoutGuard:

    def test_bookable_cart_is_sent_to_step_one(self, shopper):
        response = shopper.get('/checkout/')
        assert response.status_code == 302
        assert response.url == '/booking-selection/'

    def test_guard_recreates_missing_session(self, shopper):
        session = shopper.session
        del session[SESSION_KEY]
        session.save()

        response = shopper.get('/checkout/')
        assert response.url == '/booking-selection/'
        assert shopper.session[SESSION_KEY]['current_step'] == 1

    def test_simple_cart_reaches_checkout(self, client, workflow_pages, simple_product):
        client.post(f'/shop/cart/add/{simple_product.id}/')
        response = client.get('/checkout/')
        assert response.status_code == 200

    @override_settings(WIZARD_REDIRECT_CHECKOUT=False)
    def test_guard_can_be_disabled(self, shopper):
        response = shopper.get('/checkout/')
        assert response.status_code == 200
