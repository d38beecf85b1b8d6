"""
Order pipeline: receives the checkout wizard's captured data.

Public API:
  OrderPipeline(session).pending_order()
  OrderPipeline(session).attach_metadata(order, {form_data, signature_data, wizard_version})
  OrderPipeline(session).place(order)

Database failures surface as PersistenceUnavailable so the wizard reports
them like any other storage failure.
"""
import logging

from django.db import DatabaseError, transaction

from apps.workflow.exceptions import PersistenceUnavailable

from .models import Order, OrderStatus

logger = logging.getLogger(__name__)

WIZARD_ORDER_NOTE = 'Order created via the multi-step checkout wizard.'


class OrderPipeline:

    def __init__(self, session):
        self.session = session

    def _session_key(self) -> str:
        if self.session is None:
            raise PersistenceUnavailable('No session is attached to this request.')
        if not self.session.session_key:
            self.session.create()
        return self.session.session_key

    def pending_order(self) -> Order:
        """The shopper's PENDING order, created on first use."""
        session_key = self._session_key()
        try:
            order = Order.objects.filter(session_key=session_key, status=OrderStatus.PENDING).first()
            if order is None:
                order = Order.objects.create(session_key=session_key)
                logger.info('Pending order %s created (session %s)', order.id, session_key)
        except DatabaseError as exc:
            raise PersistenceUnavailable(f'Could not load the pending order: {exc}') from exc
        return order

    def attach_metadata(self, order: Order, metadata: dict) -> None:
        order.form_data = dict(metadata.get('form_data') or {})
        order.signature_data = dict(metadata.get('signature_data') or {})
        order.wizard_version = metadata.get('wizard_version') or ''
        try:
            with transaction.atomic():
                order.save(update_fields=['form_data', 'signature_data', 'wizard_version', 'updated_at'])
                if not order.notes.filter(note=WIZARD_ORDER_NOTE).exists():
                    order.add_note(WIZARD_ORDER_NOTE)
        except DatabaseError as exc:
            logger.exception('Failed to attach wizard data to order %s', order.id)
            raise PersistenceUnavailable(f'Could not save wizard data on order {order.id}: {exc}') from exc
        logger.info('Wizard data attached to order %s (version %s)', order.id, order.wizard_version)

    def place(self, order: Order) -> None:
        try:
            order.place()
        except DatabaseError as exc:
            raise PersistenceUnavailable(f'Could not place order {order.id}: {exc}') from exc
        logger.info('Order %s placed', order.id)
