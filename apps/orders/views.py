"""
Generic checkout.

Entering the checkout with a bookable cart and an unfinished wizard is
intercepted by WorkflowGuardMiddleware (redirect to step 1). Placing the
order re-checks completion here, so a direct POST cannot skip the wizard.
"""
import logging

from django.contrib import messages
from django.shortcuts import get_object_or_404, redirect, render

from apps.catalog.cart import SessionCart
from apps.workflow.exceptions import PersistenceUnavailable

from .models import Order, OrderStatus

logger = logging.getLogger(__name__)


def checkout(request):
    cart = SessionCart(request)
    if cart.cart_is_empty():
        messages.info(request, 'Your cart is empty.')
        return redirect('catalog:cart')

    engine = request.workflow

    if request.method == 'POST':
        if engine.cart_has_bookable_item() and not engine.is_complete():
            messages.error(request, 'You must complete every step of the process before placing your order.')
            return redirect(engine.url_for_step(1) or 'catalog:cart')

        try:
            order = engine.orders.pending_order()
            engine.orders.place(order)
        except PersistenceUnavailable:
            logger.exception('Checkout failed (session %s)', request.session.session_key)
            messages.error(request, 'Could not place your order. Please try again.')
            return redirect('orders:checkout')

        cart.clear()
        engine.clear()
        return redirect('orders:thank_you', order_id=order.id)

    session = engine.current_session()
    return render(request, 'orders/checkout.html', {
        'items': cart.items(),
        'form_data': session.form_data if session else {},
        'progress': engine.progress(),
        'wizard_complete': engine.is_complete(),
    })


def thank_you(request, order_id):
    order = get_object_or_404(
        Order,
        id=order_id,
        session_key=request.session.session_key,
        status=OrderStatus.PLACED,
    )
    return render(request, 'orders/thank_you.html', {'order': order})
