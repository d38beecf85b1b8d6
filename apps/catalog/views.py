"""
Shop views: product list, session cart, add/remove.

Adding a bookable product starts a fresh checkout wizard and sends the
shopper to its first step.
"""
import logging

from django.contrib import messages
from django.shortcuts import get_object_or_404, redirect, render
from django.views.decorators.http import require_POST

from .cart import SessionCart
from .models import Product

logger = logging.getLogger(__name__)


def product_list(request):
    products = Product.objects.active()
    return render(request, 'catalog/product_list.html', {'products': products})


def cart_detail(request):
    cart = SessionCart(request)
    return render(request, 'catalog/cart.html', {'items': cart.items()})


@require_POST
def add_to_cart(request, product_id):
    product = get_object_or_404(Product.objects.active(), id=product_id)
    try:
        quantity = int(request.POST.get('quantity', 1))
    except (TypeError, ValueError):
        quantity = 1

    cart = SessionCart(request)
    cart.add(product, quantity)
    messages.success(request, f'{product.name} was added to your cart.')

    if product.is_bookable:
        engine = request.workflow
        if engine.on_bookable_item_added():
            step_1_url = engine.url_for_step(1)
            if step_1_url:
                return redirect(step_1_url)
        else:
            logger.warning('Wizard not started after adding bookable product %s', product.id)

    return redirect('catalog:cart')


@require_POST
def remove_from_cart(request, product_id):
    SessionCart(request).remove(product_id)
    messages.info(request, 'The item was removed from your cart.')
    return redirect('catalog:cart')
