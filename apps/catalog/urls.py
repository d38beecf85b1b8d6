from django.urls import path
from . import views

app_name = 'catalog'

urlpatterns = [
    path('',                              views.product_list,     name='products'),
    path('cart/',                         views.cart_detail,      name='cart'),
    path('cart/add/<uuid:product_id>/',   views.add_to_cart,      name='add'),
    path('cart/remove/<uuid:product_id>/', views.remove_from_cart, name='remove'),
]
