from django.urls import path

from . import views

app_name = 'workflow'

urlpatterns = [
    path('next/', views.next_step, name='next'),
    path('back/', views.previous_step, name='back'),
    path('progress/', views.progress, name='progress'),
]
