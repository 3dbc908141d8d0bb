from django.urls import path
from . import views

urlpatterns = [
    path('', views.client_collection_view, name='client_collection'),
]
