from django.urls import path
from . import views

urlpatterns = [
    path('<int:pk>/notes/', views.note_collection_view, name='note_collection'),
]
