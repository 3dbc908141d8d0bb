from django.urls import path
from . import views

urlpatterns = [
    path('events/', views.event_stream_view, name='realtime_events'),
]
