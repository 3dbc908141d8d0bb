from django.urls import path
from . import views

urlpatterns = [
    path('', views.notification_list_view, name='notification_list'),
    path('mark-all-read/', views.mark_all_read_view, name='notification_mark_all_read'),
    path('<int:pk>/', views.notification_detail_view, name='notification_detail'),
]
