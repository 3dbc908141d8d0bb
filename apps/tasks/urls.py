# apps/tasks/urls.py
from django.urls import path
from . import views

urlpatterns = [
    path('', views.task_collection_view, name='task_collection'),
    path('attachments/upload/', views.attachment_upload_view, name='attachment_upload'),
    path('<int:pk>/', views.task_detail_view, name='task_detail'),
    path('<int:pk>/status/', views.task_status_view, name='task_status'),
    path('<int:pk>/subtasks/', views.subtask_collection_view, name='subtask_collection'),
    path('<int:pk>/subtasks/<int:subtask_id>/', views.subtask_detail_view, name='subtask_detail'),
    path('<int:pk>/attachments/', views.attachment_collection_view, name='attachment_collection'),
    path('<int:pk>/status-logs/', views.status_log_view, name='status_log_list'),
]
