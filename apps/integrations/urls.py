from django.urls import path
from . import views

urlpatterns = [
    path('automation/dispatch/', views.automation_dispatch_view, name='automation_dispatch'),
    path('hooks/subtasks/', views.subtasks_hook_view, name='hook_subtasks'),
    path('hooks/summary/', views.summary_hook_view, name='hook_summary'),
]
