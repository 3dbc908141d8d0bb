from django.urls import path
from . import views


urlpatterns = [
    path('auth/login/', views.login_view, name='auth_login'),
    path('auth/logout/', views.logout_view, name='auth_logout'),
    path('auth/session/', views.session_view, name='auth_session'),
    path('auth/change-password/', views.change_password_view, name='auth_change_password'),
    path('users/', views.user_list_view, name='user_list'),
    path('users/<int:pk>/', views.user_detail_view, name='user_detail'),
]
