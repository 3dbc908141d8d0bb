# inoflow/urls.py
from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import path, include


urlpatterns = [
    path('admin/', admin.site.urls),
    # API aplikacji:
    path('api/', include('apps.core.urls')),
    path('api/clients/', include('apps.clients.urls')),
    path('api/systems/', include('apps.clients.system_urls')),
    path('api/tasks/', include('apps.tasks.urls')),
    path('api/tasks/', include('apps.notes.urls')),
    path('api/notifications/', include('apps.notifications.urls')),
    path('api/realtime/', include('apps.realtime.urls')),
    path('api/', include('apps.integrations.urls')),
] + static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
