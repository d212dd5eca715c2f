"""
URL configuration for career_project project.

Including another URLconf:
    path('hr/', include('HR.urls'))
"""
from django.urls import path, include

urlpatterns = [
    path('core/', include('core.urls')),
    path('hr/', include('HR.urls')),
]
