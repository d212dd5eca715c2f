"""
URL Configuration for Core module.
"""
from django.urls import path, include

app_name = 'core'

urlpatterns = [
    path('accounts/', include('core.user_accounts.urls')),
]
