"""
URL Configuration for Accounts app.
"""
from django.urls import path
from . import views

app_name = 'accounts'

urlpatterns = [
    path('me/', views.current_user, name='current_user'),
]
