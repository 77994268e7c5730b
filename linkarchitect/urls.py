"""URL configuration for the linkarchitect app.

This module defines the URL patterns for the app's views. It also
specifies the ``app_name`` to allow namespacing from the project URL
configuration.
"""

from django.urls import path

from . import views

app_name = 'linkarchitect'

urlpatterns = [
    path('', views.inject, name='inject'),
]
