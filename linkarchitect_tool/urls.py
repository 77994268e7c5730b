"""Root URL configuration for linkarchitect_tool."""

from django.urls import include, path

urlpatterns = [
    path('', include('linkarchitect.urls')),
]
