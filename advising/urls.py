"""URL configuration for the degree planning project."""
from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    path("planner/", include("planner.urls")),
]
