"""
URL configuration for client License API endpoints.
"""

from django.urls import path

from api.v1.license import views

urlpatterns = [
    path("activate", views.ActivateView.as_view(), name="license-activate"),
    path("deactivate", views.DeactivateView.as_view(), name="license-deactivate"),
    path("validate", views.ValidateView.as_view(), name="license-validate"),
]
