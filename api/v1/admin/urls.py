"""
URL configuration for Admin API endpoints.
"""

from django.urls import path

from api.v1.admin import views

urlpatterns = [
    path("licenses", views.LicenseListView.as_view(), name="admin-license-list"),
    path(
        "licenses/<uuid:license_id>",
        views.LicenseDetailView.as_view(),
        name="admin-license-detail",
    ),
    path(
        "licenses/<uuid:license_id>/revoke",
        views.RevokeLicenseView.as_view(),
        name="admin-license-revoke",
    ),
]
