"""
URL configuration for Advisor API endpoints.
"""

from django.urls import path

from api.v1.advisor import views

urlpatterns = [
    path("chat", views.ChatView.as_view(), name="advisor-chat"),
]
