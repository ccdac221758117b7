"""
URL configuration for webhook receivers.
"""

from django.urls import path

from api.v1.webhooks import views

urlpatterns = [
    path(
        "lemonsqueezy",
        views.LemonSqueezyWebhookView.as_view(),
        name="webhook-lemonsqueezy",
    ),
]
