from django.urls import path

from apps.webhooks.views import checkin_webhook

urlpatterns = [
    path(
        "webhook-checkin/<str:coach_id>/<str:token>",
        checkin_webhook,
        name="checkin-webhook",
    ),
]
