from django.urls import path

from flights.views import FlightProxyView, HealthView

urlpatterns = [
    path("health", HealthView.as_view(), name="health"),
    path("flight-proxy", FlightProxyView.as_view(), name="flight-proxy"),
]
