from django.conf import settings
from django.utils import timezone
from rest_framework import serializers


class FlightProxyQuerySerializer(serializers.Serializer):
    origin = serializers.CharField(required=False, allow_blank=True, max_length=8)
    destination = serializers.CharField(required=False, allow_blank=True, max_length=8)
    date = serializers.DateField(required=False, allow_null=True)

    def to_internal_value(self, data):
        if hasattr(data, "dict"):
            data = data.dict()
        # A blank ?date= means "not given".
        if not str(data.get("date") or "").strip():
            data = {key: value for key, value in data.items() if key != "date"}
        return super().to_internal_value(data)

    def validate(self, attrs):
        origin = (attrs.get("origin") or "").strip() or settings.FLIGHTS_DEFAULT_ORIGIN
        destination = (attrs.get("destination") or "").strip() or settings.FLIGHTS_DEFAULT_DESTINATION
        attrs["origin"] = origin.upper()
        attrs["destination"] = destination.upper()

        # Defaults to today's calendar date in UTC.
        departure_date = attrs.get("date") or timezone.now().date()
        attrs["date"] = departure_date.isoformat()

        return attrs
