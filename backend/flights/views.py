import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from flights.providers import get_flight_provider
from flights.serializers import FlightProxyQuerySerializer
from flights.services.normalize import sort_by_departure

logger = logging.getLogger(__name__)

ERROR_SUMMARY = "Failed to fetch live offers"

PREFLIGHT_HEADERS = {
    "Access-Control-Allow-Methods": "GET, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


class CorsAPIView(APIView):
    def finalize_response(self, request, response, *args, **kwargs):
        response = super().finalize_response(request, response, *args, **kwargs)
        response["Access-Control-Allow-Origin"] = "*"
        return response


class HealthView(CorsAPIView):
    def get(self, request):
        return Response({"status": "ok"})


class FlightProxyView(CorsAPIView):
    def options(self, request, *args, **kwargs):
        return Response(status=status.HTTP_204_NO_CONTENT, headers=PREFLIGHT_HEADERS)

    def get(self, request):
        try:
            serializer = FlightProxyQuerySerializer(data=request.query_params)
            serializer.is_valid(raise_exception=True)
            params = serializer.validated_data

            # Credentials are validated here, before any upstream call.
            provider = get_flight_provider()
            records = provider.search_flights(params["origin"], params["destination"], params["date"])
        except Exception as exc:
            logger.exception("flight-proxy error")
            return Response(
                {"error": ERROR_SUMMARY, "details": str(exc)},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

        return Response(sort_by_departure(records))
