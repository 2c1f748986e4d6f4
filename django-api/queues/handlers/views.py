"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Let domain errors propagate to handlers.errors for HTTP mapping
- Never contain business logic
- Never expose internal error details
"""

import structlog
from django.db import DatabaseError, connection
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from queues.handlers.serializers import (
    CreateEventSerializer,
    CreateTicketSerializer,
    DashboardSerializer,
    EventSerializer,
    PatchTicketSerializer,
    QueuePositionSerializer,
    TicketSerializer,
    VerifyPinSerializer,
)
from queues.services import QueueService, get_queue_service

logger = structlog.get_logger(__name__)


def _event_scope(request: Request) -> str | None:
    # The web client sends ?event=; event_id is the documented name.
    return request.query_params.get("event_id") or request.query_params.get("event")


class QueueAPIView(APIView):
    """Base view giving handlers access to the queue service."""

    def get_service(self) -> QueueService:
        return get_queue_service()


class EventListView(QueueAPIView):
    """Handler for GET/POST /api/events"""

    def get(self, request: Request) -> Response:
        events = self.get_service().list_events()
        return Response({"data": EventSerializer(events, many=True).data})

    def post(self, request: Request) -> Response:
        payload = CreateEventSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        event = self.get_service().create_event(**payload.validated_data)
        return Response(
            {"data": EventSerializer(event).data}, status=status.HTTP_201_CREATED
        )


class EventVerifyView(QueueAPIView):
    """Handler for POST /api/events/{event_id}/verify"""

    def post(self, request: Request, event_id: str) -> Response:
        payload = VerifyPinSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        ok = self.get_service().verify_pin(event_id, payload.validated_data["pin"])
        return Response(
            {"ok": ok},
            status=status.HTTP_200_OK if ok else status.HTTP_401_UNAUTHORIZED,
        )


class EventDashboardView(QueueAPIView):
    """Handler for GET /api/events/{event_id}/dashboard"""

    def get(self, request: Request, event_id: str) -> Response:
        dashboard = self.get_service().dashboard(event_id)
        return Response({"data": DashboardSerializer(dashboard).data})


class TicketListView(QueueAPIView):
    """Handler for GET/POST /api/tickets"""

    def get(self, request: Request) -> Response:
        tickets = self.get_service().list_tickets(
            _event_scope(request), status=request.query_params.get("status")
        )
        return Response({"data": TicketSerializer(tickets, many=True).data})

    def post(self, request: Request) -> Response:
        payload = CreateTicketSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        ticket = self.get_service().create_ticket(
            payload.validated_data["event_id"], payload.validated_data["name"]
        )
        return Response(
            {"data": TicketSerializer(ticket).data}, status=status.HTTP_201_CREATED
        )


class TicketClearView(QueueAPIView):
    """Handler for DELETE /api/tickets/clear?event_id={event_id|all}"""

    def delete(self, request: Request) -> Response:
        removed = self.get_service().clear_tickets(_event_scope(request))
        return Response({"success": True, "removed": removed})


class TicketDetailView(QueueAPIView):
    """Handler for GET/PATCH/PUT/DELETE /api/tickets/{ticket_id}"""

    def get(self, request: Request, ticket_id: str) -> Response:
        ticket = self.get_service().get_ticket(ticket_id)
        return Response({"data": TicketSerializer(ticket).data})

    def patch(self, request: Request, ticket_id: str) -> Response:
        payload = PatchTicketSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        ticket = self.get_service().patch_ticket(ticket_id, **payload.validated_data)
        return Response({"data": TicketSerializer(ticket).data})

    def put(self, request: Request, ticket_id: str) -> Response:
        return self.patch(request, ticket_id)

    def delete(self, request: Request, ticket_id: str) -> Response:
        self.get_service().delete_ticket(ticket_id)
        return Response({"success": True})


class TicketPositionView(QueueAPIView):
    """Handler for GET /api/tickets/{ticket_id}/position"""

    def get(self, request: Request, ticket_id: str) -> Response:
        position = self.get_service().position(ticket_id)
        return Response({"data": QueuePositionSerializer(position).data})


class HealthView(APIView):
    """Handler for GET /health"""

    def get(self, request: Request) -> Response:
        try:
            with connection.cursor() as cursor:
                cursor.execute("SELECT 1")
        except DatabaseError as exc:
            logger.error("health.unhealthy", error=str(exc))
            return Response(
                {"status": "unhealthy", "service": "takeanumber"},
                status=status.HTTP_503_SERVICE_UNAVAILABLE,
            )
        return Response({"status": "healthy", "service": "takeanumber"})
