from rest_framework import status, generics
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.permissions import AllowAny, IsAdminUser
from django.shortcuts import get_object_or_404
from drf_yasg.utils import swagger_auto_schema
from drf_yasg import openapi

from booking_api.pagination import StandardResultsSetPagination
from .filters import AppointmentFilter
from .models import Appointment
from .serializers import (
    AppointmentSerializer, AppointmentStatusUpdateSerializer, AppointmentCancelSerializer
)
from .permissions import IsAdminOrBookingRequest
from .services import AppointmentService


def _appointment_queryset():
    return Appointment.objects.select_related('time_slot').prefetch_related(
        'status_history__changed_by'
    ).order_by('-booked_at')


def _acting_user(request):
    return request.user if request.user.is_authenticated else None


class AppointmentListCreateView(generics.ListCreateAPIView):
    serializer_class = AppointmentSerializer
    permission_classes = [IsAdminOrBookingRequest]
    filterset_class = AppointmentFilter

    def get_queryset(self):
        return _appointment_queryset()

    @swagger_auto_schema(operation_summary="List appointments, newest booking first (admin only).")
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)

    @swagger_auto_schema(
        operation_summary="Book a time slot.",
        responses={201: AppointmentSerializer, 400: "Validation error or slot not bookable", 404: "Time slot not found"}
    )
    def post(self, request, *args, **kwargs):
        return super().post(request, *args, **kwargs)


class AppointmentRetrieveCancelView(generics.RetrieveDestroyAPIView):
    """The appointment id is the client's booking reference, so lookups need no login."""
    serializer_class = AppointmentSerializer
    permission_classes = [AllowAny]

    def get_queryset(self):
        return _appointment_queryset()

    @swagger_auto_schema(operation_summary="Get appointment details by booking reference.")
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)

    @swagger_auto_schema(
        operation_summary="Cancel an appointment (sets status to 'cancelled').",
        responses={200: AppointmentSerializer}
    )
    def delete(self, request, *args, **kwargs):
        instance = self.get_object()
        reason = request.data.get('reason') if hasattr(request.data, 'get') else None
        appointment = AppointmentService.cancel_appointment(
            instance, changed_by=_acting_user(request), reason=reason
        )
        serializer = self.get_serializer(_appointment_queryset().get(pk=appointment.pk))
        return Response(serializer.data)


@swagger_auto_schema(
    method='GET',
    operation_summary="List appointments with a given status (admin only).",
    manual_parameters=[
        openapi.Parameter('status_value', openapi.IN_PATH, description="pending, confirmed, cancelled or completed", type=openapi.TYPE_STRING),
    ],
    responses={200: AppointmentSerializer(many=True)}
)
@api_view(['GET'])
@permission_classes([IsAdminUser])
def appointments_by_status_view(request, status_value):
    status_value = status_value.lower()
    if status_value not in dict(Appointment.STATUS_CHOICES):
        raise ValidationError({"status": f"'{status_value}' is not a valid appointment status."})

    queryset = _appointment_queryset().filter(status=status_value)
    paginator = StandardResultsSetPagination()
    result_page = paginator.paginate_queryset(queryset, request)
    serializer = AppointmentSerializer(result_page, many=True, context={'request': request})
    return paginator.get_paginated_response(serializer.data)


@swagger_auto_schema(
    method='POST',
    operation_summary="Cancel an appointment.",
    request_body=AppointmentCancelSerializer,
    responses={200: AppointmentSerializer, 400: "Appointment cannot be cancelled", 404: "Appointment not found"}
)
@api_view(['POST'])
@permission_classes([AllowAny])
def cancel_appointment_view(request, pk):
    appointment = get_object_or_404(Appointment, pk=pk)
    serializer = AppointmentCancelSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    appointment = AppointmentService.cancel_appointment(
        appointment,
        changed_by=_acting_user(request),
        reason=serializer.validated_data.get('reason') or None,
    )
    response_serializer = AppointmentSerializer(_appointment_queryset().get(pk=appointment.pk), context={'request': request})
    return Response(response_serializer.data)


@swagger_auto_schema(
    method='PATCH',
    operation_summary="Update appointment status (admin only).",
    request_body=AppointmentStatusUpdateSerializer,
    responses={200: AppointmentSerializer, 400: "Bad Request", 403: "Permission Denied"}
)
@api_view(['PATCH'])
@permission_classes([IsAdminUser])
def update_appointment_status_view(request, pk):
    appointment = get_object_or_404(Appointment, pk=pk)
    serializer = AppointmentStatusUpdateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    appointment = AppointmentService.update_status(
        appointment,
        serializer.validated_data['status'],
        changed_by=request.user,
        reason=serializer.validated_data.get('reason') or None,
    )
    response_serializer = AppointmentSerializer(_appointment_queryset().get(pk=appointment.pk), context={'request': request})
    return Response(response_serializer.data, status=status.HTTP_200_OK)
