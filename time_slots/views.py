from rest_framework import status, generics
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import AllowAny, IsAdminUser
from django.shortcuts import get_object_or_404
from drf_yasg.utils import swagger_auto_schema
from drf_yasg import openapi

from .filters import TimeSlotFilter
from .models import TimeSlot
from .permissions import IsAdminOrReadOnly
from .serializers import TimeSlotSerializer, TimeSlotValidationSerializer, AvailableSlotsQuerySerializer
from .services import TimeSlotService


class TimeSlotListCreateView(generics.ListCreateAPIView):
    queryset = TimeSlot.objects.all().order_by('start_time')
    serializer_class = TimeSlotSerializer
    permission_classes = [IsAdminOrReadOnly]
    filterset_class = TimeSlotFilter

    @swagger_auto_schema(operation_summary="List time slots, optionally filtered by day, provider or availability.")
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)

    @swagger_auto_schema(operation_summary="Create a new time slot (admin only).")
    def post(self, request, *args, **kwargs):
        return super().post(request, *args, **kwargs)


class TimeSlotRetrieveUpdateDestroyView(generics.RetrieveUpdateDestroyAPIView):
    queryset = TimeSlot.objects.all()
    serializer_class = TimeSlotSerializer
    permission_classes = [IsAdminOrReadOnly]

    @swagger_auto_schema(operation_summary="Get a time slot.")
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)

    @swagger_auto_schema(operation_summary="Update a time slot (admin only).")
    def put(self, request, *args, **kwargs):
        return super().put(request, *args, **kwargs)

    @swagger_auto_schema(operation_summary="Partially update a time slot (admin only).")
    def patch(self, request, *args, **kwargs):
        return super().patch(request, *args, **kwargs)

    @swagger_auto_schema(
        operation_summary="Delete a time slot (admin only).",
        responses={204: "Time slot deleted", 400: "Time slot still has active appointments"}
    )
    def delete(self, request, *args, **kwargs):
        return super().delete(request, *args, **kwargs)

    def perform_destroy(self, instance):
        TimeSlotService.delete_time_slot(instance)


@swagger_auto_schema(
    method='GET',
    operation_summary="List upcoming time slots that can still be booked.",
    query_serializer=AvailableSlotsQuerySerializer,
    responses={200: TimeSlotSerializer(many=True)}
)
@api_view(['GET'])
@permission_classes([AllowAny])
def available_time_slots_view(request):
    serializer = AvailableSlotsQuerySerializer(data=request.query_params)
    serializer.is_valid(raise_exception=True)
    slots = TimeSlotService.get_available_slots(
        date=serializer.validated_data.get('date'),
        service_provider=serializer.validated_data.get('service_provider'),
    )
    return Response(TimeSlotSerializer(slots, many=True).data)


@swagger_auto_schema(
    method='POST',
    operation_summary="Check whether a time slot could be created without conflicts.",
    request_body=TimeSlotValidationSerializer,
    responses={200: openapi.Response("Validation result", examples={"application/json": {"valid": True}})}
)
@api_view(['POST'])
@permission_classes([IsAdminUser])
def validate_time_slot_view(request):
    serializer = TimeSlotValidationSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data
    is_valid = TimeSlotService.validate_time_slot(
        data['start_time'], data['end_time'], data['service_provider'], exclude_id=data.get('exclude_id')
    )
    return Response({"valid": is_valid})


@swagger_auto_schema(
    method='PUT',
    operation_summary="Re-open a time slot, cancelling any active appointment on it (admin only).",
    responses={200: openapi.Response("Time slot re-opened", examples={
        "application/json": {"message": "Time slot is available again.", "cancelled_appointments": 1}
    })}
)
@api_view(['PUT'])
@permission_classes([IsAdminUser])
def make_slot_available_view(request, pk):
    time_slot = get_object_or_404(TimeSlot, pk=pk)
    cancelled = TimeSlotService.make_slot_available(time_slot, changed_by=request.user)
    time_slot.refresh_from_db()
    return Response({
        "message": "Time slot is available again.",
        "cancelled_appointments": cancelled,
        "time_slot": TimeSlotSerializer(time_slot).data,
    }, status=status.HTTP_200_OK)
