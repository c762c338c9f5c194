import django_filters

from .models import Appointment


class AppointmentFilter(django_filters.FilterSet):
    status = django_filters.CharFilter(
        field_name='status',
        lookup_expr='iexact',
        label='Appointment status (case-insensitive)'
    )
    client_email = django_filters.CharFilter(
        field_name='client_email',
        lookup_expr='iexact',
        label="Client's email address (case-insensitive)"
    )
    service_provider = django_filters.CharFilter(
        field_name='time_slot__service_provider',
        lookup_expr='exact',
        label='Service provider of the booked slot'
    )
    date_from = django_filters.DateFilter(
        field_name='time_slot__start_time',
        lookup_expr='date__gte',
        label='Slots starting on or after this date (YYYY-MM-DD)'
    )
    date_to = django_filters.DateFilter(
        field_name='time_slot__start_time',
        lookup_expr='date__lte',
        label='Slots starting on or before this date (YYYY-MM-DD)'
    )

    class Meta:
        model = Appointment
        fields = ['status', 'client_email', 'service_provider', 'date_from', 'date_to']
