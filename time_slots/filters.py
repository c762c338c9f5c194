import django_filters

from .models import TimeSlot


class TimeSlotFilter(django_filters.FilterSet):
    date = django_filters.DateFilter(
        field_name='start_time',
        lookup_expr='date',
        label='Calendar day of the slot start (YYYY-MM-DD)'
    )
    service_provider = django_filters.CharFilter(
        field_name='service_provider',
        lookup_expr='exact',
        label='Service provider (exact match)'
    )
    start_after = django_filters.IsoDateTimeFilter(
        field_name='start_time',
        lookup_expr='gte',
        label='Slots starting at or after this ISO 8601 datetime'
    )
    start_before = django_filters.IsoDateTimeFilter(
        field_name='start_time',
        lookup_expr='lte',
        label='Slots starting at or before this ISO 8601 datetime'
    )

    class Meta:
        model = TimeSlot
        fields = ['date', 'service_provider', 'is_available', 'start_after', 'start_before']
