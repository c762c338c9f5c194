from django.contrib import admin
from .models import TimeSlot


@admin.register(TimeSlot)
class TimeSlotAdmin(admin.ModelAdmin):
    list_display = ('service_provider', 'start_time', 'end_time', 'is_available', 'appointment_count')
    list_filter = ('is_available', 'service_provider', 'start_time')
    search_fields = ('service_provider',)
    date_hierarchy = 'start_time'
    readonly_fields = ('created_at', 'updated_at')

    def appointment_count(self, obj):
        return obj.appointments.count()
