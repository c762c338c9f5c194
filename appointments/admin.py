from django.contrib import admin
from .models import Appointment, AppointmentStatusHistory

class AppointmentStatusHistoryInline(admin.TabularInline):
    model = AppointmentStatusHistory
    extra = 0
    readonly_fields = ('previous_status', 'new_status', 'changed_by', 'reason', 'changed_at')
    can_delete = False

@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    list_display = ('id', 'client_name', 'client_email', 'service_provider', 'slot_start', 'status', 'service_type')
    list_filter = ('status', 'service_type', 'time_slot__service_provider', 'booked_at')
    search_fields = ('client_name', 'client_email', 'client_phone', 'service_type')
    raw_id_fields = ('time_slot',)
    inlines = [AppointmentStatusHistoryInline]
    readonly_fields = ('booked_at', 'confirmed_at', 'cancelled_at', 'updated_at')

    def service_provider(self, obj):
        return obj.time_slot.service_provider
    def slot_start(self, obj):
        return obj.time_slot.start_time
