from django.apps import AppConfig


class TimeSlotsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'time_slots'
    verbose_name = 'Time slots'
