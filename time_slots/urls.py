from django.urls import path
from . import views

app_name = 'time_slots'

urlpatterns = [
    path('', views.TimeSlotListCreateView.as_view(), name='timeslot-list-create'),
    path('available/', views.available_time_slots_view, name='timeslot-available'),
    path('validate/', views.validate_time_slot_view, name='timeslot-validate'),
    path('<uuid:pk>/', views.TimeSlotRetrieveUpdateDestroyView.as_view(), name='timeslot-detail'),
    path('<uuid:pk>/make-available/', views.make_slot_available_view, name='timeslot-make-available'),
]
