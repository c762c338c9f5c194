from django.urls import path
from . import views

app_name = 'appointments'

urlpatterns = [
    path('', views.AppointmentListCreateView.as_view(), name='appointment-list-create'),
    path('status/<str:status_value>/', views.appointments_by_status_view, name='appointment-by-status'),
    path('<uuid:pk>/', views.AppointmentRetrieveCancelView.as_view(), name='appointment-detail'),
    # DELETE on the above URL cancels as well.
    path('<uuid:pk>/cancel/', views.cancel_appointment_view, name='appointment-cancel'),
    path('<uuid:pk>/status/', views.update_appointment_status_view, name='appointment-update-status'),
]
