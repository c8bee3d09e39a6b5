"""
URL mappings for the clinic records API.

Trailing slashes are deliberately omitted; the front end calls the
paths exactly as listed here.
"""
from django.urls import path, include

from .views import health, images, patients, summary, treatments

urlpatterns = [
    # Prometheus exposes /metrics
    path('', include('django_prometheus.urls')),
    path('healthz', health.healthz, name='healthz'),
    # Patients
    path('patients', patients.patients, name='patients'),
    path('patients/summary', summary.records_summary, name='patients-summary'),
    path('patients/<int:pk>', patients.patient_detail, name='patient-detail'),
    # Treatments
    path('patients/<int:pk>/treatments', treatments.treatments, name='patient-treatments'),
    path('patients/<int:pk>/treatments/<str:tid>', treatments.treatment_detail, name='patient-treatment-detail'),
    # Images
    path('patients/<int:pk>/images', images.images, name='patient-images'),
    path('patients/<int:pk>/images/<str:iid>', images.image_detail, name='patient-image-detail'),
]
