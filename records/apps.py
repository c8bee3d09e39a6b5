from django.apps import AppConfig
from django.conf import settings


class RecordsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'records'
    verbose_name = 'Historias clínicas'

    def ready(self):
        # One store handle and one service per process; views reach them
        # through the app registry instead of opening their own connections.
        from .services.store import PatientStore
        from .services.patients import PatientService

        self.store = PatientStore(using=getattr(settings, 'RECORDS_DB_ALIAS', 'default'))
        self.service = PatientService(self.store)


def get_service():
    from django.apps import apps
    return apps.get_app_config('records').service
