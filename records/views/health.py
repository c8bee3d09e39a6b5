from django.http import JsonResponse

from records.apps import get_service


def healthz(request):
    if get_service().store.ping():
        return JsonResponse({'ok': True, 'db': True})
    return JsonResponse({'ok': False, 'db': False, 'error': 'La base de datos no está disponible'}, status=500)
