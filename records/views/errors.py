from django.http import JsonResponse


def not_found(request, exception=None):
    return JsonResponse({'error': 'Recurso no encontrado'}, status=404)


def server_error(request):
    return JsonResponse({'error': 'Error interno del servidor'}, status=500)
