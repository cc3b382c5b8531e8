"""Shared helpers for list endpoints"""
from django.core.paginator import Paginator
from rest_framework.response import Response


def _positive_int(value, default):
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


def paginated_response(request, queryset, serializer_class, default_limit=15):
    """Page a queryset with ``page``/``limit`` query params and wrap it in the list envelope"""
    page = _positive_int(request.query_params.get('page'), 1)
    limit = _positive_int(request.query_params.get('limit'), default_limit)

    paginator = Paginator(queryset, limit)
    page_obj = paginator.get_page(page)

    serializer = serializer_class(page_obj, many=True)
    return Response({
        'results': serializer.data,
        'count': paginator.count,
        'next': page_obj.next_page_number() if page_obj.has_next() else None,
        'previous': page_obj.previous_page_number() if page_obj.has_previous() else None,
        'page': page_obj.number,
        'page_size': limit,
        'total_pages': paginator.num_pages,
    })
