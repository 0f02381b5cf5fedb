"""
Page-number pagination for the function-based list endpoints.

List views return ``Response(serializer.data)`` with a plain list; the
``auto_paginate`` decorator slices it and wraps the page in the envelope:

{
    "status": "success",
    "message": "",
    "data": {"count": 42, "next": "...?page=3", "previous": "...?page=1", "results": [...]}
}
"""
from functools import wraps

from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


class StandardResultsSetPagination(PageNumberPagination):
    """``?page=`` (default 1) and ``?page_size=`` (default 20, at most 100)."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100

    def get_paginated_response(self, data):
        return Response({
            'status': 'success',
            'message': '',
            'data': {
                'count': self.page.paginator.count,
                'next': self.get_next_link(),
                'previous': self.get_previous_link(),
                'results': data
            }
        })


def auto_paginate(view_func):
    """
    Paginate successful GET responses whose data is a list.

    Goes below ``@api_view`` and ``@require_permission``:

        @api_view(['GET', 'POST'])
        @require_permission(Resource.VENDORS)
        @auto_paginate
        def po_list(request):
            ...
            return Response(PurchaseOrderListSerializer(queryset, many=True).data)

    POST bodies, detail objects and error envelopes are returned unchanged.
    A page number past the end raises NotFound, which the exception handler
    renders as a 404 envelope.
    """
    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        response = view_func(request, *args, **kwargs)

        if (
            request.method == 'GET' and
            isinstance(response, Response) and
            200 <= response.status_code < 300 and
            isinstance(response.data, list)
        ):
            paginator = StandardResultsSetPagination()
            page = paginator.paginate_queryset(response.data, request)
            if page is not None:
                return paginator.get_paginated_response(page)

        return response

    return wrapper
