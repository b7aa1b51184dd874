# backend/clinic_core/common/api/pagination.py
from __future__ import annotations

from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


class DefaultPagination(PageNumberPagination):
    """
    Page envelope used by the audit log reads: { count, next, previous, results }.

    Domain collections (appointments, histories, documents, ...) are returned whole
    under their own key and never go through this class.
    """

    page_size = 50
    page_size_query_param = "page_size"
    max_page_size = 500


def paginate(request, queryset, serializer_class, *, paginator: PageNumberPagination | None = None) -> Response:
    pager = paginator or DefaultPagination()
    rows = pager.paginate_queryset(queryset, request)
    if rows is None:
        # pagination disabled (page_size unset)
        return Response(serializer_class(queryset, many=True).data)
    return pager.get_paginated_response(serializer_class(rows, many=True).data)
