"""
Core views providing infrastructure endpoints.

This module contains views that are not part of the business domain but are
essential for application infrastructure, such as the liveness check.
"""

from django.http import HttpResponse
from django.views.decorators.http import require_GET


@require_GET
def health_check(request):
    """
    Liveness check for load balancers and container orchestration.

    The service keeps no local state (no database, no cache), so being able
    to answer is the whole check.

    Returns:
        200 text/plain "Rentify backend OK"
    """
    return HttpResponse("Rentify backend OK", content_type="text/plain")
