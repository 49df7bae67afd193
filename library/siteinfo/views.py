import time

from django.http import JsonResponse
from django.views.decorators.http import require_GET

from siteinfo.backend.extract import ExtractionError, LinkTrailError, configuration_source
from siteinfo.backend.generate import as_dict
from siteinfo.backend.pcre_engine import LinkTrailEngine, LinkTrailPatternError
from siteinfo.backend.siteinfo_service import EndpointError, SiteinfoError, fetch_query


@require_GET
def linktrail_api(request):
    """
    GET /api/linktrail?pattern=/^([a-z]+)(.*)$/sD
    -> {"pattern", "flags", "characters": [...], "count"}
    """
    pattern = request.GET.get("pattern", "")
    if not pattern:
        return JsonResponse(
            {"error": "missing_pattern", "message": "query parameter 'pattern' is required"},
            status=400,
        )

    try:
        engine = LinkTrailEngine(pattern)
    except LinkTrailPatternError as exc:
        return JsonResponse(exc.as_dict(), status=400)

    characters = engine.sorted()
    return JsonResponse({
        "pattern": pattern,
        "flags": engine.pattern.modifiers.letters(),
        "characters": characters,
        "count": len(characters),
    })


@require_GET
def siteconfig_api(request):
    """
    GET /api/siteconfig?domain=en.wikipedia.org
    Fetch errors answer 502, data the interpreter cannot handle 422.
    """
    domain = request.GET.get("domain", "").strip()
    if not domain:
        return JsonResponse(
            {"error": "missing_domain", "message": "query parameter 'domain' is required"},
            status=400,
        )

    start = time.time()

    try:
        query = fetch_query(domain)
    except EndpointError as exc:
        return JsonResponse({"error": "endpoint", "message": str(exc)}, status=400)
    except SiteinfoError as exc:
        return JsonResponse({"error": "siteinfo", "message": str(exc)}, status=502)

    try:
        source = configuration_source(query)
    except LinkTrailError as exc:
        return JsonResponse(exc.cause.as_dict(), status=422)
    except ExtractionError as exc:
        return JsonResponse({"error": "extraction", "message": str(exc)}, status=422)

    elapsed = (time.time() - start) * 1000.0

    return JsonResponse({
        "domain": domain,
        "elapsed_ms": elapsed,
        "configuration": as_dict(source),
    })
