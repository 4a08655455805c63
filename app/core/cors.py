from fastapi import Request, Response

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type, X-API-Key",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Content-Type": "application/json",
}


async def cors_middleware(request: Request, call_next):
    # Preflight never reaches routing, auth or validation.
    if request.method == "OPTIONS":
        return Response(status_code=200, headers=CORS_HEADERS)

    response = await call_next(request)
    for name, value in CORS_HEADERS.items():
        response.headers.setdefault(name, value)
    return response
