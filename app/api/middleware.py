"""
Request timing and logging middleware
"""
import time
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware


class TimingMiddleware(BaseHTTPMiddleware):
    """
    Logs method, path, status and duration of every request and reports the
    duration back to the client in the X-Process-Time-Ms header
    """
    async def dispatch(self, request: Request, call_next):
        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        response.headers["X-Process-Time-Ms"] = f"{duration_ms:.2f}"
        print(f"[TIMING] {request.method} {request.url.path} | duration={duration_ms:.2f}ms | status={response.status_code}")

        return response
