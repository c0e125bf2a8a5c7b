"""
Request / response logging middleware.
"""

import time
from fastapi import Request
from loguru import logger

# Polled by load balancers; logged at debug only
QUIET_PATHS = {"/api/health"}


async def logging_middleware(request: Request, call_next):
    log = logger.debug if request.url.path in QUIET_PATHS else logger.info
    start = time.perf_counter()
    log(f"→ {request.method} {request.url.path}")

    response = await call_next(request)

    elapsed = round((time.perf_counter() - start) * 1000, 2)
    response.headers["X-Process-Time-Ms"] = str(elapsed)
    log(f"← {request.method} {request.url.path} [{response.status_code}] {elapsed}ms")

    return response
