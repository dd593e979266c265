from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, PlainTextResponse

router = APIRouter(tags=["admin"])

METRICS_PAGE = """<html>

<body>
    <h1>Welcome, Chirpy Admin</h1>
    <p>Chirpy has been visited {hits} times!</p>
</body>

</html>
"""


@router.get("/api/healthz", response_class=PlainTextResponse)
def healthz():
    return "OK"


@router.get("/admin/metrics", response_class=HTMLResponse)
def metrics(request: Request):
    return METRICS_PAGE.format(hits=request.app.state.hits.value)


@router.api_route("/api/reset", methods=["GET", "POST"], response_class=PlainTextResponse)
def reset_metrics(request: Request):
    request.app.state.hits.reset()
    return "Hits reset to 0"
