from fastapi import FastAPI, Request
from fastapi.responses import RedirectResponse

from popdarts.bracket.routes import router as tournament_router
from popdarts.config import configure_logging
from popdarts.scoring.routes import router as match_router

configure_logging()

app = FastAPI(title="Popdarts Scorer")
app.include_router(match_router)
app.include_router(tournament_router)


@app.get("/", include_in_schema=False)
def root(request: Request):
    # If a browser hits the root, take them to Swagger UI.
    # Keep the JSON response for API clients (e.g. curl, fetch).
    accept = (request.headers.get("accept") or "").lower()
    if "text/html" in accept:
        return RedirectResponse(url="/docs")
    return {
        "name": "Popdarts Scorer",
        "docs": "/docs",
        "health": "/health",
        "endpoints": [
            "GET /shots",
            "GET /match",
            "POST /match/start",
            "POST /match/reset",
            "POST /match/input/tap",
            "POST /match/input/modifier",
            "POST /match/input/closest",
            "POST /match/input/cancel",
            "GET /match/input/preview",
            "POST /match/round",
            "PUT /match/rounds/last",
            "GET /match/stats",
            "GET /match/summary",
            "POST /tournament",
            "GET /tournament",
            "GET /tournament/next",
            "POST /tournament/matches/{match_id}/start",
            "POST /tournament/matches/{match_id}/pause",
            "POST /tournament/matches/{match_id}/resume",
            "POST /tournament/matches/{match_id}/finish",
        ],
    }


@app.get("/health")
def health():
    return {"status": "ok"}
