import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from bookly.api.v1.hosts import router as hosts_router
from bookly.application.exceptions import LedgerUnavailableError
from bookly.core.config import settings

class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in ("host_id", "booking_id", "slot_start", "range", "reason"):
            value = getattr(record, key, None)
            if value not in (None, ""):
                extras.append(f"{key}={value}")
        base = super().format(record)
        if extras:
            return f"{base} | " + " ".join(extras)
        return base


handler = logging.StreamHandler()
handler.setFormatter(ContextFormatter("%(levelname)s:%(name)s:%(message)s"))

root = logging.getLogger()
root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
root.handlers.clear()
root.addHandler(handler)

app = FastAPI(title="Bookly Scheduling", version="1.0.0")

app.include_router(hosts_router, prefix="/api/v1", tags=["scheduling"])


@app.exception_handler(LedgerUnavailableError)
def ledger_unavailable(request: Request, exc: LedgerUnavailableError) -> JSONResponse:
    return JSONResponse(status_code=503, content={"detail": str(exc)})


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
