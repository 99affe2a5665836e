import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from service_booking.api.availability import router as availability_router
from service_booking.api.bookings import router as bookings_router
from service_booking.api.calendar_admin import router as calendar_router
from service_booking.api.services import router as services_router
from service_booking.api.schemas import validation_error_body
from service_booking.core.config import settings


CONTEXT_KEYS = ("booking_id", "service_id", "appointment_date", "event_id", "status", "attempt", "reason", "error")


class ContextFormatter(logging.Formatter):
    """Appends booking context passed via `extra=` as key=value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        context = " ".join(
            f"{key}={getattr(record, key)}" for key in CONTEXT_KEYS if getattr(record, key, None) not in (None, "")
        )
        return f"{base} | {context}" if context else base


def configure_logging(level: str) -> None:
    handler = logging.StreamHandler()
    handler.setFormatter(ContextFormatter("%(asctime)s %(levelname)s:%(name)s:%(message)s"))

    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.handlers.clear()
    root.addHandler(handler)


configure_logging(settings.LOG_LEVEL)

app = FastAPI(title=f"{settings.BUSINESS_NAME} Booking", version="1.0.0")

app.include_router(availability_router, tags=["availability"])
app.include_router(bookings_router, tags=["bookings"])
app.include_router(calendar_router, tags=["calendar"])
app.include_router(services_router, tags=["services"])


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = {}
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        errors[".".join(loc) or "body"] = error.get("msg", "Invalid value")
    return JSONResponse(status_code=400, content=validation_error_body(errors, message="Invalid request"))


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
