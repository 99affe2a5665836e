from functools import lru_cache
import logging
from zoneinfo import ZoneInfo

from fastapi import BackgroundTasks
from sqlalchemy.orm import Session, sessionmaker

from service_booking.application.ports.booking_store import BookingStorePort
from service_booking.application.ports.calendar import CalendarPort
from service_booking.application.ports.mail_transport import MailTransportPort
from service_booking.application.ports.service_catalog import ServiceCatalogPort
from service_booking.application.use_cases.availability import AvailabilityService
from service_booking.application.use_cases.booking import BookingLifecycle
from service_booking.application.use_cases.calendar_gateway import ExternalCalendarGateway
from service_booking.application.use_cases.notifications import NotificationDispatcher
from service_booking.core.config import settings
from service_booking.infrastructure.calendar.google_calendar_client import GoogleCalendarClient
from service_booking.infrastructure.calendar.mock_calendar import MockCalendar
from service_booking.infrastructure.mail.memory_transport import MemoryMailTransport
from service_booking.infrastructure.mail.smtp_transport import SmtpMailTransport
from service_booking.infrastructure.store.database import build_engine, build_session_factory, create_tables
from service_booking.infrastructure.store.sql_booking_store import SqlBookingStore
from service_booking.infrastructure.store.sql_service_catalog import SqlServiceCatalog
from service_booking.infrastructure.tasks.schedulers import BackgroundTaskScheduler

logger = logging.getLogger(__name__)


def _is_dev() -> bool:
    return settings.ENV.lower() in {"dev", "local"}


@lru_cache
def get_session_factory() -> sessionmaker[Session]:
    engine = build_engine(settings.DATABASE_URL)
    create_tables(engine)
    factory = build_session_factory(engine)
    SqlServiceCatalog(factory).seed_defaults()
    return factory


@lru_cache
def get_booking_store() -> BookingStorePort:
    return SqlBookingStore(get_session_factory())


@lru_cache
def get_service_catalog() -> ServiceCatalogPort:
    return SqlServiceCatalog(get_session_factory())


@lru_cache
def get_calendar() -> CalendarPort:
    config = settings.calendar_config()
    if not config.is_configured and _is_dev():
        logger.info("Using MockCalendar (calendar credentials missing, ENV=dev/local)")
        return MockCalendar()
    if not config.is_configured:
        logger.warning("Google Calendar not configured; bookings will not be synced")
    return GoogleCalendarClient(config)


@lru_cache
def get_mail_transport() -> MailTransportPort:
    config = settings.mail_config()
    if not config.is_configured and _is_dev():
        logger.info("Using MemoryMailTransport (mail credentials missing, ENV=dev/local)")
        return MemoryMailTransport()
    if not config.is_configured:
        logger.warning("Mail transport not configured; confirmation emails will fail")
    return SmtpMailTransport(config)


@lru_cache
def get_calendar_gateway() -> ExternalCalendarGateway:
    return ExternalCalendarGateway(
        calendar=get_calendar(),
        timezone=ZoneInfo(settings.BUSINESS_TIMEZONE),
        duration_minutes=settings.APPOINTMENT_DURATION_MINUTES,
        owner_emails=tuple(settings.OWNER_NOTIFICATION_EMAILS),
    )


@lru_cache
def get_availability_service() -> AvailabilityService:
    return AvailabilityService(gateway=get_calendar_gateway(), window=settings.appointment_window())


@lru_cache
def get_notification_dispatcher() -> NotificationDispatcher:
    mail = settings.mail_config()
    return NotificationDispatcher(
        transport=get_mail_transport(),
        sender=mail.from_address or "no-reply@localhost",
        business_name=settings.BUSINESS_NAME,
        timezone=ZoneInfo(settings.BUSINESS_TIMEZONE),
        owner_emails=tuple(settings.OWNER_NOTIFICATION_EMAILS),
        subject_prefix=settings.MAIL_SUBJECT_PREFIX,
        max_attempts=settings.NOTIFICATION_MAX_ATTEMPTS,
    )


def get_booking_lifecycle(background_tasks: BackgroundTasks) -> BookingLifecycle:
    return BookingLifecycle(
        store=get_booking_store(),
        catalog=get_service_catalog(),
        gateway=get_calendar_gateway(),
        notifications=get_notification_dispatcher(),
        scheduler=BackgroundTaskScheduler(background_tasks),
        timezone=ZoneInfo(settings.BUSINESS_TIMEZONE),
    )
