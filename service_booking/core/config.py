from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from service_booking.domain.entities.calendar import CalendarConfig
from service_booking.domain.entities.email import MailConfig
from service_booking.domain.entities.time_slot import AppointmentWindow


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    BUSINESS_NAME: str = "HandyPro Service"
    BUSINESS_TIMEZONE: str = "America/New_York"
    BUSINESS_START_HOUR: int = 9
    BUSINESS_END_HOUR: int = 17
    SLOT_GRANULARITY_HOURS: int = 1
    APPOINTMENT_DURATION_MINUTES: int = 60

    DATABASE_URL: str = "sqlite:///./data/bookings.db"

    GOOGLE_CALENDAR_CLIENT_ID: str | None = None
    GOOGLE_CALENDAR_CLIENT_SECRET: str | None = None
    GOOGLE_CALENDAR_REFRESH_TOKEN: str | None = None
    GOOGLE_CALENDAR_ID: str = "primary"
    GOOGLE_CALENDAR_REDIRECT_URI: str = "http://localhost:8000/calendar/callback"
    CALENDAR_TIMEOUT_SECONDS: float = 10.0

    MAIL_HOST: str = "smtp.gmail.com"
    MAIL_PORT: int = 587
    MAIL_USE_TLS: bool = True
    MAIL_USERNAME: str | None = None
    MAIL_APP_PASSWORD: str | None = None
    MAIL_FROM_ADDRESS: str | None = None
    MAIL_FROM_NAME: str = "HandyPro Service"
    MAIL_TIMEOUT_SECONDS: float = 10.0
    MAIL_SUBJECT_PREFIX: str = "[HandyPro]"
    OWNER_NOTIFICATION_EMAILS: list[str] = Field(default_factory=list)
    NOTIFICATION_MAX_ATTEMPTS: int = 2

    ADMIN_API_TOKEN: str | None = None

    def appointment_window(self) -> AppointmentWindow:
        return AppointmentWindow(
            start_hour=self.BUSINESS_START_HOUR,
            end_hour=self.BUSINESS_END_HOUR,
            granularity_hours=self.SLOT_GRANULARITY_HOURS,
            timezone=self.BUSINESS_TIMEZONE,
        )

    def calendar_config(self) -> CalendarConfig:
        return CalendarConfig(
            client_id=self.GOOGLE_CALENDAR_CLIENT_ID,
            client_secret=self.GOOGLE_CALENDAR_CLIENT_SECRET,
            refresh_token=self.GOOGLE_CALENDAR_REFRESH_TOKEN,
            calendar_id=self.GOOGLE_CALENDAR_ID,
            redirect_uri=self.GOOGLE_CALENDAR_REDIRECT_URI,
            timezone=self.BUSINESS_TIMEZONE,
            timeout_seconds=self.CALENDAR_TIMEOUT_SECONDS,
            owner_emails=tuple(self.OWNER_NOTIFICATION_EMAILS),
        )

    def mail_config(self) -> MailConfig:
        return MailConfig(
            host=self.MAIL_HOST,
            port=self.MAIL_PORT,
            use_tls=self.MAIL_USE_TLS,
            username=self.MAIL_USERNAME,
            password=self.MAIL_APP_PASSWORD,
            from_address=self.MAIL_FROM_ADDRESS or self.MAIL_USERNAME,
            from_name=self.MAIL_FROM_NAME,
            timeout_seconds=self.MAIL_TIMEOUT_SECONDS,
        )


settings = Settings()
