"""Runtime configuration loaded from environment variables.

All settings are optional at startup. A missing Stripe secret fails the
individual operation; missing Google credentials or spreadsheet ID turn the
sheet sink into a logged no-op.
"""

from typing import Annotated, Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

DEFAULT_SHEET_EXTRA_COLUMNS: tuple[str, ...] = (
    "preferences",
    "notes",
    "age",
    "primaryConcern",
    "additionalConcerns",
    "goals",
    "photoCount",
)


class Settings(BaseSettings):
    """Service settings.

    Each field reads the environment variable named by its alias. Empty
    variables count as unset.

    Usage:
        settings = Settings()
        settings.spreadsheet_id
    """

    model_config = SettingsConfigDict(
        env_ignore_empty=True,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    # Secrets
    stripe_secret_key: str | None = Field(
        default=None, validation_alias="STRIPE_SECRET_KEY", description="Stripe API key"
    )
    stripe_webhook_secret: str | None = Field(
        default=None,
        validation_alias="STRIPE_WEBHOOK_SECRET",
        description="Stripe webhook signing secret (whsec_xxx)",
    )
    google_credentials_json: str | None = Field(
        default=None,
        validation_alias="GOOGLE_APPLICATION_CREDENTIALS_JSON",
        description="Service-account JSON blob with client_email and private_key",
    )

    # Sheet sink
    spreadsheet_id: str | None = Field(
        default=None, validation_alias="SPREADSHEET_ID", description="Destination spreadsheet"
    )
    sheet_name: str = Field(
        default="Sheet1", validation_alias="SHEET_NAME", description="Target sheet tab"
    )
    sheet_extra_columns: Annotated[tuple[str, ...], NoDecode] = Field(
        default=DEFAULT_SHEET_EXTRA_COLUMNS,
        validation_alias="SHEET_EXTRA_COLUMNS",
        description="Metadata keys written after the fixed columns, in order",
    )

    # Checkout
    checkout_success_url: str = Field(
        default="https://your-framer-site.com/success", validation_alias="CHECKOUT_SUCCESS_URL"
    )
    checkout_cancel_url: str = Field(
        default="https://your-framer-site.com/cancel", validation_alias="CHECKOUT_CANCEL_URL"
    )
    checkout_currency: str = Field(default="usd", validation_alias="CHECKOUT_CURRENCY")

    # Server
    cors_allow_origins: Annotated[tuple[str, ...], NoDecode] = Field(
        default=("*",), validation_alias="CORS_ALLOW_ORIGINS"
    )
    http_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        validation_alias="HTTP_TIMEOUT_SECONDS",
        description="Timeout for Stripe and Google calls",
    )
    port: int = Field(default=3000, ge=1, le=65535, validation_alias="PORT")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    @field_validator("sheet_extra_columns", "cors_allow_origins", mode="before")
    @classmethod
    def _split_comma_separated(cls, v: Any) -> Any:
        if isinstance(v, str):
            return tuple(part.strip() for part in v.split(",") if part.strip())
        return v
