"""Google Sheets sink for order records.

Appends one row per order to a fixed spreadsheet using a service account.
Failures are returned as a SinkResult rather than raised, so the webhook
orchestrator can log them without changing its response.
"""

import json
import logging
from enum import Enum
from typing import Any

import google_auth_httplib2
import httplib2
from google.auth.exceptions import GoogleAuthError
from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from pydantic import BaseModel, ConfigDict

from formpay.models.order import FIXED_COLUMNS, OrderRecord

logger = logging.getLogger(__name__)

SHEETS_SCOPE = "https://www.googleapis.com/auth/spreadsheets"

FORMULA_PREFIXES = ("=", "+", "-", "@")

# Columns filled by this service rather than by the customer; written unescaped
# so USER_ENTERED still types the timestamp and amount.
SERVICE_COLUMNS = frozenset({"timestamp", "paymentStatus", "paymentId", "paymentAmount"})


class SinkWriteFailed(Exception):
    """Raised when an order row cannot be written to the spreadsheet."""


class SinkStatus(str, Enum):
    """Outcome of a single append."""

    WRITTEN = "written"
    SKIPPED = "skipped"
    FAILED = "failed"


class SinkResult(BaseModel):
    """Result of SheetsService.append_record."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    status: SinkStatus
    updated_range: str | None = None
    error: SinkWriteFailed | None = None

    @property
    def ok(self) -> bool:
        return self.status == SinkStatus.WRITTEN


def escape_formula(value: str) -> str:
    """Force a cell to text when it would otherwise parse as a formula."""
    if value.startswith(FORMULA_PREFIXES):
        return "'" + value
    return value


def column_letter(index: int) -> str:
    """Convert a 1-based column index to its A1 letter (1 -> A, 27 -> AA)."""
    letters = ""
    while index > 0:
        index, remainder = divmod(index - 1, 26)
        letters = chr(ord("A") + remainder) + letters
    return letters


class SheetsService:
    """Appends order records to a Google Sheet.

    Usage:
        sheets = SheetsService(
            credentials_json=os.environ["GOOGLE_APPLICATION_CREDENTIALS_JSON"],
            spreadsheet_id=os.environ["SPREADSHEET_ID"],
        )
        result = sheets.append_record(record)
    """

    def __init__(
        self,
        *,
        credentials_json: str | None,
        spreadsheet_id: str | None,
        sheet_name: str = "Sheet1",
        extra_columns: tuple[str, ...] = (),
        timeout: float = 10.0,
    ) -> None:
        """Initialize the sink. No network access happens here.

        Args:
            credentials_json: Service-account key as a JSON string.
            spreadsheet_id: Destination spreadsheet ID.
            sheet_name: Tab the rows are appended to.
            extra_columns: Metadata keys written after the fixed columns.
            timeout: Socket timeout in seconds for token exchange and append.
        """
        self._credentials_json = credentials_json
        self._spreadsheet_id = spreadsheet_id
        self._sheet_name = sheet_name
        self._extra_columns = tuple(extra_columns)
        self._timeout = timeout
        self._credentials: service_account.Credentials | None = None
        self._service: Any = None

    @property
    def is_configured(self) -> bool:
        """True when both credentials and a spreadsheet ID are present."""
        return bool(self._credentials_json and self._spreadsheet_id)

    @property
    def sheet_range(self) -> str:
        """A1 range spanning every written column, e.g. "Sheet1!A:M"."""
        last = column_letter(len(FIXED_COLUMNS) + len(self._extra_columns))
        return f"{self._sheet_name}!A:{last}"

    def _load_credentials_info(self) -> dict[str, Any]:
        try:
            info = json.loads(self._credentials_json or "")
        except ValueError as e:
            raise SinkWriteFailed(f"Google credentials are not valid JSON: {e}") from e

        if not isinstance(info, dict) or not info.get("client_email") or not info.get("private_key"):
            raise SinkWriteFailed("Google credentials must include client_email and private_key")
        return info

    def _get_credentials(self) -> service_account.Credentials:
        """Get or load the service-account credentials (lazy initialization).

        Raises:
            SinkWriteFailed: If the credentials cannot be loaded.
        """
        if self._credentials is None:
            info = self._load_credentials_info()
            try:
                self._credentials = service_account.Credentials.from_service_account_info(
                    info, scopes=[SHEETS_SCOPE]
                )
            except (ValueError, GoogleAuthError) as e:
                raise SinkWriteFailed(f"Invalid service-account credentials: {e}") from e
            logger.info("Google Sheets credentials loaded for %s", info["client_email"])
        return self._credentials

    def _get_service(self) -> Any:
        """Get or build the Sheets API resource.

        The resource only builds requests; each request is executed over its
        own transport from _authorized_http().
        """
        if self._service is None:
            self._service = build(
                "sheets", "v4", credentials=self._get_credentials(), cache_discovery=False
            )
        return self._service

    def _authorized_http(self) -> google_auth_httplib2.AuthorizedHttp:
        """New authorized transport for one request.

        httplib2.Http is not thread-safe and appends run on worker threads.
        """
        return google_auth_httplib2.AuthorizedHttp(
            self._get_credentials(), http=httplib2.Http(timeout=self._timeout)
        )

    def _row_for(self, record: OrderRecord) -> list[str]:
        """Positional row with customer-supplied cells escaped."""
        columns = FIXED_COLUMNS + self._extra_columns
        row = record.to_row(self._extra_columns)
        return [
            value if column in SERVICE_COLUMNS else escape_formula(value)
            for column, value in zip(columns, row)
        ]

    def _append_row(self, row: list[str]) -> dict[str, Any]:
        """Append one row. Raises SinkWriteFailed on any failure."""
        service = self._get_service()
        request = (
            service.spreadsheets()
            .values()
            .append(
                spreadsheetId=self._spreadsheet_id,
                range=self.sheet_range,
                valueInputOption="USER_ENTERED",
                insertDataOption="INSERT_ROWS",
                body={"values": [row]},
            )
        )
        try:
            return request.execute(http=self._authorized_http(), num_retries=0)
        except HttpError as e:
            raise SinkWriteFailed(
                f"Sheets API rejected append ({e.resp.status}): {e.reason}"
            ) from e
        except GoogleAuthError as e:
            raise SinkWriteFailed(f"Google authentication failed: {e}") from e
        except (httplib2.HttpLib2Error, OSError) as e:
            raise SinkWriteFailed(f"Transport error talking to Google Sheets: {e}") from e

    def append_record(self, record: OrderRecord) -> SinkResult:
        """Append an order record as one spreadsheet row.

        Args:
            record: Normalized order record

        Returns:
            SinkResult with status written, skipped (sink not configured)
            or failed. Never raises.
        """
        if not self.is_configured:
            missing = "spreadsheet ID" if self._credentials_json else "Google credentials"
            logger.error("Missing %s; order row for %s not stored", missing, record.payment_id)
            return SinkResult(
                status=SinkStatus.SKIPPED,
                error=SinkWriteFailed(f"Sheet sink is not configured: missing {missing}"),
            )

        try:
            response = self._append_row(self._row_for(record))
        except SinkWriteFailed as e:
            logger.error("Failed to store order %s in Google Sheets: %s", record.payment_id, e)
            return SinkResult(status=SinkStatus.FAILED, error=e)

        updated_range = response.get("updates", {}).get("updatedRange")
        logger.info("Order %s stored in Google Sheets at %s", record.payment_id, updated_range)
        return SinkResult(status=SinkStatus.WRITTEN, updated_range=updated_range)
