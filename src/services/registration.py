"""
Covenant Bot - Registration Service
===================================

Parses registration messages and appends them to a Google spreadsheet.

DESIGN:
    Messages must match one fixed four-line template:

        Profession: <text>
        Level: <integer>
        Power: <integer, commas allowed>
        Available: <text>

    Field names are case-insensitive and accept ':' or the full-width
    '：'. gspread is synchronous, so every sheet call runs in a worker
    thread through asyncio.to_thread.
"""

import asyncio
import re
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

import gspread
from google.auth.exceptions import GoogleAuthError
from google.oauth2.service_account import Credentials

from src.core.logger import logger
from src.core.config import Config
from src.core.errors import (
    CollaboratorFailure,
    DuplicateRegistrationError,
    MalformedRegistrationError,
)


# =============================================================================
# Constants
# =============================================================================

SHEETS_SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]

REGISTRATION_PATTERN = re.compile(
    r"^\s*profession\s*[:：]\s*(?P<profession>[^\r\n]+?)\s*\r?\n"
    r"\s*level\s*[:：]\s*(?P<level>\d+)\s*\r?\n"
    r"\s*power\s*[:：]\s*(?P<power>\d{1,3}(?:,\d{3})+|\d+)\s*\r?\n"
    r"\s*available\s*[:：]\s*(?P<available>[^\r\n]+?)\s*$",
    re.IGNORECASE,
)

TEMPLATE_HINT = (
    "Please use this format:\n"
    "```\n"
    "Profession: <your profession>\n"
    "Level: <number>\n"
    "Power: <number>\n"
    "Available: <when you can play>\n"
    "```"
)

# Sheet columns: submitted_at, display_name, user_id, profession, level, power, available
NAME_COLUMN = 1
USER_ID_COLUMN = 2
PROFESSION_COLUMN = 3

SHEET_ERRORS = (gspread.exceptions.GSpreadException, GoogleAuthError, OSError)


# =============================================================================
# Parsing
# =============================================================================

@dataclass(frozen=True)
class Registration:
    profession: str
    level: int
    power: int
    available: str


def parse_registration(text: str) -> Registration:
    """
    Parse a registration message.

    Raises:
        MalformedRegistrationError: text doesn't match the template.
    """
    match = REGISTRATION_PATTERN.match(text or "")
    if match is None:
        raise MalformedRegistrationError(
            f"❌ Registration format is invalid.\n{TEMPLATE_HINT}"
        )
    return Registration(
        profession=match.group("profession"),
        level=int(match.group("level")),
        power=int(match.group("power").replace(",", "")),
        available=match.group("available"),
    )


# =============================================================================
# Spreadsheet
# =============================================================================

class RegistrationSheet:
    """
    Blocking access to the registration worksheet.

    The worksheet is opened on first use so a misconfigured sheet only
    fails the registrations that touch it.
    """

    def __init__(self, worksheet_factory: Callable[[], Any]) -> None:
        self._worksheet_factory = worksheet_factory
        self._worksheet: Optional[Any] = None

    @classmethod
    def from_config(cls, config: Config) -> "RegistrationSheet":
        sheet_name = (config.spreadsheet_range or "").split("!", 1)[0] or None

        def open_worksheet() -> gspread.Worksheet:
            credentials = Credentials.from_service_account_info(
                config.service_account_info(), scopes=SHEETS_SCOPES
            )
            spreadsheet = gspread.authorize(credentials).open_by_key(config.spreadsheet_id)
            return spreadsheet.worksheet(sheet_name) if sheet_name else spreadsheet.sheet1

        return cls(open_worksheet)

    @property
    def worksheet(self) -> Any:
        if self._worksheet is None:
            self._worksheet = self._worksheet_factory()
        return self._worksheet

    def display_names(self) -> List[str]:
        return self.worksheet.col_values(NAME_COLUMN + 1)

    def rows(self) -> List[List[str]]:
        return self.worksheet.get_all_values()

    def append_row(self, row: List[Any]) -> None:
        self.worksheet.append_row(row, value_input_option="USER_ENTERED")


# =============================================================================
# Service
# =============================================================================

@dataclass(frozen=True)
class RegistrationStats:
    total: int
    by_profession: Dict[str, int] = field(default_factory=dict)


class RegistrationService:
    """
    Registration ingestion with duplicate detection by display name.

    Attributes:
        sheet: Worksheet wrapper.
    """

    def __init__(self, sheet: RegistrationSheet) -> None:
        self.sheet = sheet

    async def _call(self, operation: str, func: Callable, *args) -> Any:
        try:
            return await asyncio.to_thread(func, *args)
        except SHEET_ERRORS as e:
            logger.error("Spreadsheet Call Failed", [
                ("Operation", operation),
                ("Error", f"{type(e).__name__}: {str(e)[:100]}"),
            ])
            raise CollaboratorFailure(
                "❌ Couldn't reach the registration sheet. Please try again later."
            ) from e

    async def submit(
        self,
        display_name: str,
        user_id: int,
        text: str,
        submitted_at: Optional[datetime] = None,
    ) -> Registration:
        """
        Parse and store one registration.

        Raises:
            MalformedRegistrationError: text doesn't match the template.
            DuplicateRegistrationError: display name already registered.
            CollaboratorFailure: the spreadsheet call failed.
        """
        registration = parse_registration(text)

        existing = await self._call("read names", self.sheet.display_names)
        wanted = display_name.strip().casefold()
        if any(name.strip().casefold() == wanted for name in existing):
            raise DuplicateRegistrationError(
                f"❌ **{display_name}** has already registered."
            )

        when = submitted_at or datetime.now(timezone.utc)
        row = [
            when.strftime("%Y-%m-%d %H:%M:%S"),
            display_name,
            str(user_id),
            registration.profession,
            registration.level,
            registration.power,
            registration.available,
        ]
        await self._call("append row", self.sheet.append_row, row)

        logger.tree("Registration Stored", [
            ("Member", f"{display_name} ({user_id})"),
            ("Profession", registration.profession),
            ("Level", str(registration.level)),
            ("Power", f"{registration.power:,}"),
        ], emoji="📝")

        return registration

    async def stats(self) -> RegistrationStats:
        """Total registrations and counts per profession."""
        rows = await self._call("read rows", self.sheet.rows)

        professions: Counter = Counter()
        for row in rows:
            # Header and blank rows carry no numeric user id
            if len(row) <= PROFESSION_COLUMN or not row[USER_ID_COLUMN].strip().isdigit():
                continue
            professions[row[PROFESSION_COLUMN].strip() or "Unknown"] += 1

        return RegistrationStats(
            total=sum(professions.values()),
            by_profession=dict(professions.most_common()),
        )


__all__ = [
    "REGISTRATION_PATTERN",
    "TEMPLATE_HINT",
    "Registration",
    "parse_registration",
    "RegistrationSheet",
    "RegistrationStats",
    "RegistrationService",
]
