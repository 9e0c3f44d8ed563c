"""
XUI Panel Gateway - ResellerHub
Direct connection to an XUI panel database: table/column probing and expiry updates.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, date, datetime, time, timedelta, timezone
from typing import TYPE_CHECKING, Any, Final, cast

from django.conf import settings
from sqlalchemy import create_engine, inspect, text
from sqlalchemy.engine import URL, Connection, Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import NullPool
from sqlalchemy.types import Integer, Numeric

from apps.common.constants import PANEL_DB_CONNECT_TIMEOUT_SECONDS, PANEL_UTC_OFFSET_HOURS
from apps.common.types import Err, Ok, Result
from apps.provisioning.ledger import ExternalLedger
from apps.settings.services import SettingsService

from .base import (
    Found,
    LookupResult,
    NotFound,
    PanelGateway,
    PanelRecord,
    PanelRenewalOutcome,
    PanelSession,
    PanelTransientError,
    RenewalRequest,
    TransientError,
)

if TYPE_CHECKING:
    from apps.provisioning.models import PanelCredentials

logger = logging.getLogger(__name__)

# ===============================================================================
# CANDIDATE TABLES
# ===============================================================================

XUI_DEFAULT_PORT: Final[int] = 3306
PREFERRED_USER_TABLES: Final[tuple[str, ...]] = ("users", "user", "lines", "clientes", "clients", "accounts")
IDENTIFIER_COLUMNS: Final[tuple[str, ...]] = ("username", "user_name", "login", "user", "email", "name")
EXPIRY_COLUMNS: Final[tuple[str, ...]] = (
    "exp_date",
    "expiration",
    "expiration_date",
    "expire_date",
    "expiry_date",
    "expires_at",
    "expire_at",
    "expiracao",
)
OWNER_ID_COLUMNS: Final[tuple[str, ...]] = ("member_id", "owner_id", "reseller_id", "created_by", "user_id")
PREFERRED_OWNER_TABLES: Final[tuple[str, ...]] = ("users", "reg_users", "resellers", "members")
BALANCE_COLUMNS: Final[tuple[str, ...]] = ("credits", "credit", "balance", "wallet", "money", "saldo")

PANEL_TZ: Final = timezone(timedelta(hours=PANEL_UTC_OFFSET_HOURS))


@dataclass(frozen=True)
class XuiConfig:
    host: str
    port: int
    database: str
    user: str
    password: str
    source: str = "reseller"  # "reseller" | "global"


def normalize_database_and_port(raw_database: str, raw_port: str | int | None) -> tuple[str, int]:
    """
    Undo the common misconfiguration where database name and port were
    entered in each other's field.
    """
    database = str(raw_database or "").strip()
    port_text = str(raw_port or "").strip() or str(XUI_DEFAULT_PORT)

    if database.isdigit() and not port_text.isdigit():
        logger.warning("⚠️ [XUI] Database name is numeric and port is not; swapping them")
        database, port_text = port_text, database

    try:
        port = int(port_text)
    except ValueError:
        port = XUI_DEFAULT_PORT
    return database, port


def due_date_epoch(due_date: date) -> int:
    """Unix epoch of 23:59:59 panel time on the due date"""
    end_of_day = datetime.combine(due_date, time(23, 59, 59), tzinfo=PANEL_TZ)
    return int(end_of_day.astimezone(UTC).timestamp())


def expiry_value(due_date: date, column_type: Any) -> int | str:
    """Unix epoch for numeric expiry columns, formatted datetime otherwise"""
    if isinstance(column_type, Integer | Numeric):
        return due_date_epoch(due_date)
    return datetime.combine(due_date, time(23, 59, 59)).strftime("%Y-%m-%d %H:%M:%S")


def create_mysql_engine(config: XuiConfig) -> Engine:
    """Per-invocation engine; NullPool so nothing outlives the session"""
    timeout = SettingsService.get_integer_setting(
        "provisioning.panel_db_connect_timeout_seconds", PANEL_DB_CONNECT_TIMEOUT_SECONDS
    )
    url = URL.create(
        "mysql+pymysql",
        username=config.user,
        password=config.password,
        host=config.host,
        port=config.port,
        database=config.database,
    )
    return create_engine(
        url,
        poolclass=NullPool,
        connect_args={"connect_timeout": timeout, "read_timeout": timeout * 3, "write_timeout": timeout * 3},
    )


# ===============================================================================
# SESSION
# ===============================================================================


class XuiSession(PanelSession):
    """Open connection to one panel database; also the BalanceStore for its ledger"""

    def __init__(self, owner_id: int, config: XuiConfig, engine: Engine):
        super().__init__("xui", owner_id, config)
        self.engine = engine
        self.connection: Connection = engine.connect()
        self._columns: dict[str, dict[str, Any]] = {}
        self._tables: list[str] | None = None

    def quote(self, identifier: str) -> str:
        return self.engine.dialect.identifier_preparer.quote(identifier)

    def table_names(self) -> list[str]:
        if self._tables is None:
            self._tables = list(inspect(self.connection).get_table_names())
        return self._tables

    def columns(self, table: str) -> dict[str, Any]:
        """Column name → SQLAlchemy type"""
        if table not in self._columns:
            self._columns[table] = {
                col["name"]: col["type"] for col in inspect(self.connection).get_columns(table)
            }
        return self._columns[table]

    def debit(self, table: str, column: str, key_column: str, row_key: str, amount: int) -> bool:
        t, c, k = self.quote(table), self.quote(column), self.quote(key_column)
        result = self.connection.execute(
            text(f"UPDATE {t} SET {c} = {c} - :amount WHERE {k} = :key AND {c} >= :amount"),
            {"amount": amount, "key": row_key},
        )
        self.connection.commit()
        return result.rowcount == 1

    def credit(self, table: str, column: str, key_column: str, row_key: str, amount: int) -> None:
        t, c, k = self.quote(table), self.quote(column), self.quote(key_column)
        self.connection.execute(
            text(f"UPDATE {t} SET {c} = {c} + :amount WHERE {k} = :key"),
            {"amount": amount, "key": row_key},
        )
        self.connection.commit()

    def close(self) -> None:
        try:
            self.connection.close()
        finally:
            self.engine.dispose()


def ordered_tables(available: list[str], preferred: tuple[str, ...]) -> list[str]:
    """Preferred tables first (when present), then everything else"""
    ordered = [table for table in preferred if table in available]
    ordered.extend(table for table in available if table not in ordered)
    return ordered


# ===============================================================================
# GATEWAY
# ===============================================================================


class XuiGateway(PanelGateway):
    """🗄️ XUI panel reached through its MySQL database"""

    family = "xui"
    display_name = "XUI"
    supports_external_ledger = True

    def __init__(self, engine_factory: Callable[[XuiConfig], Engine] | None = None):
        self.engine_factory = engine_factory or create_mysql_engine

    def load_config(self, credentials: PanelCredentials | None) -> Result[XuiConfig, str]:
        if credentials is not None and credentials.xui_configured:
            database, port = normalize_database_and_port(credentials.xui_db_name, credentials.xui_db_port)
            return Ok(
                XuiConfig(
                    host=credentials.xui_db_host,
                    port=port,
                    database=database,
                    user=credentials.xui_db_user,
                    password=credentials.get_secret("xui_db_password"),
                )
            )

        # Legacy single-panel deployments configure one global database
        global_db: dict[str, Any] = getattr(settings, "XUI_DATABASE", {}) or {}
        if global_db.get("HOST") and global_db.get("NAME"):
            database, port = normalize_database_and_port(global_db.get("NAME", ""), global_db.get("PORT"))
            if not database:
                return Err("XUI database name not configured")
            return Ok(
                XuiConfig(
                    host=global_db["HOST"],
                    port=port,
                    database=database,
                    user=global_db.get("USER", ""),
                    password=global_db.get("PASSWORD", ""),
                    source="global",
                )
            )
        return Err("XUI database not configured")

    def _connect(self, owner_id: int, config: XuiConfig) -> PanelSession:
        engine = self.engine_factory(config)
        try:
            return XuiSession(owner_id, config, engine)
        except SQLAlchemyError as e:
            engine.dispose()
            raise PanelTransientError(f"Cannot connect to XUI database: {type(e).__name__}", panel=self.family) from e

    # ===============================================================================
    # LOOKUP
    # ===============================================================================

    def resolve(self, session: PanelSession, username: str) -> LookupResult:
        db = cast(XuiSession, session)
        wanted = username.strip()
        try:
            tables = ordered_tables(db.table_names(), PREFERRED_USER_TABLES)
            for table in tables:
                record = self._find_in_table(db, table, wanted)
                if record is not None:
                    logger.info(f"🔍 [XUI] Found {wanted} in {table} (id={record.record_id})")
                    return Found(record)
        except SQLAlchemyError as e:
            logger.warning(f"⚠️ [XUI] Lookup for {wanted} failed: {type(e).__name__}")
            return TransientError(f"XUI database error: {type(e).__name__}")

        return NotFound(f'Username "{wanted}" not found in XUI database ({len(tables)} tables searched)')

    def _find_in_table(self, db: XuiSession, table: str, username: str) -> PanelRecord | None:
        columns = db.columns(table)
        identifiers = [column for column in IDENTIFIER_COLUMNS if column in columns]

        clauses = [f"TRIM(CAST({db.quote(column)} AS CHAR)) = TRIM(:username)" for column in identifiers]
        params: dict[str, Any] = {"username": username}
        if username.isdigit() and "id" in columns:
            clauses.append(f"{db.quote('id')} = :numeric_id")
            params["numeric_id"] = int(username)
        if not clauses:
            return None

        row = db.connection.execute(
            text(f"SELECT * FROM {db.quote(table)} WHERE {' OR '.join(clauses)} LIMIT 1"), params
        ).mappings().first()
        if row is None:
            return None

        data = dict(row)
        record_id = data.get("id")
        return PanelRecord(
            record_id=str(record_id) if record_id is not None else "",
            username=username,
            kind=table,
            data=data,
        )

    # ===============================================================================
    # RENEWAL
    # ===============================================================================

    def renew(self, session: PanelSession, record: PanelRecord, request: RenewalRequest) -> PanelRenewalOutcome:
        db = cast(XuiSession, session)
        table = record.kind
        columns = db.columns(table)

        expiry_column = next((column for column in EXPIRY_COLUMNS if column in columns), None)
        if expiry_column is None:
            return PanelRenewalOutcome(False, f"No known expiry column in table {table}")

        new_value = expiry_value(request.new_due_date, columns[expiry_column])
        assignments = [f"{db.quote(expiry_column)} = :expiry"]
        if "enabled" in columns:
            assignments.append(f"{db.quote('enabled')} = 1")
        if "is_trial" in columns:
            assignments.append(f"{db.quote('is_trial')} = 0")

        params: dict[str, Any] = {"expiry": new_value}
        if "id" in columns and record.record_id:
            where = f"{db.quote('id')} = :row_id"
            params["row_id"] = record.data.get("id")
        else:
            identifiers = [column for column in IDENTIFIER_COLUMNS if column in columns]
            if not identifiers:
                return PanelRenewalOutcome(False, f"Cannot determine key column for table {table}")
            where = f"TRIM(CAST({db.quote(identifiers[0])} AS CHAR)) = TRIM(:username)"
            params["username"] = record.username

        db.connection.execute(text(f"UPDATE {db.quote(table)} SET {', '.join(assignments)} WHERE {where}"), params)
        db.connection.commit()

        logger.info(
            f"✅ [XUI] {record.username} in {table}: {expiry_column} "
            f"{record.data.get(expiry_column)} → {new_value}"
        )
        return PanelRenewalOutcome(
            True,
            f"Renewed until {request.new_due_date.isoformat()}",
            data={"table": table, "expiry_column": expiry_column, "new_value": new_value},
        )

    # ===============================================================================
    # PANEL-SIDE CREDIT LEDGER
    # ===============================================================================

    def external_ledger(self, session: PanelSession, record: PanelRecord) -> ExternalLedger | None:
        db = cast(XuiSession, session)
        owner_id = next(
            (record.data[column] for column in OWNER_ID_COLUMNS if record.data.get(column) not in (None, "", 0)),
            None,
        )
        if owner_id is None:
            return None

        for table in ordered_tables(db.table_names(), PREFERRED_OWNER_TABLES):
            columns = db.columns(table)
            balance_column = next((column for column in BALANCE_COLUMNS if column in columns), None)
            if balance_column is None or "id" not in columns:
                continue
            row = db.connection.execute(
                text(f"SELECT {db.quote('id')} FROM {db.quote(table)} WHERE {db.quote('id')} = :owner LIMIT 1"),
                {"owner": owner_id},
            ).first()
            if row is not None:
                logger.info(f"🗄️ [XUI] Panel balance for owner {owner_id} at {table}.{balance_column}")
                return ExternalLedger(
                    table=table, column=balance_column, row_key=str(owner_id), key_column="id", store=db
                )
        return None
