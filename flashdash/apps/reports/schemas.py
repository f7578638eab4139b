"""
Reports schemas and response normalisation.

The reporting backend answers in several shapes (rows under `rows`, `data`,
`metrics`, a bare list, or a single object; the agent under `agent`, `name`,
`agentName` or `agent_name`). Everything is mapped onto the typed section
models here, once, so panels never probe raw payloads.
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class Column(BaseModel):
    key: str
    label: str


def _columns(*pairs: tuple[str, str]) -> List[Column]:
    return [Column(key=key, label=label) for key, label in pairs]


COMPANY_COLUMNS = _columns(
    ("leads_received", "Leads Received"),
    ("contacted", "Contacted"),
    ("no_contact", "No Contact"),
    ("dnc", "DNC"),
    ("not_interested_wrong_number", "No Longer Interested / Wrong Number"),
    ("no_credit_report_pulled", "No Credit Report Pulled"),
    ("credit_report_pulled", "Credit Report Pulled"),
    ("qualified", "Qualified"),
    ("not_qualified", "Not Qualified"),
    ("enrolled", "Enrolled"),
    ("enrolled_debt", "Enrolled Debt"),
    ("cancelled", "Cancelled"),
)

OPENER_COLUMNS = _columns(
    ("agent", "AGENT"),
    ("received", "RECEIVED"),
    ("cp", "CP"),
    ("cp_percent", "CP%"),
    ("transferred", "TRANSFERRED"),
    ("transferred_percent", "TRANSFERRED%"),
    ("ta", "TA"),
    ("cr_error", "CR ERROR"),
    ("cr_error_percent", "CR ERROR%"),
)

INTAKE_COLUMNS = _columns(
    ("agent", "AGENT"),
    ("received", "RECEIVED"),
    ("pitched", "PITCHED"),
    ("pitched_percent", "PITCHED%"),
    ("enrolled", "ENROLLED"),
    ("enrolled_debt", "ENROLLED DEBT"),
    ("enrollment_conversion", "ENROLLMENT CONVERSION"),
    ("enrolled_received", "ENROLLED / RECEIVED"),
)

SECTION_COLUMNS: Dict[str, List[Column]] = {
    "company": COMPANY_COLUMNS,
    "opener": OPENER_COLUMNS,
    "intake": INTAKE_COLUMNS,
}

SECTION_LABELS = {
    "company": "Company Metrics",
    "opener": "Opener Metrics",
    "intake": "Intake Metrics",
    "comparison": "Comparison Charts",
}

RANGE_FILTERS = ("today", "yesterday", "this_week", "this_month")

AGENT_ALIASES = ("name", "agentName", "agent_name")


class SectionDataset(BaseModel):
    """A table panel: columns plus rows keyed by column key."""
    columns: List[Column]
    rows: List[Dict[str, Any]]


class ComparisonDataset(BaseModel):
    trend: List[Dict[str, Any]] = Field(default_factory=list)
    agents: List[Dict[str, Any]] = Field(default_factory=list)


class DailyMetric(BaseModel):
    day: str
    opener: Dict[str, Any]
    intake: Dict[str, Any]


class DashboardSummary(BaseModel):
    totalLeads: float = 0
    pendingLeads: float = 0
    conversionRate: float = 0
    weeklyPerformance: List[Dict[str, Any]]
    dailyMetrics: List[DailyMetric]
    pendingLabel: str


class SyncStatus(BaseModel):
    active: bool = False
    last_success: Optional[str] = None
    error: bool = False


def visible_sections(role: Optional[str]) -> List[str]:
    """Openers and intake agents see their own table plus the comparison charts."""
    if role == "opener":
        return ["opener", "comparison"]
    if role == "intake":
        return ["intake", "comparison"]
    return ["company", "opener", "intake", "comparison"]


def _is_blank(value: Any) -> bool:
    return value is None or value == ""


def create_blank_row(columns: List[Column]) -> Dict[str, Any]:
    row: Dict[str, Any] = {}
    for column in columns:
        if column.key == "agent":
            row[column.key] = "—"
        elif "percent" in column.key or "conversion" in column.key:
            row[column.key] = "0%"
        else:
            row[column.key] = 0
    return row


def extract_rows(payload: Any) -> List[Any]:
    """Find the row list in any of the shapes the backend uses."""
    if not payload:
        return []
    if isinstance(payload, list):
        return payload
    if not isinstance(payload, dict):
        return []
    for key in ("rows", "data", "metrics"):
        if isinstance(payload.get(key), list):
            return payload[key]
    if isinstance(payload.get("metrics"), dict):
        return [payload["metrics"]]
    return [payload]


def map_rows_to_columns(raw_rows: List[Any], columns: List[Column]) -> List[Dict[str, Any]]:
    """Project raw rows onto `columns`; blanks keep the placeholder value."""
    if not raw_rows:
        return [create_blank_row(columns)]

    normalized_rows = []
    for raw in raw_rows:
        raw = raw if isinstance(raw, dict) else {}
        row = create_blank_row(columns)
        for column in columns:
            value = raw.get(column.key)
            if _is_blank(value) and column.key == "agent":
                value = next((raw.get(alias) for alias in AGENT_ALIASES if not _is_blank(raw.get(alias))), None)
            if not _is_blank(value):
                row[column.key] = value
        normalized_rows.append(row)
    return normalized_rows


def fallback_section(section: str) -> SectionDataset | ComparisonDataset:
    """Placeholder shown when a section cannot be loaded."""
    columns = SECTION_COLUMNS.get(section)
    if columns is None:
        return ComparisonDataset()
    return SectionDataset(columns=columns, rows=[create_blank_row(columns)])


def normalize_section(section: str, payload: Any) -> SectionDataset | ComparisonDataset:
    if section not in SECTION_COLUMNS:
        data = payload if isinstance(payload, dict) else {}
        return ComparisonDataset(
            trend=data.get("trend") or [],
            agents=data.get("agents") or [],
        )
    columns = SECTION_COLUMNS[section]
    return SectionDataset(columns=columns, rows=map_rows_to_columns(extract_rows(payload), columns))


WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri")


def pending_label(role: Optional[str]) -> str:
    return "Transferred Leads" if role == "opener" else "Enrolled Leads"


def fallback_summary(role: Optional[str]) -> DashboardSummary:
    return DashboardSummary(
        weeklyPerformance=[{"label": day, "value": 0} for day in WEEKDAYS],
        dailyMetrics=[
            DailyMetric(
                day=day,
                opener={"transferred": 0, "conversion": "0%"},
                intake={"enrolled": 0, "conversion": "0%"},
            )
            for day in WEEKDAYS
        ],
        pendingLabel=pending_label(role),
    )


def merge_summary(payload: Any, role: Optional[str]) -> DashboardSummary:
    """Fill whatever the summary payload lacks from the role's fallback summary."""
    fallback = fallback_summary(role)
    data = payload if isinstance(payload, dict) else {}

    def listed(key: str, default: list) -> list:
        value = data.get(key)
        return value if isinstance(value, list) and value else default

    return DashboardSummary(
        totalLeads=data.get("totalLeads") if data.get("totalLeads") is not None else fallback.totalLeads,
        pendingLeads=data.get("pendingLeads") if data.get("pendingLeads") is not None else fallback.pendingLeads,
        conversionRate=data.get("conversionRate") if data.get("conversionRate") is not None else fallback.conversionRate,
        weeklyPerformance=listed("weeklyPerformance", fallback.weeklyPerformance),
        dailyMetrics=listed("dailyMetrics", fallback.dailyMetrics),
        pendingLabel=data.get("pendingLabel") or fallback.pendingLabel,
    )


SYNC_TIMESTAMP_KEYS = ("last_successful_sync", "lastSuccess", "lastCompletedAt", "lastSyncAt")


def normalize_sync_status(payload: Any, previous: Optional[SyncStatus] = None) -> SyncStatus:
    data = payload if isinstance(payload, dict) else {}
    last_success = next((data[k] for k in SYNC_TIMESTAMP_KEYS if data.get(k)), None)
    return SyncStatus(
        active=bool(data.get("active")),
        last_success=last_success or (previous.last_success if previous else None),
        error=False,
    )
