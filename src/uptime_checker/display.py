"""Plain-text rendering of refresh results."""

import re
import time
from datetime import datetime
from typing import Optional

from .models import Monitor, MonitorStatus, MonitorType, RefreshResult

SECONDS_IN_MINUTE = 60
SECONDS_IN_HOUR = 60 * SECONDS_IN_MINUTE
SECONDS_IN_DAY = 24 * SECONDS_IN_HOUR
SECONDS_IN_MONTH = 30 * SECONDS_IN_DAY
SECONDS_IN_YEAR = 365 * SECONDS_IN_DAY

STATUS_LABELS = {
    MonitorStatus.PAUSED: "Paused",
    MonitorStatus.PENDING: "Pending",
    MonitorStatus.UP: "Up",
    MonitorStatus.SEEMS_DOWN: "Seems down",
    MonitorStatus.DOWN: "Down",
}

TYPE_LABELS = {
    MonitorType.HTTP: "HTTP",
    MonitorType.KEYWORD: "Keyword",
    MonitorType.PING: "Ping",
    MonitorType.PORT: "Port",
    MonitorType.HEARTBEAT: "Heartbeat",
}

STATUS_WIDTH = 14
NAME_WIDTH = 24
METRIC_WIDTH = 30
OUTAGE_WIDTH = 12

CACHE_NOTICE = "Using cached data."


def format_duration(duration: float) -> str:
    """Format seconds as a compact duration such as '17d', '3h 5m' or '1m 55s'.

    Smaller units are dropped once a larger one is shown: hours are hidden
    when months are present, minutes when days are, seconds when hours are.
    """
    years = int(duration // SECONDS_IN_YEAR)
    months = int((duration % SECONDS_IN_YEAR) // SECONDS_IN_MONTH)
    days = int((duration % SECONDS_IN_MONTH) // SECONDS_IN_DAY)
    hours = int((duration % SECONDS_IN_DAY) // SECONDS_IN_HOUR)
    minutes = int((duration % SECONDS_IN_HOUR) // SECONDS_IN_MINUTE)
    seconds = int(duration % SECONDS_IN_MINUTE)

    parts = [
        f"{years}y" if years > 0 else "",
        f"{months}mo" if months > 0 else "",
        f"{days}d" if days > 0 else "",
        f"{hours}h" if months == 0 and hours > 0 else "",
        f"{minutes}m" if days == 0 and months == 0 and minutes > 0 else "",
        f"{seconds}s" if hours == 0 and days == 0 and months == 0 and (seconds > 0 or duration == 0) else "",
    ]
    return " ".join(part for part in parts if part)


def format_date(timestamp: int) -> str:
    """Format epoch seconds as a local YYYY-MM-DD date."""
    return datetime.fromtimestamp(timestamp).strftime("%Y-%m-%d")


def short_url(url: str) -> str:
    return re.sub(r"/$", "", re.sub(r"^https?://(www\.)?", "", url))


def status_label(status: MonitorStatus) -> str:
    return STATUS_LABELS[status]


def type_label(monitor_type: MonitorType) -> str:
    return TYPE_LABELS[monitor_type]


def format_uptime_ratio(ratio: Optional[str]) -> str:
    if not ratio:
        return "-"
    return ("100" if ratio == "100.000" else ratio) + "%"


def format_response_time(average: Optional[float]) -> str:
    if not average:
        return "-"
    return f"{int(average)}ms"


def truncate(text: str, width: int) -> str:
    if len(text) <= width:
        return text
    return text[: width - 1] + "…"


def truncate_middle(text: str, width: int) -> str:
    if len(text) <= width:
        return text
    head = (width - 1) // 2
    tail = width - 1 - head
    return text[:head] + "…" + text[-tail:]


def _label_value(label: str, value: str) -> str:
    return label + value.rjust(METRIC_WIDTH - len(label))


def render_monitor(monitor: Monitor, now: Optional[float] = None) -> str:
    """Render one monitor as a three-line row.

    Args:
        monitor: Monitor to render
        now: Current time in epoch seconds, defaults to time.time()
    """
    now = time.time() if now is None else now

    outage = monitor.most_recent_outage()
    recovery = monitor.most_recent_recovery()

    up_for = "-"
    if recovery and monitor.status == MonitorStatus.UP and now - recovery.datetime > 0:
        up_for = format_duration(now - recovery.datetime)

    status_cells = [f"[ {status_label(monitor.status)} ]", "", ""]
    name_cells = [
        truncate(monitor.friendly_name, NAME_WIDTH),
        truncate_middle(short_url(monitor.url), NAME_WIDTH),
        truncate(f"{type_label(monitor.type)} every {format_duration(monitor.interval)}", NAME_WIDTH),
    ]
    metric_cells = [
        _label_value("Up for: ", up_for),
        _label_value("Uptime (1mo): ", format_uptime_ratio(monitor.custom_uptime_ratio)),
        _label_value("Avg speed (1d): ", format_response_time(monitor.average_response_time)),
    ]
    outage_cells = [
        "Last outage:",
        format_date(outage.datetime) if outage else "-",
        format_duration(outage.duration) if outage else "",
    ]

    lines = []
    for status_cell, name_cell, metric_cell, outage_cell in zip(status_cells, name_cells, metric_cells, outage_cells):
        line = (
            f"{status_cell:<{STATUS_WIDTH}}   {name_cell:<{NAME_WIDTH}}   "
            f"{metric_cell:<{METRIC_WIDTH}}   {outage_cell:>{OUTAGE_WIDTH}}"
        )
        lines.append(line.rstrip())
    return "\n".join(lines)


def render_result(result: RefreshResult, now: Optional[float] = None) -> str:
    """Render a refresh result as the full dashboard text."""
    if result.error:
        return result.error

    monitors = result.monitors or []
    if not monitors:
        return "No monitors found."

    separator = "-" * (STATUS_WIDTH + NAME_WIDTH + METRIC_WIDTH + OUTAGE_WIDTH + 9)
    text = f"\n{separator}\n".join(render_monitor(monitor, now) for monitor in monitors)
    if result.using_cache:
        text += f"\n\n{CACHE_NOTICE}"
    return text
