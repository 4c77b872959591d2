"""Report Generation - Pure functions for weekly adherence reports.

All functions are pure: same input always produces same output, no side effects.
"""

from datetime import date, timedelta
from typing import Optional

from .models import DayHealthSummary, HydrationLog, SleepLog, WeeklyHealthReport
from .sleep_debt import compute_sleep_debt
from .thresholds import classify_adherence


def summarize_hydration(logs: list[HydrationLog]) -> tuple[float, str]:
    """Total a day's hydration logs and classify against the latest target.

    Args:
        logs: Hydration logs for one day (non-empty)

    Returns:
        Tuple of (total liters, status)
    """
    latest = max(logs, key=lambda log: log.created_at)
    total = sum(log.liters_consumed for log in logs)
    return round(total, 2), classify_adherence(total, latest.target_liters).status


def generate_day_summary(
    log_date: date,
    hydration_logs: list[HydrationLog],
    sleep_logs: list[SleepLog],
) -> DayHealthSummary:
    """Generate a summary for a single day.

    Multiple hydration logs add up; when a night was logged more than once
    the most recent entry counts.
    """
    fields: dict = {"log_date": log_date}

    if hydration_logs:
        fields["water_liters"], fields["hydration_status"] = summarize_hydration(hydration_logs)

    if sleep_logs:
        latest = max(sleep_logs, key=lambda log: log.created_at)
        fields["sleep_hours"] = latest.sleep_hours
        fields["sleep_status"] = latest.status

    return DayHealthSummary(**fields)


def generate_weekly_report(
    hydration_logs: list[HydrationLog],
    sleep_logs: list[SleepLog],
    week_start: date,
    sleep_target_hours: Optional[float] = None,
) -> WeeklyHealthReport:
    """Generate a weekly hydration and sleep report.

    Args:
        hydration_logs: Hydration logs (may cover more than the week)
        sleep_logs: Sleep logs (may cover more than the week)
        week_start: First day of the seven-day window
        sleep_target_hours: Target used for sleep debt (defaults to the
            target recorded on the latest sleep log)

    Returns:
        WeeklyHealthReport with per-day summaries and aggregates
    """
    week_end = week_start + timedelta(days=6)

    # Filter logs to the requested week
    week_hydration = [log for log in hydration_logs if week_start <= log.log_date <= week_end]
    week_sleep = [log for log in sleep_logs if week_start <= log.log_date <= week_end]

    logged_dates = sorted({log.log_date for log in week_hydration} | {log.log_date for log in week_sleep})
    days = [
        generate_day_summary(
            day,
            [log for log in week_hydration if log.log_date == day],
            [log for log in week_sleep if log.log_date == day],
        )
        for day in logged_dates
    ]

    water_days = [d for d in days if d.water_liters is not None]
    sleep_days = [d for d in days if d.sleep_hours is not None]

    avg_water = None
    if water_days:
        avg_water = round(sum(d.water_liters for d in water_days) / len(water_days), 2)

    avg_sleep = None
    sleep_debt = None
    if sleep_days:
        avg_sleep = round(sum(d.sleep_hours for d in sleep_days) / len(sleep_days), 2)
        if sleep_target_hours is None:
            sleep_target_hours = max(week_sleep, key=lambda log: log.created_at).target_hours
        sleep_debt = compute_sleep_debt(sleep_target_hours, [d.sleep_hours for d in sleep_days])

    return WeeklyHealthReport(
        week_start=week_start,
        week_end=week_end,
        days=days,
        hydration_days_on_target=sum(1 for d in water_days if d.hydration_status == "green"),
        sleep_days_on_target=sum(1 for d in sleep_days if d.sleep_status == "green"),
        avg_water_liters=avg_water,
        avg_sleep_hours=avg_sleep,
        sleep_debt=sleep_debt,
    )
