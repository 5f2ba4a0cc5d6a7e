"""Dashboard aggregations.

Read-side computations over baptisms, activities and finance. The annual goal
setter is the only write.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Any, Optional

from dateutil.relativedelta import relativedelta
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from pastoral.activities.service import MemberRequestService
from pastoral.common.models import (
    AgeGroup,
    Baptism,
    BaptismStatus,
    Event,
    FinanceTransaction,
    Gender,
    Meeting,
    Schedule,
    TransactionType,
    User,
)
from pastoral.core.config import settings
from pastoral.core.errors import ValidationAPIError
from pastoral.core.metrics import emit_business_metric
from pastoral.system.service import ConfigService

logger = logging.getLogger(__name__)

ANNUAL_GOAL_KEY = "annual_goal"

MONTH_LABELS = (
    "Jan", "Fev", "Mar", "Abr", "Mai", "Jun",
    "Jul", "Ago", "Set", "Out", "Nov", "Dez",
)

# Baptisms counted in the evolution chart
EVOLUTION_STATUSES = (BaptismStatus.AGENDADO.value, BaptismStatus.CONCLUIDO.value)

NO_FILTER = ("", "all")


def _active_filter(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    if value.lower() in NO_FILTER:
        return None
    return value


def _parse_age_group(value: str) -> AgeGroup:
    """Accept ``child``/``adult`` or the legacy ``0``/``1`` codes."""
    if value in ("0", "1"):
        return AgeGroup.from_code(int(value))
    return AgeGroup(value.lower())


def _year_bounds(year: int) -> tuple[date, date]:
    return date(year, 1, 1), date(year, 12, 31)


class DashboardService:
    """Service for dashboard cards and charts."""

    @staticmethod
    def next_baptism(db: Session, today: date) -> Optional[Baptism]:
        stmt = (
            select(Baptism)
            .where(Baptism.scheduled_date >= today)
            .order_by(Baptism.scheduled_date, Baptism.id)
            .limit(1)
        )
        return db.execute(stmt).scalar_one_or_none()

    @staticmethod
    def next_meeting(db: Session, today: date) -> Optional[Meeting]:
        stmt = (
            select(Meeting)
            .where(Meeting.meeting_date >= today)
            .order_by(Meeting.meeting_date, Meeting.id)
            .limit(1)
        )
        return db.execute(stmt).scalar_one_or_none()

    @staticmethod
    def next_event(db: Session, today: date) -> Optional[Event]:
        stmt = (
            select(Event)
            .where(Event.date >= today)
            .order_by(Event.date, Event.id)
            .limit(1)
        )
        return db.execute(stmt).scalar_one_or_none()

    @staticmethod
    def get_summary(db: Session, today: Optional[date] = None) -> dict[str, Any]:
        """Next baptism, meeting and event on or after today, and open requests."""
        today = today or date.today()
        return {
            "next_baptism": DashboardService.next_baptism(db, today),
            "next_meeting": DashboardService.next_meeting(db, today),
            "next_event": DashboardService.next_event(db, today),
            "active_notifications": MemberRequestService.count_open(db),
        }

    @staticmethod
    def get_presence_scale(
        db: Session, today: Optional[date] = None
    ) -> list[tuple[Baptism, list[tuple[Schedule, User]]]]:
        """Upcoming scheduled baptisms, each with its team and their presence."""
        today = today or date.today()
        stmt = (
            select(Baptism)
            .where(
                Baptism.status == BaptismStatus.AGENDADO.value,
                Baptism.scheduled_date >= today,
            )
            .order_by(Baptism.scheduled_date, Baptism.id)
        )
        baptisms = list(db.execute(stmt).scalars().all())
        if not baptisms:
            return []

        team_stmt = (
            select(Schedule, User)
            .join(User, User.id == Schedule.user_id)
            .where(Schedule.baptism_id.in_([b.id for b in baptisms]))
            .order_by(Schedule.id)
        )
        teams: dict[int, list[tuple[Schedule, User]]] = defaultdict(list)
        for schedule, user in db.execute(team_stmt).all():
            teams[schedule.baptism_id].append((schedule, user))

        return [(baptism, teams[baptism.id]) for baptism in baptisms]

    @staticmethod
    def get_evolution_data(
        db: Session,
        year: Optional[int] = None,
        gender: Optional[str] = None,
        city: Optional[str] = None,
        age_group: Optional[str] = None,
    ) -> list[dict[str, Any]]:
        """Monthly count of scheduled and completed baptisms in ``year``.

        Always twelve points, January first. Empty or ``all`` filters are
        ignored.
        """
        year = year or date.today().year
        start, end = _year_bounds(year)

        stmt = select(Baptism.scheduled_date).where(
            Baptism.status.in_(EVOLUTION_STATUSES),
            Baptism.scheduled_date >= start,
            Baptism.scheduled_date <= end,
        )

        try:
            gender = _active_filter(gender)
            if gender:
                stmt = stmt.where(Baptism.gender == Gender(gender.lower()).value)

            age_group = _active_filter(age_group)
            if age_group:
                stmt = stmt.where(Baptism.age_code == _parse_age_group(age_group).code)
        except ValueError as e:
            raise ValidationAPIError(
                "Invalid evolution filter", errors=[{"message": str(e)}]
            ) from e

        city = _active_filter(city)
        if city:
            stmt = stmt.where(func.lower(func.trim(Baptism.city)) == city.lower())

        counts = [0] * 12
        for (scheduled,) in db.execute(stmt).all():
            counts[scheduled.month - 1] += 1

        return [
            {"name": MONTH_LABELS[i], "month": i + 1, "year": year, "quantity": counts[i]}
            for i in range(12)
        ]

    @staticmethod
    def get_finance_bi(
        db: Session,
        months: Optional[int] = None,
        today: Optional[date] = None,
    ) -> list[dict[str, Any]]:
        """Entries, exits and balance for the last ``months`` calendar months."""
        months = months or settings.finance_bi_months
        today = today or date.today()
        current = today.replace(day=1)
        first = current - relativedelta(months=months - 1)
        after_last = current + relativedelta(months=1)

        keys = [(first + relativedelta(months=i)).strftime("%Y-%m") for i in range(months)]
        totals: dict[str, dict[str, Decimal]] = {
            key: {"entry": Decimal("0"), "exit": Decimal("0")} for key in keys
        }

        stmt = select(
            FinanceTransaction.date,
            FinanceTransaction.type,
            FinanceTransaction.value,
        ).where(
            FinanceTransaction.date >= first,
            FinanceTransaction.date < after_last,
        )
        for tx_date, tx_type, value in db.execute(stmt).all():
            bucket = totals[tx_date.strftime("%Y-%m")]
            side = "entry" if tx_type == TransactionType.ENTRADA.value else "exit"
            bucket[side] += Decimal(value)

        return [
            {
                "month": key,
                "entry": float(totals[key]["entry"]),
                "exit": float(totals[key]["exit"]),
                "balance": float(totals[key]["entry"] - totals[key]["exit"]),
            }
            for key in keys
        ]

    @staticmethod
    def get_goal(db: Session) -> int:
        goal = ConfigService.get_int(db, ANNUAL_GOAL_KEY, settings.annual_goal_default)
        return goal if goal > 0 else settings.annual_goal_default

    @staticmethod
    def count_completed(db: Session, year: int) -> int:
        start, end = _year_bounds(year)
        stmt = (
            select(func.count())
            .select_from(Baptism)
            .where(
                Baptism.status == BaptismStatus.CONCLUIDO.value,
                Baptism.scheduled_date >= start,
                Baptism.scheduled_date <= end,
            )
        )
        return db.execute(stmt).scalar() or 0

    @staticmethod
    def get_annual_goal(db: Session, today: Optional[date] = None) -> dict[str, Any]:
        today = today or date.today()
        goal = DashboardService.get_goal(db)
        achieved = DashboardService.count_completed(db, today.year)
        progress = min(100.0, achieved / goal * 100)
        return {"goal": goal, "achieved": achieved, "progress": round(progress, 2)}

    @staticmethod
    def set_annual_goal(db: Session, goal: int, actor_id: str) -> int:
        if goal <= 0:
            raise ValidationAPIError(
                "Annual goal must be positive", errors=[{"field": "goal", "message": "must be > 0"}]
            )
        ConfigService.set_value(db, ANNUAL_GOAL_KEY, str(goal))
        logger.info("Annual goal set to %s by %s", goal, actor_id)
        emit_business_metric("dashboard.goal_changed", value=goal, unit="None")
        return goal

    @staticmethod
    def get_unique_cities(db: Session) -> list[str]:
        stmt = select(Baptism.city).where(Baptism.city.is_not(None)).distinct()
        cities = {city.strip() for (city,) in db.execute(stmt).all() if city and city.strip()}
        return sorted(cities)
