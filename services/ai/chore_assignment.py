"""
Chore assignment strategies.

Each strategy scores the household's members against one chore and picks a
single assignee. The scoring is deterministic; no provider call is involved.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import asdict, dataclass, field
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy.orm import Session

from app.exceptions import ServiceValidationError
from domain.enums import ChoreStatus
from domain.models import AppUser, Chore, ChoreCompletion, utcnow
from repositories import MemberRepository

logger = logging.getLogger("homehub.ai.chore_assignment")

DEFAULT_DIFFICULTY = 50
DEFAULT_STRATEGY = "ai_hybrid"


@dataclass
class UserWorkload:
    user_id: UUID
    name: str
    total_chores: int = 0
    pending_chores: int = 0
    completed_today: int = 0
    average_difficulty: float = DEFAULT_DIFFICULTY
    preferred_categories: List[str] = field(default_factory=list)
    energy_level: str = "medium"
    last_assigned: Optional[datetime] = None


@dataclass
class AssignmentResult:
    assigned_user_id: UUID
    assigned_user_name: str
    confidence: int
    reasoning: str
    strategy: str
    alternatives: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _alternatives(scored: List[Tuple[UserWorkload, float]], chosen: UserWorkload) -> List[Dict[str, Any]]:
    return [
        {"user_id": user.user_id, "name": user.name, "score": round(score, 2)}
        for user, score in scored
        if user.user_id != chosen.user_id
    ]


def _difficulty(chore: Dict[str, Any]) -> float:
    value = chore.get("ai_difficulty_rating")
    return DEFAULT_DIFFICULTY if value is None else value


def round_robin(chore: Dict[str, Any], users: List[UserWorkload], now: datetime) -> AssignmentResult:
    assigned = [u for u in users if u.last_assigned is not None]
    if assigned:
        latest = max(assigned, key=lambda u: u.last_assigned)
        next_user = users[(users.index(latest) + 1) % len(users)]
    else:
        next_user = users[0]

    return AssignmentResult(
        assigned_user_id=next_user.user_id,
        assigned_user_name=next_user.name,
        confidence=85,
        reasoning=f"Round-robin assignment: {next_user.name} is next in rotation",
        strategy="round_robin",
        alternatives=_alternatives([(u, 0.0) for u in users], next_user),
    )


def fairness(chore: Dict[str, Any], users: List[UserWorkload], now: datetime) -> AssignmentResult:
    scored = [
        (u, u.total_chores * 2 + u.pending_chores * 3 + u.average_difficulty / 20)
        for u in users
    ]
    scored.sort(key=lambda pair: pair[1])
    best = scored[0][0]

    return AssignmentResult(
        assigned_user_id=best.user_id,
        assigned_user_name=best.name,
        confidence=90,
        reasoning=(
            f"{best.name} has the lowest current workload "
            f"({best.total_chores} total, {best.pending_chores} pending)"
        ),
        strategy="fairness",
        alternatives=_alternatives(scored, best),
    )


def preference(chore: Dict[str, Any], users: List[UserWorkload], now: datetime) -> AssignmentResult:
    category = chore.get("category") or ""
    energy = chore.get("ai_energy_level")
    difficulty = _difficulty(chore)

    def score(user: UserWorkload) -> float:
        total = 0.0
        if category and category in user.preferred_categories:
            total += 50
        total -= user.total_chores * 10
        total -= user.pending_chores * 15
        if energy and energy == user.energy_level:
            total += 30
        total -= abs(difficulty - user.average_difficulty) / 2
        return total

    scored = sorted(((u, score(u)) for u in users), key=lambda pair: pair[1], reverse=True)
    best = scored[0][0]

    return AssignmentResult(
        assigned_user_id=best.user_id,
        assigned_user_name=best.name,
        confidence=80,
        reasoning=(
            f"{best.name} has high preference for {category or 'general'} tasks "
            "and suitable energy level"
        ),
        strategy="preference",
        alternatives=_alternatives(scored, best),
    )


def ai_hybrid(chore: Dict[str, Any], users: List[UserWorkload], now: datetime) -> AssignmentResult:
    category = chore.get("category") or ""
    energy = chore.get("ai_energy_level")
    difficulty = _difficulty(chore)

    def score(user: UserWorkload) -> float:
        workload = max(0, 100 - user.total_chores * 15 - user.pending_chores * 20)
        category_score = 100 if category and category in user.preferred_categories else 0
        if energy and energy == user.energy_level:
            energy_score = 100
        elif energy == "medium":
            energy_score = 70
        else:
            energy_score = 40
        difficulty_score = max(0, 100 - abs(difficulty - user.average_difficulty))

        total = workload * 0.4 + category_score * 0.25 + energy_score * 0.2 + difficulty_score * 0.15
        if user.last_assigned is None or now - user.last_assigned > timedelta(hours=24):
            total += 20
        return total

    scored = sorted(((u, score(u)) for u in users), key=lambda pair: pair[1], reverse=True)
    best, best_score = scored[0]

    return AssignmentResult(
        assigned_user_id=best.user_id,
        assigned_user_name=best.name,
        confidence=round(min(95, max(60, best_score))),
        reasoning=(
            f"AI hybrid analysis: {best.name} scored highest ({round(best_score)}) "
            "based on workload balance, preferences, and compatibility"
        ),
        strategy="ai_hybrid",
        alternatives=_alternatives(scored, best),
    )


STRATEGIES: Dict[str, Callable[[Dict[str, Any], List[UserWorkload], datetime], AssignmentResult]] = {
    "round_robin": round_robin,
    "fairness": fairness,
    "preference": preference,
    "ai_hybrid": ai_hybrid,
}


class ChoreAssignmentService:
    """Pick assignees for chores among household members."""

    @staticmethod
    def assign_chore(
        chore: Dict[str, Any],
        users: List[UserWorkload],
        strategy: str = DEFAULT_STRATEGY,
        now: Optional[datetime] = None,
    ) -> AssignmentResult:
        """
        Run one strategy. Unknown strategy names fall back to ai_hybrid.

        Raises:
            ServiceValidationError: If there is nobody to assign to
        """
        if not users:
            raise ServiceValidationError("No users available for assignment")
        if strategy not in STRATEGIES:
            logger.info(f"Unknown assignment strategy '{strategy}', using {DEFAULT_STRATEGY}")
            strategy = DEFAULT_STRATEGY
        return STRATEGIES[strategy](chore, users, now or utcnow())

    @staticmethod
    def get_assignment_recommendations(
        chore: Dict[str, Any],
        users: List[UserWorkload],
        now: Optional[datetime] = None,
    ) -> List[AssignmentResult]:
        """Result of every strategy, most confident first."""
        if not users:
            raise ServiceValidationError("No users available for assignment")
        now = now or utcnow()
        results = [algorithm(chore, users, now) for algorithm in STRATEGIES.values()]
        results.sort(key=lambda r: r.confidence, reverse=True)
        return results

    @staticmethod
    def chore_input(chore: Chore) -> Dict[str, Any]:
        energy = chore.ai_energy_level
        return {
            "title": chore.title,
            "category": chore.category,
            "ai_difficulty_rating": chore.ai_difficulty_rating,
            "ai_energy_level": getattr(energy, "value", energy),
        }

    @staticmethod
    def build_workloads(
        db: Session, household_id: UUID, now: Optional[datetime] = None
    ) -> List[UserWorkload]:
        """
        Derive a workload per household member from stored chores.

        Preferred categories and energy level come from the chores a member
        has completed; members with no history get "medium" and no preferences.
        """
        now = now or utcnow()
        start_of_day = now.replace(hour=0, minute=0, second=0, microsecond=0)

        members = MemberRepository(db).get_by_household(household_id)
        chores = db.query(Chore).filter(Chore.household_id == household_id).all()
        completions = (
            db.query(ChoreCompletion, Chore)
            .join(Chore, Chore.chore_id == ChoreCompletion.chore_id)
            .filter(Chore.household_id == household_id)
            .all()
        )

        workloads = []
        for member in members:
            user = db.get(AppUser, member.user_id)
            mine = [c for c in chores if c.assigned_to == member.user_id]
            done = [(comp, chore) for comp, chore in completions if comp.user_id == member.user_id]

            difficulties = [
                c.ai_difficulty_rating if c.ai_difficulty_rating is not None else DEFAULT_DIFFICULTY
                for c in mine
            ]
            categories = Counter(chore.category for _, chore in done if chore.category)
            energies = Counter(
                getattr(chore.ai_energy_level, "value", chore.ai_energy_level)
                for _, chore in done
                if chore.ai_energy_level
            )
            stamps = [c.updated_at for c in mine if c.updated_at]

            workloads.append(
                UserWorkload(
                    user_id=member.user_id,
                    name=(user.full_name or user.email) if user else str(member.user_id),
                    total_chores=len(mine),
                    pending_chores=sum(
                        1 for c in mine if c.status in (ChoreStatus.PENDING, ChoreStatus.ASSIGNED)
                    ),
                    completed_today=sum(
                        1 for comp, _ in done if comp.completed_at and comp.completed_at >= start_of_day
                    ),
                    average_difficulty=(
                        sum(difficulties) / len(difficulties) if difficulties else DEFAULT_DIFFICULTY
                    ),
                    preferred_categories=[name for name, _ in categories.most_common(3)],
                    energy_level=energies.most_common(1)[0][0] if energies else "medium",
                    last_assigned=max(stamps) if stamps else None,
                )
            )
        return workloads
