"""
Progress Service: application layer orchestrator.

Coordinates the scheduler, XP composer, ledger and badge evaluator against
the store ports. Each learner event applies every change to one ledger
value inside a single atomic store update.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date

from wordbox.domain.badges.models import BadgeDefinition
from wordbox.domain.clock import Clock
from wordbox.domain.progress.models import ProgressLedger, SessionAccumulator, heal_ledger
from wordbox.domain.progress.ports import LedgerStore
from wordbox.domain.srs.models import SrsEntry
from wordbox.domain.srs.ports import SrsStore

from . import ledger as ledger_ops
from . import scheduler
from .badges import BadgeCatalog, default_catalog, evaluate_badges
from .session_xp import DEFAULT_REWARDS, SessionXpBreakdown, XpRewards, compose_session_xp

logger = logging.getLogger(__name__)


@dataclass
class SessionOutcome:
    """Everything a finished session produced."""

    ledger: ProgressLedger
    breakdown: SessionXpBreakdown
    new_streak: int
    new_badges: list[BadgeDefinition] = field(default_factory=list)

    @property
    def xp_gained(self) -> int:
        return self.breakdown.total + sum(b.xp_reward for b in self.new_badges)


@dataclass
class EventOutcome:
    ledger: ProgressLedger
    new_badges: list[BadgeDefinition] = field(default_factory=list)


class ProgressService:
    """
    Application service for recording learner activity.

    Depends on the SrsStore and LedgerStore abstractions, not on concrete
    adapters. StorageError from either store propagates unchanged.
    """

    def __init__(
        self,
        srs_store: SrsStore,
        ledger_store: LedgerStore,
        clock: Clock,
        catalog: BadgeCatalog | None = None,
        rewards: XpRewards = DEFAULT_REWARDS,
    ):
        """
        Args:
            srs_store: Port for per-item scheduling state.
            ledger_store: Port for per-learner ledgers.
            clock: Source of the current day; read once per operation.
            catalog: Badge catalog; uses the packaged default if not provided.
            rewards: XP reward constants.
        """
        self._srs = srs_store
        self._ledgers = ledger_store
        self._clock = clock
        self._catalog = catalog if catalog is not None else default_catalog()
        self._rewards = rewards

    @property
    def catalog(self) -> BadgeCatalog:
        return self._catalog

    def today(self) -> date:
        return self._clock.today()

    def review(self, item_ref: str, was_correct: bool) -> SrsEntry:
        return scheduler.record_review(self._srs, item_ref, was_correct, self._clock.today())

    def load_ledger(self, learner_id: str) -> ProgressLedger:
        return self._heal(self._ledgers.get(learner_id))

    def _heal(self, ledger: ProgressLedger) -> ProgressLedger:
        return heal_ledger(ledger, known_badge_ids=self._catalog.ids)

    def complete_session(self, learner_id: str, session: SessionAccumulator) -> SessionOutcome:
        """
        Apply a finished practice session for ``learner_id``.

        Order: session XP and counters, activity-day streak, badge
        evaluation, badge rewards. All of it runs inside one atomic store
        update, so the ledger is written once.
        """
        today = self._clock.today()
        breakdown = compose_session_xp(session, self._rewards)
        new_streak = 0
        badges: list[BadgeDefinition] = []

        def change(current: ProgressLedger) -> ProgressLedger:
            nonlocal new_streak, badges
            updated = ledger_ops.apply_practice_session(
                self._heal(current),
                breakdown.total,
                correct_count=session.correct_count,
                wrong_count=session.wrong_count,
            )
            updated, new_streak = ledger_ops.apply_daily_activity(updated, today)
            updated, badges = self._award_badges(updated)
            return updated

        updated = self._ledgers.update(learner_id, change)
        logger.info(
            f"Session for {learner_id!r}: +{breakdown.total} XP, streak {new_streak}, "
            f"{len(badges)} new badge(s)"
        )
        return SessionOutcome(
            ledger=updated, breakdown=breakdown, new_streak=new_streak, new_badges=badges
        )

    def record_word_learned(self, learner_id: str) -> EventOutcome:
        return self._apply_event(
            learner_id,
            lambda ledger: ledger_ops.apply_word_learned(ledger, self._rewards.add_word),
        )

    def record_article_read(self, learner_id: str, article_id: str | None = None) -> EventOutcome:
        return self._apply_event(
            learner_id,
            lambda ledger: ledger_ops.apply_article_read(
                ledger, self._rewards.read_article, article_id=article_id
            ),
        )

    def record_level_completed(self, learner_id: str, tag: str) -> EventOutcome:
        return self._apply_event(
            learner_id, lambda ledger: ledger_ops.apply_level_completed(ledger, tag)
        )

    def _apply_event(
        self,
        learner_id: str,
        change: Callable[[ProgressLedger], ProgressLedger],
    ) -> EventOutcome:
        badges: list[BadgeDefinition] = []

        def apply(current: ProgressLedger) -> ProgressLedger:
            nonlocal badges
            updated, badges = self._award_badges(change(self._heal(current)))
            return updated

        updated = self._ledgers.update(learner_id, apply)
        return EventOutcome(ledger=updated, new_badges=badges)

    def _award_badges(
        self, ledger: ProgressLedger
    ) -> tuple[ProgressLedger, list[BadgeDefinition]]:
        """
        Evaluate and apply badges until nothing new qualifies.

        Badge XP can itself unlock XP badges, so evaluation repeats on the
        updated ledger. Each pass only adds badges, so this terminates
        within the catalog size.
        """
        awarded: list[BadgeDefinition] = []
        while True:
            new = evaluate_badges(
                ledger_ops.to_metrics(ledger), ledger.earned_badge_ids, self._catalog
            )
            if not new:
                return ledger, awarded
            for badge in new:
                logger.info(f"Badge unlocked: {badge.id} ({badge.name})")
            ledger = ledger_ops.apply_badges(ledger, new)
            awarded.extend(new)
