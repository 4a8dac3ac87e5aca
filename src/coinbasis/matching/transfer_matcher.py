"""TransferMatcher — links self-custody withdrawals and deposits across sources."""

import logging
import uuid
from datetime import timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from coinbasis.db.models.transfer_match import TransferMatch
from coinbasis.db.repos.normalized_transaction_repo import NormalizedTransactionRepo
from coinbasis.db.repos.transaction_repo import TransactionRepo
from coinbasis.db.repos.transfer_match_repo import TransferMatchRepo
from coinbasis.domain.enums import TransactionType, TxKind
from coinbasis.domain.models.transfer import TransferCandidate
from coinbasis.exceptions import TransferConflictError
from coinbasis.locks import UserLocks, user_locks
from coinbasis.matching.transfers import AMOUNT_TOLERANCE, TIME_WINDOW, pair_transfers

logger = logging.getLogger(__name__)

CONFIDENCE_QUANTUM = Decimal("0.0001")


class TransferMatcher:
    """Find and persist transfer matches for a user.

    Runs for the same user are serialized through ``locks``; the guarded
    update in ``mark_as_transfer`` and the unique legs on ``transfer_matches``
    cover runs in other processes.
    """

    def __init__(
        self,
        session: AsyncSession,
        locks: UserLocks | None = None,
        window: timedelta = TIME_WINDOW,
        tolerance: Decimal = AMOUNT_TOLERANCE,
    ) -> None:
        self._session = session
        self._locks = locks or user_locks
        self._window = window
        self._tolerance = tolerance
        self._tx_repo = NormalizedTransactionRepo(session)
        self._match_repo = TransferMatchRepo(session)
        self._ledger_repo = TransactionRepo(session)

    async def find_and_match_transfers(self, user_id: uuid.UUID) -> int:
        """Match the user's unmatched withdrawals and deposits. Returns the number of pairs created."""
        async with self._locks.hold(user_id):
            withdrawals = await self._tx_repo.list_unmatched(user_id, TxKind.WITHDRAWAL)
            deposits = await self._tx_repo.list_unmatched(user_id, TxKind.DEPOSIT)

            match_count = 0
            for candidate in pair_transfers(withdrawals, deposits, self._window, self._tolerance):
                try:
                    await self._create_match(user_id, candidate)
                except TransferConflictError as exc:
                    logger.warning("Skipping transfer pair: %s", exc)
                    continue
                match_count += 1

        logger.info(
            "Transfer matching for user %s: %d withdrawals, %d deposits, %d matched",
            user_id, len(withdrawals), len(deposits), match_count,
        )
        return match_count

    async def get_match(self, match_id: uuid.UUID) -> Optional[TransferMatch]:
        return await self._match_repo.get_by_id(match_id)

    async def unmatch_transfer(self, match_id: uuid.UUID) -> None:
        """Reset both legs and delete the match. Unknown ids are ignored."""
        match = await self._match_repo.get_by_id(match_id)
        if match is None:
            # Legs may still point at a match removed out of band.
            await self._tx_repo.clear_transfer(match_id)
            return

        user_id = match.user_id
        async with self._locks.hold(user_id):
            await self._tx_repo.clear_transfer(match_id)
            await self._ledger_repo.retype_for_normalized([match.withdrawal_tx_id], TransactionType.TRANSFER_OUT.value)
            await self._ledger_repo.retype_for_normalized([match.deposit_tx_id], TransactionType.TRANSFER_IN.value)
            await self._match_repo.delete(match_id)
        logger.info("Transfer match %s removed for user %s", match_id, user_id)

    async def list_matches(self, user_id: uuid.UUID) -> list[TransferMatch]:
        return await self._match_repo.list_for_user(user_id)

    async def _create_match(self, user_id: uuid.UUID, candidate: TransferCandidate) -> TransferMatch:
        withdrawal, deposit = candidate.withdrawal, candidate.deposit
        match = await self._match_repo.create(
            user_id=user_id,
            withdrawal_tx_id=withdrawal.id,
            deposit_tx_id=deposit.id,
            confidence=candidate.confidence.quantize(CONFIDENCE_QUANTUM, rounding=ROUND_HALF_UP),
            method=candidate.method,
        )

        flipped = await self._tx_repo.mark_as_transfer([withdrawal.id, deposit.id], match.id)
        if flipped != 2:
            # Another run claimed a leg first; undo this match.
            await self._tx_repo.clear_transfer(match.id)
            await self._match_repo.delete(match.id)
            raise TransferConflictError(withdrawal.id, deposit.id)

        await self._ledger_repo.retype_for_normalized(
            [withdrawal.id, deposit.id], TransactionType.SELF_TRANSFER.value,
        )

        logger.debug(
            "Matched %s -> %s via %s (%s)",
            withdrawal.id, deposit.id, candidate.method.value, match.match_confidence,
        )
        return match
