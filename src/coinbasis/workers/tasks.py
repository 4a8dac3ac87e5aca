"""Celery tasks for background processing."""

import asyncio
import logging

from coinbasis.workers.celery_app import celery_app

logger = logging.getLogger(__name__)


@celery_app.task(bind=True, name="match_transfers", max_retries=2, default_retry_delay=30)
def match_transfers_task(self, user_id: str) -> dict:
    """Run the transfer matcher for one user, then refresh the user's ledger rows.

    Runs in a fresh event loop with its own engine. The per-user lock is local
    to that loop, so queue at most one task per user at a time.
    """
    return asyncio.run(_match_transfers_async(user_id))


async def _match_transfers_async(user_id: str) -> dict:
    import uuid

    from coinbasis.config import settings
    from coinbasis.db.repos.user_repo import UserRepo
    from coinbasis.db.session import build_engine, build_session_factory
    from coinbasis.ledger.transformer import TransactionTransformer
    from coinbasis.matching.transfer_matcher import TransferMatcher

    engine = build_engine(settings.database_url, echo=settings.db_echo)
    session_factory = build_session_factory(engine)

    try:
        async with session_factory() as session:
            try:
                user = await UserRepo(session).get_by_id(uuid.UUID(user_id))
                if user is None:
                    logger.error("User %s not found", user_id)
                    return {"status": "error", "message": "User not found"}

                matcher = TransferMatcher(
                    session,
                    window=settings.transfer_time_window,
                    tolerance=settings.transfer_amount_tolerance,
                )
                matched = await matcher.find_and_match_transfers(user.id)
                transformed = await TransactionTransformer(session).transform(user.id)

                await session.commit()
                logger.info("User %s: %d transfers matched, %d ledger rows added", user_id, matched, transformed)
                return {"status": "ok", "matched": matched, "transformed": transformed}
            except Exception as e:
                await session.rollback()
                logger.exception("Failed to match transfers for user %s", user_id)
                return {"status": "error", "message": str(e)}
    finally:
        await engine.dispose()
