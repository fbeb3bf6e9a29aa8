"""Delete email OTP records whose expiry has passed.

Expired records are already rejected (and removed) on redemption; this
sweeps the ones nobody came back for. Safe to run from cron.
"""

import asyncio
import sys
from datetime import datetime, timezone
from pathlib import Path

# Ensure the project root is on sys.path so `eggpro` package imports work
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from eggpro.domain.repositories.otp_repository import OtpRepository
from eggpro.infrastructure.database.session import dispose_engine, get_session_factory
from eggpro.infrastructure.monitoring.logging_setup import get_logger

logger = get_logger("purge_expired_otps")


async def purge_expired_otps() -> int:
    async with get_session_factory()() as session:
        repo = OtpRepository(session)
        removed = await repo.delete_expired(datetime.now(timezone.utc))
        await repo.commit()
    await dispose_engine()
    return removed


def main():
    removed = asyncio.run(purge_expired_otps())
    logger.info("Expired OTPs purged", extra={"removed": removed})
    print(f"Removed {removed} expired OTP record(s).")


if __name__ == "__main__":
    main()
