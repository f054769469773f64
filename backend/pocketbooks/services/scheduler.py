"""
Scheduled maintenance with APScheduler

- nightly copy of the SQLite database into backups/
- nightly recalculation of asset payment totals
"""

import os
import shutil
from datetime import datetime
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from pocketbooks.core.config import settings
from pocketbooks.core.logging_config import get_logger
from pocketbooks.db.session import SessionLocal
from pocketbooks.services.assets import recalculate_all_asset_payments

logger = get_logger(__name__)

scheduler: Optional[AsyncIOScheduler] = None


def get_db_path() -> str:
    db_url = settings.DATABASE_URI
    for prefix in ("sqlite+aiosqlite:///", "sqlite:///"):
        if db_url.startswith(prefix):
            return db_url[len(prefix):]
    raise ValueError("Only SQLite databases can be backed up")


def get_backup_dir() -> str:
    backup_dir = os.path.join(os.path.dirname(os.path.abspath(get_db_path())), "backups")
    os.makedirs(backup_dir, exist_ok=True)
    return backup_dir


def create_backup(prefix: str = "backup") -> dict:
    """Copy the database file; raises when the database file is missing."""
    db_path = get_db_path()
    if not os.path.exists(db_path):
        raise FileNotFoundError(f"Database file not found: {db_path}")

    backup_dir = get_backup_dir()
    filename = f"{prefix}_{datetime.now().strftime('%Y%m%d_%H%M%S')}.db"
    backup_path = os.path.join(backup_dir, filename)
    shutil.copy2(db_path, backup_path)

    size = os.stat(backup_path).st_size
    logger.info(f"Backup written: {filename} ({size / 1024 / 1024:.2f} MB)")
    return {
        "filename": filename,
        "path": backup_path,
        "size": size,
        "created_at": datetime.now().isoformat(),
    }


def cleanup_old_backups(backup_dir: str, keep_count: int = 7, prefix: str = "auto_backup_") -> int:
    """Keep the newest ``keep_count`` automatic backups; returns how many were removed."""
    backups = []
    for filename in os.listdir(backup_dir):
        if filename.startswith(prefix) and filename.endswith(".db"):
            path = os.path.join(backup_dir, filename)
            backups.append((os.stat(path).st_mtime, filename, path))
    backups.sort(reverse=True)

    removed = 0
    for _, filename, path in backups[keep_count:]:
        os.remove(path)
        removed += 1
        logger.info(f"Removed old backup: {filename}")
    return removed


def auto_backup():
    """Nightly job"""
    try:
        create_backup(prefix="auto_backup")
        cleanup_old_backups(get_backup_dir(), keep_count=settings.AUTO_BACKUP_KEEP_COUNT)
    except Exception as e:
        logger.error(f"Automatic backup failed: {e}")


async def recalculate_assets_job():
    """Nightly job"""
    async with SessionLocal() as session:
        try:
            result = await recalculate_all_asset_payments(session)
            await session.commit()
            logger.info(f"Asset payments recalculated: {result['updated_count']}/{result['total_assets']}")
        except Exception as e:
            await session.rollback()
            logger.error(f"Asset payment recalculation failed: {e}")


def init_scheduler():
    global scheduler

    if not settings.scheduler_enabled:
        logger.info("Scheduler disabled")
        return

    scheduler = AsyncIOScheduler()
    if settings.AUTO_BACKUP_ENABLED:
        scheduler.add_job(
            auto_backup,
            trigger=CronTrigger(hour=settings.AUTO_BACKUP_HOUR, minute=settings.AUTO_BACKUP_MINUTE),
            id="auto_backup",
            name="Nightly database backup",
            replace_existing=True,
        )
    if settings.ASSET_RECALC_ENABLED:
        scheduler.add_job(
            recalculate_assets_job,
            trigger=CronTrigger(hour=settings.ASSET_RECALC_HOUR, minute=0),
            id="asset_payment_recalc",
            name="Nightly asset payment recalculation",
            replace_existing=True,
        )

    scheduler.start()
    logger.info(
        f"Scheduler started - backup at {settings.AUTO_BACKUP_HOUR:02d}:{settings.AUTO_BACKUP_MINUTE:02d}, "
        f"asset recalculation at {settings.ASSET_RECALC_HOUR:02d}:00"
    )


def shutdown_scheduler():
    global scheduler
    if scheduler:
        scheduler.shutdown()
        scheduler = None
        logger.info("Scheduler stopped")


def get_scheduler_status() -> dict:
    if not scheduler:
        return {"enabled": settings.scheduler_enabled, "running": False, "jobs": []}

    jobs = []
    for job in scheduler.get_jobs():
        jobs.append({
            "id": job.id,
            "name": job.name,
            "next_run_time": job.next_run_time.isoformat() if job.next_run_time else None,
        })
    return {"enabled": settings.scheduler_enabled, "running": scheduler.running, "jobs": jobs}


def trigger_backup_now() -> dict:
    return create_backup(prefix="backup")
