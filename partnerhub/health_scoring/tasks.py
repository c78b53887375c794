from typing import Any, Dict

from celery import shared_task
from sqlalchemy.orm import Session

from partnerhub.db.session import SessionLocal
from .services import ProjectHealthScoringService


@shared_task(name="health_scoring.daily_recompute")
def daily_recompute_task() -> Dict[str, Any]:
    """Recompute and persist health scores for every eligible project."""
    db: Session = SessionLocal()
    try:
        result = ProjectHealthScoringService(db).scheduled_health_score_update()
        return result.model_dump()
    finally:
        db.close()
