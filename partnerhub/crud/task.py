import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from partnerhub.core.exceptions import ResourceNotFoundError
from partnerhub.health_scoring.services import ProjectHealthScoringService
from partnerhub.models import Task, TaskPriority, TaskStatus
from partnerhub.schemas.task import TaskCreate, TaskUpdate
from partnerhub.utils.timezone import now_local_naive


logger = logging.getLogger(__name__)


class CRUDTask:
    """Task mutations. Every change to a project's tasks refreshes that project's health score."""

    def get(self, db: Session, id: str, with_deleted: bool = False) -> Optional[Task]:
        query = db.query(Task).filter(Task.id == id)
        if not with_deleted:
            query = query.filter(Task.deleted_at.is_(None))
        return query.first()

    def create(self, db: Session, *, obj_in: TaskCreate, created_by_id: Optional[str] = None) -> Task:
        data = obj_in.model_dump(exclude_none=True)
        if data.get("status") == TaskStatus.COMPLETED.value:
            data.setdefault("completed_at", now_local_naive())
            data["progress"] = 100
        db_obj = Task(**data, created_by_id=created_by_id)
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        logger.info(f"[Tasks] Task created: {db_obj.title} ({db_obj.id})")

        self._on_changed(db, db_obj.project_id)
        return db_obj

    def bulk_create(
        self,
        db: Session,
        *,
        project_id: str,
        titles: List[str],
        created_by_id: Optional[str] = None,
    ) -> List[Task]:
        """Create one todo task per title and recompute the project once."""
        db_objs = [
            Task(
                title=title,
                project_id=project_id,
                status=TaskStatus.TODO.value,
                priority=TaskPriority.MEDIUM.value,
                created_by_id=created_by_id,
            )
            for title in titles
        ]
        db.add_all(db_objs)
        db.commit()
        for db_obj in db_objs:
            db.refresh(db_obj)
        logger.info(f"[Tasks] Bulk created {len(db_objs)} tasks for project {project_id}")

        self._on_changed(db, project_id)
        return db_objs

    def update(self, db: Session, *, id: str, obj_in: TaskUpdate) -> Task:
        db_obj = self._get_or_raise(db, id)
        original_project_id = db_obj.project_id

        for field, value in obj_in.model_dump(exclude_unset=True).items():
            setattr(db_obj, field, value)
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        logger.info(f"[Tasks] Task updated: {db_obj.title} ({db_obj.id})")

        self._on_changed(db, db_obj.project_id)
        # A task moved between projects changes both scores
        if original_project_id and original_project_id != db_obj.project_id:
            self._on_changed(db, original_project_id)
        return db_obj

    def update_progress(self, db: Session, *, id: str, progress: int) -> Task:
        db_obj = self._get_or_raise(db, id)
        db_obj.progress = progress
        if progress == 100:
            db_obj.status = TaskStatus.COMPLETED.value
            db_obj.completed_at = now_local_naive()
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        logger.info(f"[Tasks] Task progress updated: {db_obj.title} -> {progress}%")

        self._on_changed(db, db_obj.project_id)
        return db_obj

    def update_status(self, db: Session, *, id: str, status: TaskStatus) -> Task:
        db_obj = self._get_or_raise(db, id)
        db_obj.status = TaskStatus(status).value
        if db_obj.status == TaskStatus.COMPLETED.value:
            db_obj.completed_at = now_local_naive()
            db_obj.progress = 100
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        logger.info(f"[Tasks] Task status updated: {db_obj.title} -> {db_obj.status}")

        self._on_changed(db, db_obj.project_id)
        return db_obj

    def remove(self, db: Session, *, id: str) -> None:
        """Soft delete."""
        db_obj = self._get_or_raise(db, id)
        project_id = db_obj.project_id
        db_obj.deleted_at = datetime.utcnow()
        db.add(db_obj)
        db.commit()
        logger.info(f"[Tasks] Task soft deleted: {db_obj.title} ({id})")

        self._on_changed(db, project_id)

    def restore(self, db: Session, *, id: str) -> Task:
        db_obj = self.get(db, id, with_deleted=True)
        if not db_obj or db_obj.deleted_at is None:
            raise ResourceNotFoundError.for_task(id)
        db_obj.deleted_at = None
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        logger.info(f"[Tasks] Task restored: {db_obj.title} ({id})")

        self._on_changed(db, db_obj.project_id)
        return db_obj

    def force_remove(self, db: Session, *, id: str) -> None:
        """Permanently delete a task, including soft-deleted ones."""
        db_obj = self.get(db, id, with_deleted=True)
        if not db_obj:
            raise ResourceNotFoundError.for_task(id)
        project_id = db_obj.project_id
        db.delete(db_obj)
        db.commit()
        logger.info(f"[Tasks] Task permanently deleted: {id}")

        self._on_changed(db, project_id)

    def _get_or_raise(self, db: Session, id: str) -> Task:
        db_obj = self.get(db, id)
        if not db_obj:
            raise ResourceNotFoundError.for_task(id)
        return db_obj

    @staticmethod
    def _on_changed(db: Session, project_id: Optional[str]) -> None:
        ProjectHealthScoringService(db).on_task_changed(project_id)


task = CRUDTask()
