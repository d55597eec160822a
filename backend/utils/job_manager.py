import logging
import threading
import time
import uuid
from typing import Dict, List, Optional, Any

from utils.logger import build_formatter


class InMemoryJob:
    def __init__(self, kind: str, params: Dict[str, Any]):
        self.id: str = str(uuid.uuid4())
        self.kind: str = kind
        self.params: Dict[str, Any] = params
        self.status: str = "queued"  # queued | running | succeeded | failed
        self.logs: List[str] = []
        self.result: Optional[Dict[str, Any]] = None
        self.error: Optional[str] = None
        self.files_done: int = 0
        self.total_files: int = 0
        self.current_file: Optional[str] = None
        self.created_at: float = time.time()
        self.started_at: Optional[float] = None
        self.completed_at: Optional[float] = None
        self._lock = threading.Lock()

    def append_log(self, message: str) -> None:
        with self._lock:
            self.logs.append(message)

    def update_progress(self, done: int, total: int, current_file: Optional[str] = None) -> None:
        with self._lock:
            self.files_done = done
            self.total_files = total
            self.current_file = current_file

    @property
    def progress(self) -> int:
        if not self.total_files:
            return 100 if self.status == "succeeded" else 0
        return int(self.files_done * 100 / self.total_files)


class JobManager:
    def __init__(self):
        self._jobs: Dict[str, InMemoryJob] = {}
        self._lock = threading.Lock()

    def create(self, kind: str, params: Dict[str, Any]) -> InMemoryJob:
        job = InMemoryJob(kind, params)
        with self._lock:
            self._jobs[job.id] = job
        return job

    def get(self, job_id: str) -> Optional[InMemoryJob]:
        with self._lock:
            return self._jobs.get(job_id)

    def list(self) -> List[Dict[str, Any]]:
        with self._lock:
            return [self.serialize(j) for j in self._jobs.values()]

    def serialize(self, job: InMemoryJob) -> Dict[str, Any]:
        return {
            "id": job.id,
            "kind": job.kind,
            "status": job.status,
            "progress": job.progress,
            "files_done": job.files_done,
            "total_files": job.total_files,
            "current_file": job.current_file,
            "result": job.result,
            "error": job.error,
            "created_at": job.created_at,
            "started_at": job.started_at,
            "completed_at": job.completed_at,
        }

    def attach_logger_handler(self, job: InMemoryJob) -> logging.Handler:
        """Handler that copies every formatted record into job.logs."""

        class JobLogHandler(logging.Handler):
            def emit(self, record):
                try:
                    msg = self.format(record)
                except Exception:
                    msg = record.getMessage()
                job.append_log(msg)

        handler = JobLogHandler()
        handler.setFormatter(build_formatter())
        return handler
