"""
FastAPI service exposing placeholder resolution, template validation and
whole-site resolution as background jobs with progress logs.
Run: uvicorn server:app --host 0.0.0.0 --port 8000 --reload
"""
import logging
import os
import threading
import time
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel, Field

from config import GENERATED_IMAGES_DIR, GENERATED_IMAGES_URL_PREFIX, LOG_LEVEL, LOG_FILE
from core.resolver import BusinessContext, create_resolver
from utils.job_manager import JobManager
from utils.logger import get_logger
from utils.placeholder_scanner import validate_template

logger = get_logger("server", LOG_LEVEL, LOG_FILE)
app = FastAPI(title="Site Template Resolver API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

os.makedirs(GENERATED_IMAGES_DIR, exist_ok=True)
app.mount(GENERATED_IMAGES_URL_PREFIX, StaticFiles(directory=GENERATED_IMAGES_DIR), name="generated-images")

job_manager = JobManager()
resolver = create_resolver(use_ai=True)

# Loggers whose records are copied into a job's log while it runs
JOB_LOGGERS = ["server", "core.resolver", "core.text_resolver", "core.image_resolver", "core.generator"]


class ResolveRequest(BaseModel):
    template: Optional[str] = None
    final_json: Dict[str, Any] = Field(default_factory=dict)
    # camelCase (chat flow) or snake_case keys, see BusinessContext.from_dict
    ctx: Dict[str, Any] = Field(default_factory=dict)
    project_name: Optional[str] = None
    user_intent: Optional[str] = None


class ValidateRequest(BaseModel):
    template: str


class SiteJobRequest(BaseModel):
    files: Dict[str, str]
    final_json: Dict[str, Any] = Field(default_factory=dict)
    ctx: Dict[str, Any] = Field(default_factory=dict)
    project_name: Optional[str] = None
    user_intent: Optional[str] = None


def usage_delta(before: Optional[Dict[str, int]], after: Optional[Dict[str, int]]) -> Optional[Dict[str, int]]:
    if before is None or after is None:
        return None
    return {key: after[key] - before.get(key, 0) for key in after}


@app.post("/resolve")
def resolve_template(req: ResolveRequest):
    if req.template is None:
        raise HTTPException(status_code=400, detail="Template is required")
    ctx = BusinessContext.from_dict(req.ctx)
    result = resolver.resolve(
        req.template,
        req.final_json,
        ctx,
        project_name=req.project_name,
        user_intent=req.user_intent,
    )
    if result.fallback_used:
        logger.warning(f"Fallback content used for {ctx.industry or 'unknown'} template (confidence {result.confidence})")
    return result.to_dict()


@app.post("/validate")
def validate(req: ValidateRequest):
    return validate_template(req.template)


@app.post("/jobs/site")
def start_site_job(req: SiteJobRequest):
    if not req.files:
        raise HTTPException(status_code=400, detail="At least one file template is required")
    params: Dict[str, Any] = req.model_dump()
    job = job_manager.create("resolve_site", params)
    job.total_files = len(req.files)
    ctx = BusinessContext.from_dict(req.ctx)

    def run_job():
        job.status = "running"
        job.started_at = time.time()

        handler = job_manager.attach_logger_handler(job)
        targets = [logging.getLogger(name) for name in JOB_LOGGERS]
        for target_logger in targets:
            target_logger.addHandler(handler)

        try:
            usage_before = resolver.token_usage()
            results = resolver.resolve_many(
                req.files,
                req.final_json,
                ctx,
                project_name=req.project_name,
                user_intent=req.user_intent,
                on_progress=lambda done, total, path: job.update_progress(done, total, path),
            )
            # Concurrent jobs share one generator, so overlapping runs are counted in both
            token_usage = usage_delta(usage_before, resolver.token_usage())
            if token_usage:
                logger.info(f"📊 Token usage for job {job.id}: {token_usage}")
            job.result = {
                "files": {
                    path: {**result.to_dict(), "fallback_placeholders": sorted(result.fallback)}
                    for path, result in results.items()
                },
                "fallback_files": sorted(path for path, result in results.items() if result.fallback_used),
                "token_usage": token_usage,
            }
            job.status = "succeeded"
        except Exception as e:
            logger.error(f"Site resolution job {job.id} failed: {e}")
            job.status = "failed"
            job.error = str(e)
        finally:
            job.completed_at = time.time()
            for target_logger in targets:
                target_logger.removeHandler(handler)

    threading.Thread(target=run_job, daemon=True).start()
    return {"job_id": job.id, "total_files": job.total_files}


@app.get("/jobs/{job_id}")
def get_job(job_id: str):
    job = job_manager.get(job_id)
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")
    return job_manager.serialize(job)


@app.get("/jobs/{job_id}/logs")
def get_job_logs(job_id: str):
    job = job_manager.get(job_id)
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")
    return {"logs": list(job.logs)}
