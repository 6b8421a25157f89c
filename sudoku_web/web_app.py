import logging
import os
import threading
import time
import uuid
from collections import OrderedDict
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException # type: ignore
from fastapi.middleware.cors import CORSMiddleware # type: ignore
from pydantic import BaseModel, Field

from sudoku_solver import CancelToken, PuzzleModel, build_puzzle_model, solve
from sudoku_solver.config import CELL_COUNT, MAX_STEP_DELAY_MS
from sudoku_solver.grid.parser import grid_to_board


# ============================================================
# Configuration & Logging
# ============================================================
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("sudoku_web")

# メモリ上に保持するジョブの最大数（超えたら終了済みの古いものから捨てる）
# 実行中のジョブがこの数に達している間は、新しいジョブを 429 で断る
MAX_JOBS = int(os.getenv("SUDOKU_MAX_JOBS", "100"))


# ============================================================
# FastAPI App
# ============================================================
app = FastAPI()

# NOTE:
# allow_origins=["*"] と allow_credentials=True はブラウザ仕様上NGになりやすいので、
# credentials は False にします
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

logger.info("web_app.py loaded. MAX_JOBS=%d", MAX_JOBS)


# ============================================================
# Validation
# ============================================================
def validate_board(board: List[List[Any]]):
    """
    盤面を検証して PuzzleModel を返す。問題があれば HTTP 400。
    """
    try:
        model = build_puzzle_model(board)
    except ValueError as e:
        # InvalidShapeError / InvalidCellError
        raise HTTPException(status_code=400, detail=str(e))

    if len(model.variables) == CELL_COUNT:
        raise HTTPException(status_code=400, detail="At least 1 number must be given.")

    return model


# ============================================================
# Background Jobs (in-memory)
# ============================================================
class SolveJob:
    """
    バックグラウンドのスレッドで1つの盤面を解くジョブ。

    進捗（探索状態数と途中盤面）は progress_sink 経由で随時更新され、
    GET /api/jobs/{job_id} で取り出せる。
    """

    def __init__(self, board: List[List[Any]], step_delay_ms: int, model: Optional[PuzzleModel] = None):
        self.job_id = uuid.uuid4().hex
        self.board = board
        self.model = model
        self.step_delay_ms = step_delay_ms
        self.cancel_token = CancelToken()
        self.created_at = time.time()

        self._lock = threading.Lock()
        self.state = "running"
        self.explored = 0
        self.partial = None
        self.result: Optional[Dict[str, Any]] = None

        self._thread = threading.Thread(target=self._run, name=f"solve-{self.job_id}", daemon=True)

    def start(self) -> None:
        self._thread.start()

    def stop(self) -> None:
        self.cancel_token.cancel()

    def _on_progress(self, explored: int, grid) -> None:
        with self._lock:
            self.explored = explored
            self.partial = grid

    def _run(self) -> None:
        try:
            result = solve(
                self.model if self.model is not None else self.board,
                progress_sink=self._on_progress,
                cancel_token=self.cancel_token,
                step_delay=self.step_delay_ms / 1000.0,
            )
        except Exception as e:
            logger.error("Job %s failed", self.job_id, exc_info=True)
            result = {"status": "error", "message": str(e)}

        with self._lock:
            self.result = result
            self.explored = result.get("explored", self.explored)
            self.state = "finished"

    @property
    def finished(self) -> bool:
        with self._lock:
            return self.state == "finished"

    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "job_id": self.job_id,
                "state": self.state,
                "explored": self.explored,
                "board": grid_to_board(self.partial),
                "result": self.result,
            }


class JobRegistry:
    def __init__(self, max_jobs: int = 100):
        self.max_jobs = max_jobs
        self._jobs: "OrderedDict[str, SolveJob]" = OrderedDict()
        self._lock = threading.Lock()

    def add(self, job: SolveJob) -> None:
        with self._lock:
            running = sum(1 for j in self._jobs.values() if not j.finished)
            if running >= self.max_jobs:
                logger.warning("Job rejected: %d jobs running (max %d)", running, self.max_jobs)
                raise HTTPException(status_code=429, detail="Too many running jobs. Try again later.")
            self._jobs[job.job_id] = job
            self._evict()

    def get(self, job_id: str) -> SolveJob:
        with self._lock:
            job = self._jobs.get(job_id)
        if job is None:
            raise HTTPException(status_code=404, detail=f"Unknown job: {job_id}")
        return job

    def _evict(self) -> None:
        # 終了済みのジョブを古い順に捨てる（実行中のジョブは捨てない）
        finished = sorted((j for j in self._jobs.values() if j.finished), key=lambda j: j.created_at)
        for job in finished:
            if len(self._jobs) <= self.max_jobs:
                break
            del self._jobs[job.job_id]


registry = JobRegistry(max_jobs=MAX_JOBS)


def start_job(board: List[List[Any]], step_delay_ms: int, model: Optional[PuzzleModel] = None) -> SolveJob:
    job = SolveJob(board, step_delay_ms, model)
    registry.add(job)
    job.start()
    logger.info("Job %s started (step_delay_ms=%d)", job.job_id, step_delay_ms)
    return job


# ============================================================
# Pydantic Models
# ============================================================
class SolveRequest(BaseModel):
    board: List[List[Any]]


class JobRequest(BaseModel):
    board: List[List[Any]]
    step_delay_ms: int = Field(default=0, ge=0, le=MAX_STEP_DELAY_MS)


class JobResponse(BaseModel):
    job_id: str


class HealthResponse(BaseModel):
    ok: bool


# ============================================================
# Health
# ============================================================
@app.get("/health", response_model=HealthResponse)
async def health():
    return {"ok": True}


# ============================================================
# API Endpoints
# ============================================================
@app.post("/api/solve")
def api_solve(request: SolveRequest):
    model = validate_board(request.board)
    try:
        return solve(model)
    except Exception as e:
        logger.error("Solve Error", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/api/jobs", response_model=JobResponse)
def api_start_job(request: JobRequest):
    model = validate_board(request.board)
    job = start_job(request.board, request.step_delay_ms, model)
    return {"job_id": job.job_id}


@app.get("/api/jobs/{job_id}")
def api_get_job(job_id: str):
    return registry.get(job_id).snapshot()


@app.post("/api/jobs/{job_id}/stop")
def api_stop_job(job_id: str):
    job = registry.get(job_id)
    job.stop()
    logger.info("Job %s stop requested", job_id)
    return job.snapshot()


@app.post("/api/jobs/{job_id}/replay", response_model=JobResponse)
def api_replay_job(job_id: str):
    old = registry.get(job_id)
    job = start_job(old.board, old.step_delay_ms, old.model)
    return {"job_id": job.job_id}
