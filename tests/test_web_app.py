import time

import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient

from sudoku_solver import PuzzleModel
from sudoku_web import web_app
from sudoku_web.web_app import JobRegistry, SolveJob, app, registry

from conftest import empty_board

client = TestClient(app)


def wait_finished(job_id, timeout=10.0):
    deadline = time.time() + timeout
    while time.time() < deadline:
        snap = client.get(f"/api/jobs/{job_id}").json()
        if snap["state"] == "finished":
            return snap
        time.sleep(0.02)
    pytest.fail(f"job {job_id} did not finish")


def test_health():
    res = client.get("/health")
    assert res.status_code == 200
    assert res.json() == {"ok": True}


def test_solve(easy_puzzle, easy_solution):
    res = client.post("/api/solve", json={"board": easy_puzzle})
    assert res.status_code == 200
    body = res.json()
    assert body["status"] == "solved"
    assert body["board"] == easy_solution
    assert body["message"] == f"Done. {body['explored']} states explored."


def test_solve_accepts_strings_and_nulls(easy_puzzle, easy_solution):
    board = [[str(v) if v else None for v in row] for row in easy_puzzle]
    res = client.post("/api/solve", json={"board": board})
    assert res.status_code == 200
    assert res.json()["board"] == easy_solution


def test_solve_conflicting_givens():
    board = empty_board()
    board[0][0] = 5
    board[0][3] = 5
    res = client.post("/api/solve", json={"board": board})
    assert res.status_code == 200
    body = res.json()
    assert body["status"] == "unsatisfiable"
    assert body["message"] == "No solution"
    assert body["explored"] == 0
    assert body["conflicts"] == ["r1"]
    assert body["board"][0][0] == 5 and body["board"][0][1] is None


@pytest.mark.parametrize(
    "board",
    [
        [[None] * 9 for _ in range(8)],
        [[None] * 8 for _ in range(9)],
    ],
)
def test_solve_rejects_bad_shape(board):
    res = client.post("/api/solve", json={"board": board})
    assert res.status_code == 400
    assert "9x9" in res.json()["detail"]


def test_solve_rejects_bad_cell(easy_puzzle):
    easy_puzzle[0][2] = "a"
    res = client.post("/api/solve", json={"board": easy_puzzle})
    assert res.status_code == 400
    assert "Only enter numbers from 1 to 9" in res.json()["detail"]


def test_solve_requires_a_given():
    res = client.post("/api/solve", json={"board": empty_board()})
    assert res.status_code == 400
    assert res.json()["detail"] == "At least 1 number must be given."


def test_step_delay_is_bounded(easy_puzzle):
    res = client.post("/api/jobs", json={"board": easy_puzzle, "step_delay_ms": 1000})
    assert res.status_code == 422
    res = client.post("/api/jobs", json={"board": easy_puzzle, "step_delay_ms": -1})
    assert res.status_code == 422


def test_solve_is_not_paced(monkeypatch, easy_puzzle):
    calls = []
    real_solve = web_app.solve

    def recording_solve(board, **kwargs):
        calls.append((board, kwargs))
        return real_solve(board, **kwargs)

    monkeypatch.setattr(web_app, "solve", recording_solve)
    res = client.post("/api/solve", json={"board": easy_puzzle, "step_delay_ms": 500})

    assert res.status_code == 200
    assert res.json()["status"] == "solved"
    # the validated model is solved as is, without pacing
    assert len(calls) == 1
    assert isinstance(calls[0][0], PuzzleModel)
    assert calls[0][1].get("step_delay", 0) == 0


def test_job_runs_to_completion(easy_puzzle, easy_solution):
    res = client.post("/api/jobs", json={"board": easy_puzzle})
    assert res.status_code == 200
    job_id = res.json()["job_id"]

    snap = wait_finished(job_id)
    assert snap["result"]["status"] == "solved"
    assert snap["result"]["board"] == easy_solution
    assert snap["explored"] == snap["result"]["explored"]


def test_job_can_be_stopped(easy_puzzle):
    job_id = client.post("/api/jobs", json={"board": easy_puzzle, "step_delay_ms": 500}).json()["job_id"]

    res = client.post(f"/api/jobs/{job_id}/stop")
    assert res.status_code == 200

    snap = wait_finished(job_id)
    assert snap["result"]["status"] == "cancelled"
    assert snap["result"]["message"] == "Stopped"


def test_job_replay(easy_puzzle):
    job_id = client.post("/api/jobs", json={"board": easy_puzzle}).json()["job_id"]
    wait_finished(job_id)

    res = client.post(f"/api/jobs/{job_id}/replay")
    assert res.status_code == 200
    new_id = res.json()["job_id"]
    assert new_id != job_id
    assert wait_finished(new_id)["result"]["status"] == "solved"


def test_job_validation(easy_puzzle):
    easy_puzzle[3] = easy_puzzle[3][:5]
    res = client.post("/api/jobs", json={"board": easy_puzzle})
    assert res.status_code == 400


def test_unknown_job():
    assert client.get("/api/jobs/nope").status_code == 404
    assert client.post("/api/jobs/nope/stop").status_code == 404


def wait_job(job, timeout=10.0):
    deadline = time.time() + timeout
    while not job.finished:
        if time.time() > deadline:
            pytest.fail(f"job {job.job_id} did not finish")
        time.sleep(0.02)


def test_registry_rejects_jobs_over_the_limit(easy_puzzle):
    jobs = JobRegistry(max_jobs=2)
    running = [SolveJob(easy_puzzle, 500) for _ in range(2)]
    for job in running:
        jobs.add(job)
        job.start()

    try:
        with pytest.raises(HTTPException) as exc:
            jobs.add(SolveJob(easy_puzzle, 500))
        assert exc.value.status_code == 429
        assert len(jobs._jobs) <= jobs.max_jobs
    finally:
        for job in running:
            job.stop()
            wait_job(job)

    # finished jobs make room, oldest first
    newest = SolveJob(easy_puzzle, 0)
    jobs.add(newest)
    assert len(jobs._jobs) == 2
    assert running[0].job_id not in jobs._jobs
    assert jobs.get(running[1].job_id) is running[1]
    assert jobs.get(newest.job_id) is newest


def test_api_rejects_jobs_while_limit_is_reached(easy_puzzle):
    old_max = registry.max_jobs
    registry.max_jobs = 1
    try:
        first = client.post("/api/jobs", json={"board": easy_puzzle, "step_delay_ms": 500}).json()["job_id"]
        res = client.post("/api/jobs", json={"board": easy_puzzle})
        assert res.status_code == 429
        # the running job is kept
        assert client.get(f"/api/jobs/{first}").status_code == 200

        client.post(f"/api/jobs/{first}/stop")
        wait_finished(first)

        res = client.post("/api/jobs", json={"board": easy_puzzle})
        assert res.status_code == 200
        wait_finished(res.json()["job_id"])
        assert len(registry._jobs) <= 1
    finally:
        registry.max_jobs = old_max
