"""FastAPI app: Codeforces proxy and the XP / quest / theme API."""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from pymongo.errors import PyMongoError

from api.schemas import (
    HandleRequest,
    MarkSolvedRequest,
    QuestCreate,
    QuestUpdate,
    StoreProblemRequest,
    UserUpdate,
)
from config import settings
from config.gamification import THEMES
from db import dal
from db.client import ensure_indexes
from gamification import leaderboard, quests, selector, themes
from gamification.awards import apply_xp, complete_assigned_problem
from gamification.ranks import rank_progress
from integrations import codeforces
from utils.errors import AppError, BadRequestError, NotFoundError, StorageError, UpstreamError
from utils.logging import get_logger, setup_logging

setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        ensure_indexes()
    except PyMongoError as e:
        logger.warning("Index ensure failed (MongoDB may be down): %s", e)
    yield


app = FastAPI(title="CF Quest", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Errors render as {"error": message} ---
@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    first = exc.errors()[0] if exc.errors() else {}
    field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    message = f"Invalid '{field}': {first.get('msg', 'invalid value')}" if field else "Invalid request"
    return JSONResponse(status_code=400, content={"error": message})


@app.exception_handler(PyMongoError)
async def database_error_handler(request: Request, exc: PyMongoError):
    logger.exception("Database error on %s %s: %s", request.method, request.url.path, exc)
    err = StorageError()
    return JSONResponse(status_code=err.status_code, content={"error": err.message})


def _require(value, name: str):
    if value is None or (isinstance(value, str) and not value.strip()):
        raise BadRequestError(f"Missing '{name}' parameter")
    return value.strip() if isinstance(value, str) else value


def _check_problem(problem: dict) -> None:
    contest_id = problem.get("contestId", problem.get("contest_id"))
    index = problem.get("index")
    try:
        valid_id = not isinstance(contest_id, bool) and int(contest_id) > 0
    except (TypeError, ValueError):
        valid_id = False
    if not valid_id or not isinstance(index, str) or not index.strip():
        raise BadRequestError("Problem must include contestId and index")


def _user_view(user: dict) -> dict:
    return {
        **user,
        "daily_xp": leaderboard.current_daily_xp(user),
        "rank": rank_progress(user.get("experience", 0), user.get("max_experience", 0)),
    }


def _get_user_or_404(handle: str) -> dict:
    user = dal.get_user(handle)
    if not user:
        raise NotFoundError("User not found")
    return user


# --- Health ---
@app.get("/api/health")
def api_health():
    return {"status": "ok"}


@app.get("/favicon.ico", include_in_schema=False)
def favicon():
    return Response(status_code=204)


# --- Codeforces proxy (verbatim JSON) ---
@app.get("/proxy/codeforces/getcontests")
def proxy_contests():
    try:
        return codeforces.raw_contest_list()
    except UpstreamError:
        raise UpstreamError("Failed to fetch contests")


@app.get("/proxy/codeforces/getSubmissions")
def proxy_submissions(handle: str | None = None):
    handle = _require(handle, "handle")
    try:
        return codeforces.raw_user_status(handle)
    except UpstreamError:
        raise UpstreamError("Failed to fetch submissions")


@app.get("/proxy/codeforces/getStandings")
def proxy_standings(contestId: str | None = None):
    contest_id = _require(contestId, "contestId")
    try:
        return codeforces.raw_contest_standings(contest_id)
    except UpstreamError:
        raise UpstreamError("Failed to fetch contest standings")


# --- Users ---
@app.post("/api/users")
def api_create_user(payload: HandleRequest):
    handle = _require(payload.handle, "handle")
    if dal.get_user(handle):
        raise BadRequestError("User already exists")
    user = dal.create_user(handle)
    if user is None:
        raise BadRequestError("User already exists")
    logger.info("Registered user %s", handle)
    return {"message": "User registered successfully", "user": _user_view(user)}


@app.get("/api/users/{handle}")
def api_get_user(handle: str):
    return _user_view(_get_user_or_404(handle))


@app.put("/api/users/{handle}/update")
def api_update_user(handle: str, payload: UserUpdate):
    user = apply_xp(
        handle,
        experience=payload.experience,
        problems_solved=payload.total_problems_solved,
        problem_id=payload.problem_id,
        problem_name=payload.problem_name,
        contest_id=payload.contest_id,
    )
    return {"message": "User updated successfully", "user": _user_view(user)}


@app.delete("/api/users/{handle}")
def api_delete_user(handle: str):
    if not dal.delete_user(handle):
        raise NotFoundError("User not found")
    logger.info("Deleted user %s", handle)
    return {"message": "User deleted successfully"}


@app.get("/api/users/{handle}/dailyXP")
def api_daily_xp(handle: str):
    user = _get_user_or_404(handle)
    return {"handle": handle, "dailyXP": leaderboard.current_daily_xp(user)}


@app.get("/api/users/{handle}/daily-activity")
def api_daily_activity(handle: str):
    _get_user_or_404(handle)
    return leaderboard.daily_activity(handle)


# --- Assigned problem ---
@app.post("/api/storeProblem")
def api_store_problem(payload: StoreProblemRequest):
    handle = _require(payload.handle, "handle")
    problem = _require(payload.problem, "problem")
    _check_problem(problem)
    dal.get_or_create_user(handle)
    doc, created = dal.store_problem(handle, problem)
    if created:
        logger.info("Stored problem %s%s for %s", doc["contest_id"], doc["index"], handle)
        return {"message": "Problem stored successfully", "problem": doc}
    return {"message": "Problem already assigned", "problem": doc}


@app.get("/api/getStoredProblem")
def api_get_stored_problem(handle: str | None = None):
    handle = _require(handle, "handle")
    problem = dal.get_assigned_problem(handle)
    if not problem:
        raise NotFoundError("No problem assigned")
    return {"problem": problem}


@app.delete("/api/deleteProblem")
def api_delete_problem(handle: str | None = None):
    handle = _require(handle, "handle")
    if not dal.delete_assigned_problem(handle):
        raise NotFoundError("No problem assigned")
    return {"message": "Problem deleted successfully"}


@app.post("/api/assignProblem")
def api_assign_problem(payload: HandleRequest):
    handle = _require(payload.handle, "handle")
    problem = selector.assign_next_problem(handle)
    if problem is None:
        raise NotFoundError("No unsolved problem found")
    return {"problem": problem}


@app.post("/api/markSolved")
def api_mark_solved(payload: MarkSolvedRequest):
    handle = _require(payload.handle, "handle")
    result = complete_assigned_problem(handle, payload.assistance)
    next_problem = None
    try:
        next_problem = selector.assign_next_problem(handle)
    except UpstreamError as e:
        logger.warning("Next problem for %s not assigned: %s", handle, e)
    return {
        "message": "Problem verified as solved",
        "base_xp": result["base_xp"],
        "xp_awarded": result["xp_awarded"],
        "problem": result["problem"],
        "user": _user_view(result["user"]),
        "next_problem": next_problem,
    }


# --- Leaderboard ---
@app.get("/api/leaderboard")
def api_leaderboard(handle: str | None = None, limit: int = 20, skip: int = 0):
    return leaderboard.leaderboard_page(handle, limit=limit, skip=skip)


@app.get("/api/leaderboard/daily")
def api_leaderboard_daily(handle: str | None = None):
    handle = _require(handle, "handle")
    return {"handle": handle, "days": leaderboard.daily_summary(handle)}


# --- Side quests ---
@app.get("/api/users/{handle}/quests")
def api_list_quests(handle: str):
    return quests.list_quests(handle)


@app.post("/api/users/{handle}/quests")
def api_create_quest(handle: str, payload: QuestCreate):
    return quests.create_quest(handle, payload.title, payload.description, payload.xp_reward)


@app.put("/api/users/{handle}/quests/{quest_id}")
def api_update_quest(handle: str, quest_id: str, payload: QuestUpdate):
    return quests.update_quest(handle, quest_id, payload.title, payload.description, payload.xp_reward)


@app.put("/api/users/{handle}/quests/{quest_id}/complete")
def api_complete_quest(handle: str, quest_id: str):
    result = quests.complete_quest(handle, quest_id)
    return {
        "message": f"Quest completed! +{result['quest']['xp_reward']} XP",
        "quest": result["quest"],
        "user": _user_view(result["user"]),
    }


@app.delete("/api/users/{handle}/quests/{quest_id}")
def api_delete_quest(handle: str, quest_id: str):
    quests.delete_quest(handle, quest_id)
    return {"message": "Quest deleted successfully"}


# --- Themes ---
@app.get("/api/themes")
def api_themes():
    return [{**t, "switch_cost": themes.switch_cost(t)} for t in THEMES]


@app.get("/api/users/{handle}/themes")
def api_user_themes(handle: str):
    return themes.theme_state(handle)


@app.post("/api/users/{handle}/themes/{theme_id}/purchase")
def api_purchase_theme(handle: str, theme_id: str):
    return themes.purchase_theme(handle, theme_id)


@app.post("/api/users/{handle}/themes/{theme_id}/switch")
def api_switch_theme(handle: str, theme_id: str):
    return themes.switch_theme(handle, theme_id)
