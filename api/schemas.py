"""Request bodies. Field aliases keep the camelCase names the web client sends."""
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class _Body(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class HandleRequest(_Body):
    handle: str | None = None


class UserUpdate(_Body):
    experience: int = 0
    total_problems_solved: int = Field(0, alias="totalProblemsSolved")
    problem_id: str | None = Field(None, alias="problemId")
    problem_name: str | None = Field(None, alias="problemName")
    contest_id: int | None = Field(None, alias="contestId")


class StoreProblemRequest(_Body):
    handle: str | None = None
    problem: dict[str, Any] | None = None


class MarkSolvedRequest(_Body):
    handle: str | None = None
    # Self-reported help: "none", "hint" or "editorial"
    assistance: str = "none"


class QuestCreate(_Body):
    title: str | None = None
    description: str | None = None
    xp_reward: int | None = Field(None, alias="xpReward")


class QuestUpdate(_Body):
    title: str | None = None
    description: str | None = None
    xp_reward: int | None = Field(None, alias="xpReward")
