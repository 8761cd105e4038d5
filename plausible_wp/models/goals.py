"""Pydantic models mirroring the Plausible Sites API goal/funnel payloads."""

from __future__ import annotations

from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field


class CustomEventGoal(BaseModel):
    goal_type: Literal["Goal.CustomEvent"] = "Goal.CustomEvent"
    event_name: str

    def to_payload(self) -> dict:
        return {"goal_type": self.goal_type, "goal": {"event_name": self.event_name}}


class PageviewGoal(BaseModel):
    goal_type: Literal["Goal.Pageview"] = "Goal.Pageview"
    path: str

    def to_payload(self) -> dict:
        return {"goal_type": self.goal_type, "goal": {"path": self.path}}


class RevenueGoal(BaseModel):
    goal_type: Literal["Goal.Revenue"] = "Goal.Revenue"
    event_name: str
    currency: str = Field(min_length=3, max_length=3)

    def to_payload(self) -> dict:
        return {
            "goal_type": self.goal_type,
            "goal": {"event_name": self.event_name, "currency": self.currency},
        }


GoalRequest = Annotated[
    Union[CustomEventGoal, PageviewGoal, RevenueGoal],
    Field(discriminator="goal_type"),
]


class FunnelRequest(BaseModel):
    name: str
    steps: List[GoalRequest]

    def to_payload(self) -> dict:
        return {
            "funnel": {
                "name": self.name,
                "steps": [step.to_payload() for step in self.steps],
            }
        }


class Goal(BaseModel):
    """A goal as returned by the remote API."""

    id: int
    display_name: str
    goal_type: str = "Goal.CustomEvent"
    path: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: dict) -> "Goal":
        goal = payload.get("goal") or {}
        return cls(
            id=goal["id"],
            display_name=goal["display_name"],
            goal_type=payload.get("goal_type") or "Goal.CustomEvent",
            path=goal.get("path"),
        )


class FunnelStep(BaseModel):
    step_order: Optional[int] = None
    goal: Optional[Goal] = None


class Funnel(BaseModel):
    id: Optional[int] = None
    name: str
    steps: List[FunnelStep] = Field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: dict) -> "Funnel":
        funnel = payload.get("funnel") or {}
        steps = []
        for step in funnel.get("steps") or []:
            goal = step.get("goal")
            steps.append(
                FunnelStep(
                    step_order=step.get("step_order"),
                    goal=Goal.from_payload(goal) if goal else None,
                )
            )
        return cls(id=funnel.get("id"), name=funnel.get("name") or "", steps=steps)


class SharedLink(BaseModel):
    id: str
    name: str
    href: str
    password_protected: bool = False

    @classmethod
    def from_payload(cls, payload: dict) -> "SharedLink":
        return cls.model_validate(payload.get("shared_link") or payload)
