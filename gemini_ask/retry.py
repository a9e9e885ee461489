"""失败后使用默认模型的单次回退重试。"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

from .models import ApiResult

logger = logging.getLogger(__name__)

AFFIRMATIVE_ANSWERS = frozenset({"y", "yes"})

SendFn = Callable[[str], ApiResult]
ConfirmFn = Callable[[str, ApiResult], bool]
FailureFn = Callable[[str, ApiResult], None]


class RetryState(str, enum.Enum):
    IDLE = "idle"
    ATTEMPTING = "attempting"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    SUCCESS = "success"
    FAILED = "failed"


def is_affirmative(answer: Optional[str]) -> bool:
    return (answer or "").strip().lower() in AFFIRMATIVE_ANSWERS


@dataclass(slots=True)
class RetryOutcome:
    """Final state of a run; ``attempts`` lists the model of every call made."""

    state: RetryState
    result: ApiResult
    model: str
    attempts: List[str] = field(default_factory=list)
    declined: bool = False

    @property
    def ok(self) -> bool:
        return self.state is RetryState.SUCCESS

    @property
    def retried(self) -> bool:
        return len(self.attempts) > 1


class RetryController:
    """Runs the primary attempt and, when allowed, one retry on the default model.

    ``send`` performs one call for the given model. ``confirm`` is asked only
    after a non-default model failed; a truthy answer triggers the retry.
    A failure on the default model is final, and so is a failed retry.
    """

    def __init__(
        self,
        send: SendFn,
        default_model: str,
        confirm: ConfirmFn,
        on_failure: Optional[FailureFn] = None,
    ):
        self._send = send
        self._default_model = default_model
        self._confirm = confirm
        self._on_failure = on_failure
        self.state = RetryState.IDLE
        self.transitions: List[Tuple[RetryState, Optional[str]]] = [(RetryState.IDLE, None)]

    def _move(self, state: RetryState, model: Optional[str] = None) -> None:
        self.state = state
        self.transitions.append((state, model))
        logger.debug("重试状态 -> %s (%s)", state.value, model)

    def _attempt(self, model: str, attempts: List[str]) -> ApiResult:
        self._move(RetryState.ATTEMPTING, model)
        attempts.append(model)
        result = self._send(model)
        if result.ok:
            self._move(RetryState.SUCCESS, model)
        else:
            self._move(RetryState.FAILED, model)
            if self._on_failure is not None:
                self._on_failure(model, result)
        return result

    def run(self, model: str) -> RetryOutcome:
        if self.state is not RetryState.IDLE:
            raise RuntimeError("RetryController.run() may only be called once")

        attempts: List[str] = []
        result = self._attempt(model, attempts)
        if result.ok:
            return RetryOutcome(self.state, result, model, attempts)

        if model == self._default_model:
            logger.info("默认模型 %s 失败，不再重试", model)
            return RetryOutcome(self.state, result, model, attempts)

        self._move(RetryState.AWAITING_CONFIRMATION, model)
        if not self._confirm(model, result):
            logger.info("用户拒绝使用 %s 重试", self._default_model)
            self._move(RetryState.FAILED, model)
            return RetryOutcome(self.state, result, model, attempts, declined=True)

        logger.info("%s 失败，使用默认模型 %s 重试", model, self._default_model)
        result = self._attempt(self._default_model, attempts)
        return RetryOutcome(self.state, result, self._default_model, attempts)


__all__ = [
    "AFFIRMATIVE_ANSWERS",
    "RetryController",
    "RetryOutcome",
    "RetryState",
    "is_affirmative",
]
