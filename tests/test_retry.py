"""Retry controller: at most one retry, always on the default model."""
from unittest.mock import MagicMock

import pytest

from tests.helpers import failed_result, ok_result
from gemini_ask.retry import RetryController, RetryState, is_affirmative

DEFAULT = "gemini-2.5-flash"


def controller(results, answer=True):
    send = MagicMock(side_effect=list(results))
    confirm = MagicMock(return_value=answer)
    on_failure = MagicMock()
    return RetryController(send, DEFAULT, confirm, on_failure), send, confirm, on_failure


def test_success_on_first_attempt():
    ctl, send, confirm, on_failure = controller([ok_result("a")])
    outcome = ctl.run("gemini-2.5-pro")

    assert outcome.ok
    assert outcome.attempts == ["gemini-2.5-pro"]
    assert not outcome.retried
    confirm.assert_not_called()
    on_failure.assert_not_called()


def test_default_model_failure_never_retries():
    ctl, send, confirm, on_failure = controller([failed_result()])
    outcome = ctl.run(DEFAULT)

    assert not outcome.ok
    assert outcome.state is RetryState.FAILED
    assert send.call_count == 1
    confirm.assert_not_called()
    on_failure.assert_called_once()


def test_declined_retry_makes_no_second_call():
    ctl, send, confirm, _ = controller([failed_result()], answer=False)
    outcome = ctl.run("gemini-2.5-pro")

    assert not outcome.ok
    assert outcome.declined
    assert send.call_count == 1
    confirm.assert_called_once()
    assert ctl.transitions[-2][0] is RetryState.AWAITING_CONFIRMATION


def test_accepted_retry_targets_default_and_succeeds():
    ctl, send, _, _ = controller([failed_result(), ok_result("b")])
    outcome = ctl.run("gemini-2.5-pro")

    assert outcome.ok
    assert outcome.model == DEFAULT
    assert outcome.attempts == ["gemini-2.5-pro", DEFAULT]
    assert [c.args[0] for c in send.call_args_list] == ["gemini-2.5-pro", DEFAULT]


def test_failed_retry_is_final():
    ctl, send, confirm, on_failure = controller([failed_result(), failed_result(500, "boom")])
    outcome = ctl.run("custom-model")

    assert not outcome.ok
    assert not outcome.declined
    assert send.call_count == 2
    assert confirm.call_count == 1
    assert on_failure.call_count == 2
    assert outcome.result.body == "boom"


@pytest.mark.parametrize(
    "first_model, results, answer",
    [
        ("x", [failed_result(), failed_result()], True),
        ("x", [failed_result(), ok_result("ok")], True),
        ("x", [failed_result()], False),
        (DEFAULT, [failed_result()], True),
        ("x", [ok_result("ok")], True),
    ],
)
def test_at_most_two_calls_and_second_is_default(first_model, results, answer):
    ctl, send, _, _ = controller(results, answer=answer)
    outcome = ctl.run(first_model)

    assert send.call_count <= 2
    assert outcome.attempts[0] == first_model
    if send.call_count == 2:
        assert outcome.attempts[1] == DEFAULT


def test_run_only_once():
    ctl, _, _, _ = controller([ok_result("a")])
    ctl.run("m")
    with pytest.raises(RuntimeError):
        ctl.run("m")


@pytest.mark.parametrize("answer", ["y", "Y", "yes", " YES ", "Yes\n"])
def test_affirmative_answers(answer):
    assert is_affirmative(answer)


@pytest.mark.parametrize("answer", ["", "n", "no", "sure", "yy", None])
def test_non_affirmative_answers(answer):
    assert not is_affirmative(answer)
