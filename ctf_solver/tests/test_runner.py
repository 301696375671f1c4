"""
Tests for the sequential runner
"""

import pytest

from .. import runner as runner_module
from ..challenges import BaseChallenge, ChallengeResult
from ..runner import ChallengeRunner, is_yes
from .conftest import run


def stub_challenges(outcomes, executed):
    """Challenge classes that succeed or fail according to ``outcomes``"""
    classes = {}
    for challenge_id, succeeds in outcomes.items():
        class Stub(BaseChallenge):
            async def execute(self) -> ChallengeResult:
                executed.append(self.challenge_id)
                if self.outcome:
                    return self._create_result(True)
                return self._create_result(False, error_message="boom")

            def get_name(self) -> str:
                return f"Stub {self.challenge_id}"

            def get_description(self) -> str:
                return "stub"

        Stub.challenge_id = challenge_id
        Stub.outcome = succeeds
        classes[challenge_id] = Stub
    return classes


@pytest.fixture
def make_runner(monkeypatch, config, client, registry):
    def factory(outcomes, answers=()):
        executed = []
        prompts = []
        replies = iter(answers)

        def fake_input(prompt):
            prompts.append(prompt)
            return next(replies)

        monkeypatch.setattr(runner_module, "CHALLENGES", stub_challenges(outcomes, executed))
        challenge_runner = ChallengeRunner(config, client=client, registry=registry, input_func=fake_input)
        return challenge_runner, executed, prompts

    return factory


def test_is_yes():
    assert is_yes("y")
    assert is_yes(" YES ")
    assert not is_yes("n")
    assert not is_yes("")


def test_all_succeed(make_runner):
    runner, executed, prompts = make_runner({i: True for i in range(1, 13)})

    summary = run(runner.run(assume_yes=True))

    assert executed == list(range(1, 13))
    assert prompts == []
    assert summary.succeeded == 12
    assert summary.exit_code == 0


def test_confirmation_declined(make_runner):
    runner, executed, prompts = make_runner({1: True}, answers=["n"])

    summary = run(runner.run())

    assert summary.cancelled
    assert executed == []
    assert summary.exit_code == 0
    assert len(prompts) == 1


def test_prerequisite_failure_aborts(make_runner):
    runner, executed, prompts = make_runner({1: True, 2: True, 3: False, 4: True, 10: True})

    summary = run(runner.run(assume_yes=True))

    assert executed == [1, 2, 3]
    assert summary.aborted
    assert summary.failed == 1
    assert summary.exit_code == 1
    assert prompts == []


def test_late_failure_asks_to_continue(make_runner):
    runner, executed, prompts = make_runner({10: False, 11: True, 12: True}, answers=["y"])

    summary = run(runner.run(assume_yes=True))

    assert executed == [10, 11, 12]
    assert len(prompts) == 1
    assert summary.exit_code == 1
    assert not summary.aborted


def test_late_failure_stop(make_runner):
    runner, executed, prompts = make_runner({10: True, 11: False, 12: True}, answers=["no"])

    summary = run(runner.run(assume_yes=True))

    assert executed == [10, 11]
    assert summary.aborted


def test_last_challenge_failure_does_not_prompt(make_runner):
    runner, executed, prompts = make_runner({11: True, 12: False})

    summary = run(runner.run([12, 11], assume_yes=True))

    assert executed == [11, 12]
    assert prompts == []
    assert summary.exit_code == 1


def test_selection_validated(make_runner):
    runner, _, _ = make_runner({1: True})

    with pytest.raises(ValueError):
        run(runner.run([13], assume_yes=True))


def test_exception_becomes_failed_result(make_runner):
    runner, executed, _ = make_runner({1: True})

    class Exploding(runner_module.CHALLENGES[1]):
        async def execute(self):
            raise RuntimeError("rpc down")

    runner_module.CHALLENGES[1] = Exploding

    summary = run(runner.run(assume_yes=True))

    assert summary.results[0].error_message == "rpc down"
    assert summary.aborted


def test_print_summary(make_runner, capsys):
    runner, _, _ = make_runner({1: True, 2: False})

    runner.print_summary(run(runner.run(assume_yes=True)))

    out = capsys.readouterr().out
    assert "Succeeded: 1" in out
    assert "Failed: 1" in out
    assert "Stub 2" in out
    assert "boom" in out
