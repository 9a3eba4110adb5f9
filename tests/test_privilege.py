"""
Tests for the privilege guards.
"""

from pacgate.core.models import BuildConfig, FailureKind, Outcome
from pacgate.core.security.privilege import forbid_true_root, require_elevated


class _Action:
    """Counts how often it runs."""

    def __init__(self, value="done"):
        self.calls = 0
        self.value = value

    def __call__(self):
        self.calls += 1
        return Outcome.success(self.value)


class TestRequireElevated:
    """require_elevated() tests."""

    def test_refuses_without_root(self, settings):
        action = _Action()
        outcome = require_elevated(settings, action)
        assert outcome.failed
        assert outcome.failure.kind == FailureKind.MUST_BE_ROOT
        assert action.calls == 0

    def test_runs_under_sudo(self, sudo_settings):
        action = _Action()
        assert require_elevated(sudo_settings, action).unwrap() == "done"
        assert action.calls == 1

    def test_runs_as_true_root(self, root_settings):
        action = _Action()
        assert require_elevated(root_settings, action).ok
        assert action.calls == 1

    def test_action_failure_passes_through(self, sudo_settings):
        def failing():
            return Outcome.fail(FailureKind.REMOVAL_FAILED, "nope")

        outcome = require_elevated(sudo_settings, failing)
        assert outcome.failure.kind == FailureKind.REMOVAL_FAILED


class TestForbidTrueRoot:
    """forbid_true_root() tests."""

    def test_refuses_true_root(self, root_settings):
        action = _Action()
        outcome = forbid_true_root(root_settings, action)
        assert outcome.failure.kind == FailureKind.TRUE_ROOT_FORBIDDEN
        assert action.calls == 0

    def test_allows_root_build_user(self, root_settings):
        overridden = root_settings.model_copy(update={"build": BuildConfig(user="root")})
        action = _Action()
        assert forbid_true_root(overridden, action).ok
        assert action.calls == 1

    def test_other_build_user_still_refused(self, root_settings):
        other = root_settings.model_copy(update={"build": BuildConfig(user="builder")})
        assert forbid_true_root(other, _Action()).failed

    def test_allows_sudo(self, sudo_settings):
        action = _Action()
        assert forbid_true_root(sudo_settings, action).ok

    def test_allows_normal_user(self, settings):
        assert forbid_true_root(settings, _Action()).ok


class TestStacking:
    """Guards compose because they return what they wrap."""

    def test_both_pass_under_sudo(self, sudo_settings):
        action = _Action()
        outcome = require_elevated(sudo_settings, lambda: forbid_true_root(sudo_settings, action))
        assert outcome.unwrap() == "done"
        assert action.calls == 1

    def test_inner_guard_refuses(self, root_settings):
        action = _Action()
        outcome = require_elevated(root_settings, lambda: forbid_true_root(root_settings, action))
        assert outcome.failure.kind == FailureKind.TRUE_ROOT_FORBIDDEN
        assert action.calls == 0

    def test_outer_guard_refuses_first(self, settings):
        action = _Action()
        outcome = require_elevated(settings, lambda: forbid_true_root(settings, action))
        assert outcome.failure.kind == FailureKind.MUST_BE_ROOT
        assert action.calls == 0
