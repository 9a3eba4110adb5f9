"""
Tests for version demand rendering and satisfaction checks.
"""

import subprocess
from unittest.mock import patch

import pytest

from pacgate.core.models import Anything, AtLeast, Dep, FailureKind, LessThan, MoreThan, MustBe
from pacgate.core.services.versions import is_satisfied, render_demand, satisfied, vercmp

_RUN = "pacgate.adapters.pacman.command.subprocess.run"


def _completed(stdout="", returncode=0):
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr="")


class TestRenderDemand:
    """render_demand() tests."""

    @pytest.mark.parametrize("demand,expected", [
        (Anything(), ""),
        (LessThan(version="2"), "<2"),
        (AtLeast(version="1.2.0"), ">=1.2.0"),
        (MoreThan(version="3"), ">3"),
        (MustBe(version="4"), "=4"),
    ])
    def test_render(self, demand, expected):
        assert render_demand(demand) == expected

    def test_unknown_demand(self):
        with pytest.raises(TypeError):
            render_demand("<=1")


class TestIsSatisfied:
    """is_satisfied() tests."""

    def test_one_pacman_t_call(self, settings):
        dep = Dep(name="foo", demand=AtLeast(version="1.2.0"))
        with patch(_RUN, return_value=_completed()) as mock_run:
            assert is_satisfied(settings, dep) is True
        mock_run.assert_called_once()
        assert mock_run.call_args[0][0] == ["pacman", "-T", "foo>=1.2.0"]

    def test_bare_name(self, settings):
        with patch(_RUN, return_value=_completed()) as mock_run:
            is_satisfied(settings, Dep(name="bar"))
        assert mock_run.call_args[0][0] == ["pacman", "-T", "bar"]

    def test_unsatisfied(self, settings):
        with patch(_RUN, return_value=_completed("foo>=9\n", returncode=127)):
            assert is_satisfied(settings, Dep(name="foo", demand=AtLeast(version="9"))) is False

    def test_pacman_missing(self, settings):
        with patch(_RUN, side_effect=FileNotFoundError()):
            assert is_satisfied(settings, Dep(name="foo")) is False


class TestVercmp:
    """vercmp() / satisfied() tests."""

    @pytest.mark.parametrize("output,expected", [("-1\n", -1), ("0\n", 0), ("1\n", 1), ("5\n", 1)])
    def test_normalised(self, settings, output, expected):
        with patch(_RUN, return_value=_completed(output)):
            assert vercmp(settings, "1.0", "2.0").unwrap() == expected

    def test_command(self, settings):
        with patch(_RUN, return_value=_completed("0\n")) as mock_run:
            vercmp(settings, "1.0-1", "1.0-1")
        assert mock_run.call_args[0][0] == ["vercmp", "1.0-1", "1.0-1"]

    def test_garbage_output(self, settings):
        with patch(_RUN, return_value=_completed("what\n")):
            outcome = vercmp(settings, "1", "2")
        assert outcome.failure.kind == FailureKind.QUERY_FAILED
        assert outcome.failure.detail == "what"

    def test_missing_binary(self, settings):
        with patch(_RUN, side_effect=FileNotFoundError()):
            outcome = vercmp(settings, "1", "2")
        assert outcome.failed
        assert outcome.failure.source == "vercmp"

    def test_satisfied_reports_vercmp_failure(self, settings):
        with patch(_RUN, side_effect=FileNotFoundError()):
            outcome = satisfied(settings, "1.0", AtLeast(version="2"))
        assert outcome.failure.kind == FailureKind.QUERY_FAILED

    def test_anything_needs_no_call(self, settings):
        with patch(_RUN) as mock_run:
            assert satisfied(settings, "0.1", Anything()).unwrap() is True
        mock_run.assert_not_called()

    @pytest.mark.parametrize("order,demand,expected", [
        ("-1", LessThan(version="2"), True),
        ("0", LessThan(version="2"), False),
        ("0", AtLeast(version="2"), True),
        ("-1", AtLeast(version="2"), False),
        ("1", MoreThan(version="2"), True),
        ("0", MoreThan(version="2"), False),
        ("0", MustBe(version="2"), True),
        ("1", MustBe(version="2"), False),
    ])
    def test_satisfied(self, settings, order, demand, expected):
        with patch(_RUN, return_value=_completed(order + "\n")) as mock_run:
            assert satisfied(settings, "x", demand).unwrap() is expected
        mock_run.assert_called_once()
