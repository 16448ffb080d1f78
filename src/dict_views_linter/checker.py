"""Pylint plugin entry point: ``load-plugins = ["dict_views_linter.checker"]``."""

from pylint.lint import PyLinter

from dict_views_linter.use_cases.checks.dict_views import DictViewsChecker


def register(linter: PyLinter) -> None:
    """Register checkers."""
    linter.register_checker(DictViewsChecker(linter))
