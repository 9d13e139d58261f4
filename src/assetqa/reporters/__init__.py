"""Reporter plugin registry."""

from assetqa.core.exceptions import ReporterError
from assetqa.reporters.base import BaseReporter, MultiReporter
from assetqa.reporters.console import ConsoleReporter
from assetqa.reporters.markdown import MarkdownReporter

REPORTER_REGISTRY: dict[str, type[BaseReporter]] = {
    "markdown": MarkdownReporter,
    "console": ConsoleReporter,
}


def build_reporter(names: list[str]) -> BaseReporter:
    """Instantiate registered reporters by name, combined when more than one.

    Raises:
        ReporterError: For an unknown reporter name.
    """
    unknown = [name for name in names if name not in REPORTER_REGISTRY]
    if unknown:
        available = ", ".join(REPORTER_REGISTRY)
        msg = f"Unknown reporter(s): {', '.join(unknown)} (available: {available})"
        raise ReporterError(msg)
    reporters = [REPORTER_REGISTRY[name]() for name in names]
    if len(reporters) == 1:
        return reporters[0]
    return MultiReporter(reporters)


__all__ = [
    "REPORTER_REGISTRY",
    "BaseReporter",
    "ConsoleReporter",
    "MarkdownReporter",
    "MultiReporter",
    "build_reporter",
]
