"""Plugin manager driving installs, init hooks and config hooks."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Sequence

from editor_profile.runtime.telemetry import record_event, span

from .models import PluginCallback, PluginContext, PluginSpec
from .order import resolve_load_order

if TYPE_CHECKING:  # pragma: no cover
    from editor_profile.profile.settings import EditorSettings

    from .host import Host


class PluginConfigError(RuntimeError):
    """Raised in strict mode when a plugin's init or config hook fails."""

    def __init__(self, plugin_id: str, stage: str, cause: BaseException):
        super().__init__(f"Plugin '{plugin_id}' failed during {stage}: {cause}")
        self.plugin_id = plugin_id
        self.stage = stage


@dataclass(frozen=True, slots=True)
class PluginFailure:
    plugin_id: str
    stage: str
    error: str


@dataclass(slots=True)
class PluginLoadReport:
    """Outcome of ``PluginManager.load``."""

    order: tuple[str, ...] = ()
    loaded: list[str] = field(default_factory=list)
    installed: list[str] = field(default_factory=list)
    failures: list[PluginFailure] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    def failed(self, plugin_id: str) -> bool:
        return any(failure.plugin_id == plugin_id for failure in self.failures)


class PluginManager:
    """Loads a wiring table against a host.

    Every ``init`` hook runs before any plugin is installed. Plugins are
    then installed in dependency order and configured exactly once per
    manager. A failing hook is reported and does not stop later plugins
    unless ``strict`` is set.
    """

    def __init__(
        self,
        host: "Host",
        settings: "EditorSettings",
        *,
        strict: bool = False,
        logger_name: str | None = None,
    ) -> None:
        self.host = host
        self.settings = settings
        self.strict = strict
        self._logger_name = logger_name
        self._configured: set[str] = set()
        self._initialized: set[str] = set()

    def is_configured(self, plugin_id: str) -> bool:
        return plugin_id in self._configured

    def load(self, specs: Sequence[PluginSpec]) -> PluginLoadReport:
        order = resolve_load_order(specs)
        report = PluginLoadReport(order=tuple(spec.id for spec in order))

        with span(
            "plugins::load",
            logger_name=self._logger_name,
            component="plugins",
            metadata={"count": len(order)},
        ):
            for spec in order:
                if spec.init is None or spec.id in self._initialized:
                    continue
                self._initialized.add(spec.id)
                self._run_hook(spec, "init", spec.init, report)

            for spec in order:
                if spec.id in self._configured:
                    report.skipped.append(spec.id)
                    continue
                self._load_one(spec, report)

        record_event(
            "plugins.loaded",
            level="info",
            data={
                "loaded": len(report.loaded),
                "failed": len(report.failures),
                "skipped": len(report.skipped),
            },
            logger_name=self._logger_name,
        )
        return report

    def _load_one(self, spec: PluginSpec, report: PluginLoadReport) -> None:
        if self.host.install_plugin(spec):
            report.installed.append(spec.id)
            if spec.build:
                self.host.run_build(spec)

        self._configured.add(spec.id)
        if spec.config is not None:
            ok = self._run_hook(spec, "config", spec.config, report)
        elif spec.opts is not None:
            ok = self._run_setup(spec, report)
        else:
            ok = True
        if ok:
            report.loaded.append(spec.id)

    def _run_hook(
        self,
        spec: PluginSpec,
        stage: str,
        callback: PluginCallback,
        report: PluginLoadReport,
    ) -> bool:
        context = PluginContext(spec=spec, settings=self.settings, host=self.host)
        try:
            callback(context)
        except Exception as exc:
            self._fail(spec, stage, exc, report)
            return False
        return True

    def _run_setup(self, spec: PluginSpec, report: PluginLoadReport) -> bool:
        try:
            self.host.setup_plugin(spec.module_name, spec.opts or {})
        except Exception as exc:
            self._fail(spec, "setup", exc, report)
            return False
        return True

    def _fail(
        self, spec: PluginSpec, stage: str, exc: Exception, report: PluginLoadReport
    ) -> None:
        report.failures.append(PluginFailure(spec.id, stage, str(exc)))
        record_event(
            "plugins.failure",
            level="error",
            data={"plugin": spec.id, "stage": stage, "error": str(exc)},
            logger_name=self._logger_name,
        )
        self.host.notify(f"Failed to load {spec.id} ({stage}): {exc}", "error")
        if self.strict:
            raise PluginConfigError(spec.id, stage, exc) from exc


__all__ = ["PluginLoadReport", "PluginConfigError", "PluginFailure", "PluginManager"]
