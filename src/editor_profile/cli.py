"""``editor-profile`` command line: dry-run the profile against a recording host."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Optional, Sequence

from editor_profile.adapters.textual import app as playground
from editor_profile.keymaps import MODES
from editor_profile.profile import PLUGIN_TABLE, apply_profile, load_settings
from editor_profile.profile.settings import EditorSettings
from editor_profile.runtime import telemetry
from editor_profile.snippets import (
    ExpansionContext,
    SnippetDefinitionError,
    SnippetRegistry,
    expand,
    load_default_snippets,
    load_directory,
)
from editor_profile.wiring import (
    BootstrapError,
    PluginDependencyError,
    PluginSpecError,
    RecordingHost,
    ensure_plugin_manager,
    resolve_load_order,
)

DEFAULT_DATA_DIR = Path("~/.local/share/nvim")


def _recording_host(settings: EditorSettings, path: Optional[str] = None) -> RecordingHost:
    return RecordingHost(
        colorschemes=("default", settings.colorscheme), current_file=path
    )


def _cmd_plan(args: argparse.Namespace, settings: EditorSettings) -> int:
    try:
        order = resolve_load_order(PLUGIN_TABLE)
    except (PluginSpecError, PluginDependencyError) as exc:
        print(f"error: {exc}")
        return 2
    for position, spec in enumerate(order, start=1):
        extras = []
        if spec.priority is not None:
            extras.append(f"priority={spec.priority}")
        for name in ("version", "tag", "build", "main"):
            value = getattr(spec, name)
            if value:
                extras.append(f"{name}={value}")
        if spec.dependencies:
            extras.append("after " + ", ".join(spec.dependencies))
        suffix = f"  ({'; '.join(extras)})" if extras else ""
        print(f"{position:>2}. {spec.id}{suffix}")
    return 0


def _cmd_apply(args: argparse.Namespace, settings: EditorSettings) -> int:
    host = _recording_host(settings, args.file)
    report = apply_profile(host, settings, strict=args.strict)
    summary = {
        "options": dict(host.options),
        "globals": dict(host.globals),
        "plugins": {
            "order": list(report.plugins.order),
            "loaded": list(report.plugins.loaded),
            "failures": [
                {"plugin": f.plugin_id, "stage": f.stage, "error": f.error}
                for f in report.plugins.failures
            ],
        },
        "colorscheme": host.active_colorscheme,
        "language_servers": sorted(host.language_servers),
        "user_commands": sorted(host.user_commands),
        "autocmds": [list(autocmd.events) for autocmd in host.autocmds],
        "keymaps": host.keymaps.stats().binding_count,
        "snippets": list(report.snippets.triggers),
        "skipped_snippets": [
            {"source": s.source, "position": s.position, "reason": s.reason}
            for s in report.snippets.skipped
        ],
        "notifications": [
            {"level": n.level, "message": n.message} for n in host.notifications
        ],
    }
    if args.json:
        print(json.dumps(summary, indent=2, default=str))
        return 0 if report.plugins.ok else 1

    print(f"colorscheme: {summary['colorscheme']}")
    print(f"plugins loaded: {len(report.plugins.loaded)}/{len(report.plugins.order)}")
    for failure in summary["plugins"]["failures"]:
        print(f"  failed: {failure['plugin']} ({failure['stage']}): {failure['error']}")
    print(f"language servers: {', '.join(summary['language_servers'])}")
    print(f"keymaps: {summary['keymaps']}")
    print(f"snippets: {', '.join(summary['snippets'])}")
    for skipped in report.snippets.skipped:
        print(f"  skipped #{skipped.position} from {skipped.source}: {skipped.reason}")
    for note in host.notifications:
        print(f"[{note.level}] {note.message}")
    return 0 if report.plugins.ok else 1


def _cmd_keymaps(args: argparse.Namespace, settings: EditorSettings) -> int:
    host = _recording_host(settings)
    apply_profile(host, settings)
    if args.attach:
        for server in args.attach:
            host.attach_language_server(server, args.buffer)
    for binding in host.keymaps.iter_bindings(args.mode):
        if binding.buffer is not None and binding.buffer != args.buffer:
            continue
        keys = binding.key_signature
        print(
            f"{binding.mode:<7} {keys:<16} {binding.action.label:<28} "
            f"{binding.scope:<9} {binding.description}"
        )
    return 0


def _cmd_snippets(args: argparse.Namespace, settings: EditorSettings) -> int:
    registry = SnippetRegistry()
    report = load_default_snippets(registry)
    try:
        for directory in args.path:
            report.merge(load_directory(registry, Path(directory), replace=True))
    except SnippetDefinitionError as exc:
        print(f"error: {exc}")
        return 2
    for snippet in registry.iter_snippets(args.filetype):
        kind = "auto" if snippet.auto_expand else "manual"
        print(f"{snippet.filetype:<6} {snippet.trigger:<8} {kind:<6} {snippet.description}")
    for skipped in report.skipped:
        print(f"skipped #{skipped.position} from {skipped.source}: {skipped.reason}")
    return 0


def _cmd_expand(args: argparse.Namespace, settings: EditorSettings) -> int:
    registry = SnippetRegistry()
    load_default_snippets(registry)
    snippet = registry.resolve(args.trigger, args.filetype)
    if snippet is None:
        print(f"no snippet '{args.trigger}' for filetype {args.filetype}")
        return 1
    expansion = expand(snippet, ExpansionContext(indent=args.indent))
    print(expansion.text)
    for stop in expansion.tab_stops:
        print(f"${stop.index} [{stop.start}, {stop.end})")
    return 0


def _cmd_bootstrap(args: argparse.Namespace, settings: EditorSettings) -> int:
    try:
        path = ensure_plugin_manager(
            args.data_dir, git=settings.tools.git, dry_run=args.dry_run
        )
    except BootstrapError as exc:
        print(f"error: {exc}")
        return 2
    print(path)
    return 0


def _cmd_demo(args: argparse.Namespace, settings: EditorSettings) -> int:
    playground.run(args)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="editor-profile",
        description="Inspect and dry-run the editor profile.",
    )
    parser.add_argument(
        "--log-preset",
        choices=["development", "production"],
        default=None,
        help="telelog preset (default: EDITOR_PROFILE_* environment settings)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    plan = sub.add_parser("plan", help="Show the plugin load order.")
    plan.set_defaults(handler=_cmd_plan)

    apply = sub.add_parser("apply", help="Apply the profile to a recording host.")
    apply.add_argument("--strict", action="store_true", help="Stop at the first plugin failure.")
    apply.add_argument("--json", action="store_true", help="Print the summary as JSON.")
    apply.add_argument("--file", default=None, help="Path reported as the current file.")
    apply.set_defaults(handler=_cmd_apply)

    keymaps = sub.add_parser("keymaps", help="List bindings after the profile is applied.")
    keymaps.add_argument("--mode", choices=sorted(MODES), default=None)
    keymaps.add_argument("--buffer", type=int, default=1)
    keymaps.add_argument(
        "--attach",
        action="append",
        default=[],
        metavar="SERVER",
        help="Simulate a language server attaching to --buffer.",
    )
    keymaps.set_defaults(handler=_cmd_keymaps)

    snippets = sub.add_parser("snippets", help="List registered snippets.")
    snippets.add_argument("--filetype", default=None)
    snippets.add_argument(
        "--path",
        action="append",
        default=[],
        help="Extra snippet directory (*.json). Can be given multiple times.",
    )
    snippets.set_defaults(handler=_cmd_snippets)

    expand_cmd = sub.add_parser("expand", help="Print the expansion of a trigger.")
    expand_cmd.add_argument("trigger")
    expand_cmd.add_argument("--filetype", default="tex")
    expand_cmd.add_argument("--indent", default="")
    expand_cmd.set_defaults(handler=_cmd_expand)

    bootstrap = sub.add_parser("bootstrap", help="Clone the plugin manager if missing.")
    bootstrap.add_argument("--data-dir", type=Path, default=DEFAULT_DATA_DIR)
    bootstrap.add_argument("--dry-run", action="store_true")
    bootstrap.set_defaults(handler=_cmd_bootstrap)

    demo = sub.add_parser("demo", help="Run the Textual snippet playground.")
    playground.build_parser(demo)
    demo.set_defaults(handler=_cmd_demo)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.log_preset:
        telemetry.configure(preset=args.log_preset)
    settings = load_settings()
    return args.handler(args, settings)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
