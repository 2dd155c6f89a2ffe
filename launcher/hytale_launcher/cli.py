from __future__ import annotations
import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional, Tuple
from .settings import Settings
from .logging_setup import setup_logging, get_logger
from .config_loader import (
    build_run_configuration, load_config, parse_include, resolve_artifact, resolve_includes,
)
from .errors import LauncherError
from .fs_layout import build_layout
from .orchestrator import Orchestrator
from .placement import ArtifactPlacer

log = get_logger("hytale.launcher.cli")


def _add_common(p: argparse.ArgumentParser) -> None:
    p.add_argument("artifact", nargs="?", help="Built mod jar (default: 'artifact' from the run file)")
    p.add_argument("--config", type=Path, help="JSON run file (overrides HYTALE_CONFIG)")
    p.add_argument("--root", type=Path, help="Runtime root dir (cache/, bin/, runtime/)")
    p.add_argument("--include", action="append", default=[], metavar="BUCKET=JAR",
                   help="Extra jar for mods, earlyplugins or plugins; a bare path goes to mods")
    p.add_argument("--patchline", help="Downloader patchline, e.g. pre-release")
    p.add_argument("--as-early-plugin", action="store_true", default=None,
                   help="Install the artifact into earlyplugins instead of mods")
    p.add_argument("--early-plugins", action="store_true", default=None,
                   help="Pass --accept-early-plugins to the server")
    p.add_argument("--server-arg", action="append", dest="server_args", metavar="ARG",
                   help="Extra server argument (repeatable); write dash values as --server-arg=--bind. "
                        "Anything after a bare -- is passed to the server as well")
    p.add_argument("--jvm-arg", action="append", dest="jvm_args", metavar="ARG",
                   help="Extra JVM argument (repeatable), e.g. --jvm-arg=-Xmx2G")


def _build(args, settings: Settings) -> Orchestrator:
    run_file = None
    file_base: Optional[Path] = None
    cfg_path = args.config or settings.config_file
    if cfg_path:
        run_file = load_config(cfg_path)
        file_base = Path(cfg_path).absolute().parent

    cfg = build_run_configuration(
        settings, run_file,
        base_dir=file_base if (run_file and run_file.serverRootDir is not None and args.root is None) else None,
        server_root=args.root,
        patchline=args.patchline,
        as_early_plugin=args.as_early_plugin,
        enable_early_plugin_loading=args.early_plugins,
        server_args=args.server_args,
        jvm_args=args.jvm_args,
    )

    if args.artifact:
        artifact = resolve_artifact(args.artifact)
    else:
        artifact = resolve_artifact(run_file.artifact if run_file else None, file_base)

    requests = []
    if run_file:
        requests += resolve_includes([(e.directory, str(e.path)) for e in run_file.includes], file_base)
    cli_includes: List[Tuple[str, str]] = [parse_include(s) for s in args.include]
    requests += resolve_includes(cli_includes)
    return Orchestrator(cfg, artifact, requests)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(prog="hytale-launcher")
    sub = parser.add_subparsers(dest="cmd", required=True)

    run_p = sub.add_parser("run", help="Download/extract the server, install jars and start it")
    _add_common(run_p)
    run_p.add_argument("--no-start", action="store_true", help="Stop after installing jars; print the server command")

    plan_p = sub.add_parser("plan", help="Print a dry-run plan as JSON and exit")
    _add_common(plan_p)

    argv = list(sys.argv[1:] if argv is None else argv)
    passthrough: List[str] = []
    if "--" in argv:
        i = argv.index("--")
        argv, passthrough = argv[:i], argv[i + 1:]

    args = parser.parse_args(argv)
    if passthrough:
        args.server_args = (args.server_args or []) + passthrough
    settings = Settings()
    setup_logging(settings)

    try:
        orch = _build(args, settings)
        if args.cmd == "run":
            ArtifactPlacer.validate(orch.requests, orch.self_artifact)
    except LauncherError as e:
        log.error("%s", e)
        return 1
    if args.cmd == "run":
        # the log file lives under the runtime root; plan leaves the root untouched
        setup_logging(settings, build_layout(orch.cfg.server_root).logs)

    if args.cmd == "plan":
        plan = orch.plan().to_dict()
        print(json.dumps(plan, indent=2, ensure_ascii=False))
        return 0 if plan.get("ok", True) else 1

    try:
        result = orch.run(start=not args.no_start)
    except LauncherError as e:
        log.error("%s", e)
        return 1

    if args.no_start:
        cmd = orch.launcher.build_command(result.server_jar, result.server_args, list(orch.cfg.jvm_args))
        print(" ".join(cmd))
        return 0
    return int(result.returncode or 0)
