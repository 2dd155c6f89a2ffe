from __future__ import annotations
import shutil
import stat
from pathlib import Path
from typing import Iterable, List, Optional, Tuple
from .archive import extract_all, extract_one
from .downloader import HytaleDownloader, fetch_archive
from .errors import DownloadIntegrityError, LauncherError, MissingArtifactError
from .fs_layout import Layout, build_layout, ensure_dirs
from .logging_setup import get_logger
from .models import PlacementRequest, ProvisionResult, RunConfiguration
from .placement import ArtifactPlacer
from .planner import Plan, PlanAction
from .platform_select import select_downloader_binary
from .server import ServerLauncher
from .version import VersionResolver

log = get_logger("hytale.launcher.orch")

ASSETS_FLAG = "--assets"
EARLY_PLUGINS_FLAG = "--accept-early-plugins"


def build_server_args(cfg: RunConfiguration, assets_zip: Path) -> List[str]:
    """
    Caller's server args, then --accept-early-plugins (if enabled), then
    --assets <Assets.zip> unless the caller already passed --assets.
    """
    args = list(cfg.server_args)
    if cfg.enable_early_plugin_loading:
        args.append(EARLY_PLUGINS_FLAG)
    if ASSETS_FLAG not in args:
        args += [ASSETS_FLAG, str(Path(assets_zip).absolute())]
    return args


def make_executable(path: Path) -> None:
    try:
        mode = path.stat().st_mode
        path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    except OSError as e:
        log.warning("Could not mark %s executable: %s", path, e)


class Orchestrator:
    def __init__(self, cfg: RunConfiguration, artifact: Path,
                 requests: Iterable[PlacementRequest] = (), *,
                 launcher: Optional[ServerLauncher] = None,
                 resolver: Optional[VersionResolver] = None,
                 os_name: Optional[str] = None):
        self.cfg = cfg
        self.artifact = Path(artifact)
        self.requests = list(requests)
        self.layout: Layout = build_layout(cfg.server_root)
        self.platform = select_downloader_binary(os_name)
        self.launcher = launcher or ServerLauncher(cfg.java_binary)
        self.resolver = resolver or VersionResolver()
        self.placer = ArtifactPlacer(lambda bucket: self.layout.bucket_dir(self.version, bucket))
        self._version: Optional[str] = None

    @property
    def self_artifact(self) -> Tuple[Path, str]:
        return self.artifact, self.cfg.primary_bucket

    @property
    def downloader_binary(self) -> Path:
        return self.layout.bin / self.platform.binary_name

    @property
    def version(self) -> str:
        if self._version is None:
            raise LauncherError("Server version has not been resolved yet")
        return self._version

    # ---------------- Stages ----------------
    def ensure_downloader_archive(self) -> Path:
        ensure_dirs(self.layout)
        zip_path = self.layout.downloader_zip
        if not zip_path.exists():
            log.info("Downloading hytale-downloader.zip -> %s", zip_path)
            fetch_archive(self.cfg.downloader_zip_url, zip_path)
        return zip_path

    def ensure_downloader_binary(self) -> Path:
        binary = self.downloader_binary
        if not binary.exists():
            log.info("Extracting %s -> %s", self.platform.entry_name, binary)
            extract_one(self.layout.downloader_zip, self.platform.entry_name, binary)
            if self.platform.needs_chmod:
                make_executable(binary)
        return binary

    def resolve_version(self) -> str:
        # resolved once per run
        if self._version is None:
            self._version = self.resolver.resolve(self.downloader_binary, self.layout.root)
        return self._version

    def ensure_server_bundle(self) -> Path:
        game_zip = self.layout.game_zip(self.version)
        if game_zip.exists():
            log.info("Using cached server zip: %s", game_zip.name)
            return game_zip

        log.info("Downloading Hytale server zip for version '%s' -> %s", self.version, game_zip)
        HytaleDownloader(self.downloader_binary, self.layout.root).download_server(
            game_zip,
            patchline=self.cfg.patchline,
            skip_update_check=self.cfg.skip_update_check,
        )
        if not game_zip.exists() or game_zip.stat().st_size == 0:
            raise DownloadIntegrityError(f"Downloader finished, but game zip was not created at {game_zip}")
        return game_zip

    def ensure_runtime(self) -> Path:
        runtime_dir = self.layout.runtime_dir(self.version)
        server_jar = self.layout.server_jar(self.version)
        assets_zip = self.layout.assets_zip(self.version)

        if not server_jar.exists() or not assets_zip.exists():
            game_zip = self.layout.game_zip(self.version)
            log.info("Extracting %s -> %s", game_zip.name, runtime_dir)
            if runtime_dir.exists():
                shutil.rmtree(runtime_dir)
            runtime_dir.mkdir(parents=True)
            extract_all(game_zip, runtime_dir)

        if not server_jar.exists():
            raise MissingArtifactError("server jar", server_jar)
        if not assets_zip.exists():
            raise MissingArtifactError("Assets.zip", assets_zip)
        return runtime_dir

    def place_artifacts(self):
        return self.placer.place(self.requests, self.self_artifact)

    # ---------------- Pipeline ----------------
    def provision(self) -> ProvisionResult:
        """Run every stage up to and including artifact placement."""
        # bad buckets / missing artifact fail before anything is downloaded
        ArtifactPlacer.validate(self.requests, self.self_artifact)

        self.ensure_downloader_archive()
        self.ensure_downloader_binary()
        version = self.resolve_version()
        self.ensure_server_bundle()
        runtime_dir = self.ensure_runtime()
        placements = self.place_artifacts()

        assets_zip = self.layout.assets_zip(version)
        return ProvisionResult(
            version=version,
            runtime_dir=runtime_dir,
            server_dir=self.layout.server_dir(version),
            server_jar=self.layout.server_jar(version),
            assets_zip=assets_zip,
            placements=placements,
            server_args=build_server_args(self.cfg, assets_zip),
        )

    def start_server(self, result: ProvisionResult) -> int:
        log.info("Starting server (version %s)", result.version)
        return self.launcher.launch(
            result.server_jar,
            result.server_dir,
            result.server_args,
            list(self.cfg.jvm_args),
        )

    def run(self, *, start: bool = True) -> ProvisionResult:
        result = self.provision()
        if start:
            result.returncode = self.start_server(result)
        return result

    # ---------------- Planning ----------------
    def plan(self) -> Plan:
        """Describe what run() would do. No network, process or filesystem side effects."""
        actions: List[PlanAction] = []
        notes: List[str] = []
        ok = True

        try:
            ArtifactPlacer.validate(self.requests, self.self_artifact)
        except LauncherError as e:
            ok = False
            actions.append(PlanAction(
                action="config_error", target="placement", detail=str(e),
                paths={}, will_change=False, severity="error",
            ))

        dz = self.layout.downloader_zip
        actions.append(PlanAction(
            action="fetch_downloader", target=self.cfg.downloader_zip_url,
            detail="HTTP GET" if not dz.exists() else "cached",
            paths={"dest": str(dz)}, will_change=not dz.exists(),
        ))
        binary = self.downloader_binary
        actions.append(PlanAction(
            action="extract_downloader", target=self.platform.entry_name,
            detail="extract from hytale-downloader.zip" if not binary.exists() else "cached",
            paths={"dest": str(binary)}, will_change=not binary.exists(),
        ))
        actions.append(PlanAction(
            action="resolve_version", target=self._version or "<unresolved>",
            detail="hytale-downloader -print-version -skip-update-check",
            paths={"binary": str(binary)}, will_change=False,
        ))

        if self._version is None:
            notes.append("Server version unknown until the downloader runs; version-dependent stages are estimates.")
            for action in ("download_server", "extract_server", "place_artifacts"):
                actions.append(PlanAction(
                    action=action, target="<unresolved>", detail="depends on server version",
                    paths={}, will_change=True, severity="warn",
                ))
        else:
            v = self._version
            gz = self.layout.game_zip(v)
            actions.append(PlanAction(
                action="download_server", target=v,
                detail="hytale-downloader -download-path" if not gz.exists() else "cached",
                paths={"dest": str(gz)}, will_change=not gz.exists(),
            ))
            jar, assets = self.layout.server_jar(v), self.layout.assets_zip(v)
            stale = not jar.exists() or not assets.exists()
            actions.append(PlanAction(
                action="extract_server", target=v,
                detail="wipe and re-extract runtime dir" if stale else "cached",
                paths={"server_jar": str(jar), "assets": str(assets)}, will_change=stale,
            ))
            actions.append(PlanAction(
                action="place_artifacts", target=self.cfg.primary_bucket,
                detail=f"{1 + len(self.requests)} artifact(s)",
                paths={"server_dir": str(self.layout.server_dir(v))}, will_change=True,
            ))

        actions.append(PlanAction(
            action="launch", target=self.cfg.java_binary,
            detail=" ".join(build_server_args(self.cfg, self.layout.assets_zip(self._version or "<version>"))),
            paths={}, will_change=False,
        ))
        return Plan(ok=ok, actions=actions, notes=notes)
