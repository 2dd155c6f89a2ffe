"""
placement.py — installs built jars into Server/{mods,earlyplugins,plugins}
--------------------------------------------------------------------------
Every source gets a destination name that is unique within its bucket for
the current run. The first candidate name may replace a file left over from
an earlier run; numbered candidates (name-1.jar, name-2.jar, ...) never do.
"""

from __future__ import annotations
import shutil
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Set, Tuple
from .errors import ConfigurationError
from .models import BUCKETS, PlacementRequest, PlacementResult, make_request
from .logging_setup import get_logger

log = get_logger("hytale.launcher.placement")

JAR_EXT = ".jar"


def _candidate(original: str, i: int) -> str:
    if i == 0:
        return original
    dot = original.rfind(".")
    if dot > 0:
        return f"{original[:dot]}-{i}{original[dot:]}"
    return f"{original}-{i}"


def unique_name(original: str, on_disk: Iterable[str], claimed: Set[str]) -> str:
    """
    Pick a destination name for original and add it to claimed.

    on_disk: names already present in the destination directory
    claimed: names handed out earlier in this run (mutated)
    """
    disk = set(on_disk)
    i = 0
    while True:
        name = _candidate(original, i)
        if name not in claimed and (i == 0 or name not in disk):
            claimed.add(name)
            return name
        i += 1


def _copy(src: Path, dst: Path) -> None:
    dst.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(src, dst)


class ArtifactPlacer:
    def __init__(self, bucket_dir: Callable[[str], Path]):
        """bucket_dir maps a bucket name to its directory under Server/."""
        self.bucket_dir = bucket_dir

    @staticmethod
    def validate(requests: Iterable, self_artifact: Tuple[Path, str]) -> Tuple[List[PlacementRequest], PlacementRequest]:
        """Normalize and check everything up front so nothing is copied on bad input."""
        primary_path, primary_bucket = self_artifact
        primary = make_request(primary_path, primary_bucket)
        if not primary.path.is_file():
            raise ConfigurationError(f"Build artifact not found: {primary.path}")

        out: List[PlacementRequest] = []
        seen = set()
        for r in requests:
            req = r if isinstance(r, PlacementRequest) else make_request(*r)
            key = (str(req.path.absolute()), req.bucket)
            if key in seen:
                continue
            seen.add(key)
            out.append(req)
        return out, primary

    def place(self, requests: Iterable, self_artifact: Tuple[Path, str]) -> Dict[str, PlacementResult]:
        reqs, primary = self.validate(requests, self_artifact)
        primary_key = primary.path.absolute()

        results: Dict[str, PlacementResult] = {}
        for bucket in BUCKETS:
            dest_dir = self.bucket_dir(bucket)
            dest_dir.mkdir(parents=True, exist_ok=True)
            on_disk = {p.name for p in dest_dir.iterdir()}
            claimed: Set[str] = set()
            result = PlacementResult(bucket=bucket, directory=dest_dir)

            if primary.bucket == bucket:
                name = unique_name(primary.path.name, on_disk, claimed)
                log.info("Copying mod jar -> %s", dest_dir / name)
                _copy(primary.path, dest_dir / name)
                result.files.append(name)

            for req in reqs:
                if req.bucket != bucket:
                    continue
                if req.path.absolute() == primary_key and primary.bucket == bucket:
                    continue
                if not req.path.is_file() or not req.path.name.endswith(JAR_EXT):
                    log.warning("Skipping %s for %s: not a jar file", req.path, bucket)
                    continue
                name = unique_name(req.path.name, on_disk, claimed)
                log.info("Copying %s -> %s", req.path, dest_dir / name)
                _copy(req.path, dest_dir / name)
                result.files.append(name)

            results[bucket] = result
        return results
