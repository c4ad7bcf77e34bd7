import hashlib
import json
import os
import platform
import sys
import time
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

import importlib.metadata as importlib_metadata

# Recordings are deterministic for a given seed, dt and grid, so the digest
# doubles as a regression fingerprint.

@dataclass(frozen=True)
class RunManifest:
    started_utc: str
    config: Dict[str, Any]
    recording: Dict[str, Any]
    python: Dict[str, Any]
    packages: Dict[str, str]
    git: Dict[str, Any]
    system: Dict[str, Any]

def _utc_iso() -> str:
    return time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime())

def _safe_pkg_version(name: str) -> Optional[str]:
    try:
        return importlib_metadata.version(name)
    except importlib_metadata.PackageNotFoundError:
        return None

def file_sha256(path: str, chunk: int = 1 << 20) -> str:
    h = hashlib.sha256()
    with open(path, "rb") as f:
        for block in iter(lambda: f.read(chunk), b""):
            h.update(block)
    return h.hexdigest()

def build_manifest(*, config: Dict[str, Any], output: str, frames: int, directives: int,
                   git_commit: Optional[str]) -> RunManifest:
    pkgs = {}
    for name in ["numpy", "numba", "tqdm"]:
        v = _safe_pkg_version(name)
        if v:
            pkgs[name] = v

    return RunManifest(
        started_utc=_utc_iso(),
        config=config,
        recording={
            "output": output,
            "frames": frames,
            "directives": directives,
            "sha256": file_sha256(output),
        },
        python={"version": sys.version, "executable": sys.executable},
        packages=pkgs,
        git={"commit": git_commit},
        system={"platform": platform.platform(), "machine": platform.machine(), "processor": platform.processor()},
    )

def manifest_path_for(output: str) -> str:
    root, _ = os.path.splitext(output)
    return root + ".json"

def write_manifest(path: str, manifest: RunManifest) -> None:
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(asdict(manifest), f, indent=2, sort_keys=True)
