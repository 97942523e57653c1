"""Resolve route module files from the Remix route manifest."""

import json
import logging
import shutil
import subprocess
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

ROUTES_COMMAND = ["npx", "-y", "@remix-run/dev", "routes", "--json"]


class RouteManifestError(Exception):
    pass


def traverse_route_entry(entry: Any) -> list[str]:
    """Collect ``file`` values of a route entry and its ``children``, depth first."""
    files: list[str] = []
    if not isinstance(entry, dict):
        return files
    file = entry.get("file")
    if isinstance(file, str):
        files.append(file)
    children = entry.get("children")
    if isinstance(children, list):
        for child in children:
            files.extend(traverse_route_entry(child))
    return files


def parse_route_manifest(raw: str) -> list[str]:
    try:
        manifest = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise RouteManifestError(f"Failed to parse route manifest: {exc}") from exc
    if not isinstance(manifest, list):
        raise RouteManifestError("Failed to parse route manifest: expected an array")
    files: list[str] = []
    for entry in manifest:
        files.extend(traverse_route_entry(entry))
    return files


def resolve_route_files(files: list[str], project_dir: Path) -> list[Path]:
    """Make manifest paths absolute; they are relative to ``<project>/app``."""
    resolved: dict[Path, None] = {}
    for file in files:
        candidate = project_dir / "app" / file
        try:
            resolved[candidate.resolve(strict=True)] = None
        except FileNotFoundError:
            raise RouteManifestError(f"Failed to resolve path: {candidate}") from None
    return list(resolved)


def fetch_route_manifest(project_dir: Path) -> str:
    if shutil.which(ROUTES_COMMAND[0]) is None:
        raise RouteManifestError("npx is not installed or not in PATH.")
    logger.info("Running %s in %s", " ".join(ROUTES_COMMAND), project_dir)
    result = subprocess.run(
        ROUTES_COMMAND,
        cwd=str(project_dir),
        capture_output=True,
        text=True,
    )
    if result.returncode != 0:
        raise RouteManifestError(f"Route manifest command failed: {result.stderr.strip()}")
    return result.stdout


def collect_route_files(project_dir: Path, manifest_path: Path | None = None) -> list[Path]:
    if manifest_path is not None:
        try:
            raw = manifest_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise RouteManifestError(f"Route manifest not found: {manifest_path}") from None
    else:
        raw = fetch_route_manifest(project_dir)
    return resolve_route_files(parse_route_manifest(raw), project_dir)
