from __future__ import annotations

import argparse
import json
import subprocess
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from src.config import settings


def add_common_walk_args(
    parser: argparse.ArgumentParser,
    *,
    default_n_walks: int = settings.n_walks,
    default_seed: int = settings.default_seed,
    default_start_state: int = 0,
) -> argparse.ArgumentParser:
    parser.add_argument("--n-walks", type=int, default=default_n_walks, help="Number of random walks or draws.")
    parser.add_argument("--seed", type=int, default=default_seed, help="Seed of the random source.")
    parser.add_argument("--start-state", type=int, default=default_start_state, help="State every walk starts from.")
    parser.add_argument(
        "--no-plots",
        action="store_true",
        help="Run without generating plot files.",
    )
    parser.add_argument(
        "--metadata-tag",
        type=str,
        default="",
        help="Optional suffix for the metadata JSON filename.",
    )
    return parser


def git_revision(project_root: Path) -> str | None:
    """
    Commit hash of the checkout at project_root, None outside a git checkout.
    """
    try:
        res = subprocess.run(
            ["git", "rev-parse", "--short=12", "HEAD"],
            cwd=str(project_root),
            check=True,
            capture_output=True,
            text=True,
        )
    except (OSError, subprocess.CalledProcessError):
        return None
    return res.stdout.strip() or None


def metadata_path(output_dir: Path, run_name: str, tag: str = "") -> Path:
    suffix = f"_{tag}" if tag else ""
    return output_dir / f"{run_name}_metadata{suffix}.json"


def write_run_metadata(
    *,
    output_dir: Path,
    run_name: str,
    args: argparse.Namespace,
    summary: dict[str, Any],
    project_root: Path,
) -> Path:
    """
    Record the CLI arguments and walk summary of a demo run as JSON,
    keyed by run name and the optional --metadata-tag.
    """
    out_path = metadata_path(output_dir, run_name, getattr(args, "metadata_tag", ""))
    out_path.parent.mkdir(parents=True, exist_ok=True)

    record = {
        "run": run_name,
        "created_utc": datetime.now(timezone.utc).isoformat(timespec="seconds"),
        "revision": git_revision(project_root),
        "cli": {k: v for k, v in vars(args).items() if k != "metadata_tag"},
        "summary": summary,
    }
    out_path.write_text(json.dumps(record, indent=2, sort_keys=True, default=str))
    return out_path
