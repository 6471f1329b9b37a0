"""Consume instruction fixtures and validate them against the Python specs."""

from __future__ import annotations

import glob
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Optional

import click

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT / "src"))
sys.path.insert(0, str(ROOT))

from sysprog_spec.errors import SpecError  # noqa: E402
from sysprog_spec.instructions import build_instruction  # noqa: E402
from sysprog_spec.parser import parse_instruction  # noqa: E402
from tools.config import ConsumeConfig  # noqa: E402
from tools.fixtures_io import (  # noqa: E402
    instruction_from_json,
    instruction_to_json,
    params_from_json,
    params_to_json,
)
from tools.yaml_dump import load_yaml  # noqa: E402

logger = logging.getLogger(__name__)


def find_fixture_files(fixture_dir: str) -> list[str]:
    """Find all instruction fixture files (JSON or YAML) in a directory."""
    files: list[str] = []
    for ext in ("json", "yaml", "yml"):
        files.extend(glob.glob(os.path.join(fixture_dir, "**", f"*.{ext}"), recursive=True))
    return sorted(files)


def load_vectors(path: Path) -> list[dict[str, Any]]:
    if path.suffix in (".yaml", ".yml"):
        data = load_yaml(path)
    else:
        data = json.loads(path.read_text())
    return list((data or {}).get("vectors", []))


def check_vector(vec: dict[str, Any]) -> list[str]:
    """Rebuild one vector from its params and compare with the recorded instruction."""
    name = vec.get("name", "<unnamed>")
    failures: list[str] = []

    try:
        params = params_from_json(vec["params"])
        built = instruction_to_json(build_instruction(params))
    except SpecError as e:
        return [f"{name}: build_failed ({e})"]

    expected = vec["expected"]
    if built["program_id"] != expected["program_id"]:
        failures.append(f"{name}: program_id_mismatch")
    if built["accounts"] != expected["accounts"]:
        failures.append(f"{name}: accounts_mismatch")
    if built["data"] != expected["data"]:
        failures.append(f"{name}: data_mismatch")

    try:
        parsed = parse_instruction(instruction_from_json(expected))
    except SpecError as e:
        failures.append(f"{name}: parse_failed ({e})")
    else:
        if params_to_json(parsed) != params_to_json(params):
            failures.append(f"{name}: parse_mismatch")

    return failures


def check_file(path: Path, stop_on_first_failure: bool = False) -> list[str]:
    failures: list[str] = []
    vectors = load_vectors(path)
    logger.info(f"Checking {len(vectors)} vectors in {path}")
    for vec in vectors:
        vec_failures = check_vector(vec)
        status = "FAIL" if vec_failures else "PASS"
        logger.debug(f"  [{status}] {vec.get('name')}")
        failures.extend(vec_failures)
        if vec_failures and stop_on_first_failure:
            break
    return failures


@click.command()
@click.option(
    "--fixtures",
    default=None,
    help="Path to fixtures directory or a specific JSON/YAML file",
)
@click.option(
    "--verbose",
    is_flag=True,
    help="Enable verbose output",
)
@click.option(
    "--stop-on-failure",
    is_flag=True,
    help="Stop on first failing vector",
)
def main(fixtures: Optional[str], verbose: bool, stop_on_failure: bool) -> None:
    """Re-check generated instruction fixtures against the encoder."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )

    config = ConsumeConfig.from_env()
    if verbose:
        config.verbose = True
    if stop_on_failure:
        config.stop_on_first_failure = True
    if config.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    fixture_dir = fixtures or config.fixture_dir
    if os.path.isfile(fixture_dir):
        files = [fixture_dir]
    else:
        files = find_fixture_files(fixture_dir)

    if not files:
        logger.error(f"No fixture files found in {fixture_dir}")
        sys.exit(1)

    failures: list[str] = []
    for path in files:
        failures.extend(check_file(Path(path), config.stop_on_first_failure))
        if failures and config.stop_on_first_failure:
            break

    if failures:
        for f in failures:
            logger.error(f"FAIL {f}")
        sys.exit(1)

    logger.info("All fixtures passed")


if __name__ == "__main__":
    main()
