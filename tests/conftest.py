"""Pytest hooks to generate instruction fixtures (EEST-style)."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import pytest

from sysprog_spec.instructions import build_instruction
from sysprog_spec.types import Instruction, InstructionParams
from tools.fixtures_io import instruction_to_json, params_to_json
from tools.yaml_dump import write_yaml

_INSTRUCTION_VECTORS: list[dict[str, Any]] = []


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        "--output",
        action="store",
        default=None,
        help="Output directory for generated fixtures",
    )


@pytest.fixture
def instruction_vector() -> Callable[[str, InstructionParams], Instruction]:
    """Build an instruction from params, record it as a vector and return it."""

    def _instruction_vector(name: str, params: InstructionParams) -> Instruction:
        ix = build_instruction(params)
        _INSTRUCTION_VECTORS.append(
            {
                "name": name,
                "params": params_to_json(params),
                "expected": instruction_to_json(ix),
            }
        )
        return ix

    return _instruction_vector


def pytest_sessionfinish(session: pytest.Session, exitstatus: int) -> None:
    output_dir = session.config.getoption("--output")
    if not output_dir or not _INSTRUCTION_VECTORS:
        return

    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)

    payload = {"vectors": _INSTRUCTION_VECTORS}
    (out / "instructions.json").write_text(json.dumps(payload, indent=2))
    write_yaml(out / "instructions.yaml", payload)
