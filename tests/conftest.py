import argparse
import sys
from collections.abc import Callable
from pathlib import Path

import pytest

GENERATOR_DIR = Path(__file__).resolve().parent.parent
if str(GENERATOR_DIR) not in sys.path:
    sys.path.insert(0, str(GENERATOR_DIR))

import gen  # noqa: E402


@pytest.fixture
def source_tree(tmp_path: Path) -> Path:
    src = tmp_path / "src"
    (src / "Memory").mkdir(parents=True)
    (src / "Memory" / "Buffers.cs").write_text(
        "struct Buffers\n"
        "{\n"
        "    public Array5<int> Sizes;\n"
        "    public Array8<ulong> Handles;\n"
        "}\n",
        encoding="utf-8",
    )
    (src / "Queue.cs").write_text(
        "class Queue { private Array8<byte> _slots; }\n", encoding="utf-8"
    )
    return src


@pytest.fixture
def write_source(tmp_path: Path) -> Callable[[str, str], Path]:
    def _write_source(relative: str, text: str) -> Path:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    return _write_source


@pytest.fixture
def make_args(source_tree: Path, tmp_path: Path) -> Callable[..., argparse.Namespace]:
    def _make_args(**overrides: object) -> argparse.Namespace:
        base_args: dict[str, object] = {
            "inputs": [source_tree],
            "namespace": "Ryujinx.Common.Memory",
            "output_dir": tmp_path / "out",
            "list_sizes": False,
            "verbose": False,
        }
        base_args.update(overrides)
        return argparse.Namespace(**base_args)

    return _make_args


@pytest.fixture
def make_field() -> Callable[..., gen.ArrayField]:
    def _make_field(label: str, capacity: int = 1) -> gen.ArrayField:
        kind = gen.FIELD_SCALAR if capacity == 1 else gen.FIELD_COMPOSITE
        return gen.ArrayField(kind=kind, capacity=capacity, label=label)

    return _make_field
