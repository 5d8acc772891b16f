from __future__ import annotations

from pathlib import Path
import subprocess
import sys


EXPECTED_FILES = {"IArray.g.cs", "Arrays.g.cs"}


def _tool_root() -> Path:
    return Path(__file__).resolve().parents[2]


def _run(args: list[str], cwd: Path | None = None) -> subprocess.CompletedProcess[str]:
    run_cwd = _tool_root() if cwd is None else cwd
    return subprocess.run(
        [sys.executable, "gen.py", *args],
        cwd=run_cwd,
        capture_output=True,
        text=True,
        check=False,
    )


def _write_sources(root: Path) -> Path:
    src = root / "src"
    src.mkdir(parents=True)
    (src / "Surface.cs").write_text(
        "struct Surface { Array8<uint> Planes; Array5<byte> Flags; }\n",
        encoding="utf-8",
    )
    return src


def _run_generate(src: Path, output_dir: Path) -> subprocess.CompletedProcess[str]:
    return _run(
        [
            str(src.resolve()),
            "--namespace",
            "Ryujinx.Common.Memory",
            "--output-dir",
            str(output_dir.resolve()),
        ]
    )


def test_t_01_generate_writes_expected_surface(tmp_path: Path) -> None:
    output_dir = tmp_path / "generated"

    result = _run_generate(_write_sources(tmp_path), output_dir)

    assert result.returncode == 0
    assert "Struct arrays generated:" in result.stdout
    assert "Total:" in result.stdout
    assert {p.name for p in output_dir.glob("*.g.cs")} == EXPECTED_FILES
    arrays = (output_dir / "Arrays.g.cs").read_text(encoding="utf-8")
    assert "public struct Array8<T> : IArray<T> where T : unmanaged" in arrays


def test_t_02_generate_is_byte_identical_across_runs(tmp_path: Path) -> None:
    src = _write_sources(tmp_path)
    first_dir = tmp_path / "first"
    second_dir = tmp_path / "second"

    assert _run_generate(src, first_dir).returncode == 0
    assert _run_generate(src, second_dir).returncode == 0

    for name in EXPECTED_FILES:
        assert (first_dir / name).read_bytes() == (second_dir / name).read_bytes()


def test_t_03_empty_discovery_warns_and_writes_base_types(tmp_path: Path) -> None:
    src = tmp_path / "src"
    src.mkdir()
    (src / "Plain.cs").write_text("class Plain { int[] values; }\n", encoding="utf-8")
    output_dir = tmp_path / "generated"

    result = _run_generate(src, output_dir)

    assert result.returncode == 0
    assert "Warning: No struct array types found." in result.stdout
    arrays = (output_dir / "Arrays.g.cs").read_text(encoding="utf-8")
    assert "struct Array3<T>" in arrays
    assert "struct Array4<T>" not in arrays


def test_t_04_list_sizes_is_read_only(tmp_path: Path) -> None:
    src = _write_sources(tmp_path)

    result = _run(["--list-sizes", str(src.resolve())])

    assert result.returncode == 0
    assert "Discovered sizes: 5, 8" in result.stdout
    assert "Array8 = T + Array5 + Array2" in result.stdout
    assert sorted(p.name for p in tmp_path.rglob("*.g.cs")) == []


def test_t_05_unknown_flag_returns_argparse_usage_code() -> None:
    result = _run(["--not-a-flag"])

    assert result.returncode == 2


def test_t_06_missing_namespace_returns_config_error(tmp_path: Path) -> None:
    src = _write_sources(tmp_path)

    result = _run([str(src.resolve()), "--output-dir", str(tmp_path / "out")])

    assert result.returncode == 1
    assert "Config error [MISSING_NAMESPACE]" in result.stdout
    assert not (tmp_path / "out").exists()
