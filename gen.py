"""Fixed-capacity struct array generator for C#.

Scans C# sources for `ArrayN<T>` references and generates one
`ArrayN<T>` value type per discovered size, plus the `IArray<T>` interface
they all implement. Each type is composed from the largest previously
generated array types so that it carries as few member fields as possible.

Usage:
    python gen.py --namespace Ryujinx.Common.Memory --output-dir obj/generated src/
"""

import argparse
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path

TOOL_NAME = "struct-arrays-gen"
INTERFACE_FILENAME = "IArray.g.cs"
ARRAYS_FILENAME = "Arrays.g.cs"
OUTPUT_FILENAMES = (INTERFACE_FILENAME, ARRAYS_FILENAME)

BASE_SIZES: tuple[int, ...] = (1, 2, 3)
NO_SIZES_MESSAGE = "No struct array types found. Generating base sizes only."


# ===--- CLI config contracts ---=== #


@dataclass(frozen=True)
class GenerateConfig:
    inputs: tuple[Path, ...]
    namespace: str
    output_dir: Path
    verbose: bool = False


@dataclass(frozen=True)
class ListConfig:
    inputs: tuple[Path, ...]
    verbose: bool = False


VALID_ERROR_CODES = {
    "NO_INPUTS",
    "PATH_NOT_FOUND",
    "MISSING_NAMESPACE",
    "INVALID_NAMESPACE",
    "MISSING_OUTPUT_DIR",
    "CONFLICT_LIST_GENERATE",
}
_NAMESPACE_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*$")


class ConfigError(Exception):
    def __init__(self, code: str, message: str, suggestion: str | None = None):
        if code not in VALID_ERROR_CODES:
            raise ValueError(f"Unknown config error code: {code}")
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion


class InvalidSizeError(ValueError):
    """A requested array size is not a positive integer."""

    def __init__(self, size: object):
        super().__init__(f"Array size must be a positive integer, got {size!r}")
        self.size = size


def validate_namespace(name: str) -> str:
    if _NAMESPACE_RE.match(name):
        return name
    raise ConfigError(
        "INVALID_NAMESPACE",
        f"Invalid namespace: {name}",
        "Use a dotted C# identifier path (for example Ryujinx.Common.Memory).",
    )


def validate_path_exists(path: Path, suggestion: str | None = None) -> Path:
    if path.exists():
        return path
    raise ConfigError(
        "PATH_NOT_FOUND",
        f"Input path does not exist: {path}",
        suggestion or "Pass existing source files or directories.",
    )


def build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate fixed-capacity struct array types for C#"
    )

    parser.add_argument("inputs", nargs="*", type=Path)
    parser.add_argument("--namespace", type=str, default=None)
    parser.add_argument("--output-dir", type=Path, default=None)
    parser.add_argument("--list-sizes", action="store_true", default=False)
    parser.add_argument("-v", "--verbose", action="store_true", default=False)

    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = build_argument_parser()
    return parser.parse_args(argv)


def validate_config(args: argparse.Namespace) -> GenerateConfig | ListConfig:
    if not args.inputs:
        raise ConfigError(
            "NO_INPUTS",
            "No input files or directories given.",
            "Pass one or more .cs files or source directories.",
        )

    if args.list_sizes and (args.namespace or args.output_dir):
        raise ConfigError(
            "CONFLICT_LIST_GENERATE",
            "--list-sizes cannot be combined with --namespace or --output-dir.",
            "Drop --list-sizes to generate, or drop the generate flags to list.",
        )

    inputs = tuple(validate_path_exists(Path(path)) for path in args.inputs)

    if args.list_sizes:
        return ListConfig(inputs=inputs, verbose=bool(args.verbose))

    if not args.namespace:
        raise ConfigError(
            "MISSING_NAMESPACE",
            "Generate mode requires --namespace.",
            "Pass the namespace the generated types belong to.",
        )
    namespace = validate_namespace(args.namespace)

    if args.output_dir is None:
        raise ConfigError(
            "MISSING_OUTPUT_DIR",
            "Generate mode requires --output-dir.",
            "Pass the directory the .g.cs files are written to.",
        )

    return GenerateConfig(
        inputs=inputs,
        namespace=namespace,
        output_dir=args.output_dir,
        verbose=bool(args.verbose),
    )


def build_config(argv: list[str] | None = None) -> GenerateConfig | ListConfig:
    return validate_config(parse_args(argv))


# ===--- Data classes ---=== #

FIELD_SCALAR = "scalar"
FIELD_COMPOSITE = "composite"


@dataclass(frozen=True)
class ArrayField:
    """One member field of a generated array type.

    Attributes:
        kind: FIELD_SCALAR (holds one element) or FIELD_COMPOSITE (embeds a
            previously generated array type).
        capacity: Number of elements the field holds. Always 1 for scalars.
        label: Field name in the generated source, e.g. "_e0" or "_array3_2".
    """

    kind: str
    capacity: int
    label: str

    @property
    def type_ref(self) -> str | None:
        """Name of the embedded array type, or None for scalar fields."""
        if self.kind == FIELD_COMPOSITE:
            return array_type_name(self.capacity)
        return None


@dataclass(frozen=True)
class ArrayType:
    """A generated fixed-capacity array: its size and ordered member fields.

    Raises:
        ValueError: If fields is empty, does not start with a scalar, or the
            field capacities do not add up to size exactly.
    """

    size: int
    fields: tuple[ArrayField, ...]

    def __post_init__(self) -> None:
        if not self.fields or self.fields[0].kind != FIELD_SCALAR:
            raise ValueError(f"{self.name} must start with a scalar field")
        total = sum(f.capacity for f in self.fields)
        if total != self.size:
            raise ValueError(
                f"{self.name} field capacities sum to {total}, expected {self.size}"
            )

    @property
    def name(self) -> str:
        return array_type_name(self.size)


@dataclass(frozen=True)
class ArrayInterface:
    name: str
    element_param: str
    index_param: str
    length_member: str


ARRAY_INTERFACE = ArrayInterface(
    name="IArray",
    element_param="T",
    index_param="index",
    length_member="Length",
)


@dataclass(frozen=True)
class CompositionResult:
    """Everything one generation run produced, in emission order.

    Attributes:
        discovered: Normalized (sorted, deduplicated) discovered sizes.
        types: One ArrayType per plan entry, base sizes first.
        interface: The size-independent interface every type implements.
        diagnostics: Non-fatal messages for the caller to report.
    """

    discovered: tuple[int, ...]
    types: tuple[ArrayType, ...]
    interface: ArrayInterface
    diagnostics: tuple[str, ...] = ()

    @property
    def sizes(self) -> tuple[int, ...]:
        return tuple(t.size for t in self.types)


def array_type_name(size: int) -> str:
    return f"Array{size}"


# ===--- Size registry ---=== #


class SizeRegistry:
    """Ascending, append-only record of sizes generated so far in one run."""

    def __init__(self):
        self._sizes: list[int] = []

    def add(self, size: int) -> None:
        if self._sizes and size <= self._sizes[-1]:
            raise ValueError(
                f"Registry sizes must ascend: {size} after {self._sizes[-1]}"
            )
        self._sizes.append(size)

    @property
    def sizes(self) -> tuple[int, ...]:
        return tuple(self._sizes)

    def __contains__(self, size: object) -> bool:
        return size in self._sizes

    def __len__(self) -> int:
        return len(self._sizes)


# ===--- Size composition ---=== #


class ReuseCursor:
    """Scan position into the registry, from its tail, for one type."""

    def __init__(self):
        self.position = 0


def next_block(remaining: int, available: Sequence[int], cursor: ReuseCursor) -> int:
    """Pick the next block size for a type under construction.

    Scans `available` from the largest element the cursor has not inspected
    yet toward the front, and returns the first size that fits in
    `remaining`. The cursor is left on the returned element so a later call
    resumes below it.

    Args:
        remaining: Element capacity still to cover. Must be >= 1.
        available: Ascending sizes already generated in this run.
        cursor: Scan state shared by all calls for one type.

    Returns:
        The largest uninspected available size <= remaining, 1 when a
        scalar field is the only option (empty registry or one element
        left), or 0 when the registry is exhausted without a fit.

    Raises:
        ValueError: If remaining is less than 1.
    """
    if remaining < 1:
        raise ValueError(f"remaining must be >= 1, got {remaining}")
    if not available or remaining == 1:
        return 1

    while cursor.position < len(available):
        cursor.position += 1
        size = available[-cursor.position]
        if size <= remaining:
            return size

    return 0


def _scalar_field(ordinal: int) -> ArrayField:
    return ArrayField(kind=FIELD_SCALAR, capacity=1, label=f"_e{ordinal}")


def compose_array_type(size: int, available: Sequence[int]) -> ArrayType:
    """Build the field list of one array type of `size` elements.

    Field 0 is always a scalar (the generated struct spans from it). The
    remaining capacity is filled with the current reuse block for as long as
    it fits, asking next_block for a smaller one once it no longer does.
    Repeats of the same composite size are labelled _arrayN, _arrayN_2, ...

    Raises:
        InvalidSizeError: If size is not a positive integer.
    """
    if not _is_valid_size(size):
        raise InvalidSizeError(size)

    fields: list[ArrayField] = [_scalar_field(0)]
    if size == 1:
        return ArrayType(size=1, fields=tuple(fields))

    cursor = ReuseCursor()
    reuse_counts: dict[int, int] = {}
    accumulated = 1
    block = 0

    while accumulated < size:
        remaining = size - accumulated
        if block == 0 or block > remaining:
            block = next_block(remaining, available, cursor)

        if block > 1:
            count = reuse_counts.get(block, 0) + 1
            reuse_counts[block] = count
            label = f"_array{block}" if count == 1 else f"_array{block}_{count}"
            fields.append(
                ArrayField(kind=FIELD_COMPOSITE, capacity=block, label=label)
            )
            accumulated += block
        else:
            fields.append(_scalar_field(len(fields)))
            accumulated += 1

    return ArrayType(size=size, fields=tuple(fields))


# ===--- Generation orchestration ---=== #


def _is_valid_size(size: object) -> bool:
    return isinstance(size, int) and not isinstance(size, bool) and size >= 1


def normalize_sizes(discovered: Iterable[int]) -> tuple[int, ...]:
    """Validate, deduplicate and sort discovered sizes ascending.

    Raises:
        InvalidSizeError: On the first size that is not a positive integer.
    """
    unique: set[int] = set()
    for size in discovered:
        if not _is_valid_size(size):
            raise InvalidSizeError(size)
        unique.add(size)
    return tuple(sorted(unique))


def build_generation_plan(discovered: Iterable[int]) -> tuple[int, ...]:
    sizes = normalize_sizes(discovered)
    return BASE_SIZES + tuple(s for s in sizes if s not in BASE_SIZES)


def compose_array_types(discovered: Iterable[int]) -> CompositionResult:
    """Compose every array type required by `discovered`, smallest first.

    Base sizes 1, 2 and 3 are always generated first, from scalar fields
    only. Every other size is composed against the registry as it stands
    when its turn comes, so it can reuse any smaller size generated before it.

    Args:
        discovered: Sizes found in the scanned sources, in any order.

    Returns:
        CompositionResult with types in generation order. An empty
        `discovered` yields the base types and one diagnostic.

    Raises:
        InvalidSizeError: If any discovered size is not a positive integer.
    """
    sizes = normalize_sizes(discovered)
    diagnostics: tuple[str, ...] = () if sizes else (NO_SIZES_MESSAGE,)

    registry = SizeRegistry()
    types: list[ArrayType] = []

    for size in BASE_SIZES:
        types.append(compose_array_type(size, ()))
        registry.add(size)

    for size in sizes:
        if size in registry:
            continue
        types.append(compose_array_type(size, registry.sizes))
        registry.add(size)

    return CompositionResult(
        discovered=sizes,
        types=tuple(types),
        interface=ARRAY_INTERFACE,
        diagnostics=diagnostics,
    )


# ===--- Source scanning ---=== #

_ARRAY_REF_RE = re.compile(r"\bArray(\d+)\s*<")
# Comments and literals are blanked before matching so they contribute no sizes.
_NON_CODE_RE = re.compile(
    r"//[^\n]*"
    r"|/\*.*?\*/"
    r'|@"(?:[^"]|"")*"'
    r'|"(?:\\.|[^"\\\n])*"'
    r"|'(?:\\.|[^'\\\n])*'",
    re.DOTALL,
)
_SKIPPED_BUILD_DIRS = (("obj", "Debug"), ("obj", "Release"))


def scan_array_sizes(text: str) -> frozenset[int]:
    """Return every N referenced as `ArrayN<...>` in C# source text."""
    code = _NON_CODE_RE.sub(" ", text)
    return frozenset(int(m.group(1)) for m in _ARRAY_REF_RE.finditer(code))


def should_skip_input(path: Path) -> bool:
    if path.name.endswith(".g.cs"):
        return True
    parts = path.parts
    for build_dir in _SKIPPED_BUILD_DIRS:
        for i in range(len(parts) - 1):
            if parts[i : i + 2] == build_dir:
                return True
    return False


def collect_input_files(inputs: Iterable[Path]) -> tuple[Path, ...]:
    """Expand input paths into the sorted, deduplicated C# files to scan.

    Files are taken as given; directories are searched recursively for
    *.cs. Generated files and obj/Debug, obj/Release intermediates are
    dropped.
    """
    files: set[Path] = set()
    for path in inputs:
        path = Path(path)
        candidates = sorted(path.rglob("*.cs")) if path.is_dir() else [path]
        for candidate in candidates:
            if not should_skip_input(candidate):
                files.add(candidate)
    return tuple(sorted(files))


def discover_array_sizes(files: Iterable[Path], verbose: bool = False) -> frozenset[int]:
    """Scan every file and return the union of referenced array sizes.

    Raises:
        OSError: If a file cannot be read.
        UnicodeDecodeError: If a file is not valid UTF-8.
    """
    found: set[int] = set()
    for path in files:
        if verbose:
            print(f"Searching for struct array types in: {path}")
        sizes = scan_array_sizes(path.read_text(encoding="utf-8-sig"))
        if verbose:
            for size in sorted(sizes):
                print(f"  Found array size: {size}")
        found.update(sizes)
    return frozenset(found)


# ===--- C# emission ---=== #

_HEADER_BORDER: str = "// x-------------------------------------------x"
_INDENT = "    "


@dataclass(frozen=True)
class WriteConfig:
    """Shared generation metadata embedded in every file preamble.

    Attributes:
        namespace: C# namespace every generated type is declared in.
        sizes: Generated sizes in emission order, listed in the header.
    """

    namespace: str
    sizes: tuple[int, ...]


@dataclass(frozen=True)
class SourceFileSpec:
    """Complete input for one generated .g.cs file.

    Attributes:
        filename: Output filename, e.g. "Arrays.g.cs".
        usings: Namespaces imported with `using`, in declaration order.
        body_lines: Lines declared inside the namespace block, unindented.
    """

    filename: str
    usings: tuple[str, ...]
    body_lines: tuple[str, ...]


def format_file_header(config: WriteConfig) -> list[str]:
    """Return the comment block at the top of every generated file.

    Output format:
        // <auto-generated />
        // x-------------------------------------------x
        // | Struct arrays for Ryujinx.Common.Memory
        // | Generated by struct-arrays-gen
        // | Sizes: 1, 2, 3, 5, 8
        // x-------------------------------------------x

    Raises:
        ValueError: If config.namespace is empty.
    """
    if not config.namespace:
        raise ValueError("namespace must not be empty")

    sizes = ", ".join(str(s) for s in config.sizes)
    return [
        "// <auto-generated />",
        _HEADER_BORDER,
        f"// | Struct arrays for {config.namespace}",
        f"// | Generated by {TOOL_NAME}",
        f"// | Sizes: {sizes}",
        _HEADER_BORDER,
    ]


def _indent(lines: Iterable[str], depth: int = 1) -> list[str]:
    prefix = _INDENT * depth
    return [f"{prefix}{line}" if line else "" for line in lines]


def _block(header: str, body: list[str]) -> list[str]:
    return [header, "{", *_indent(body), "}"]


def generate_interface_lines(interface: ArrayInterface) -> list[str]:
    t = interface.element_param
    body = [
        "/// <summary>",
        "/// Used to index the array.",
        "/// </summary>",
        f'/// <param name="{interface.index_param}">Element index</param>',
        "/// <returns>Element at the specified index</returns>",
        f"ref {t} this[int {interface.index_param}] {{ get; }}",
        "",
        "/// <summary>",
        "/// Number of elements on the array.",
        "/// </summary>",
        f"int {interface.length_member} {{ get; }}",
    ]
    return [
        "/// <summary>",
        "/// Array interface.",
        "/// </summary>",
        f'/// <typeparam name="{t}">Element type</typeparam>',
        *_block(
            f"public interface {interface.name}<{t}> where {t} : unmanaged", body
        ),
    ]


def format_field_declaration(field: ArrayField, element_param: str = "T") -> str:
    if field.kind == FIELD_COMPOSITE:
        return f"{field.type_ref}<{element_param}> {field.label};"
    return f"{element_param} {field.label};"


def generate_array_struct(array_type: ArrayType, interface: ArrayInterface) -> list[str]:
    t = interface.element_param
    first, *rest = array_type.fields

    body = [format_field_declaration(first, t)]
    # Fields past _e0 are only reached through the span, never by name.
    if rest:
        body.append("#pragma warning disable CS0169")
        body.extend(format_field_declaration(f, t) for f in rest)
        body.append("#pragma warning restore CS0169")

    body.extend(
        [
            "",
            f"public int {interface.length_member} => {array_type.size};",
            f"public ref {t} this[int {interface.index_param}] => "
            f"ref AsSpan()[{interface.index_param}];",
            f"public Span<{t}> AsSpan() => "
            f"MemoryMarshal.CreateSpan(ref {first.label}, {interface.length_member});",
        ]
    )
    return _block(
        f"public struct {array_type.name}<{t}> : {interface.name}<{t}> "
        f"where {t} : unmanaged",
        body,
    )


def assemble_source(config: WriteConfig, spec: SourceFileSpec) -> str:
    """Assemble a complete C# source string from a SourceFileSpec.

    File structure:
        <header comment block>
        <blank line>
        <using lines, then a blank line>      <- only when usings present
        namespace <config.namespace>
        {
            <body_lines, indented one level>
        }
        <trailing newline>

    Raises:
        ValueError: If spec.filename does not end with ".g.cs".
        ValueError: Propagated from format_file_header on empty namespace.
    """
    if not spec.filename.endswith(".g.cs"):
        raise ValueError(
            f"spec.filename must end with '.g.cs', got {spec.filename!r}"
        )

    parts: list[str] = list(format_file_header(config))
    parts.append("")

    if spec.usings:
        parts.extend(f"using {name};" for name in spec.usings)
        parts.append("")

    parts.extend(_block(f"namespace {config.namespace}", list(spec.body_lines)))
    return "\n".join(parts) + "\n"


def build_interface_spec(interface: ArrayInterface) -> SourceFileSpec:
    return SourceFileSpec(
        filename=INTERFACE_FILENAME,
        usings=(),
        body_lines=tuple(generate_interface_lines(interface)),
    )


def build_arrays_spec(result: CompositionResult) -> SourceFileSpec:
    body: list[str] = []
    for array_type in result.types:
        if body:
            body.append("")
        body.extend(generate_array_struct(array_type, result.interface))
    return SourceFileSpec(
        filename=ARRAYS_FILENAME,
        usings=("System", "System.Runtime.InteropServices"),
        body_lines=tuple(body),
    )


# ===--- Writer I/O functions ---=== #


@dataclass(frozen=True)
class FileWriteResult:
    """Result of writing a single generated file.

    Attributes:
        filename: Filename written, e.g. "Arrays.g.cs".
        path: Absolute path of the written file.
        line_count: Number of newline characters in the written content.
        byte_count: Number of bytes written (UTF-8 encoded).
    """

    filename: str
    path: Path
    line_count: int
    byte_count: int


@dataclass(frozen=True)
class OutputWriteResult:
    """Result of writing every generated file, in write order."""

    output_dir: Path
    files: tuple[FileWriteResult, ...]

    @property
    def total_lines(self) -> int:
        return sum(f.line_count for f in self.files)

    @property
    def paths(self) -> tuple[Path, ...]:
        return tuple(f.path for f in self.files)


def remove_stale_outputs(output_dir: Path) -> tuple[Path, ...]:
    """Delete previously generated files so every run starts from scratch.

    Returns:
        Paths that existed and were removed.
    """
    removed: list[Path] = []
    for filename in OUTPUT_FILENAMES:
        path = Path(output_dir) / filename
        if path.exists():
            path.unlink()
            removed.append(path)
    return tuple(removed)


def write_source_file(
    output_dir: Path, config: WriteConfig, spec: SourceFileSpec
) -> FileWriteResult:
    """Write one generated file, creating output_dir if absent.

    Raises:
        ValueError: Propagated from assemble_source on invalid spec.
        OSError: Propagated directly if the filesystem write fails.
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    content = assemble_source(config, spec)
    file_path = output_dir / spec.filename
    file_path.write_text(content, encoding="utf-8")
    resolved = file_path.resolve()
    return FileWriteResult(
        filename=spec.filename,
        path=resolved,
        line_count=content.count("\n"),
        byte_count=len(resolved.read_bytes()),
    )


def write_outputs(
    output_dir: Path, config: WriteConfig, result: CompositionResult
) -> OutputWriteResult:
    """Write the interface file, then the arrays file.

    No rollback: an OSError on the second write leaves the first in place.
    """
    files = (
        write_source_file(output_dir, config, build_interface_spec(result.interface)),
        write_source_file(output_dir, config, build_arrays_spec(result)),
    )
    return OutputWriteResult(output_dir=Path(output_dir), files=files)


# ===--- Pipeline ---=== #


def discover_from_inputs(
    inputs: Iterable[Path], verbose: bool = False
) -> tuple[tuple[Path, ...], frozenset[int]]:
    files = collect_input_files(inputs)
    print(f"Scanning: {len(files)} source files")
    sizes = discover_array_sizes(files, verbose=verbose)
    print(f"  Discovered: {len(sizes)} distinct array sizes")
    return files, sizes


def report_diagnostics(result: CompositionResult) -> None:
    for message in result.diagnostics:
        print(f"Warning: {message}")


def run_generate(config: GenerateConfig) -> OutputWriteResult:
    """Execute the complete generation pipeline for a GenerateConfig.

    Stages: collect inputs -> scan sizes -> compose -> remove stale
    outputs -> write -> summary.

    Raises:
        OSError: Unreadable input or filesystem write failure.
        UnicodeDecodeError: Input file is not valid UTF-8.
        InvalidSizeError: A source references a non-positive array size.
    """
    files, sizes = discover_from_inputs(config.inputs, config.verbose)

    result = compose_array_types(sizes)
    report_diagnostics(result)
    print(f"  Composed: {len(result.types)} array types")

    remove_stale_outputs(config.output_dir)
    write_config = WriteConfig(namespace=config.namespace, sizes=result.sizes)
    written = write_outputs(config.output_dir, write_config, result)
    print(
        f"  Written: {len(written.files)} files, "
        f"{written.total_lines} lines to {written.output_dir}"
    )

    summary = build_generation_summary(config, len(files), result, written)
    print_generation_summary(summary)
    return written


def format_composition_table(result: CompositionResult) -> str:
    """Render one `ArrayN = T + ArrayM + ...` row per generated type."""
    width = max(len(t.name) for t in result.types)
    lines: list[str] = []
    discovered = ", ".join(str(s) for s in result.discovered) or "none"
    lines.append(f"Discovered sizes: {discovered}")
    lines.append("")
    for array_type in result.types:
        parts = " + ".join(f.type_ref or "T" for f in array_type.fields)
        count = len(array_type.fields)
        noun = "field" if count == 1 else "fields"
        lines.append(f"  {array_type.name:<{width}} = {parts}  ({count} {noun})")
    lines.append("")
    return "\n".join(lines)


def run_list(config: ListConfig) -> CompositionResult:
    _files, sizes = discover_from_inputs(config.inputs, config.verbose)
    result = compose_array_types(sizes)
    report_diagnostics(result)
    print()
    print(format_composition_table(result), end="")
    return result


# ===--- Summary report ---=== #


@dataclass(frozen=True)
class FieldCounts:
    """Field totals across all generated types.

    Invariant: scalar + composite == total.
    """

    total: int
    scalar: int
    composite: int


@dataclass(frozen=True)
class GenerationSummary:
    namespace: str
    input_count: int
    output_dir: str
    discovered: tuple[int, ...]
    type_count: int
    fields: FieldCounts
    files: tuple[FileWriteResult, ...]


def build_field_counts(types: Iterable[ArrayType]) -> FieldCounts:
    scalar = 0
    composite = 0
    for array_type in types:
        for field in array_type.fields:
            if field.kind == FIELD_COMPOSITE:
                composite += 1
            else:
                scalar += 1
    return FieldCounts(total=scalar + composite, scalar=scalar, composite=composite)


def build_generation_summary(
    config: GenerateConfig,
    input_count: int,
    result: CompositionResult,
    write_result: OutputWriteResult,
) -> GenerationSummary:
    return GenerationSummary(
        namespace=config.namespace,
        input_count=input_count,
        output_dir=str(write_result.output_dir),
        discovered=result.discovered,
        type_count=len(result.types),
        fields=build_field_counts(result.types),
        files=write_result.files,
    )


def format_generation_summary(summary: GenerationSummary) -> str:
    """Render a GenerationSummary to the multi-section console string.

    Returns a string with exactly one trailing newline.
    """
    discovered = ", ".join(str(s) for s in summary.discovered) or "none"

    lines: list[str] = []
    lines.append("Struct arrays generated:")
    lines.append("")
    lines.append(f"  Namespace:  {summary.namespace}")
    lines.append(f"  Inputs:     {summary.input_count} source files")
    lines.append(f"  Output:     {summary.output_dir}")
    lines.append(f"  Discovered: {discovered}")
    lines.append("")
    lines.append("  Types generated:")
    lines.append(f"    {'Array types:':<18}{summary.type_count:>6}")
    lines.append(f"    {'Scalar fields:':<18}{summary.fields.scalar:>6}")
    lines.append(f"    {'Composite fields:':<18}{summary.fields.composite:>6}")

    lines.append("")
    lines.append("  Files written:")
    for file_result in summary.files:
        line_str = f"{file_result.line_count:>6,} lines"
        lines.append(f"    {file_result.filename:<16} {line_str}")

    total_lines = sum(f.line_count for f in summary.files)
    lines.append("")
    lines.append(f"  Total: {total_lines:,} lines across {len(summary.files)} files")
    lines.append("")

    return "\n".join(lines)


def print_generation_summary(summary: GenerationSummary) -> None:
    print(format_generation_summary(summary), end="")


# ===--- Main generation ---=== #


def main(argv: list[str] | None = None):
    try:
        config = build_config(argv)
    except ConfigError as err:
        print(f"Config error [{err.code}]: {err.message}")
        if err.suggestion:
            print(f"Hint: {err.suggestion}")
        raise SystemExit(1) from err

    try:
        if isinstance(config, ListConfig):
            run_list(config)
        else:
            run_generate(config)
    except (OSError, UnicodeDecodeError) as err:
        print(f"Error: {err}")
        raise SystemExit(1) from err
    except ValueError as err:
        print(f"Error: {err}")
        raise SystemExit(1) from err


if __name__ == "__main__":
    main()
