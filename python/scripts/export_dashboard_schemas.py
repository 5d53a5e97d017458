"""Write the dashboard record schemas to disk so the UI build can validate fixtures."""

from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

SCRIPT_PATH = Path(__file__).resolve()
PYTHON_ROOT = SCRIPT_PATH.parent.parent
PROJECT_ROOT = PYTHON_ROOT.parent

for candidate in (PROJECT_ROOT, PYTHON_ROOT):
    if str(candidate) not in sys.path:
        sys.path.insert(0, str(candidate))

from studio_core import dashboard_json_schemas  # noqa: E402 - path adjusted above


def schema_filename(family: str) -> str:
    return f"{family.replace('_', '-')}.schema.json"


def export_dashboard_schemas(
    output_dir: Path,
    *,
    families: Sequence[str] | None = None,
    pretty: bool = False,
) -> list[Path]:
    """Write ``catalog.json`` plus one file per record family; return the paths written."""

    catalog = dashboard_json_schemas()
    if families:
        unknown = sorted(set(families) - set(catalog))
        if unknown:
            raise KeyError(f"Unknown schema families: {', '.join(unknown)}")
        catalog = {family: catalog[family] for family in families}

    output_dir.mkdir(parents=True, exist_ok=True)
    written = [_dump(output_dir / "catalog.json", catalog, pretty)]
    for family, schema in catalog.items():
        written.append(_dump(output_dir / schema_filename(family), schema, pretty))
    return written


def _dump(path: Path, document: Any, pretty: bool) -> Path:
    path.write_text(json.dumps(document, indent=2 if pretty else None), encoding="utf-8")
    return path


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("schema-exports"),
        help="Directory to write the generated schema files into.",
    )
    parser.add_argument(
        "--family",
        action="append",
        dest="families",
        choices=sorted(dashboard_json_schemas()),
        help="Restrict the export to one record family (repeatable).",
    )
    parser.add_argument("--pretty", action="store_true", help="Indent JSON output by two spaces.")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    output_dir = args.output.expanduser()
    files = export_dashboard_schemas(output_dir, families=args.families, pretty=args.pretty)
    names = ", ".join(path.name for path in files)
    print(f"Wrote {len(files)} schema files to {output_dir.resolve()} ({names})")
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
