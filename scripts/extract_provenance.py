"""Print the provenance metadata embedded in a PNG or MP4 file as JSON."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from cpr_backend.features.metadata.service import extract, guess_media_kind  # noqa: E402
from cpr_shared import request_id_var  # noqa: E402


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Extract the ComfyUI graph and prompts embedded in a PNG or MP4 file."
    )
    parser.add_argument("path", help="PNG or MP4 file to read.")
    parser.add_argument(
        "--raw",
        action="store_true",
        help="Include the pretty-printed graph JSON in the output.",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    path = Path(args.path)
    if not path.is_file():
        print(f"file not found: {path}")
        return 1

    request_id_var.set(path.name)
    res = extract(path.read_bytes(), guess_media_kind(path.name))
    if not res.ok or res.data is None:
        print(f"[{res.code}] {res.error}")
        return 1

    payload = res.data.to_dict()
    if not args.raw:
        payload.pop("rawJson", None)
    print(json.dumps(payload, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
