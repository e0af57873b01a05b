"""Export the timer and schedule API's OpenAPI document to a static JSON file.

Usage:
    python scripts/export_openapi.py                 # writes ./openapi.json
    python scripts/export_openapi.py docs/api.json   # custom path
"""

import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from main import app  # noqa: E402

DEFAULT_PATH = Path(__file__).resolve().parent.parent / "openapi.json"


def main():
    target = Path(sys.argv[1]) if len(sys.argv) > 1 else DEFAULT_PATH
    document = app.openapi()
    paths = sorted(document.get("paths", {}))
    target.write_text(json.dumps(document, indent=2) + "\n")
    print(f"Wrote {target} ({len(paths)} paths)")


if __name__ == "__main__":
    main()
