from __future__ import annotations

import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from provisioner.api.main import app as api_app

DEFAULT_DESTINATION = Path("docs/api/openapi.json")


def main(argv: list[str] | None = None) -> None:
    """Write the provisioner OpenAPI schema (default: docs/api/openapi.json)."""
    args = sys.argv[1:] if argv is None else argv
    destination = Path(args[0]) if args else DEFAULT_DESTINATION
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_text(json.dumps(api_app.openapi(), indent=2))
    print(f"OpenAPI schema written to {destination}")


if __name__ == "__main__":
    main()
