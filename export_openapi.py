import json
import sys
from pathlib import Path

from ip_verifier.main import app

DEFAULT_OUT_PATH = Path("openapi") / "openapi.generated.json"


def export_schema(out_path: Path = DEFAULT_OUT_PATH) -> Path:
    """Write the service's OpenAPI schema as pretty-printed JSON."""
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(json.dumps(app.openapi(), indent=2, sort_keys=True) + "\n")
    return out_path


def main() -> None:
    out_path = Path(sys.argv[1]) if len(sys.argv) > 1 else DEFAULT_OUT_PATH
    print(f"Wrote {export_schema(out_path)}")  # noqa: T201


if __name__ == "__main__":
    main()
