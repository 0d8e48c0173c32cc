"""
Write the service's OpenAPI schema to interfaces/openapi.json.

Usage:
    python -m member_search.api.generate_openapi
"""
import json
import os

from member_search.api.main import app


def main(output_dir: str = "interfaces") -> str:
    """Dump the OpenAPI schema (REST routes live under /api/v1) and return the file path."""
    openapi_schema = app.openapi()

    os.makedirs(output_dir, exist_ok=True)
    output_path = os.path.join(output_dir, "openapi.json")
    with open(output_path, "w") as f:
        json.dump(openapi_schema, f, indent=2)
    return output_path


if __name__ == "__main__":
    main()
