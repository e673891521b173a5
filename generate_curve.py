#!/usr/bin/env python3
"""
Generate a custom delivery curve from a JSON request file.

Usage: python3 generate_curve.py <request_file.json>

The request names a tool ("preview_curve" by default, "build_pacing_curve"
or "get_flight_bounds") alongside that tool's arguments. The result is
written as JSON to stdout.

Security: This script only reads from the specified JSON file and writes
to stdout. It does not accept any code or commands as input.
"""

import json
import sys

from curve_tools import invoke_tool
from curvesmith.errors import CurveError


def main() -> None:
    if len(sys.argv) != 2:
        print(json.dumps({"error": "Usage: generate_curve.py <request_file.json>"}))
        sys.exit(1)

    request_file = sys.argv[1]

    try:
        with open(request_file) as f:
            data = json.load(f)

        tool_name = data.pop("tool", "preview_curve")
        result = invoke_tool(tool_name, data)

        print(json.dumps(result))

    except FileNotFoundError:
        print(json.dumps({"error": f"Request file not found: {request_file}"}))
        sys.exit(1)
    except json.JSONDecodeError as e:
        print(json.dumps({"error": f"Invalid JSON in request file: {e}"}))
        sys.exit(1)
    except KeyError as e:
        print(json.dumps({"error": f"Missing required field: {e}"}))
        sys.exit(1)
    except CurveError as e:
        print(json.dumps({"error": e.message, "code": e.code}))
        sys.exit(1)
    except Exception as e:
        print(json.dumps({"error": f"Curve generation failed: {e}"}))
        sys.exit(1)


if __name__ == "__main__":
    main()
