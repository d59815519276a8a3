#!/usr/bin/env python3
"""
Send N form submissions in parallel to POST /api/submit.

Each request inserts one row into --table of the database at --destination,
e.g. for a MySQL table ``todo (title VARCHAR(255), done TINYINT)``:

  python scripts/submit_concurrent.py \
      --destination "jdbc:mysql://localhost:3306/forms?user=app&password=app" \
      --table todo --concurrent 20

Expected: N x HTTP 204. Failures print the short error returned by the server.

Usage:
  python scripts/submit_concurrent.py [--url URL] [--destination URL] [--table T] [--concurrent N]
  Or set env: SUBMIT_URL, DESTINATION_URL, TABLE, CONCURRENT
"""

import argparse
import os
import sys
from concurrent.futures import ThreadPoolExecutor, as_completed

try:
    import requests
except ImportError:
    print("Install requests: pip install requests", file=sys.stderr)
    sys.exit(1)


def do_request(
    url: str,
    destination: str,
    table: str,
    index: int,
) -> tuple[int, int, str]:
    """Send one submission; return (index, status_code, body)."""
    body = {
        "schema": {
            "type": "object",
            "properties": {
                "title": {"type": "string"},
                "done": {"type": "boolean"},
            },
        },
        "destination": {"url": destination, "table": table},
        "data": {"title": f"concurrent submission {index}", "done": index % 2 == 0},
    }
    try:
        r = requests.post(url, json=body, timeout=30)
        return (index, r.status_code, r.text)
    except requests.RequestException as e:
        return (index, -1, str(e))  # -1 = error


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Send N parallel form submissions to /api/submit."
    )
    parser.add_argument(
        "--url",
        default=os.environ.get("SUBMIT_URL", "http://localhost:8000/api/submit"),
        help="Submit endpoint URL",
    )
    parser.add_argument(
        "--destination",
        default=os.environ.get("DESTINATION_URL", ""),
        help="Destination database URL (or set DESTINATION_URL env)",
    )
    parser.add_argument(
        "--table",
        default=os.environ.get("TABLE", "todo"),
        help="Destination table (default todo)",
    )
    parser.add_argument(
        "--concurrent",
        type=int,
        default=int(os.environ.get("CONCURRENT", "20")),
        help="Number of concurrent requests (default 20)",
    )
    args = parser.parse_args()

    if not args.destination:
        print("Error: --destination or DESTINATION_URL env required", file=sys.stderr)
        sys.exit(1)

    print(f"Sending {args.concurrent} concurrent submissions to {args.url}")
    print("---")

    results: list[tuple[int, int, str]] = []
    with ThreadPoolExecutor(max_workers=args.concurrent) as executor:
        futures = {
            executor.submit(do_request, args.url, args.destination, args.table, i): i
            for i in range(1, args.concurrent + 1)
        }
        for fut in as_completed(futures):
            idx, code, text = fut.result()
            results.append((idx, code, text))
            code_str = str(code) if code >= 0 else "ERR"
            suffix = f" {text!r}" if code != 204 else ""
            print(f"{idx} HTTP {code_str}{suffix}")

    print("---")
    ok = sum(1 for _, c, _ in results if c == 204)
    failed = sum(1 for _, c, _ in results if c >= 400)
    err = sum(1 for _, c, _ in results if c < 0)
    print(f"Done. 204={ok} failed={failed} errors={err}")


if __name__ == "__main__":
    main()
