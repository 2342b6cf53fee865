"""CLI demo that tags a handful of shipments through :mod:`shipdash`.

Run with the virtual environment activated::

    python examples/demo_tag_batch.py VIP se-123 se-456

Set ``SS_API_KEY`` (and optionally ``SS_BASE_URL``) first. Pass ``--detach`` to
remove the tag instead.
"""

import logging
import os
import sys
from pprint import pprint

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
SRC_DIR = os.path.join(PROJECT_ROOT, "src")
if SRC_DIR not in sys.path:
    sys.path.insert(0, SRC_DIR)

from shipdash import ShipStation, ValidationError, apply_tag_batch

logging.basicConfig(level=logging.INFO)


def main(argv: list[str]) -> int:
    action = "detach" if "--detach" in argv else "attach"
    args = [arg for arg in argv if arg != "--detach"]
    if len(args) < 2:
        print(__doc__)
        return 2

    tag_name, order_ids = args[0], args[1:]
    client = ShipStation()

    tags = client.tags.list() or []
    print(f"Account has {len(tags)} tags")
    if action == "attach" and tag_name not in {tag.get("name") for tag in tags}:
        print(f"Tag {tag_name!r} does not exist yet; creating it")
        client.tags.create(tag_name, "#3b82f6")

    try:
        report = apply_tag_batch(
            client,
            {"orderIds": order_ids, "tagName": tag_name, "action": action},
            show_progress=True,
        )
    except ValidationError as exc:
        print(f"Invalid request: {exc}")
        return 2

    pprint(report)
    return 0 if report["overallStatus"] == "success" else 1


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
