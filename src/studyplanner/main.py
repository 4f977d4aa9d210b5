"""CLI entrypoint for running the planner API with uvicorn."""

from __future__ import annotations

import os

import uvicorn


def main() -> None:
    """Serve ``studyplanner.app:create_app`` on PLANNER_HOST:PLANNER_PORT."""

    uvicorn.run(
        "studyplanner.app:create_app",
        factory=True,
        host=os.getenv("PLANNER_HOST", "127.0.0.1"),
        port=int(os.getenv("PLANNER_PORT", "8000")),
        reload=False,
    )


if __name__ == "__main__":  # pragma: no cover - manual invocation
    main()
