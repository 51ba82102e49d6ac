#!/usr/bin/env python3
"""Webhook listener that pulls token updates and regenerates Swift files.

POST /figma-webhook with ``{"event": "tokens_updated", ...}`` runs the pull
command and then the regenerate command from the pipeline config. Updates are
serialised: a second notification waits until the running one finishes.
"""
from __future__ import annotations

import os
import shlex
import subprocess
import threading
from pathlib import Path
from typing import Any, Callable, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from rich.console import Console

from automation.shared.settings import load_config, load_environment
from automation.shared.tokens import utc_timestamp

console = Console()

TOKENS_UPDATED = "tokens_updated"


class CommandError(RuntimeError):
    pass


class WebhookPayload(BaseModel):
    event: str
    repository: Optional[str] = None
    commit: Optional[str] = None
    timestamp: Optional[str] = None


def as_argv(command: Any) -> list[str]:
    if isinstance(command, str):
        return shlex.split(command)
    return [str(part) for part in command]


def run_command(command: list[str], cwd: Path) -> str:
    console.log("$ " + " ".join(command))
    if not Path(cwd).is_dir():
        raise CommandError(f"Working directory not found: {cwd}")
    try:
        completed = subprocess.run(command, cwd=cwd, capture_output=True, text=True)
    except FileNotFoundError as err:
        raise CommandError(f"Command not found: {command[0]}") from err
    except OSError as err:
        raise CommandError(f"Command could not start: {' '.join(command)}: {err}") from err
    if completed.returncode != 0:
        stderr = completed.stderr.strip()
        console.print(f"[bold red]Command failed ({completed.returncode}): {' '.join(command)}")
        raise CommandError(f"Command failed: {' '.join(command)}" + (f": {stderr}" if stderr else ""))
    output = completed.stdout.strip()
    if output:
        console.print(output)
    return completed.stdout


def create_app(
    config: dict[str, Any] | None = None,
    runner: Callable[[list[str], Path], str] = run_command,
) -> FastAPI:
    config = config or load_config()
    webhook = config["webhook"]
    workdir = Path(webhook.get("workdir") or ".")
    steps = [as_argv(webhook["pull_command"]), as_argv(webhook["generate_command"])]
    update_lock = threading.Lock()

    app = FastAPI(title="Figma tokens webhook")

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        console.log(f"{request.method} {request.url.path}")
        return await call_next(request)

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok", "timestamp": utc_timestamp(), "service": webhook["service"]}

    @app.post("/figma-webhook")
    def figma_webhook(payload: WebhookPayload):
        if payload.event != TOKENS_UPDATED:
            console.print(f"Ignoring non-tokens event: {payload.event}")
            return {"success": True, "message": "Event ignored", "event": payload.event}

        console.print(f"Processing tokens update for {payload.repository} ({payload.commit})")
        with update_lock:
            try:
                for step in steps:
                    runner(step, workdir)
            except CommandError as err:
                console.print(f"[bold red]Webhook processing failed: {err}")
                return JSONResponse(status_code=500, content={"success": False, "error": str(err)})

        console.print("[green]Design tokens updated successfully")
        return {
            "success": True,
            "message": "Tokens updated successfully",
            "repository": payload.repository,
            "commit": payload.commit,
            "timestamp": utc_timestamp(),
        }

    return app


def main() -> None:
    load_environment()
    port = int(os.getenv("PORT", "3000"))
    host = os.getenv("HOST", "0.0.0.0")
    console.print(f"Figma tokens webhook listening on {host}:{port}")
    console.print(f"Webhook URL: http://localhost:{port}/figma-webhook")
    console.print(f"Health check: http://localhost:{port}/health")
    uvicorn.run(create_app(), host=host, port=port)


if __name__ == "__main__":
    main()
