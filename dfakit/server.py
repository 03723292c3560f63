"""
dfakit HTTP server.

A thin FastAPI layer over the machine core:
- GET  /                     mod-three HTML page
- POST /modthree             form field ``binaryInput``, remainder as an htmx fragment
- GET  /machines             registered machine names
- POST /machines/{name}/run  JSON run API reporting error kinds

Machines are built once at startup and shared between requests; runs keep
their state locally so sharing is safe.
"""

import logging
from typing import Any, Dict, List, Optional

import uvicorn
from fastapi import FastAPI, Form, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel

from dfakit import __version__
from dfakit.config.settings import DfakitSettings
from dfakit.machine.engine import FiniteStateMachine
from dfakit.machine.errors import MachineError
from dfakit.machine.parser import MachineRegistry

logger = logging.getLogger(__name__)

MOD_THREE = "mod-three"

PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
    <head>
        <meta charset="utf-8">
        <meta name="viewport" content="width=device-width, initial-scale=1">
        <title>Mod-Three Finite State Machine</title>
        <script src="https://unpkg.com/htmx.org@2.0.4"></script>
        <style>
            body {{ font-family: sans-serif; margin: 2rem auto; max-width: 32rem; color: #1f2937; }}
            label, .result {{ display: block; margin: 0.5rem 0; }}
            #remainder {{ display: inline-block; min-width: 6rem; padding: 0.25rem; border: 1px solid #9ca3af; background: #fef3c7; }}
            .error {{ color: #b91c1c; font-weight: bold; }}
        </style>
    </head>
    <body>
        <h1>Mod-Three Finite State Machine</h1>
        <form hx-post="/modthree" hx-target="#remainder" hx-swap="innerHTML">
            <label>Enter a number in binary
                <input name="binaryInput" required type="text" maxlength="{max_length}" />
            </label>
            <span class="result">Remainder <span id="remainder">--</span></span>
            <button type="submit">Run Mod-Three</button>
        </form>
    </body>
</html>
"""


class ColoredFormatter(logging.Formatter):
    """Custom formatter to add colors to logs."""

    grey = "\x1b[38;20m"
    blue = "\x1b[34;20m"
    yellow = "\x1b[33;20m"
    red = "\x1b[31;20m"
    bold_red = "\x1b[31;1m"
    reset = "\x1b[0m"
    format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    FORMATS = {
        logging.DEBUG: grey + format_str + reset,
        logging.INFO: blue + format_str + reset,
        logging.WARNING: yellow + format_str + reset,
        logging.ERROR: red + format_str + reset,
        logging.CRITICAL: bold_red + format_str + reset,
    }

    def format(self, record):
        log_fmt = self.FORMATS.get(record.levelno)
        formatter = logging.Formatter(log_fmt, datefmt="%Y-%m-%d %H:%M:%S")
        return formatter.format(record)


class RunRequest(BaseModel):
    """Body of a JSON run request."""

    input: str


class RunResponse(BaseModel):
    """Outcome of a JSON run request."""

    ok: bool
    machine: str
    input: str
    output: Optional[Any] = None
    final_state: str
    path: List[str]
    error: Optional[str] = None
    message: Optional[str] = None


def build_machines(settings: DfakitSettings) -> Dict[str, FiniteStateMachine]:
    """Build every built-in machine plus the configured one."""
    registry = MachineRegistry.with_builtins()
    configured = settings.load_definition()
    registry.register(configured)
    return {name: registry.build(name) for name in registry.list_machines()}


def create_app(settings: Optional[DfakitSettings] = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        settings: Optional DfakitSettings. Loaded from the environment
                  and dfakit.yaml if not provided.
    """
    settings = settings or DfakitSettings()
    machines = build_machines(settings)
    max_length = settings.server.max_input_length
    error_text = settings.server.error_text

    app = FastAPI(title="dfakit", version=__version__)

    @app.get("/", response_class=HTMLResponse)
    async def index() -> str:
        return PAGE_TEMPLATE.format(max_length=max_length)

    @app.post("/modthree", response_class=HTMLResponse)
    async def mod_three(binaryInput: Optional[str] = Form(default=None)) -> str:
        # An empty field counts as missing
        if not binaryInput or len(binaryInput) > max_length:
            logger.debug("Rejected /modthree request: missing or over-long input")
            return error_text
        try:
            return str(machines[MOD_THREE].process(binaryInput))
        except MachineError as e:
            logger.debug(f"/modthree run failed for {binaryInput!r}: {e.kind.value}")
            return error_text

    @app.get("/machines")
    async def list_machines() -> Dict[str, List[str]]:
        return {"machines": sorted(machines)}

    @app.post("/machines/{name}/run", response_model=RunResponse)
    async def run_machine(name: str, request: RunRequest) -> RunResponse:
        machine = machines.get(name)
        if machine is None:
            raise HTTPException(status_code=404, detail=f"Unknown machine: {name}")
        if len(request.input) > max_length:
            raise HTTPException(
                status_code=422,
                detail=f"Input longer than {max_length} characters",
            )

        result = machine.run(request.input)
        return RunResponse(
            ok=result.ok,
            machine=name,
            input=result.input,
            output=result.output,
            final_state=result.final_state,
            path=list(result.path),
            error=result.kind.value if result.kind else None,
            message=str(result.error) if result.error else None,
        )

    logger.info(f"dfakit app created with machines: {', '.join(sorted(machines))}")
    return app


class MachineServer:
    """
    Serve the dfakit application with uvicorn.

    Example:
        ```python
        from dfakit import DfakitSettings
        from dfakit.server import MachineServer

        server = MachineServer(DfakitSettings())
        await server.start()
        ```
    """

    def __init__(self, settings: Optional[DfakitSettings] = None):
        self.settings = settings or DfakitSettings()
        self.app: Optional[FastAPI] = None

    def _setup_logging(self) -> None:
        """Configure logging based on settings."""
        log_level = logging.DEBUG if self.settings.debug else getattr(logging, self.settings.log_level)

        handler = logging.StreamHandler()
        handler.setFormatter(ColoredFormatter())

        root_logger = logging.getLogger()
        root_logger.setLevel(log_level)

        # Remove existing handlers to avoid duplicates
        if root_logger.handlers:
            root_logger.handlers.clear()

        root_logger.addHandler(handler)

    def initialize(self) -> FastAPI:
        """Set up logging and build the application."""
        self._setup_logging()
        self.app = create_app(self.settings)
        return self.app

    async def start(self) -> None:
        """Start serving (runs until shutdown)."""
        app = self.app or self.initialize()

        config = uvicorn.Config(
            app=app,
            host=self.settings.server.host,
            port=self.settings.server.port,
            workers=self.settings.server.workers,
            log_level=self.settings.log_level.lower(),
        )
        server = uvicorn.Server(config)
        logger.info(
            f"Starting dfakit server on {self.settings.server.host}:{self.settings.server.port}"
        )
        await server.serve()


def start_server(settings: Optional[DfakitSettings] = None) -> None:
    """
    Start the dfakit server (blocking).

    This is the main entry point for the CLI.
    """
    import asyncio

    server = MachineServer(settings)
    asyncio.run(server.start())
