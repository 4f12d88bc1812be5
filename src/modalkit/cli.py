"""Command-line interface for modalkit.

Runs the web bridge for the process-wide modal controller so a browser
renderer can display the dialog and send button clicks back. Invoked via the
``modalkit`` console script or ``python -m modalkit``.
"""

from __future__ import annotations

import argparse
import asyncio
import logging

from modalkit import __version__
from modalkit.modal.controller import ModalController
from modalkit.runtime import RuntimeConfig, get_modal, make_runtime_config
from modalkit.settings.values import LOG_LEVELS
from modalkit.web.bridge import ModalBridge, serve

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI flags. Unset flags stay ``None`` so settings apply."""
    ap = argparse.ArgumentParser(
        prog="modalkit", description="Serve the modal dialog state to a browser."
    )
    ap.add_argument("--host", default=None, help="Interface to bind")
    ap.add_argument("--port", type=int, default=None, help="TCP port to bind")
    ap.add_argument(
        "--log-level",
        dest="log_level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=None,
        help="Logging level (default from settings, INFO)",
    )
    ap.add_argument(
        "--demo",
        action="store_true",
        help="Show a demo confirmation dialog on startup",
    )
    ap.add_argument("--version", action="store_true", help="Print version and exit")
    return ap.parse_args(argv)


def show_demo(modal: ModalController) -> None:
    """Show a chained confirm -> success/info dialog sequence."""
    modal.confirm(
        "Restart the proxy service now?",
        on_confirm=lambda: modal.success("Restart requested."),
        on_cancel=lambda: modal.info("Restart cancelled."),
        title="Restart",
    )


def main(argv: list[str] | None = None) -> None:
    """Synchronous entrypoint for the modalkit CLI."""
    args = parse_args(argv)
    if args.version:
        print(f"modalkit {__version__}")
        return
    try:
        asyncio.run(run_async(argv))
    except KeyboardInterrupt:
        pass


async def run_async(
    argv: list[str] | None = None, *, stop: asyncio.Event | None = None
) -> None:
    """Async entrypoint for programmatic usage/testing.

    Serves until *stop* is set; runs forever when it is ``None``.
    """
    args = parse_args(argv)
    if args.version:
        print(f"modalkit {__version__}")
        return

    rc: RuntimeConfig = make_runtime_config(args=args)
    logging.basicConfig(
        level=getattr(logging, rc.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    modal = get_modal()
    if args.demo:
        show_demo(modal)

    bridge = ModalBridge(
        modal, heartbeat_s=rc.ws_heartbeat_s, queue_size=rc.ws_queue_size
    )
    await serve(bridge, rc.host, rc.port, stop=stop)


if __name__ == "__main__":
    main()
