"""Flask application proxying a hosted knowledge-base service with grounded chat."""

import argparse
import logging
import signal
import sys
import threading
from types import FrameType, TracebackType
from typing import List, Optional, Type

from dotenv import load_dotenv
from flask import Flask
from flask_cors import CORS

from kbproxy.conf.config import Config, ConfigError, ServerConfig
from kbproxy.src.api import setup_api
from kbproxy.src.services import (
    BaseKnowledgeBaseClient,
    BaseLLMService,
    create_chat_service,
    create_knowledge_base_client,
)

# Logging is configured in kbproxy/__init__.py
logger = logging.getLogger(__name__)


def create_app(
    config: Optional[ServerConfig] = None,
    knowledge_base_client: Optional[BaseKnowledgeBaseClient] = None,
    llm_service: Optional[BaseLLMService] = None,
) -> Flask:
    """Create and configure the Flask application.

    Both the standalone server and the serverless handler are built here, so
    they share one request-handling path.

    Args:
        config: Server configuration, resolved from the environment if None
        knowledge_base_client: Optional client replacing the HTTP client
        llm_service: Optional LLM service replacing the Gemini service

    Returns:
        The configured application

    Raises:
        ConfigError: If the configuration cannot be resolved
    """
    logger.info("Starting application setup...")
    if config is None:
        config = ServerConfig.from_env()

    app = Flask(__name__)
    CORS(app)
    app.config["MAX_CONTENT_LENGTH"] = config.max_upload_bytes
    app.config["SERVER_CONFIG"] = config

    if knowledge_base_client is None:
        knowledge_base_client = create_knowledge_base_client(config)

    logger.info("Creating chat service")
    chat_service = create_chat_service(
        config, knowledge_base_client=knowledge_base_client, llm_service=llm_service
    )

    logger.info("Setting up API routes")
    setup_api(app, knowledge_base_client, chat_service)

    logger.info("Application setup complete")
    return app


def _log_uncaught_exception(
    exc_type: Type[BaseException],
    exc_value: BaseException,
    exc_traceback: Optional[TracebackType],
) -> None:
    if issubclass(exc_type, KeyboardInterrupt):
        sys.__excepthook__(exc_type, exc_value, exc_traceback)
        return
    logger.error(
        "Uncaught exception", exc_info=(exc_type, exc_value, exc_traceback)
    )


def _log_uncaught_thread_exception(args: "threading.ExceptHookArgs") -> None:
    if args.exc_type is SystemExit:
        return
    thread_name = args.thread.name if args.thread else "unknown"
    logger.error(
        f"Uncaught exception in thread {thread_name}",
        exc_info=(args.exc_type, args.exc_value, args.exc_traceback),  # type: ignore
    )


def install_last_resort_handlers() -> None:
    """Log exceptions that escape request handling instead of dying silently.

    Request handlers already turn exceptions into responses; these hooks cover
    worker threads of the threaded server.
    """
    sys.excepthook = _log_uncaught_exception
    threading.excepthook = _log_uncaught_thread_exception


def _handle_shutdown_signal(signum: int, frame: Optional[FrameType]) -> None:
    logger.info(f"{signal.Signals(signum).name} signal received: closing HTTP server")
    sys.exit(0)


def register_signal_handlers() -> None:
    """Log SIGTERM and SIGINT before shutting the server down."""
    signal.signal(signal.SIGTERM, _handle_shutdown_signal)
    signal.signal(signal.SIGINT, _handle_shutdown_signal)


def main(argv: Optional[List[str]] = None) -> None:
    """Run the standalone server."""
    parser = argparse.ArgumentParser(
        description="Run the knowledge base proxy (--host, --port, --debug)"
    )
    parser.add_argument(
        "--host",
        type=str,
        default=Config.DEFAULT_HOST,
        help=f"Interface to bind (default: {Config.DEFAULT_HOST})",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to listen on (default: PORT environment variable, then 3000)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Run Flask in debug mode",
    )
    args = parser.parse_args(argv)

    load_dotenv()

    try:
        config = ServerConfig.from_env()
    except ConfigError as e:
        logger.error(f"Invalid configuration: {str(e)}")
        sys.exit(1)

    port = args.port or config.listen_port

    install_last_resort_handlers()
    register_signal_handlers()

    app = create_app(config)
    logger.info(f"Running on: http://localhost:{port}")
    app.run(host=args.host, port=port, debug=args.debug, use_reloader=False, threaded=True)


if __name__ == "__main__":
    main()
