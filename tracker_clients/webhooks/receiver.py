"""Webhook receiver for GitHub and Aha deliveries."""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from fastapi import FastAPI, Request, HTTPException, BackgroundTasks
from fastapi.responses import JSONResponse
import uvicorn

from ..models.aha import AhaEvent
from ..models.github import parse_event
from ..utils.logging import StructuredLogger
from .signatures import github_signature, verify_github_signature


@dataclass
class WebhookEvent:
    """A delivery handed to a registered handler.

    ``event`` is the typed model (``IssuesEvent``, ``AhaEvent``...) and
    ``payload`` the decoded JSON.
    """
    source: str  # github, aha
    event_type: str
    key: str
    event: Any
    payload: Dict[str, Any] = field(repr=False)
    timestamp: datetime = field(default_factory=datetime.utcnow)
    delivery_id: Optional[str] = None


Handler = Callable[[WebhookEvent], None]


class WebhookReceiver:
    """Webhook receiver for GitHub and Aha notifications.

    Handlers are registered by event key: ``github.<event>.<action>``
    (``github.<event>`` for deliveries without an action) or ``aha.<event>``.
    """

    def __init__(
        self,
        github_secret: Optional[str] = None,
        port: int = 8080,
        host: str = "0.0.0.0"
    ):
        """Initialize webhook receiver.

        Args:
            github_secret: GitHub webhook secret; when set every GitHub
                delivery must carry a valid signature
            port: Port to listen on
            host: Host to bind to
        """
        self.github_secret = github_secret
        self.port = port
        self.host = host
        self.logger = logging.getLogger(__name__)
        self.structured_logger = StructuredLogger(__name__)

        self.event_handlers: Dict[str, Handler] = {}

        self.app = FastAPI(title="Tracker Clients Webhook Receiver")
        self._setup_routes()

    def register_handler(self, event_key: str, handler: Handler) -> None:
        """Register an event handler.

        Args:
            event_key: Key of the event to handle (e.g., 'github.issues.opened')
            handler: Function to call when the event arrives
        """
        self.event_handlers[event_key] = handler
        self.logger.info(f"Registered handler for event type: {event_key}")

    def _decode(self, payload: bytes) -> Dict[str, Any]:
        try:
            data = json.loads(payload.decode())
        except (UnicodeDecodeError, json.JSONDecodeError):
            raise HTTPException(status_code=400, detail="Invalid JSON payload")
        if not isinstance(data, dict):
            raise HTTPException(status_code=400, detail="Invalid JSON payload")
        return data

    def _setup_routes(self):
        """Set up FastAPI routes."""

        @self.app.get("/health")
        async def health_check():
            """Health check endpoint."""
            return {"status": "healthy", "timestamp": datetime.utcnow().isoformat()}

        @self.app.post("/webhooks/github")
        async def github_webhook(request: Request, background_tasks: BackgroundTasks):
            """Handle GitHub webhook events."""
            payload = await request.body()

            if self.github_secret:
                signature = github_signature(request.headers)
                if not verify_github_signature(self.github_secret, payload, signature):
                    self.logger.warning("Rejected GitHub webhook with missing or invalid signature")
                    raise HTTPException(status_code=401, detail="Invalid signature")

            event_type = request.headers.get("X-GitHub-Event")
            if not event_type:
                raise HTTPException(status_code=400, detail="Missing X-GitHub-Event header")

            delivery_id = request.headers.get("X-GitHub-Delivery")
            data = self._decode(payload)
            event = parse_event(event_type, data)

            key = f"github.{event_type}"
            if event.action:
                key = f"{key}.{event.action}"

            webhook_event = WebhookEvent(
                source="github",
                event_type=event_type,
                key=key,
                event=event,
                payload=data,
                delivery_id=delivery_id
            )
            background_tasks.add_task(self._process_event, webhook_event)

            self.structured_logger.log_webhook_received("github", key, delivery=delivery_id)

            return JSONResponse(
                status_code=200,
                content={"message": "Webhook received", "event_type": key}
            )

        @self.app.post("/webhooks/aha")
        async def aha_webhook(request: Request, background_tasks: BackgroundTasks):
            """Handle Aha activity webhooks."""
            data = self._decode(await request.body())
            event = AhaEvent.from_dict(data)
            event_type = event.event or "unknown"
            key = f"aha.{event_type}"

            webhook_event = WebhookEvent(
                source="aha",
                event_type=event_type,
                key=key,
                event=event,
                payload=data
            )
            background_tasks.add_task(self._process_event, webhook_event)

            self.structured_logger.log_webhook_received(
                "aha", key,
                auditable=event.audit.auditable_type if event.audit else None
            )

            return JSONResponse(
                status_code=200,
                content={"message": "Webhook received", "event_type": key}
            )

    def _process_event(self, event: WebhookEvent) -> None:
        """Run the handler registered for the event key, if any."""
        handler = self.event_handlers.get(event.key)
        if handler is None:
            self.logger.debug(f"No handler registered for event type: {event.key}")
            return

        try:
            handler(event)
            self.logger.info(f"Successfully processed event: {event.key}")
        except Exception as e:
            self.structured_logger.log_error_with_context(str(e), event_key=event.key)
            self.logger.exception(f"Error in event handler for {event.key}")

    def start(self):
        """Start the webhook receiver server."""
        self.logger.info(f"Starting webhook receiver on {self.host}:{self.port}")
        uvicorn.run(
            self.app,
            host=self.host,
            port=self.port,
            log_level="info"
        )

    async def start_async(self):
        """Start the webhook receiver server asynchronously."""
        config = uvicorn.Config(
            self.app,
            host=self.host,
            port=self.port,
            log_level="info"
        )
        server = uvicorn.Server(config)
        await server.serve()
