from relay.core.config import settings
from relay.realtime.broadcaster import Broadcaster
from relay.realtime.liveness import LivenessMonitor
from relay.realtime.registry import ConnectionRegistry
from relay.realtime.router import MessageRouter
from relay.services.persistence import PersistenceGateway

registry = ConnectionRegistry()
broadcaster = Broadcaster(registry)
message_router = MessageRouter(registry, broadcaster, PersistenceGateway(), require_join=settings.REQUIRE_JOIN)
liveness_monitor = LivenessMonitor(
    registry, on_terminate=message_router.on_close, interval=settings.HEARTBEAT_INTERVAL_SECONDS
)

def get_message_router() -> MessageRouter:
    return message_router
