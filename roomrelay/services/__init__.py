from .broadcaster import Broadcaster
from .session import SessionProtocol

__all__ = ["Broadcaster", "SessionProtocol"]
