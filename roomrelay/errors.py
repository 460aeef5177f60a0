class RelayError(Exception):
    """Base class for every error raised by the relay core."""


class ProtocolError(RelayError):
    """A rule violation reported back to the offending connection as an ``error`` frame.

    ``terminates`` tells the transport whether the connection must be closed
    after the error has been sent.
    """

    message = "Protocol error"
    terminates = True

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class RoomNotFoundError(ProtocolError):
    message = "Room not found"


class RoomFullError(ProtocolError):
    message = "Room is full"


class AlreadyInAnotherRoomError(ProtocolError):
    message = "User already in another room."


class NotAMemberError(ProtocolError):
    message = "You are not in this room."
    terminates = False


class RoomCodesExhaustedError(RelayError):
    def __init__(self, active: int):
        self.active = active
        super().__init__(f"All {active} room codes are in use")
