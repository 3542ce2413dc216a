"""Decode errors raised by the wire framework."""


class DecodeError(Exception):
    """Error raised when wire bytes cannot be decoded.

    Carries a stack of ``(message, field)`` frames pushed while the error
    unwinds through nested message decoding, innermost first.
    """

    def __init__(self, description: str) -> None:
        super().__init__(description)
        self.description = description
        self.stack: list[tuple[str, str]] = []

    def push(self, message: str, field: str) -> None:
        self.stack.append((message, field))

    def __str__(self) -> str:
        location = "".join(f"{message}.{field}: " for message, field in self.stack)
        return f"failed to decode message: {location}{self.description}"
