"""Wire decoding limits via environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings

from wire.encoding import DEFAULT_RECURSION_LIMIT, MAX_RECURSION_LIMIT


class WireSettings(BaseSettings):
    model_config = {"env_prefix": "WIRE_"}

    # Nesting depth for groups and length-delimited sub-messages.
    recursion_limit: int = Field(default=DEFAULT_RECURSION_LIMIT, ge=1, le=MAX_RECURSION_LIMIT)
    max_message_len: int = Field(default=4 * 1024 * 1024, ge=1)  # 4MB
