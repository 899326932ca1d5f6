"""Connection settings for a gNMI target."""
import os
from dataclasses import dataclass
from typing import Optional

from .errors import ValidationError

DEFAULT_PORT = 6030


@dataclass
class ClientConfig:
    """How to reach and authenticate with a target.

    Built once from the command-line flags and handed to the transport.
    """
    addr: str = "localhost"
    cafile: Optional[str] = None
    certfile: Optional[str] = None
    keyfile: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    password_env: str = "GNMI_PASSWORD"
    tls: bool = False
    timeout: float = 10
    dial_retries: int = 3

    @property
    def target(self) -> str:
        """host:port to dial, adding the default port when none is given."""
        addr = self.addr or "localhost"
        if addr.startswith("["):
            # Bracketed IPv6 literal, port only after the closing bracket
            return f"{addr}:{DEFAULT_PORT}" if addr.endswith("]") else addr
        if ":" in addr:
            return addr
        return f"{addr}:{DEFAULT_PORT}"

    @property
    def use_tls(self) -> bool:
        """TLS is implied by any certificate option."""
        return bool(self.tls or self.cafile or self.certfile)

    def get_password(self) -> str:
        """Get password from config or environment variable."""
        if self.password:
            return self.password
        return os.environ.get(self.password_env, "")

    def metadata(self) -> list[tuple[str, str]]:
        """Per-call credentials sent as request metadata."""
        md = []
        if self.username:
            md.append(("username", self.username))
            md.append(("password", self.get_password()))
        return md

    def validate(self) -> None:
        """Reject flag combinations the transport cannot honor.

        Raises:
            ValidationError: On an unusable combination
        """
        if bool(self.certfile) != bool(self.keyfile):
            raise ValidationError("certfile and keyfile must be given together")
        if self.dial_retries < 1:
            raise ValidationError("dial_retries must be at least 1")
