"""Service Configuration - Settings read from the environment.

Read once at startup; the pure core never looks at the environment.
"""

import os
from dataclasses import dataclass, field
from typing import Mapping

from ..core.thresholds import ProgressThresholds


DEFAULT_ALLOWED_ORIGINS = ("https://yahealthy.app", "http://localhost:5173")


@dataclass
class ServiceConfig:
    """Configuration for the tool server and HTTP app.

    Attributes:
        storage_backend: "firestore" or "memory"
        firestore_project: GCP project ID (None for default)
        firestore_database: Firestore database name
        progress_green_min: Progress percent at or above which a goal is green
        progress_yellow_min: Progress percent at or above which a goal is yellow
        host: Bind address
        port: Bind port
        allowed_origins: CORS origins
    """

    storage_backend: str = "firestore"
    firestore_project: str | None = None
    firestore_database: str = "yahealthy"
    progress_green_min: float = 50
    progress_yellow_min: float = 10
    host: str = "0.0.0.0"
    port: int = 8080
    allowed_origins: list[str] = field(default_factory=lambda: list(DEFAULT_ALLOWED_ORIGINS))

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ServiceConfig":
        """Build configuration from environment variables.

        Raises:
            ValueError: If a variable has an unusable value
        """
        env = os.environ if environ is None else environ

        backend = env.get("STORAGE_BACKEND", "firestore").strip().lower()
        if backend not in ("firestore", "memory"):
            raise ValueError(f"STORAGE_BACKEND must be 'firestore' or 'memory', got {backend!r}")

        origins = env.get("ALLOWED_ORIGINS")
        allowed_origins = (
            [o.strip() for o in origins.split(",") if o.strip()]
            if origins else list(DEFAULT_ALLOWED_ORIGINS)
        )

        return cls(
            storage_backend=backend,
            firestore_project=env.get("FIRESTORE_PROJECT") or None,
            firestore_database=env.get("FIRESTORE_DATABASE", "yahealthy"),
            progress_green_min=float(env.get("PROGRESS_GREEN_MIN", 50)),
            progress_yellow_min=float(env.get("PROGRESS_YELLOW_MIN", 10)),
            host=env.get("HOST", "0.0.0.0"),
            port=int(env.get("PORT", 8080)),
            allowed_origins=allowed_origins,
        )

    def progress_thresholds(self) -> ProgressThresholds:
        return ProgressThresholds(
            green_min=self.progress_green_min,
            yellow_min=self.progress_yellow_min,
        )
