import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


DEFAULT_TRANSCRIPT_LABEL = "ShuffleProofTest"
DEFAULT_GENS_CAPACITY = 1024


@dataclass
class ShuffleConfig:
    transcript_label: str = DEFAULT_TRANSCRIPT_LABEL
    gens_capacity: int = DEFAULT_GENS_CAPACITY
    # None이면 TinyDB MemoryStorage
    storage_path: Optional[Path] = Path("db.json")
    log_level: str = "INFO"
    secret_key: str = "key"

    def __post_init__(self):
        if self.storage_path is not None:
            self.storage_path = Path(self.storage_path)
        self.gens_capacity = int(self.gens_capacity)
        if self.gens_capacity < 1:
            raise ValueError(f"gens_capacity는 1 이상이어야 합니다: {self.gens_capacity}")
        self.log_level = self.log_level.upper()

    @property
    def label_bytes(self) -> bytes:
        return self.transcript_label.encode()

    @classmethod
    def from_env(cls, environ=None) -> "ShuffleConfig":
        """SHUFFLE_* 환경 변수에서 설정을 읽는다. 없는 값은 기본값."""
        environ = os.environ if environ is None else environ
        storage = environ.get("SHUFFLE_STORAGE_PATH", "db.json")
        return cls(
            transcript_label=environ.get("SHUFFLE_TRANSCRIPT_LABEL", DEFAULT_TRANSCRIPT_LABEL),
            gens_capacity=int(environ.get("SHUFFLE_GENS_CAPACITY", DEFAULT_GENS_CAPACITY)),
            storage_path=Path(storage) if storage else None,
            log_level=environ.get("SHUFFLE_LOG_LEVEL", "INFO"),
            secret_key=environ.get("SHUFFLE_SECRET_KEY", "key"),
        )
