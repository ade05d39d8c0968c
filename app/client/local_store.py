# app/client/local_store.py
import json
from pathlib import Path


class LocalStore:
    """
    Durable key/value store for client-side state (string values),
    kept as a single JSON object in a file.

    Behaves like browser localStorage: get_item returns None for unknown
    keys and every set_item is written through to disk immediately.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def _read_all(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        raw = self.path.read_text(encoding="utf-8")
        return json.loads(raw) if raw.strip() else {}

    def get_item(self, key: str) -> str | None:
        return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(data), encoding="utf-8")
        tmp.replace(self.path)

