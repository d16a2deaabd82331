import json
import os
import re
import threading
from pathlib import Path
from typing import Dict, Optional, Protocol
from uuid import uuid4

from checkup_assistant.config.settings import settings
from checkup_assistant.domain.exceptions import StorageError


_KEY_RE = re.compile(r"^[A-Za-z0-9_.-]+$")


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def set_if_absent(self, key: str, value: str) -> str:
        """写入 value（仅当 key 不存在时），返回最终生效的值。"""
        ...


class MemoryKeyValueStore(KeyValueStore):
    """进程内键值存储，主要用于测试与无磁盘环境。"""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value

    def set_if_absent(self, key: str, value: str) -> str:
        with self._lock:
            return self._data.setdefault(key, value)


class JsonKeyValueStore(KeyValueStore):
    """以 JSON 文件持久化的键值存储，每个 key 一个文件。

    set_if_absent 先写临时文件再 os.link 到目标路径：目标已存在时 link 失败，
    因此多个进程并发初始化同一个 key 时只有第一个写入者生效。
    """

    def __init__(self, root: str | Path | None = None):
        self._root = Path(root or settings.storage_root).resolve()
        self._kv_root = self._root / "kv"
        try:
            self._kv_root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(code="STORE_INIT_ERROR", message=str(e))

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(code="STORE_READ_ERROR", message=str(e), key=key)
        value = data.get("value") if isinstance(data, dict) else None
        return str(value) if value is not None else None

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        tmp_path = self._write_tmp(key, value)
        try:
            os.replace(tmp_path, path)
        except OSError as e:
            self._discard(tmp_path)
            raise StorageError(code="STORE_WRITE_ERROR", message=str(e), key=key)

    def set_if_absent(self, key: str, value: str) -> str:
        path = self._path(key)
        tmp_path = self._write_tmp(key, value)
        try:
            os.link(tmp_path, path)
        except FileExistsError:
            existing = self.get(key)
            if existing is None:
                raise StorageError(code="STORE_READ_ERROR", message=f"Empty value for {key}", key=key)
            return existing
        except OSError as e:
            raise StorageError(code="STORE_WRITE_ERROR", message=str(e), key=key)
        finally:
            self._discard(tmp_path)
        return value

    def _path(self, key: str) -> Path:
        if not _KEY_RE.match(key):
            raise StorageError(code="INVALID_KEY", message=f"Invalid storage key: {key!r}")
        return self._kv_root / f"{key}.json"

    def _write_tmp(self, key: str, value: str) -> Path:
        tmp_path = self._kv_root / f"{key}.{uuid4().hex}.json.tmp"
        try:
            tmp_path.write_text(json.dumps({"value": value}, ensure_ascii=False), encoding="utf-8")
        except OSError as e:
            raise StorageError(code="STORE_WRITE_ERROR", message=str(e), key=key)
        return tmp_path

    @staticmethod
    def _discard(path: Path) -> None:
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            raise StorageError(code="STORE_DELETE_ERROR", message=str(e))
