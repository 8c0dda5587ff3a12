import copy
import json
from pathlib import Path
from typing import Any, Dict

DATA_FILE = Path(__file__).parent / "test_data.json"


class TestDataLoader:
    """Read-only access to test_data.json; callers mutate copies only"""

    __test__ = False
    _data: Dict[str, Any] = None

    @classmethod
    def load(cls) -> Dict[str, Any]:
        if cls._data is None:
            cls._data = json.loads(DATA_FILE.read_text(encoding="utf-8"))
        return cls._data

    @classmethod
    def get(cls, key: str) -> Any:
        return cls.load()[key]

    @classmethod
    def get_copy(cls, key: str) -> Any:
        return copy.deepcopy(cls.get(key))

    @classmethod
    def user(cls, key: str) -> Dict[str, Any]:
        """Seed user by role key: super_admin, manager or user"""
        return copy.deepcopy(cls.get("users")[key])
