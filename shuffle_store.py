"""
셔플 세션 저장소
================

TinyDB 위의 단순한 key → data 저장소. 레코드는 {"type": key, "data": data}.
"""

from tinydb import TinyDB, Query
from tinydb.storages import MemoryStorage


DATA = Query()


class ShuffleStore:

    def __init__(self, path=None):
        if path is None:
            self.db = TinyDB(storage=MemoryStorage)
        else:
            self.db = TinyDB(str(path))
        self.table = self.db.table("shuffle")

    def get(self, key):
        """키로 데이터를 조회한다. 없으면 None."""
        result = self.table.search(DATA.type == key)
        if not result:
            return None
        return result[0].get("data")

    def set(self, key, data):
        self.table.upsert({"type": key, "data": data}, DATA.type == key)

    def remove(self, key):
        self.table.remove(DATA.type == key)

    def remove_prefix(self, prefix):
        """prefix로 시작하는 모든 키를 삭제한다."""
        self.table.remove(DATA.type.test(lambda t: t.startswith(prefix)))
