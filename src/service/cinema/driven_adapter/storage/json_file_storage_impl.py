"""
JSON File Local Storage

Two independent records in one directory:
- cart.json:    {session_id, seat_ids, created_at, total_price}
- contact.json: {name, email, phone}

Writes go to a temp file first and are moved into place, so a record is either the
old or the new version. An unreadable record is treated as absent.
"""

from datetime import datetime
import os
from pathlib import Path
from typing import Any

import orjson

from src.platform.logging.loguru_io import Logger
from src.service.cinema.app.interface.i_local_storage import ILocalStorage
from src.service.cinema.domain.value_object.cart_entry import CartEntry
from src.service.cinema.domain.value_object.contact_info import ContactInfo


CART_RECORD = 'cart.json'
CONTACT_RECORD = 'contact.json'


class JsonFileStorageImpl(ILocalStorage):
    def __init__(self, *, directory: Path | str) -> None:
        self.directory = Path(directory)

    @Logger.io
    def load_cart(self) -> CartEntry | None:
        record = self._read(CART_RECORD)
        if record is None:
            return None
        try:
            return CartEntry(
                session_id=record['session_id'],
                seat_ids=record['seat_ids'],
                total_price=int(record['total_price']),
                created_at=datetime.fromisoformat(record['created_at']),
            )
        except (KeyError, TypeError, ValueError) as e:
            Logger.base.warning(f'💾 [STORAGE] Ignoring malformed cart record: {e!r}')
            return None

    @Logger.io
    def save_cart(self, *, cart: CartEntry) -> None:
        self._write(
            CART_RECORD,
            {
                'session_id': cart.session_id,
                'seat_ids': list(cart.seat_ids),
                'created_at': cart.created_at,
                'total_price': cart.total_price,
            },
        )

    @Logger.io
    def delete_cart(self) -> None:
        self._delete(CART_RECORD)

    @Logger.io
    def load_contact(self) -> ContactInfo | None:
        record = self._read(CONTACT_RECORD)
        if record is None:
            return None
        try:
            return ContactInfo(name=record['name'], email=record['email'], phone=record['phone'])
        except (KeyError, TypeError) as e:
            Logger.base.warning(f'💾 [STORAGE] Ignoring malformed contact record: {e!r}')
            return None

    @Logger.io
    def save_contact(self, *, contact: ContactInfo) -> None:
        self._write(
            CONTACT_RECORD,
            {'name': contact.name, 'email': contact.email, 'phone': contact.phone},
        )

    @Logger.io
    def delete_contact(self) -> None:
        self._delete(CONTACT_RECORD)

    def _read(self, name: str) -> dict[str, Any] | None:
        path = self.directory / name
        if not path.exists():
            return None
        try:
            record = orjson.loads(path.read_bytes())
        except orjson.JSONDecodeError as e:
            Logger.base.warning(f'💾 [STORAGE] Ignoring unreadable record {path}: {e}')
            return None
        return record if isinstance(record, dict) else None

    def _write(self, name: str, record: dict[str, Any]) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.directory / name
        tmp_path = path.with_suffix(path.suffix + '.tmp')
        tmp_path.write_bytes(orjson.dumps(record, option=orjson.OPT_INDENT_2))
        os.replace(tmp_path, path)

    def _delete(self, name: str) -> None:
        (self.directory / name).unlink(missing_ok=True)
