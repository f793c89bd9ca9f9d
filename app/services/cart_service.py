"""
Cart engine.

The cart is an ordered list of ``{item, quantity}`` lines, unique by item id,
kept per browser. Storage is injected (``read``/``write``/``subscribe``) so the
engine runs the same against the Flask session cookie and against an
in-process store shared by several engines.

Persisted format under the storage key (default ``"cart"``)::

    [{"item": "<menu item id>", "quantity": 2}, ...]

Unreadable or malformed storage is treated as an empty cart.
"""
import json
import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

CART_STORAGE_KEY = 'cart'


@dataclass(frozen=True)
class CartLine:
    item: str
    quantity: int

    def to_dict(self):
        return {'item': self.item, 'quantity': self.quantity}


@dataclass(frozen=True)
class StorageEvent:
    """Change notification: ``new_value`` is the raw persisted string (or None when cleared)."""
    key: str
    new_value: Optional[str]


Listener = Callable[[StorageEvent], None]


# ----------------------
# Encoding
# ----------------------

def encode_cart(lines: List[CartLine]) -> str:
    return json.dumps([line.to_dict() for line in lines], separators=(',', ':'))


def decode_cart(raw: Optional[str]) -> List[CartLine]:
    """Parse a persisted cart; anything unparseable yields an empty cart."""
    if not raw:
        return []
    try:
        data = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("Cart storage is not valid JSON, treating as empty")
        return []

    if not isinstance(data, list):
        logger.warning("Cart storage is not a list, treating as empty")
        return []

    lines: List[CartLine] = []
    seen = set()
    for entry in data:
        if not isinstance(entry, dict):
            return []
        item = entry.get('item')
        quantity = entry.get('quantity')
        if not isinstance(item, str) or not item:
            return []
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            return []
        if item in seen:
            return []
        seen.add(item)
        lines.append(CartLine(item=item, quantity=quantity))
    return lines


def apply_delta_to_lines(lines: List[CartLine], item_id: str, delta: int) -> List[CartLine]:
    """
    Pure cart transition.

    Existing line: quantity += delta, removed when it reaches 0 or below.
    Missing line: appended with ``quantity=delta`` when delta > 0, otherwise no-op.
    """
    result: List[CartLine] = []
    found = False
    for line in lines:
        if line.item != item_id:
            result.append(line)
            continue
        found = True
        new_quantity = line.quantity + delta
        if new_quantity > 0:
            result.append(CartLine(item=item_id, quantity=new_quantity))

    if not found and delta > 0:
        result.append(CartLine(item=item_id, quantity=delta))
    return result


# ----------------------
# Storage backends
# ----------------------

class CartStorage:
    """Storage interface: one string value under ``key`` plus change listeners."""

    def __init__(self, key: str = CART_STORAGE_KEY):
        self.key = key
        self._listeners: List[Listener] = []

    def read(self) -> Optional[str]:
        raise NotImplementedError

    def write(self, value: str) -> None:
        raise NotImplementedError

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener; returns the function that removes it."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)
        return unsubscribe

    def _notify(self, new_value: Optional[str]) -> None:
        event = StorageEvent(key=self.key, new_value=new_value)
        for listener in list(self._listeners):
            listener(event)


class MemoryCartStorage(CartStorage):
    """In-process storage. Every engine subscribed to it sees every write."""

    def __init__(self, key: str = CART_STORAGE_KEY, initial: Optional[str] = None):
        super().__init__(key)
        self._value = initial

    def read(self) -> Optional[str]:
        return self._value

    def write(self, value: str) -> None:
        self._value = value
        self._notify(value)


class SessionCartStorage(CartStorage):
    """Flask session storage: the signed cookie is the browser-local store."""

    def __init__(self, key: str = CART_STORAGE_KEY, session=None):
        super().__init__(key)
        self._session = session

    @property
    def session(self):
        if self._session is not None:
            return self._session
        from flask import session
        return session

    def read(self) -> Optional[str]:
        return self.session.get(self.key)

    def write(self, value: str) -> None:
        self.session[self.key] = value
        self.session.modified = True
        self._notify(value)


# ----------------------
# Engine
# ----------------------

class CartEngine:
    """
    Cart state container.

    ``lines`` is the in-memory mirror used for rendering. Mutations always
    start from what storage holds, never from the mirror.
    """

    def __init__(self, storage: CartStorage):
        self.storage = storage
        self.lines: List[CartLine] = []
        self._unsubscribe: Optional[Callable[[], None]] = None

    def _load(self) -> List[CartLine]:
        try:
            raw = self.storage.read()
        except Exception as e:
            logger.warning(f"Cart storage read failed, treating as empty: {e}")
            return []
        return decode_cart(raw)

    def hydrate(self) -> List[CartLine]:
        self.lines = self._load()
        return self.lines

    def activate(self) -> 'CartEngine':
        """Hydrate and start following storage changes."""
        self.hydrate()
        if self._unsubscribe is None:
            self._unsubscribe = self.storage.subscribe(self.handle_storage_event)
        return self

    def deactivate(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def handle_storage_event(self, event: StorageEvent) -> None:
        # The event payload is used as-is; storage is not re-read.
        if event.key != self.storage.key:
            return
        self.lines = decode_cart(event.new_value)

    def apply_delta(self, item_id: str, delta: int) -> List[CartLine]:
        lines = apply_delta_to_lines(self._load(), item_id, delta)
        self.storage.write(encode_cart(lines))
        self.lines = lines
        return lines

    def add(self, item_id: str) -> List[CartLine]:
        return self.apply_delta(item_id, 1)

    def increment(self, item_id: str) -> List[CartLine]:
        return self.apply_delta(item_id, 1)

    def decrement(self, item_id: str) -> List[CartLine]:
        return self.apply_delta(item_id, -1)

    def quantity(self, item_id: str) -> int:
        for line in self.lines:
            if line.item == item_id:
                return line.quantity
        return 0

    def has_line(self, item_id: str) -> bool:
        """True when the UI should render the +/- stepper instead of "Add"."""
        return self.quantity(item_id) > 0

    def quantities(self) -> Dict[str, int]:
        return {line.item: line.quantity for line in self.lines}

    @property
    def total_quantity(self) -> int:
        return sum(line.quantity for line in self.lines)

    @property
    def is_empty(self) -> bool:
        return not self.lines


def get_session_cart() -> CartEngine:
    """Engine bound to the current request's session, already hydrated."""
    from flask import current_app
    key = current_app.config.get('CART_STORAGE_KEY', CART_STORAGE_KEY)
    return CartEngine(SessionCartStorage(key)).activate()


def resolve_cart_names(session, lines: List[CartLine]) -> Dict[str, str]:
    """Item name per cart line; items that no longer exist show as "Unknown"."""
    from app.services import menu_service
    names: Dict[str, str] = {}
    for line in lines:
        item = menu_service.get_by_id(session, line.item)
        names[line.item] = item.name if item is not None else 'Unknown'
    return names
