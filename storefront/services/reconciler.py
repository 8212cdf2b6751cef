# storefront/services/reconciler.py
import threading
from concurrent.futures import Future
from dataclasses import dataclass, field
from typing import Callable, Dict, Generic, List, Optional, Type, TypeVar

import requests
from pydantic import BaseModel

from storefront.domain.schemas import User
from storefront.services.api_client import StorefrontClient
from storefront.services.identity import IdentityContext
from storefront.services.snapshot_store import SnapshotStore
from storefront.utils.keyed_executor import KeyedSerialExecutor
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T", bound=BaseModel)

FETCH_KEY = "__fetch__"
ALL_KEY = "__all__"


class BatchMutationError(Exception):
    """Czesc zapytan z paczki (np. DELETE per pozycja) sie nie udala."""

    def __init__(self, failed: Dict[str, Exception]):
        self.failed = failed
        super().__init__(f"{len(failed)} request(s) failed: {', '.join(failed)}")


# transport / status / zly JSON / walidacja pydantic (ValidationError to ValueError)
RECOVERABLE_ERRORS = (requests.RequestException, ValueError, BatchMutationError)

StateListener = Callable[["ReconcilerState"], None]


@dataclass(frozen=True)
class ReconcilerState:
    items: List[BaseModel] = field(default_factory=list)
    pending: bool = False
    error: Optional[str] = None


def _resolved(value: bool) -> Future:
    future: Future = Future()
    future.set_result(value)
    return future


class Reconciler(Generic[T]):
    """
    Lokalna, optymistycznie modyfikowana kopia listy z serwera.

    - zmiana tozsamosci -> nowa generacja, czyszczenie, fetch w tle
    - mutacja -> od razu lokalnie, potwierdzenie w tle (kolejka per productId)
    - clear i fetch to bariery: ida po wszystkim co juz zakolejkowane,
      a pozniejsze mutacje czekaja na nie
    - blad potwierdzenia -> precyzyjny rollback, a jesli w miedzyczasie
      ktos ten klucz zmienil -> resync z serwera
    Bledy sieci nigdy nie wychodza do wywolujacego.
    """

    kind = "list"
    line_model: Type[T]

    def __init__(
        self,
        identity: IdentityContext,
        client: StorefrontClient | None = None,
        executor: KeyedSerialExecutor | None = None,
        snapshot_store: SnapshotStore | None = None,
    ):
        self.identity = identity
        self.client = client or StorefrontClient()
        self.executor = executor or KeyedSerialExecutor()
        self.snapshot_store = snapshot_store or SnapshotStore()

        self._lock = threading.RLock()
        self._listeners: List[StateListener] = []
        self._items: List[T] = []
        self._pending = False
        self._error: Optional[str] = None
        self._email: Optional[str] = None

        # generacja = sesja tozsamosci, seq = numer lokalnej mutacji
        self._generation = 0
        self._seq = 0
        self._baseline_seq = 0
        self._key_seq: Dict[str, int] = {}

        self.loading: Optional[Future] = None

        identity.subscribe(self._on_identity_change)
        if identity.user is not None:
            self._on_identity_change(identity.user)

    # ------------------------------------------------------------------
    # hooks
    # ------------------------------------------------------------------
    def _load(self, email: str) -> List[T]:
        raise NotImplementedError

    # ------------------------------------------------------------------
    # query
    # ------------------------------------------------------------------
    @property
    def items(self) -> List[T]:
        with self._lock:
            return list(self._items)

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._pending

    @property
    def state(self) -> ReconcilerState:
        with self._lock:
            return ReconcilerState(
                items=list(self._items), pending=self._pending, error=self._error
            )

    def find(self, product_id: str) -> Optional[T]:
        with self._lock:
            for item in self._items:
                if item.product_id == product_id:
                    return item
        return None

    def contains(self, product_id: str) -> bool:
        return self.find(product_id) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """
        Listener dostaje ReconcilerState po kazdej zmianie, w kolejnosci zmian.
        Wolany pod lockiem reconcilera: nie moze czekac na inny watek,
        ktory uzywa tego samego reconcilera.
        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    # ------------------------------------------------------------------
    # identity / fetch
    # ------------------------------------------------------------------
    def _on_identity_change(self, user: User | None) -> None:
        with self._lock:
            self._generation += 1
            generation = self._generation
            self._email = user.email if user else None
            self._seq += 1
            self._baseline_seq = self._seq
            self._key_seq.clear()
            self._items = self._warm_start(user.email) if user else []
            self._pending = user is not None
            self._error = None
            self._notify()

            if user is None:
                logger.info(f"{self.kind}: identity cleared, local list dropped")
                self.loading = None
                return

            logger.info(f"{self.kind}: loading for {user.email} (generation {generation})")
            loading = self._schedule_fetch(generation)
            # przy synchronicznym executorze fetch moze juz zmienic tozsamosc
            if generation == self._generation:
                self.loading = loading

    def _warm_start(self, email: str) -> List[T]:
        items: List[T] = []
        for raw in self.snapshot_store.load(self.kind, email):
            try:
                items.append(self.line_model.model_validate(raw))
            except ValueError as e:
                logger.warning(f"{self.kind}: dropping bad snapshot entry: {e}")
                return []
        return items

    def fetch(self) -> bool:
        """
        Pobiera liste z serwera i podmienia lokalna w calosci.
        True = serwer potwierdzil (takze pusta liste), False = blad albo brak usera.
        Czeka na potwierdzenia mutacji zakolejkowanych wczesniej.
        """
        return self._schedule_fetch().result()

    def resync(self) -> Future:
        return self._schedule_fetch()

    def _schedule_fetch(self, generation: Optional[int] = None) -> Future:
        with self._lock:
            if generation is None:
                generation = self._generation
            # mutacje z seq > mark poszly po tym fetchu i serwer ich jeszcze nie widzi
            mark = self._seq
            return self.executor.submit_barrier(FETCH_KEY, self._fetch_for, generation, mark)

    def _fetch_for(self, generation: int, mark: int) -> bool:
        with self._lock:
            if generation != self._generation or self._email is None:
                return False
            email = self._email

        try:
            items = self._load(email)
        except RECOVERABLE_ERRORS as e:
            logger.error(f"Failed to fetch {self.kind} for {email}: {e}")
            self._replace(generation, [], error=str(e) or type(e).__name__, mark=mark)
            return False

        return self._replace(generation, items, error=None, mark=mark)

    def _replace(
        self, generation: int, items: List[T], error: Optional[str], mark: int
    ) -> bool:
        with self._lock:
            if generation != self._generation:
                logger.info(f"{self.kind}: discarding fetch result of stale generation {generation}")
                return False
            email = self._email

            if self._baseline_seq > mark:
                # clear po zakolejkowaniu fetcha, lokalna lista jest nowsza
                logger.info(f"{self.kind}: list was cleared since fetch was queued, keeping local")
                self._pending = False
                self._error = error
                self._notify()
                return error is None

            merged = list(items)
            newer = {key for key, seq in self._key_seq.items() if seq > mark}
            if error is None and newer:
                merged = [item for item in merged if item.product_id not in newer]
                for index, item in enumerate(self._items):
                    if item.product_id in newer:
                        merged.insert(min(index, len(merged)), item)
                logger.info(f"{self.kind}: kept {len(newer)} unconfirmed change(s) over fetched list")

            self._items = merged
            self._pending = False
            self._error = error
            self._seq += 1
            self._baseline_seq = self._seq
            self._key_seq.clear()
            self._notify()

        if error is None:
            self._save_snapshot(email, items)
            return True
        return False

    # ------------------------------------------------------------------
    # mutations
    # ------------------------------------------------------------------
    def _mutate(
        self,
        key: str,
        action: str,
        apply: Callable[[List[T]], Optional[List[T]]],
        remote: Callable[[str], None],
    ) -> Future:
        """
        apply dostaje kopie listy, zwraca nowa albo None (nic do zrobienia).
        remote(email) robi zapytanie; rzuca przy bledzie.
        ALL_KEY (clear) idzie jako bariera.
        """
        with self._lock:
            email = self._email
            if email is None:
                logger.warning(f"{self.kind}: {action} {key} ignored, no signed-in user")
                return _resolved(False)

            before = list(self._items)
            after = apply(list(before))
            if after is None:
                return _resolved(True)

            self._seq += 1
            seq = self._seq
            if key == ALL_KEY:
                self._baseline_seq = seq
            else:
                self._key_seq[key] = seq
            self._items = after
            generation = self._generation
            self._notify()

            # submit pod lockiem: kolejnosc w executorze = kolejnosc seq
            args = (key, action, seq, generation, email, before, remote)
            if key == ALL_KEY:
                return self.executor.submit_barrier(key, self._confirm, *args)
            return self.executor.submit(key, self._confirm, *args)

    def _confirm(
        self,
        key: str,
        action: str,
        seq: int,
        generation: int,
        email: str,
        before: List[T],
        remote: Callable[[str], None],
    ) -> bool:
        try:
            remote(email)
        except RECOVERABLE_ERRORS as e:
            logger.warning(f"{self.kind}: {action} {key} failed for {email}: {e}")
            self._rollback(key, seq, generation, before, e)
            return False

        logger.info(f"{self.kind}: {action} {key} confirmed for {email}")
        return True

    def _rollback(
        self, key: str, seq: int, generation: int, before: List[T], error: Exception
    ) -> None:
        with self._lock:
            if generation != self._generation:
                logger.info(f"{self.kind}: identity changed, skipping rollback of {key}")
                return
            if key == ALL_KEY:
                precise = self._seq == seq
            else:
                precise = self._key_seq.get(key) == seq and self._baseline_seq < seq

            if precise:
                self._items = self._restore(key, before, error)
                logger.info(f"{self.kind}: rolled back {key}")
                self._notify()
                return

            # bariera na FETCH_KEY: idzie po wszystkim co juz zakolejkowane
            logger.info(f"{self.kind}: {key} was modified since, resyncing")
            self._schedule_fetch(generation)

    def _restore(self, key: str, before: List[T], error: Exception) -> List[T]:
        if key == ALL_KEY:
            return list(before)

        restored = [item for item in self._items if item.product_id != key]
        for index, item in enumerate(before):
            if item.product_id == key:
                restored.insert(min(index, len(restored)), item)
                break
        return restored

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------
    def _save_snapshot(self, email: Optional[str], items: List[T]) -> None:
        """Zapisuje tylko liste potwierdzona przez serwer (wynik fetcha)."""
        if not self.snapshot_store.enabled or email is None:
            return
        self.snapshot_store.save(self.kind, email, [item.model_dump(by_alias=True) for item in items])

    def _notify(self) -> None:
        # wolane pod self._lock, zeby kolejnosc powiadomien = kolejnosc zmian
        listeners = list(self._listeners)
        state = ReconcilerState(
            items=list(self._items), pending=self._pending, error=self._error
        )
        for listener in listeners:
            try:
                listener(state)
            except Exception:
                logger.exception(f"{self.kind}: state listener failed")
