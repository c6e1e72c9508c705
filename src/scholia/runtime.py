"""Runtime wiring: config -> backend -> store, built once at startup."""

from dataclasses import dataclass
from pathlib import Path

from .adapters.fs_storage import FsBlobStorage
from .adapters.idgen import TimeRandomId
from .adapters.local_backend import LocalBackend
from .adapters.remote_backend import RemoteBackend
from .config import ScholiaConfig, load_config
from .core.model import StoreState
from .core.ports import NotesBackend
from .store import NotesStore


@dataclass
class Runtime:
    """Container for all wired components."""
    store: NotesStore
    backend: NotesBackend
    config: ScholiaConfig

    async def aclose(self) -> None:
        await self.backend.aclose()


def build_backend(config: ScholiaConfig, idgen: TimeRandomId | None = None) -> NotesBackend:
    """Remote when an API base URL is configured, local otherwise."""
    if config.use_remote:
        return RemoteBackend(
            config.api.base_url,
            token=config.api.token,
            timeout=config.api.timeout,
            id_generator=idgen,
        )
    return LocalBackend(
        FsBlobStorage(config.local.data_dir),
        key=config.local.storage_key,
        latency_ms=config.local.latency_ms,
        id_generator=idgen,
    )


def build_runtime(
    config: ScholiaConfig | None = None,
    config_path: Path | None = None,
) -> Runtime:
    """Build and wire the store. Local mode restores notes from disk up front."""
    if config is None:
        config = load_config(config_path=config_path)

    idgen = TimeRandomId()
    backend = build_backend(config, idgen)

    initial = StoreState()
    if isinstance(backend, LocalBackend):
        initial = StoreState(notes=tuple(backend.snapshot()))

    store = NotesStore(backend, initial_state=initial, id_generator=idgen)
    return Runtime(store=store, backend=backend, config=config)
