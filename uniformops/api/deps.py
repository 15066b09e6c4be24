from fastapi import Depends

from ..backend import Backend
from ..config import Settings, get_settings
from ..db import get_backend
from ..staging import StagingStore


def get_store(backend: Backend = Depends(get_backend), settings: Settings = Depends(get_settings)) -> StagingStore:
    return StagingStore(backend, chunk_size=settings.import_chunk_size)
