"""FastAPI dependencies for dependency injection."""

from typing import Annotated

from fastapi import Depends, Request

from school_ops.config import Settings, get_settings
from school_ops.store import Store


def get_store(request: Request) -> Store:
    """Get the application's store."""
    return request.app.state.store


# Type aliases for cleaner dependency injection
AppStore = Annotated[Store, Depends(get_store)]
AppSettings = Annotated[Settings, Depends(get_settings)]
