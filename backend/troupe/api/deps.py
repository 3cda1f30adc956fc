from __future__ import annotations
"""Helpers shared by the CRUD routers."""

from typing import Any

from fastapi import HTTPException
from pydantic import BaseModel

from troupe.errors import TroupeError


def http_error(exc: TroupeError) -> HTTPException:
    """Translate a domain error into the HTTPException the router raises."""
    return HTTPException(status_code=exc.status_code, detail=exc.message)


def apply_patch(target: Any, data: BaseModel, required: tuple[str, ...] = ()) -> None:
    """Copy the fields present in ``data`` onto ``target``.

    Fields listed in ``required`` may be omitted but not set to null.
    """
    update_data = data.model_dump(exclude_unset=True)
    for key in required:
        if key in update_data and update_data[key] is None:
            raise HTTPException(status_code=422, detail=f"'{key}' cannot be null")
    for key, value in update_data.items():
        setattr(target, key, value)
