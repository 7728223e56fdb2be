"""Shared base for persisted domain entities"""

import uuid
from sqlmodel import SQLModel


def generate_uuid() -> str:
    """Generate a string UUID used as a persisted record identifier"""
    return str(uuid.uuid4())


class BaseModel(SQLModel):
    """Base class for all SQLModel domain entities"""

    pass
