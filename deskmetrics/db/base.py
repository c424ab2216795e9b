from datetime import datetime

from sqlalchemy import DateTime
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for relational store models (cases, surveys, follow-ups)."""
    type_annotation_map = {
        datetime: DateTime(timezone=True),
    }


class ConversationBase(DeclarativeBase):
    """Base class for conversation store models, kept on separate metadata."""
    type_annotation_map = {
        datetime: DateTime(timezone=True),
    }
