from datetime import datetime
from uuid import uuid4

import sqlalchemy as sa
from sqlmodel import Field, SQLModel


def _new_user_id() -> str:
    return str(uuid4())


class User(SQLModel, table=True):
    __tablename__ = "user"
    # Authoritative uniqueness guard; the service's lookup only gives a nicer error
    __table_args__ = (sa.UniqueConstraint("email", name="uq_user_email"),)

    id: str = Field(default_factory=_new_user_id, primary_key=True, max_length=36)
    name: str
    email: str = Field(index=True)
    password: str
    created_at: datetime = Field(nullable=False)
    updated_at: datetime = Field(nullable=False)
