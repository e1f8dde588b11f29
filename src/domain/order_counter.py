"""Order Counter Domain Entity

One row per calendar year holding the last issued order sequence.
"""

from datetime import datetime
from sqlmodel import Field
from sqlalchemy import DateTime
from src.domain.base import BaseModel, utc_now


class OrderCounter(BaseModel, table=True):
    """
    Order Counter - Atomic per-year order number sequence

    Domain Rules:
    - Exactly one row per year
    - last_sequence only ever increases
    - Incremented with a single-row atomic update so concurrent order
      creation never reads the same value twice
    """

    __tablename__ = "order_counters"

    year: int = Field(
        primary_key=True,
        sa_column_kwargs={"autoincrement": False},
        description="Calendar year the sequence belongs to"
    )

    last_sequence: int = Field(
        default=0,
        description="Last sequence number handed out for this year"
    )

    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_type=DateTime(timezone=True),
        description="Last increment timestamp"
    )
