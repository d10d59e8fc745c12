"""Principal directory ORM model. Table: principal."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from catalog_search.infrastructure.persistence.database import Base
from catalog_search.infrastructure.persistence.models.mixins import TimestampMixin


class PrincipalModel(TimestampMixin, Base):
    """Identity -> role and profile ids, maintained by the identity service."""

    __tablename__ = "principal"

    user_id: Mapped[str] = mapped_column(String, primary_key=True)
    role: Mapped[str] = mapped_column(String(16), nullable=False)
    creator_id: Mapped[str | None] = mapped_column(String)
    brand_id: Mapped[str | None] = mapped_column(String)
