"""SQLAlchemy models for spendtrack database."""

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


class Category(Base):
    """Main category model."""

    __tablename__ = "categories"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    sort_order = Column(Integer, nullable=False)

    # Relationships
    subcategories = relationship(
        "SubCategory", back_populates="category", cascade="all, delete-orphan"
    )


class SubCategory(Base):
    """Subcategory model."""

    __tablename__ = "subcategories"

    id = Column(String, primary_key=True)
    category_id = Column(String, ForeignKey("categories.id"), nullable=False)
    name = Column(String, nullable=False)

    # Relationships
    category = relationship("Category", back_populates="subcategories")
    keywords = relationship("Keyword", back_populates="subcategory", cascade="all, delete-orphan")


class Keyword(Base):
    """Keyword model."""

    __tablename__ = "keywords"

    id = Column(Integer, primary_key=True)
    subcategory_id = Column(String, ForeignKey("subcategories.id"), nullable=False)
    keyword = Column(String, nullable=False)

    __table_args__ = (UniqueConstraint("subcategory_id", "keyword", name="uq_subcategory_keyword"),)

    # Relationships
    subcategory = relationship("SubCategory", back_populates="keywords")


class Expense(Base):
    """Processed expense model.

    Category references are plain columns, not foreign keys: they may point
    at deleted categories until the next re-classification.
    """

    __tablename__ = "expenses"

    id = Column(String, primary_key=True)
    position = Column(Integer, nullable=False)
    date = Column(Date, nullable=False)
    # Stored as text to keep the exact decimal value
    amount = Column(String, nullable=False)
    currency = Column(String, nullable=False)
    comment = Column(String, nullable=False)
    full_comment = Column(String, nullable=False)
    category_id = Column(String, nullable=True)
    subcategory_id = Column(String, nullable=True)
    is_unidentified = Column(Boolean, default=True, nullable=False)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
