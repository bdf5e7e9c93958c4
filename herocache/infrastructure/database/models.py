from sqlalchemy import Boolean, Column, ForeignKey, Index, Integer, String, Text, false
from sqlalchemy.orm import relationship

from .connection import Base


class Hero(Base):
    __tablename__ = "heroes"

    # Natural key from the remote API; inserts with an existing id merge field by field
    id = Column(String, primary_key=True)
    name = Column(String, nullable=True, index=True)
    info = Column(Text, nullable=True)
    photo = Column(String, nullable=True)  # URI of the hero's picture
    favorite = Column(Boolean, nullable=False, default=False, server_default=false())

    locations = relationship("Location", back_populates="hero", passive_deletes=True)
    transformations = relationship("Transformation", back_populates="hero", passive_deletes=True)


class Location(Base):
    __tablename__ = "locations"

    # Children are appended, never merged, so the API id is not the primary key
    row_id = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String, nullable=True, index=True)
    date = Column(String, nullable=True)  # Opaque, never parsed
    latitude = Column(String, nullable=True)
    longitude = Column(String, nullable=True)
    # NULL when the owning hero was not in the store at insert time
    hero_id = Column(String, ForeignKey("heroes.id", ondelete="SET NULL"), nullable=True)

    __table_args__ = (Index("idx_location_hero_id", "hero_id"),)

    hero = relationship("Hero", back_populates="locations")


class Transformation(Base):
    __tablename__ = "transformations"

    row_id = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String, nullable=True, index=True)
    name = Column(String, nullable=True)
    info = Column(Text, nullable=True)
    photo = Column(String, nullable=True)
    hero_id = Column(String, ForeignKey("heroes.id", ondelete="SET NULL"), nullable=True)

    __table_args__ = (Index("idx_transformation_hero_id", "hero_id"),)

    hero = relationship("Hero", back_populates="transformations")


# Declared attributes copied from a transfer record, in merge order
HERO_FIELDS = ("name", "info", "photo", "favorite")
