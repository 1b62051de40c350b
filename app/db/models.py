from sqlalchemy import Column, Integer, String, DateTime, Boolean, Text, JSON, ForeignKey, Index, Numeric, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base
import uuid


class MSA(Base):
    """Metro Statistical Area with cached Census demographics"""
    __tablename__ = "msas"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    code = Column(String(10), nullable=False, unique=True)  # CBSA code, e.g. 12420
    name = Column(String(200), nullable=False)
    state = Column(String(50), nullable=False)

    # Demographics (refreshed from the Census API)
    population = Column(Integer)
    median_income = Column(Integer)
    housing_units = Column(Integer)
    rental_vacancy_rate = Column(Numeric(5, 2))
    last_updated = Column(DateTime(timezone=True))

    # Relationships
    communities = relationship("Community", back_populates="msa")

    __table_args__ = (
        Index('idx_msas_name', 'name'),
    )


class Community(Base):
    """Multifamily community (property/complex)"""
    __tablename__ = "communities"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    name = Column(String(300), nullable=False)
    msa_id = Column(Uuid, ForeignKey('msas.id'))

    # Address and location
    street = Column(String(300))
    city = Column(String(100), nullable=False)
    state = Column(String(50), nullable=False)
    zip_code = Column(String(20))
    latitude = Column(Numeric(10, 7))
    longitude = Column(Numeric(10, 7))

    amenities = Column(JSON)  # Array of community-level amenity names

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    msa = relationship("MSA", back_populates="communities")
    units = relationship("Unit", back_populates="community")

    __table_args__ = (
        Index('idx_communities_msa_id', 'msa_id'),
        Index('idx_communities_name', 'name'),
    )


class Unit(Base):
    """Individual apartment within a community"""
    __tablename__ = "units"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    community_id = Column(Uuid, ForeignKey('communities.id'), nullable=False)
    unit_number = Column(String(50))

    bedrooms = Column(Integer, nullable=False)
    bathrooms = Column(Numeric(3, 1), nullable=False)  # 1.5 baths etc.
    square_feet = Column(Integer, nullable=False)
    monthly_rent = Column(Numeric(10, 2), nullable=False)
    availability = Column(String(20), nullable=False, default="available")  # available, occupied, offline

    # Media
    floor_plan = Column(String(100))
    photo_urls = Column(JSON)  # Array of image URLs
    floor_plan_urls = Column(JSON)
    virtual_tour_url = Column(String(1000))

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    community = relationship("Community", back_populates="units")
    feature_links = relationship("UnitFeature", back_populates="unit")

    # Indexes for the search filters
    __table_args__ = (
        Index('idx_units_community_id', 'community_id'),
        Index('idx_units_bedrooms', 'bedrooms'),
        Index('idx_units_bathrooms', 'bathrooms'),
        Index('idx_units_monthly_rent', 'monthly_rent'),
        Index('idx_units_square_feet', 'square_feet'),
        Index('idx_units_availability', 'availability'),
    )


class Feature(Base):
    """Unit-level feature/amenity, e.g. quartz countertops"""
    __tablename__ = "features"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    name = Column(String(200), nullable=False, unique=True)
    category = Column(String(50))  # kitchen, flooring, appliances, technology, bathroom, other
    description = Column(Text)
    is_popular = Column(Boolean, default=False)

    unit_links = relationship("UnitFeature", back_populates="feature")


class UnitFeature(Base):
    """Association between units and features.

    (unit_id, feature_id) pairs may repeat in warehouse loads.
    """
    __tablename__ = "unit_features"

    id = Column(Integer, primary_key=True, autoincrement=True)

    unit_id = Column(Uuid, ForeignKey('units.id'), nullable=False)
    feature_id = Column(Uuid, ForeignKey('features.id'), nullable=False)

    unit = relationship("Unit", back_populates="feature_links")
    feature = relationship("Feature", back_populates="unit_links")

    __table_args__ = (
        Index('idx_unit_features_unit_id', 'unit_id'),
        Index('idx_unit_features_feature_id', 'feature_id'),
    )
