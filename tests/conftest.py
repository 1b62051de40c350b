import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from app.core.database import Base
from app.db.models import MSA, Community, Unit, Feature, UnitFeature

# Use in-memory SQLite for tests
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

MSA_ID = uuid.UUID("6f1c2a36-0d7e-4a7b-9f63-3c0f5b1e2a01")
OAK_ID = uuid.UUID("0a8e6d52-5b8c-4c1e-8c7e-2f3b9d4a6c01")
PINE_ID = uuid.UUID("0a8e6d52-5b8c-4c1e-8c7e-2f3b9d4a6c02")
EMPTY_ID = uuid.UUID("0a8e6d52-5b8c-4c1e-8c7e-2f3b9d4a6c03")

U1_ID = uuid.UUID("5d3b0f4e-1111-4a0e-9d1a-000000000001")
U2_ID = uuid.UUID("5d3b0f4e-1111-4a0e-9d1a-000000000002")
U3_ID = uuid.UUID("5d3b0f4e-1111-4a0e-9d1a-000000000003")
U4_ID = uuid.UUID("5d3b0f4e-1111-4a0e-9d1a-000000000004")


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Create a test database engine"""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.create_all)

    try:
        yield engine
    finally:
        async with engine.begin() as connection:
            await connection.run_sync(Base.metadata.drop_all)
        await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def test_db_session(test_engine):
    """Create a test database session"""
    TestingSessionLocal = async_sessionmaker(bind=test_engine, autoflush=False, expire_on_commit=False)
    async with TestingSessionLocal() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def seeded_session(test_db_session):
    """
    Session over a small warehouse:

    - Oak Ridge: U1 {Quartz Countertops, Hardwood Floors, Smart Thermostat},
      U2 {Quartz Countertops, Hardwood Floors}, U4 {} (occupied)
    - Pine Court: U3 {Quartz Countertops}, with a repeated association row
    - Empty Acres: no units
    """
    session = test_db_session

    session.add(MSA(
        id=MSA_ID, code="12420", name="Austin-Round Rock-Georgetown, TX", state="TX",
        population=2352426, median_income=89415,
        last_updated=datetime.now(timezone.utc) - timedelta(days=30),
    ))
    session.add_all([
        Community(id=OAK_ID, name="Oak Ridge", msa_id=MSA_ID, street="100 Oak St",
                  city="Austin", state="TX", zip_code="78701",
                  latitude=Decimal("30.2672000"), longitude=Decimal("-97.7431000"),
                  amenities=["Pool", "Gym"]),
        Community(id=PINE_ID, name="Pine Court", msa_id=MSA_ID, city="Austin", state="TX"),
        Community(id=EMPTY_ID, name="Empty Acres", city="Dallas", state="TX"),
    ])

    quartz = Feature(name="Quartz Countertops", category="kitchen", is_popular=True)
    hardwood = Feature(name="Hardwood Floors", category="flooring")
    thermostat = Feature(name="Smart Thermostat", category="technology")
    rooftop = Feature(name="Rooftop Access", category="Outdoor")
    session.add_all([quartz, hardwood, thermostat, rooftop])

    session.add_all([
        Unit(id=U1_ID, community_id=OAK_ID, unit_number="101", bedrooms=2, bathrooms=Decimal("2.0"),
             square_feet=1100, monthly_rent=Decimal("1234.50"), availability="available",
             floor_plan="B2", photo_urls=["https://img.example.com/101.jpg"]),
        Unit(id=U2_ID, community_id=OAK_ID, unit_number="102", bedrooms=1, bathrooms=Decimal("1.0"),
             square_feet=750, monthly_rent=Decimal("1800.00"), availability="available"),
        Unit(id=U3_ID, community_id=PINE_ID, unit_number="A1", bedrooms=3, bathrooms=Decimal("2.5"),
             square_feet=1400, monthly_rent=Decimal("2500.00"), availability="available"),
        Unit(id=U4_ID, community_id=OAK_ID, unit_number="103", bedrooms=0, bathrooms=Decimal("1.0"),
             square_feet=500, monthly_rent=Decimal("950.00"), availability="occupied"),
    ])
    await session.flush()

    session.add_all([
        UnitFeature(unit_id=U1_ID, feature_id=quartz.id),
        UnitFeature(unit_id=U1_ID, feature_id=hardwood.id),
        UnitFeature(unit_id=U1_ID, feature_id=thermostat.id),
        UnitFeature(unit_id=U2_ID, feature_id=quartz.id),
        UnitFeature(unit_id=U2_ID, feature_id=hardwood.id),
        UnitFeature(unit_id=U3_ID, feature_id=quartz.id),
        UnitFeature(unit_id=U3_ID, feature_id=quartz.id),
    ])
    await session.commit()
    session.expunge_all()

    return session
