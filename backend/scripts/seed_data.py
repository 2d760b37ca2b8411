#!/usr/bin/env python3
"""
Database seeding script for development and testing.
Creates a state, sample organizations, an author, and projects saved
through the regular project pipeline.
"""

import asyncio
import sys
from pathlib import Path

import shapely
from sqlalchemy import text

# Add parent directory to path to import our modules
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from streammap.database import async_engine, Base, AsyncSessionLocal
from streammap.models import Organization, User, State
from streammap.services.project_service import ProjectService

# Simplified Oregon boundary, lon/lat order
OREGON_WKT = (
    "POLYGON ((-124.566 41.992, -116.463 41.992, -116.463 46.292, "
    "-124.566 46.292, -124.566 41.992))"
)


async def create_tables():
    """Create all database tables"""
    async with async_engine.begin() as conn:
        if conn.dialect.name == "postgresql":
            await conn.execute(text("CREATE EXTENSION IF NOT EXISTS postgis"))
        await conn.run_sync(Base.metadata.create_all)
    print("✓ Database tables created")


async def seed_data():
    """Seed the database with sample data"""
    async with AsyncSessionLocal() as session:
        try:
            session.add(State(name="Oregon", geom=shapely.from_wkt(OREGON_WKT)))

            org1 = Organization(name="Upper Deschutes Watershed Council")
            org2 = Organization(name="Crooked River Watershed Council")
            session.add_all([org1, org2])

            author = User(
                email="field.crew@example.org",
                first_name="Field",
                last_name="Crew",
            )
            session.add(author)
            await session.commit()
            print("✓ Created state, organizations, and author")

            service = ProjectService(session)
            samples = [
                (
                    {
                        "name": "Whychus Creek Restoration",
                        "stream_name": "Whychus Creek",
                        "watershed": "Upper Deschutes",
                        "implementation_date": "2017-10-05",
                        "primary_contact": "Field Crew",
                        "narrative": "Beaver dam analogs installed along a degraded reach.",
                        "structure_description": "Post-assisted log structures",
                        "url": "https://example.org/projects/whychus",
                        "length": 15234,
                        "number_of_structures": 42,
                        "latitude": "44.0429694",
                        "longitude": "-121.333482",
                        "affiliation_legacy": "Upper Deschutes Watershed Council",
                    },
                    [org1.id],
                ),
                (
                    {
                        "name": "Bridge Creek BDAs",
                        "stream_name": "Bridge Creek",
                        "watershed": "John Day",
                        "implementation_date": "2009-07-14",
                        "primary_contact": "Field Crew",
                        "narrative": "Instream structures to aggrade an incised channel.",
                        "structure_description": "Beaver dam analogs",
                        "url": "https://example.org/projects/bridge-creek",
                        "length": 3200,
                        "number_of_structures": 121,
                        "latitude": "44.712",
                        "longitude": "-120.216",
                    },
                    [org1.id, org2.id],
                ),
            ]

            for attributes, organization_ids in samples:
                result = await service.create(
                    attributes, author_id=author.id, organization_ids=organization_ids
                )
                if not result.ok:
                    raise ValueError(f"Sample project {attributes['name']} rejected: {result.errors}")
                print(f"✓ Created project {result.project.name} in state_id={result.project.state_id}")

            print("\n✅ Database seeding completed successfully!")

        except Exception as e:
            await session.rollback()
            print(f"❌ Error seeding database: {e}")
            raise


async def main():
    """Main function"""
    print("Starting database seeding...\n")

    # Optionally create tables first (useful for fresh databases)
    # Uncomment the next line if you want to create tables before seeding
    # await create_tables()

    await seed_data()


if __name__ == "__main__":
    asyncio.run(main())
