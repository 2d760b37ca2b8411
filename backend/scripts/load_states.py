#!/usr/bin/env python3
"""
Load the state region catalog from a GeoJSON FeatureCollection.

Usage:
    python scripts/load_states.py states.geojson [--name-property NAME]

Each Polygon feature becomes (or replaces) the State row with the same name.
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

# Add parent directory to path to import our modules
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy import select
from streammap.database import AsyncSessionLocal
from streammap.models import State
from streammap.services.region_service import RegionCatalog

logger = logging.getLogger(__name__)


async def load_states(catalog: RegionCatalog) -> int:
    """Insert or update one State row per catalog region"""
    async with AsyncSessionLocal() as session:
        try:
            for region in catalog:
                result = await session.execute(select(State).where(State.name == region.name))
                state = result.scalar_one_or_none()

                if state is None:
                    session.add(State(name=region.name, geom=region.polygon))
                    print(f"✓ Added state {region.name}")
                else:
                    state.geom = region.polygon
                    print(f"✓ Updated state {region.name}")

            await session.commit()
        except Exception as e:
            await session.rollback()
            print(f"❌ Error loading states: {e}")
            raise

    return len(catalog)


async def main():
    """Main function"""
    parser = argparse.ArgumentParser(description="Load state polygons from GeoJSON")
    parser.add_argument("path", type=Path, help="GeoJSON FeatureCollection of Polygons")
    parser.add_argument("--name-property", default="name", help="Feature property holding the state name")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO)

    with args.path.open() as f:
        catalog = RegionCatalog.from_geojson(json.load(f), name_property=args.name_property)

    count = await load_states(catalog)
    print(f"\n✅ Loaded {count} state(s)")


if __name__ == "__main__":
    asyncio.run(main())
