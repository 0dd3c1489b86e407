import sys
import logging
from pathlib import Path

# Add project root to path
sys.path.append(str(Path(__file__).parent))

from engine.resources.database import Database
from critters.elements import DEFAULT_DATA_PATH, build_type_chart

def main():
    logging.basicConfig(level=logging.INFO)
    logger = logging.getLogger("DataVerification")
    
    try:
        db = Database(DEFAULT_DATA_PATH)
        
        logger.info("Loading database...")
        db.load_all()
        
        # Verify roster
        assert len(db.types) == 10, f"Expected 10 types, found {len(db.types)}"
        assert db.get_type("fire") is not None, "Missing Fire"
        assert db.get_type("metal") is not None, "Missing Metal"
        orders = sorted(record.get("order", 0) for record in db.types.values())
        assert orders == list(range(10)), f"Type order has gaps or duplicates: {orders}"
        
        # Every effectiveness entry must point at a known type
        for type_id, record in db.types.items():
            for target in record.get("effectiveness", {}):
                assert target in db.types, f"{type_id} references unknown type '{target}'"
        
        # Verify chart
        chart = build_type_chart(db.types)
        fire, nature = chart.roster.require("Fire"), chart.roster.require("Nature")
        assert chart.effectiveness(fire, nature) == 2.0
        assert chart.effectiveness(chart.roster.require("Electric"), chart.roster.require("Ground")) == 0.0
        
        logger.info(f"VERIFICATION SUCCESSFUL: {len(db.types)} types, {len(chart.table)} chart entries.")
        
    except Exception as e:
        logger.error(f"VERIFICATION FAILED: {e}")
        sys.exit(1)

if __name__ == "__main__":
    main()
