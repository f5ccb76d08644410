import unittest
from pathlib import Path


ROOT = Path(__file__).resolve().parents[1]
CONTRACT = ROOT / "pipeline" / "src" / "osimport" / "contracts" / "postgis.py"
TABLES = ROOT / "pipeline" / "src" / "osimport" / "db" / "tables.py"


class PostgisContractTests(unittest.TestCase):
    def test_geography_points_use_wgs84_and_gist_index(self) -> None:
        text = CONTRACT.read_text(encoding="utf-8")
        self.assertIn("ST_SetSRID(ST_MakePoint(", text)
        self.assertIn("::geography", text)
        self.assertIn("USING GIST", text)

    def test_import_never_drops_or_truncates_tables(self) -> None:
        text = CONTRACT.read_text(encoding="utf-8").upper()
        self.assertNotIn("DROP TABLE", text)
        self.assertNotIn("TRUNCATE", text)
        self.assertNotIn("IF NOT EXISTS", text)

    def test_tables_declare_geography_point_column(self) -> None:
        text = TABLES.read_text(encoding="utf-8")
        self.assertIn('GEO_COLUMN = "geo_location"', text)
        self.assertIn('f"geography(Point, {WGS84_SRID})"', text)


if __name__ == "__main__":
    unittest.main()
