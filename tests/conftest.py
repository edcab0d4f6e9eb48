"""Pytest configuration and fixtures."""

from pathlib import Path

import numpy as np
import pandas as pd
import pytest

from amphibian_merge.config import PipelineConfig


PRIMARY_TXT = """\
park_code\tpark_name\trecord_id\tcategory\torder\tfamily\tscientific_name\toccurrence\tabundance\tseasonality\trecord_status
YELL\tYellowstone National Park\tYELL-1001\tAmphibian\tAnura\tBufonidae\tAnaxyrus boreas\tPresent\tCommon\tBreeder\tApproved
GRSM\tGreat Smoky Mountains National Park\tGRSM-2001\tReptile\tSquamata\tColubridae\tThamnophis sirtalis\tPresent\tCommon\tResident\tApproved
YELL\tYellowstone National Park\tYELL-1002\tAmphibian\tCaudata\tAmbystomatidae\tAmbystoma mavortium\tPresent\tUncommon\tBreeder\tApproved
"""

SECONDARY_TXT = """\
Park_Code\tPark_Name\tRecord\tID\tCategory\tOrder\tFamily\tScientific_Name\tOccurrence\tAbundance\tSeasonality\tRecord_Status
ACAD\tAcadia National Park\tACAD\t1\tAmphibian\tAnura\tRanidae\tLithobates catesbeianus\tPresent\tCommon\tBreeder\tApproved
ACAD\tAcadia National Park\tACAD\t2\tAmphibian\t\t\tLithobates clamitans\tPresent\tAbundant\tBreeder\tApproved
"""

RECORDS_TXT = """\
record_id\tRana.aurora\tTaricha.granulosa\tDicamptodon.tenebrosus
REDW-1\tPresent-Common-Breeder-Approved\t\tNA-Rare-NA-NA
REDW-2\t\tPresent-NA-Resident-Approved\t
"""

SPECIES_TXT = """\
park_code\tpark_name\tcategory\torder\tfamily\tscientific_name\tcommon_names
REDW\tRedwood National Park\tAmphibian\tAnura\tRanidae\tRana aurora\tNorthern Red-legged Frog
REDW\tRedwood National Park\tAmphibian\tCaudata\tSalamandridae\tTaricha granulosa\tRough-skinned Newt
REDW\tRedwood National Park\tAmphibian\tCaudata\tDicamptodontidae\tDicamptodon tenebrosus\tCoastal Giant Salamander
"""

PARKS_TXT = """\
park_code\tpark_name\tstate\tacres
ACAD\tAcadia National Park\tME\t47390
YELL\tYellowstone National Park\tWY\t2219791
REDW\tRedwood National Park\tCA\t112512
"""


def write_sources(raw_dir: Path, **overrides) -> Path:
    """Write the five sample extracts, replacing any given by keyword."""
    files = {
        "data.txt": PRIMARY_TXT,
        "ACAD.txt": SECONDARY_TXT,
        "REDW_records.txt": RECORDS_TXT,
        "REDW_species.txt": SPECIES_TXT,
        "parks_updated.txt": PARKS_TXT,
    }
    files.update(overrides)
    raw_dir.mkdir(parents=True, exist_ok=True)
    for name, text in files.items():
        (raw_dir / name).write_text(text, encoding="utf-8")
    return raw_dir


@pytest.fixture
def raw_dir(tmp_path):
    """Directory holding the five sample extracts."""
    return write_sources(tmp_path / "raw")


@pytest.fixture
def pipeline_config(tmp_path, raw_dir):
    """Config pointing every path at the temporary directory."""
    return PipelineConfig(
        raw_dir=str(raw_dir),
        final_dir=str(tmp_path / "final"),
        staging_dir=str(tmp_path / "staging"),
        reports_dir=str(tmp_path / "reports"),
    )


@pytest.fixture
def wide_records():
    """Wide Redwood records as read from disk."""
    return pd.DataFrame({
        "record_id": ["REDW-1", "REDW-2"],
        "Rana.aurora": ["Present-Common-Breeder-Approved", np.nan],
        "Taricha.granulosa": [np.nan, "Present-NA-Resident-Approved"],
        "Dicamptodon.tenebrosus": ["NA-Rare-NA-NA", np.nan],
    })
