import logging
from typing import List

from .codec import Record

logger = logging.getLogger(__name__)

KEY_PREFIX = "REC"

SAMPLE_RECORDS = [
    Record("Jacob Henderson", "MF Doom", "Vascetomy", "400000"),
    Record("La'var Ball", "Leo Muskang", "STI Test", "00"),
    Record("George Stephanoppolis", "Marley Davis", "Immunizations", "10000"),
    Record("Anika Ghoshis", "Robert DeNiro", "12 Stitches", "103000"),
    Record("David Cameron", "Rob Hood", "Yearly Checkup", "1230400"),
    Record("Ryan Pagan", "Bridget Dewey", "Hepatitis C Vaccination", "00"),
    Record("Chary Adamo", "VanBailey", "Check Blood Pressure", "5000"),
    Record("Paris Hilton", "Allen Po", "Botox Injection 120cc", "15000000"),
    Record("Tata Holden", "Nano Bot", "Liposuction 12 lbs", "2200300"),
    Record("Joe Crawford", "Brian Nina", "Cast Broken Arm", "404400"),
    Record("John Smith", "Strange", "Brain Surgery", "50"),
    Record("John Jacob Jingleheimer Schmidtt", "Grenaldi", "Turn your head and cough", "50"),
]


def seed_ledger(store) -> List[str]:
    """Write the sample batch under REC0..REC11 and return the keys written."""
    keys = []
    for i, rec in enumerate(SAMPLE_RECORDS):
        key = f"{KEY_PREFIX}{i}"
        store.put(key, rec.patient, rec.doctor, rec.procedure, rec.cost)
        logger.info("Added %s %s", key, rec)
        keys.append(key)
    return keys


__all__ = ["KEY_PREFIX", "SAMPLE_RECORDS", "seed_ledger"]
