"""
Sample data builders used by database/seed_data.py.
"""
import random
from datetime import datetime

from database import seed_data

NOW = datetime(2024, 6, 1, 12, 0)


def test_build_patients_shapes_rows():
    rows = seed_data.build_patients(50, days_back=30, now=NOW, rng=random.Random(3))
    assert len(rows) == 50
    for _id, mrn, _name, status, diagnosis, admitted in rows:
        assert mrn.startswith("MRN-")
        assert status in seed_data.STATUSES
        assert diagnosis in seed_data.DIAGNOSES
        assert admitted <= NOW


def test_discharges_only_for_discharged_patients():
    rng = random.Random(11)
    patients = seed_data.build_patients(80, now=NOW, rng=rng)
    discharges = seed_data.build_discharges(patients, now=NOW, rng=rng)
    discharged = {p[0]: p for p in patients if p[3] == "Discharged"}

    assert len(discharges) == len(discharged)
    for _id, patient_id, discharged_at, condition, _summary in discharges:
        assert discharged_at >= discharged[patient_id][5]
        assert discharged_at <= NOW
        assert condition in seed_data.DISCHARGE_CONDITIONS


def test_events_fall_between_admission_and_now():
    rng = random.Random(5)
    patients = seed_data.build_patients(10, now=NOW, rng=rng)
    admitted = {p[0]: p[5] for p in patients}
    for rows in (
        seed_data.build_medications(patients, now=NOW, rng=rng),
        seed_data.build_lab_results(patients, now=NOW, rng=rng),
        seed_data.build_vitals(patients, now=NOW, rng=rng),
    ):
        assert rows
        for row in rows:
            assert admitted[row[1]] <= row[-1] <= NOW
