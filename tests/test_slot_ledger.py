import pytest

from clinicbook import crud
from clinicbook.core.exceptions import DoctorUnavailable, SlotAlreadyBooked
from clinicbook.models.doctor import BookedSlot
from clinicbook.services import slot_ledger
from tests.conftest import make_doctor


def test_reserve_records_slot(db, doctor):
    slot_ledger.reserve(db, doctor, "2024-03-10", "10:00")
    slot_ledger.reserve(db, doctor, "2024-03-10", "11:00")
    slot_ledger.reserve(db, doctor, "2024-03-11", "10:00")
    db.commit()
    db.refresh(doctor)

    assert doctor.slots_booked == {
        "2024-03-10": ["10:00", "11:00"],
        "2024-03-11": ["10:00"],
    }
    assert slot_ledger.is_booked(db, doctor.id, "2024-03-10", "11:00")
    assert not slot_ledger.is_booked(db, doctor.id, "2024-03-11", "11:00")


def test_reserve_rejects_taken_slot(db, doctor):
    slot_ledger.reserve(db, doctor, "2024-03-10", "10:00")
    db.commit()

    with pytest.raises(SlotAlreadyBooked) as exc_info:
        slot_ledger.reserve(db, doctor, "2024-03-10", "10:00")
    assert exc_info.value.message == "Slot Not Available"


def test_same_time_on_another_doctor_is_free(db, doctor):
    other = make_doctor(db, email="dr.iyer@clinicbook.io", fees=800)
    slot_ledger.reserve(db, doctor, "2024-03-10", "10:00")
    slot_ledger.reserve(db, other, "2024-03-10", "10:00")
    db.commit()

    assert db.query(BookedSlot).count() == 2


def test_reserve_rejects_unavailable_doctor(db, doctor):
    crud.doctor.toggle_availability(db, db_obj=doctor)

    with pytest.raises(DoctorUnavailable):
        slot_ledger.reserve(db, doctor, "2024-03-10", "10:00")
    assert db.query(BookedSlot).count() == 0


def test_concurrent_reservation_loses_at_constraint(db, doctor, monkeypatch):
    """Test a booking that passed the pre-check still fails on the unique constraint"""
    slot_ledger.reserve(db, doctor, "2024-03-10", "10:00")
    db.commit()

    # Simulate a racing request that checked before the first insert landed
    monkeypatch.setattr(slot_ledger, "is_booked", lambda *args: False)

    with pytest.raises(SlotAlreadyBooked):
        slot_ledger.reserve(db, doctor, "2024-03-10", "10:00")
    assert db.query(BookedSlot).count() == 1


def test_release_frees_slot(db, doctor):
    slot_ledger.reserve(db, doctor, "2024-03-10", "10:00")
    slot_ledger.reserve(db, doctor, "2024-03-10", "11:00")
    db.commit()

    slot_ledger.release(db, doctor.id, "2024-03-10", "10:00")
    db.commit()
    db.refresh(doctor)

    assert doctor.slots_booked == {"2024-03-10": ["11:00"]}


def test_release_of_unbooked_slot_is_noop(db, doctor):
    slot_ledger.release(db, doctor.id, "2024-03-10", "10:00")
    db.commit()
    assert db.query(BookedSlot).count() == 0
