# care_core/conftest.py
import uuid

import pytest

from care_core.patients.models import CaseStatus, Patient
from care_core.patients.services import PatientService
from care_core.staff.identity import Actor
from care_core.staff.models import StaffRole
from care_core.staff.services import StaffService


@pytest.fixture
def make_staff(db):
    def _make(**kwargs):
        kwargs.setdefault("full_name", f"Staff {uuid.uuid4().hex[:6]}")
        return StaffService.create_staff(**kwargs)

    return _make


@pytest.fixture
def make_caregiver(make_staff):
    def _make(**kwargs):
        return make_staff(role=StaffRole.CAREGIVER, **kwargs)

    return _make


@pytest.fixture
def make_patient(db):
    def _make(**kwargs):
        kwargs.setdefault("full_name", f"Patient {uuid.uuid4().hex[:6]}")
        return PatientService.create_patient(**kwargs)

    return _make


@pytest.fixture
def supervisor(make_staff):
    return make_staff(full_name="Sam Supervisor", role=StaffRole.SUPERVISOR)


@pytest.fixture
def admin(make_staff):
    return make_staff(full_name="Ada Admin", role=StaffRole.ADMIN)


@pytest.fixture
def caregiver(make_caregiver):
    return make_caregiver(full_name="Casey Caregiver", specialties=["Pain Management"], years_experience=3)


@pytest.fixture
def caregiver2(make_caregiver):
    return make_caregiver(full_name="Riley Caregiver", specialties=["Speech Therapy"], years_experience=5)


@pytest.fixture
def supervisor_actor(supervisor):
    return Actor.for_staff(supervisor)


@pytest.fixture
def caregiver_actor(caregiver):
    return Actor.for_staff(caregiver)


@pytest.fixture
def patient(make_patient):
    return make_patient(full_name="Pat Patient", mrn="MRN-001", tags=["chronic-pain"], diagnoses=[])


@pytest.fixture
def fill_caseload(make_patient):
    """
    Give a caregiver `count` active patients without going through the workflow.
    """
    def _fill(caregiver, count, case_status=CaseStatus.ACTIVE):
        for _ in range(count):
            p = make_patient(case_status=case_status)
            Patient.objects.filter(id=p.id).update(assigned_caregiver=caregiver)

    return _fill
