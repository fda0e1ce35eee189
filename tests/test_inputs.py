import unittest

from pydantic import ValidationError

from portal.schemas.inputs import (
    AssetInput,
    MedicalLeaveInput,
    PersonnelInput,
    PersonnelTransferInput,
    VehicleInput,
)


def personnel_payload(**overrides):
    payload = {
        "rank": "Cabo",
        "name": "João Silva",
        "rg": "12.345.678-9",
        "phone": "(45) 99999-0000",
        "city": "Medianeira",
        "platoon": "1º Pelotão",
        "sector": "ROTAM",
    }
    payload.update(overrides)
    return payload


def leave_payload(**overrides):
    payload = {
        "rank": "Cabo",
        "warName": "Silva",
        "leaveType": "medical",
        "cid": "M54.5",
        "startDate": "2024-06-01",
        "endDate": "2024-06-20",
    }
    payload.update(overrides)
    return payload


class PersonnelInputTests(unittest.TestCase):
    def test_valid_payload_to_record(self) -> None:
        record = PersonnelInput.model_validate(personnel_payload()).to_record()
        self.assertEqual("Cabo", record["rank"])
        self.assertEqual("1º Pelotão", record["platoon"])
        self.assertEqual("ROTAM", record["sector"])

    def test_legacy_sector_is_canonicalized(self) -> None:
        record = PersonnelInput.model_validate(personnel_payload(sector="ATESTADO")).to_record()
        self.assertEqual("Licença Médica", record["sector"])
        transfer = PersonnelTransferInput.model_validate({"id": "p1", "newSector": "FERIAS"})
        self.assertEqual("Férias", transfer.new_sector)

    def test_unknown_rank_is_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            PersonnelInput.model_validate(personnel_payload(rank="Delegado"))

    def test_unknown_fields_are_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            PersonnelInput.model_validate(personnel_payload(badge="42"))


class MedicalLeaveInputTests(unittest.TestCase):
    def test_medical_leave_requires_cid(self) -> None:
        with self.assertRaises(ValidationError):
            MedicalLeaveInput.model_validate(leave_payload(cid=None))

    def test_other_leave_types_require_observation(self) -> None:
        with self.assertRaises(ValidationError):
            MedicalLeaveInput.model_validate(leave_payload(leaveType="vacation"))
        record = MedicalLeaveInput.model_validate(
            leave_payload(leaveType="vacation", cid=None, observation="Férias regulamentares")
        ).to_record()
        self.assertEqual("Férias regulamentares", record["observation"])
        self.assertNotIn("cid", record)

    def test_end_date_required_unless_indeterminate(self) -> None:
        with self.assertRaises(ValidationError):
            MedicalLeaveInput.model_validate(leave_payload(endDate=None))

    def test_indeterminate_drops_end_date(self) -> None:
        record = MedicalLeaveInput.model_validate(leave_payload(isIndeterminate=True)).to_record()
        self.assertTrue(record["isIndeterminate"])
        self.assertNotIn("endDate", record)

    def test_status_is_always_written_active(self) -> None:
        record = MedicalLeaveInput.model_validate(leave_payload(endDate="2020-01-01", startDate="2019-12-01")).to_record()
        self.assertEqual("active", record["status"])
        self.assertFalse(record["isIndeterminate"])

    def test_dates_must_be_iso(self) -> None:
        with self.assertRaises(ValidationError):
            MedicalLeaveInput.model_validate(leave_payload(startDate="01/06/2024"))


class VehicleInputTests(unittest.TestCase):
    def _payload(self, **overrides):
        payload = {
            "plate": "abc1d23",
            "state": "pr",
            "inspectionDate": "2024-05-10",
            "brand": "Fiat",
            "model": "Uno",
            "vehicleType": "Automóvel",
            "hasKey": True,
            "city": "Medianeira",
        }
        payload.update(overrides)
        return payload

    def test_plate_and_state_are_uppercased(self) -> None:
        record = VehicleInput.model_validate(self._payload()).to_record()
        self.assertEqual("ABC1D23", record["plate"])
        self.assertEqual("PR", record["state"])
        self.assertNotIn("registrationNumber", record)

    def test_unknown_state_is_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            VehicleInput.model_validate(self._payload(state="XX"))

    def test_unknown_vehicle_type_is_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            VehicleInput.model_validate(self._payload(vehicleType="Carroça"))


class AssetInputTests(unittest.TestCase):
    def test_defaults(self) -> None:
        record = AssetInput.model_validate(
            {"sector": "JUDICE", "generalTag": "000123", "description": "Mesa de escritório"}
        ).to_record()
        self.assertEqual("Afastado Judicialmente", record["sector"])
        self.assertEqual(0.0, record["netValue"])
        self.assertIsNone(record["acquisitionDate"])


if __name__ == "__main__":
    unittest.main()
