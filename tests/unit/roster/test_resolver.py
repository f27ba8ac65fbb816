"""Unit tests for the update resolver."""

import pytest

from rosterdesk.roster import ValidationError, build_student, normalize_slots, resolve
from rosterdesk.roster.payloads import parse_create, parse_update
from rosterdesk.roster_store import StudentField

ALL_FIELDS = frozenset(StudentField)


@pytest.mark.unit
class TestNormalizeSlots:
    """Tests for normalize_slots."""

    def test_pads_short_lists(self) -> None:
        """Missing slots become empty strings."""
        assert normalize_slots(["Math"]) == ("Math", "", "", "", "", "")

    def test_truncates_long_lists(self) -> None:
        """Only the first six slots are kept."""
        assert normalize_slots([str(i) for i in range(8)]) == ("0", "1", "2", "3", "4", "5")

    def test_none_is_empty(self) -> None:
        """None gives six empty slots."""
        assert normalize_slots(None) == ("",) * 6

    def test_rejects_string(self) -> None:
        """A bare string is not a list of slots."""
        with pytest.raises(ValidationError) as exc_info:
            normalize_slots("Math", "attendance")

        assert exc_info.value.field == "attendance"

    def test_rejects_non_string_items(self) -> None:
        """Every kept slot must be a string."""
        with pytest.raises(ValidationError):
            normalize_slots(["Math", None])  # type: ignore[list-item]


@pytest.mark.unit
class TestBuildStudent:
    """Tests for build_student."""

    def test_fills_defaults(self, student_payload: dict) -> None:
        """Omitted optional strings and arrays are empty."""
        student = build_student(parse_create(student_payload))

        assert student.first_name == "Mia"
        assert student.courses == ("",) * 6
        assert student.attendance == ("",) * 6
        assert student.av == ""
        assert student.sv == ""
        assert student.id

    def test_generates_distinct_ids(self, student_payload: dict) -> None:
        """Every new student gets its own id."""
        payload = parse_create(student_payload)

        assert build_student(payload).id != build_student(payload).id

    def test_keeps_given_id(self, student_payload: dict) -> None:
        """Imported records keep their id."""
        assert build_student(parse_create(student_payload), "imported-1").id == "imported-1"

    def test_normalizes_arrays(self, student_payload: dict) -> None:
        """Course and attendance lists are padded to six slots."""
        student_payload["courses"] = ["Math", "Art"]
        student_payload["attendance"] = ["x"]

        student = build_student(parse_create(student_payload))

        assert student.courses == ("Math", "Art", "", "", "", "")
        assert student.attendance == ("x", "", "", "", "", "")


@pytest.mark.unit
class TestResolve:
    """Tests for resolve."""

    def test_omitted_fields_keep_values(self, make_student) -> None:
        """Admin update without av/sv preserves them."""
        existing = make_student("s1", av="gut", sv="befriedigend")

        updated = resolve(existing, parse_update({"school": "Neue Schule"}), ALL_FIELDS)

        assert updated.school == "Neue Schule"
        assert updated.av == "gut"
        assert updated.sv == "befriedigend"

    def test_only_editable_fields_applied(self, make_student) -> None:
        """Present but non-editable fields are ignored."""
        existing = make_student("s1")
        proposed = parse_update({"school": "Andere", "av": "gut"})

        updated = resolve(existing, proposed, {StudentField.AV})

        assert updated.school == existing.school
        assert updated.av == "gut"

    def test_id_never_changes(self, make_student) -> None:
        """The id is taken from the existing record."""
        existing = make_student("s1")

        updated = resolve(existing, parse_update({"id": "other", "av": "x"}), ALL_FIELDS)

        assert updated.id == "s1"

    def test_no_change_returns_existing(self, make_student) -> None:
        """An update without applicable fields is a no-op."""
        existing = make_student("s1")

        assert resolve(existing, parse_update({}), ALL_FIELDS) is existing

    def test_is_idempotent(self, make_student) -> None:
        """Applying the same update twice gives the same record."""
        existing = make_student("s1", courses=("Math",))
        proposed = parse_update({"courses": ["Art", "Math"], "av": "ok"})

        once = resolve(existing, proposed, ALL_FIELDS)

        assert resolve(once, proposed, ALL_FIELDS) == once

    def test_courses_are_normalized(self, make_student) -> None:
        """Updated course lists are padded to six slots."""
        updated = resolve(make_student("s1"), parse_update({"courses": ["Bio"]}), ALL_FIELDS)

        assert updated.courses == ("Bio", "", "", "", "", "")

    def test_attendance_slots_restrict_merge(self, make_student) -> None:
        """Only the given attendance indices come from the payload."""
        existing = make_student("s1", attendance=("a0", "a1", "a2", "a3", "a4", "a5"))
        proposed = parse_update({"attendance": ["n0", "n1", "n2", "n3", "n4", "n5"]})

        updated = resolve(existing, proposed, {StudentField.ATTENDANCE}, frozenset({1, 4}))

        assert updated.attendance == ("a0", "n1", "a2", "a3", "n4", "a5")

    def test_attendance_without_slots_replaces_vector(self, make_student) -> None:
        """None means the whole vector is replaced."""
        existing = make_student("s1", attendance=("a0", "a1", "", "", "", ""))

        updated = resolve(existing, parse_update({"attendance": ["n0"]}), ALL_FIELDS, None)

        assert updated.attendance == ("n0", "", "", "", "", "")
