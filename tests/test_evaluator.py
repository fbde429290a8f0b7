import datetime

import pytest

from savedsearch_mds.crud.evaluator import matches, matchesAll, parseInstant, isKnownOperator
from savedsearch_mds.crud.field_mapping import mapField, isUserField
from savedsearch_mds.models.search import DateRange, FilterClause


JUNE_15 = DateRange(
	start=datetime.datetime(2024, 6, 15, 0, 0, 0),
	end=datetime.datetime(2024, 6, 15, 23, 59, 59, 999000)
)


# date range regime

@pytest.mark.parametrize("operator", ["on", "equals", "is", "between"])
def test_range_containment_is_inclusive(operator):
	assert matches("2024-06-15T00:00:00", JUNE_15, operator)
	assert matches("2024-06-15T23:59:59.999", JUNE_15, operator)
	assert matches("2024-06-15T12:00:00", JUNE_15, operator)
	assert not matches("2024-06-16T00:00:00", JUNE_15, operator)
	assert not matches("2024-06-14T23:59:59", JUNE_15, operator)


def test_range_before_is_strictly_before_start():
	assert matches("2024-06-14T23:59:59", JUNE_15, "before")
	assert not matches("2024-06-15T00:00:00", JUNE_15, "before")
	assert not matches("2024-06-20", JUNE_15, "before")


def test_range_after_is_strictly_after_end():
	assert matches("2024-06-16T00:00:00", JUNE_15, "after")
	assert not matches("2024-06-15T23:59:59.999", JUNE_15, "after")
	assert not matches("2024-06-01", JUNE_15, "after")


@pytest.mark.parametrize("operator", ["on", "before", "after", "between", "equals", "made_up"])
@pytest.mark.parametrize("fieldValue", [None, "", "   ", "not a date", True])
def test_missing_or_unparseable_date_never_matches(operator, fieldValue):
	assert not matches(fieldValue, JUNE_15, operator)


def test_range_unknown_operator_is_permissive():
	assert matches("2020-01-01", JUNE_15, "sometime_near")


def test_range_accepts_datetime_date_and_epoch_values():
	assert matches(datetime.datetime(2024, 6, 15, 9, 0), JUNE_15, "on")
	assert matches(datetime.date(2024, 6, 15), JUNE_15, "on")

	epochMillis = datetime.datetime(2024, 6, 15, 9, 0).timestamp() * 1000
	assert matches(epochMillis, JUNE_15, "on")


def test_aware_values_compare_in_local_time():
	localNoon = datetime.datetime(2024, 6, 15, 12, 0)
	awareNoon = localNoon.astimezone(datetime.timezone.utc)

	assert matches(awareNoon, JUNE_15, "on")
	assert matches(awareNoon.isoformat(), JUNE_15, "on")


def test_parse_instant_handles_trailing_z():
	parsed = parseInstant("2024-06-15T12:00:00Z")
	expected = datetime.datetime(2024, 6, 15, 12, 0, tzinfo=datetime.timezone.utc).astimezone().replace(tzinfo=None)

	assert parsed == expected
	assert parseInstant("2024-13-45") is None


# scalar regime

@pytest.mark.parametrize("fieldValue,resolved,operator,expected", [
	("Website Redesign", "design", "contains", True),
	("Website Redesign", "DESIGN", "contains", True),
	("Website Redesign", "mobile", "contains", False),
	("Website Redesign", "mobile", "not_contains", True),
	("Website Redesign", "site", "not_contains", False),
	("active", "Active", "equals", True),
	("active", "active", "is", True),
	("active", "planning", "is", False),
	("active", "planning", "not_equals", True),
	("active", "ACTIVE", "is_not", False),
	("Website Redesign", "web", "starts_with", True),
	("Website Redesign", "sign", "starts_with", False),
	("Website Redesign", "SIGN", "ends_with", True),
	("Website Redesign", "web", "ends_with", False),
	(12, "12", "equals", True),
	(True, "true", "is", True),
])
def test_scalar_operators(fieldValue, resolved, operator, expected):
	assert matches(fieldValue, resolved, operator) is expected


def test_missing_field_is_empty_string():
	assert matches(None, "", "is_empty")
	assert not matches(None, "x", "contains")
	assert matches(None, "x", "not_contains")


@pytest.mark.parametrize("operator", [
	"contains", "not_contains", "equals", "is", "not_equals", "is_not", "starts_with", "ends_with"
])
def test_empty_comparison_value_is_no_constraint(operator):
	assert matches("anything", "", operator)
	assert matches(None, "", operator)


def test_is_empty_ignores_comparison_value():
	assert matches("   ", "ignored", "is_empty")
	assert matches(None, "ignored", "is_empty")
	assert not matches("x", "", "is_empty")

	assert matches("x", "ignored", "is_not_empty")
	assert not matches("  ", "", "is_not_empty")
	assert not matches(None, "", "is_not_empty")


def test_scalar_unknown_operator_is_permissive():
	assert matches("active", "planning", "sounds_like")
	assert matches("active", "planning", "before")


def test_numeric_operators():
	assert matches("5", "3", "greater_than")
	assert not matches("2", "3", "greater_than")
	assert matches(2, "3", "less_than")
	assert not matches("many", "3", "less_than")
	assert matches("many", "", "less_than")


def test_is_known_operator():
	assert isKnownOperator("before", JUNE_15)
	assert not isKnownOperator("contains", JUNE_15)
	assert isKnownOperator("Contains", "x")
	assert not isKnownOperator("on", "x")
	assert not isKnownOperator("sounds_like", "x")


# filter set matcher

def clause(field, operator, value="", smartValue=None, visible=False):
	return FilterClause(field=field, operator=operator, value=value, smartValue=smartValue, visible=visible)


RECORD = {
	"id": "p1",
	"name": "Website Redesign",
	"status": "active",
	"ownerId": "U1",
	"dueDate": "2024-06-15T10:00:00",
	"teamSize": "4",
}


def test_empty_clause_list_matches_everything():
	assert matchesAll([], RECORD, [])
	assert matchesAll([], {}, [])


def test_conjunction_of_clauses():
	clauses = [clause("status", "is", "active"), clause("name", "contains", "web")]
	assert matchesAll(clauses, RECORD, ["active", "web"])

	clauses = [clause("status", "is", "active"), clause("name", "contains", "mobile")]
	assert not matchesAll(clauses, RECORD, ["active", "mobile"])


def test_adding_true_clause_keeps_and_false_clause_empties():
	records = [
		RECORD,
		{**RECORD, "id": "p2", "status": "planning"},
		{**RECORD, "id": "p3", "name": "Mobile App"},
	]
	base = [clause("status", "is", "active")]
	baseValues = ["active"]

	baseline = [r["id"] for r in records if matchesAll(base, r, baseValues)]

	withTrue = base + [clause("description", "contains", "")]
	assert [r["id"] for r in records if matchesAll(withTrue, r, baseValues + [""])] == baseline

	withFalse = base + [clause("status", "is", "archived")]
	assert [r["id"] for r in records if matchesAll(withFalse, r, baseValues + ["archived"])] == []


def test_matcher_uses_mapped_attribute_names():
	clauses = [
		clause("created_by", "is", smartValue="@me"),
		clause("due_date", "on", smartValue="@today"),
		clause("team_size", "greater_than", "3"),
	]
	assert matchesAll(clauses, RECORD, ["U1", JUNE_15, "3"])
	assert not matchesAll(clauses, {**RECORD, "ownerId": "U2"}, ["U1", JUNE_15, "3"])


def test_matcher_requires_one_resolved_value_per_clause():
	with pytest.raises(ValueError):
		matchesAll([clause("status", "is", "active")], RECORD, [])


# field mapper

def test_field_mapping_and_identity_fallback():
	assert mapField("created_by") == "ownerId"
	assert mapField("last_modified") == "updatedAt"
	assert mapField("started") == "startDate"
	assert mapField("due_date") == "dueDate"
	assert mapField("team_size") == "teamSize"
	assert mapField("status") == "status"
	assert mapField("customAttribute") == "customAttribute"

	assert isUserField("created_by")
	assert not isUserField("status")
