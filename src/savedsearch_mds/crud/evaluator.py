from savedsearch_mds.crud.field_mapping import mapField
from savedsearch_mds.models.search import (
	DateRange,
	FilterClause,
	OperatorEnum,
	ResolvedValue,
	parseOperator
)
from typing import Any, List, Mapping, Optional
import datetime


def toLocalTime(moment: datetime.datetime) -> datetime.datetime:
	""" Convert an aware datetime to naive local wall time, naive datetimes are already local
	"""
	if moment.tzinfo is None:
		return moment
	return moment.astimezone().replace(tzinfo=None)


def parseInstant(fieldValue: Any) -> Optional[datetime.datetime]:
	""" Parse a record value as a local instant, None when it is absent or not a date
	"""
	if fieldValue is None or isinstance(fieldValue, bool):
		return None

	if isinstance(fieldValue, datetime.datetime):
		return toLocalTime(fieldValue)

	if isinstance(fieldValue, datetime.date):
		return datetime.datetime.combine(fieldValue, datetime.time())

	# numbers are epoch milliseconds
	if isinstance(fieldValue, (int, float)):
		try:
			return datetime.datetime.fromtimestamp(fieldValue / 1000)
		except (OverflowError, OSError, ValueError):
			return None

	if isinstance(fieldValue, str):
		text = fieldValue.strip()
		if not text:
			return None
		if text.endswith(("Z", "z")):
			text = text[:-1] + "+00:00"
		try:
			return toLocalTime(datetime.datetime.fromisoformat(text))
		except ValueError:
			return None

	return None


def coerceText(fieldValue: Any) -> str:
	if fieldValue is None:
		return ""
	if isinstance(fieldValue, bool):
		return str(fieldValue).lower()
	if isinstance(fieldValue, datetime.datetime):
		return fieldValue.isoformat()
	return str(fieldValue)


def parseNumber(text: str) -> Optional[float]:
	try:
		return float(text)
	except ValueError:
		return None


def matchesRange(fieldValue: Any, dateRange: DateRange, operator: str) -> bool:
	instant = parseInstant(fieldValue)

	# a missing date never satisfies a date filter
	if instant is None:
		return False

	start = toLocalTime(dateRange.start)
	end = toLocalTime(dateRange.end)

	match parseOperator(operator):
		case OperatorEnum.ON | OperatorEnum.EQUALS | OperatorEnum.IS | OperatorEnum.BETWEEN:
			return start <= instant <= end
		case OperatorEnum.BEFORE:
			return instant < start
		case OperatorEnum.AFTER:
			return instant > end
		case _:
			# unknown operators match so one bad clause does not hide every record
			return True


def matchesScalar(fieldValue: Any, resolved: str, operator: str) -> bool:
	parsedOperator = parseOperator(operator)
	fieldText = coerceText(fieldValue)

	if parsedOperator == OperatorEnum.IS_EMPTY:
		return fieldText.strip() == ""
	if parsedOperator == OperatorEnum.IS_NOT_EMPTY:
		return fieldText.strip() != ""

	# an empty comparison value places no constraint
	if resolved == "":
		return True

	fieldText = fieldText.lower()
	expected = resolved.lower()

	match parsedOperator:
		case OperatorEnum.CONTAINS:
			return expected in fieldText
		case OperatorEnum.NOT_CONTAINS:
			return expected not in fieldText
		case OperatorEnum.EQUALS | OperatorEnum.IS:
			return fieldText == expected
		case OperatorEnum.NOT_EQUALS | OperatorEnum.IS_NOT:
			return fieldText != expected
		case OperatorEnum.STARTS_WITH:
			return fieldText.startswith(expected)
		case OperatorEnum.ENDS_WITH:
			return fieldText.endswith(expected)
		case OperatorEnum.GREATER_THAN | OperatorEnum.LESS_THAN:
			fieldNumber = parseNumber(fieldText)
			expectedNumber = parseNumber(expected)
			if fieldNumber is None or expectedNumber is None:
				return False
			if parsedOperator == OperatorEnum.GREATER_THAN:
				return fieldNumber > expectedNumber
			return fieldNumber < expectedNumber
		case _:
			# unknown operators match so one bad clause does not hide every record
			return True


def matches(fieldValue: Any, resolved: ResolvedValue, operator: str) -> bool:
	""" Decide whether one record value satisfies one clause

	Date ranges compare as instants, everything else compares as case insensitive text.
	"""
	if isinstance(resolved, DateRange):
		return matchesRange(fieldValue, resolved, operator)
	return matchesScalar(fieldValue, resolved, operator)


RANGE_OPERATORS = frozenset([
	OperatorEnum.ON,
	OperatorEnum.EQUALS,
	OperatorEnum.IS,
	OperatorEnum.BETWEEN,
	OperatorEnum.BEFORE,
	OperatorEnum.AFTER,
])

RANGE_ONLY_OPERATORS = frozenset([
	OperatorEnum.ON,
	OperatorEnum.BETWEEN,
	OperatorEnum.BEFORE,
	OperatorEnum.AFTER,
])


def isKnownOperator(operator: str, resolved: ResolvedValue) -> bool:
	""" False when ``matches`` would fall back to its permissive default for this operator
	"""
	parsedOperator = parseOperator(operator)
	if parsedOperator is None:
		return False

	if isinstance(resolved, DateRange):
		return parsedOperator in RANGE_OPERATORS
	return parsedOperator not in RANGE_ONLY_OPERATORS


def matchesAll(
	clauses: List[FilterClause],
	record: Mapping[str, Any],
	resolvedValues: List[ResolvedValue]
) -> bool:
	""" AND every clause of a filter group against one record, an empty group matches
	"""
	for clause, resolved in zip(clauses, resolvedValues, strict=True):
		fieldValue = record.get(mapField(clause.field))
		if not matches(fieldValue, resolved, clause.operator):
			return False
	return True
