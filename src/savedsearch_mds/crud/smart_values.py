""" Expansion of @-prefixed smart values into principal ids and date ranges

Ranges are inclusive and use the wall clock of the ``now`` they are given,
weeks start on Sunday.
"""
from savedsearch_mds.core.logging import searchLogger
from savedsearch_mds.models.search import DateRange, ResolvedValue
from enum import Enum
import calendar
import datetime


SMART_VALUE_PREFIX = "@"


class SmartValueEnum(str, Enum):
	ME = "@me"
	MY_TEAM = "@my-team"
	TODAY = "@today"
	THIS_WEEK = "@this-week"
	THIS_MONTH = "@this-month"
	THIS_YEAR = "@this-year"


def startOfDay(moment: datetime.datetime) -> datetime.datetime:
	return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def endOfDay(moment: datetime.datetime) -> datetime.datetime:
	return moment.replace(hour=23, minute=59, second=59, microsecond=999000)


def todayRange(now: datetime.datetime) -> DateRange:
	return DateRange(start=startOfDay(now), end=endOfDay(now))


def thisWeekRange(now: datetime.datetime) -> DateRange:
	# weekday() counts from monday
	daysSinceSunday = (now.weekday() + 1) % 7
	sunday = startOfDay(now) - datetime.timedelta(days=daysSinceSunday)
	saturday = sunday + datetime.timedelta(days=6)
	return DateRange(start=sunday, end=endOfDay(saturday))


def thisMonthRange(now: datetime.datetime) -> DateRange:
	_, lastDay = calendar.monthrange(now.year, now.month)
	return DateRange(
		start=startOfDay(now.replace(day=1)),
		end=endOfDay(now.replace(day=lastDay))
	)


def thisYearRange(now: datetime.datetime) -> DateRange:
	return DateRange(
		start=startOfDay(now.replace(month=1, day=1)),
		end=endOfDay(now.replace(month=12, day=31))
	)


def isSmartValue(token) -> bool:
	return isinstance(token, str) and token.startswith(SMART_VALUE_PREFIX)


def resolveSmartValue(
	token: str,
	actingPrincipalId: str,
	now: datetime.datetime
) -> ResolvedValue:
	""" Resolve a smart value token for the acting principal at ``now``

	Plain literals are returned unchanged. Unknown tokens are logged and returned
	unchanged so the clause compares against the literal token text.
	"""
	if not isSmartValue(token):
		return token

	match token.lower():
		case SmartValueEnum.ME:
			return actingPrincipalId

		case SmartValueEnum.MY_TEAM:
			# team membership is not modelled, the principal stands in for their team
			searchLogger.info(f"smart value not implemented\ttoken: {token}\tfallback: acting principal")
			return actingPrincipalId

		case SmartValueEnum.TODAY:
			return todayRange(now)

		case SmartValueEnum.THIS_WEEK:
			return thisWeekRange(now)

		case SmartValueEnum.THIS_MONTH:
			return thisMonthRange(now)

		case SmartValueEnum.THIS_YEAR:
			return thisYearRange(now)

		case _:
			searchLogger.warning(f"unresolved smart value\ttoken: {token}")
			return token
