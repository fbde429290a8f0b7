from savedsearch_mds.core.logging import searchLogger
from savedsearch_mds.crud.server_request import SearchServerRequest
from savedsearch_mds.crud.evaluator import matchesAll, isKnownOperator
from savedsearch_mds.crud.field_mapping import mapField, isUserField
from savedsearch_mds.crud.smart_values import resolveSmartValue
from savedsearch_mds.models.errors import SavedSearchNotFound, MalformedFilterDocument
from savedsearch_mds.models.search import (
	EntityTypeEnum,
	FilterClause,
	FilterDocument,
	ResolvedValue,
	SavedSearch,
	SearchResult
)
from pydantic import ValidationError
from typing import Any, Dict, List, Mapping, Optional
import asyncio
import datetime


def parseFilterDocument(savedSearch: SavedSearch) -> FilterDocument:
	try:
		return FilterDocument.model_validate_json(savedSearch.filters)
	except ValidationError as e:
		raise MalformedFilterDocument(
			message=f"saved search {savedSearch.id} has a malformed filter document",
			searchId=savedSearch.id,
			detail=str(e)
		)


class SearchExecutor(SearchServerRequest):

	async def execute(
		self,
		savedSearchId: str,
		actingPrincipalId: str,
		now: Optional[datetime.datetime] = None
	) -> List[SearchResult]:
		""" Run a saved search and return the matching records of every executed entity type

		Results are concatenated in entity type order without ranking or deduplication.
		Raises SavedSearchNotFound and MalformedFilterDocument, store errors propagate.
		"""
		savedSearch = await self.store.getSavedSearchById(savedSearchId)

		if savedSearch is None:
			raise SavedSearchNotFound(
				message=f"saved search {savedSearchId} does not exist",
				searchId=savedSearchId
			)

		filterDocument = parseFilterDocument(savedSearch)

		if now is None:
			now = datetime.datetime.now()

		results: List[SearchResult] = []

		for entityType in EntityTypeEnum:
			clauses = filterDocument.getGroup(entityType)

			# absent or empty groups contribute nothing
			if not clauses:
				continue

			resolvedValues = self.resolveClauses(clauses, actingPrincipalId, now)

			match entityType:
				case EntityTypeEnum.PROJECT:
					results.extend(await self.executeProjects(clauses, resolvedValues))
				case _:
					searchLogger.info(
						f"entity type not executed\tsearch: {savedSearchId}\ttype: {entityType.value}\tclauses: {len(clauses)}"
					)

		searchLogger.info(
			f"executed saved search\tsearch: {savedSearchId}\tprincipal: {actingPrincipalId}\tresults: {len(results)}"
		)
		return results

	def resolveClauses(
		self,
		clauses: List[FilterClause],
		actingPrincipalId: str,
		now: datetime.datetime
	) -> List[ResolvedValue]:
		resolvedValues = []

		for clause in clauses:
			resolved = resolveSmartValue(clause.comparisonValue(), actingPrincipalId, now)

			if not isKnownOperator(clause.operator, resolved):
				searchLogger.warning(
					f"unknown operator, clause matches every record\tfield: {clause.field}\toperator: {clause.operator}"
				)

			resolvedValues.append(resolved)

		return resolvedValues

	async def executeProjects(
		self,
		clauses: List[FilterClause],
		resolvedValues: List[ResolvedValue]
	) -> List[SearchResult]:
		projects = await self.store.getProjects()

		matchedProjects = [
			project for project in projects
			if matchesAll(clauses, project, resolvedValues)
		]

		visibleClauses = [clause for clause in clauses if clause.visible]
		usernames = await self.lookupUsernames(matchedProjects, visibleClauses)

		return [
			buildResult(EntityTypeEnum.PROJECT, project, visibleClauses, usernames)
			for project in matchedProjects
		]

	async def lookupUsernames(
		self,
		records: List[Mapping[str, Any]],
		visibleClauses: List[FilterClause]
	) -> Dict[str, str]:
		""" Fetch usernames for every user id shown in result metadata, one lookup per distinct id
		"""
		userIds = set()
		for clause in visibleClauses:
			if not isUserField(clause.field):
				continue
			attribute = mapField(clause.field)
			for record in records:
				userId = record.get(attribute)
				if userId:
					userIds.add(str(userId))

		if not userIds:
			return {}

		orderedIds = sorted(userIds)
		foundUsers = await asyncio.gather(*[self.store.getUser(userId) for userId in orderedIds])

		return {
			userId: user.username
			for userId, user in zip(orderedIds, foundUsers)
			if user is not None
		}


def displayValue(
	clause: FilterClause,
	record: Mapping[str, Any],
	usernames: Dict[str, str]
) -> Any:
	value = record.get(mapField(clause.field))

	if isUserField(clause.field) and value:
		return usernames.get(str(value), value)

	return value


def buildResult(
	entityType: EntityTypeEnum,
	record: Mapping[str, Any],
	visibleClauses: List[FilterClause],
	usernames: Dict[str, str]
) -> SearchResult:
	metadata = {
		clause.field: displayValue(clause, record, usernames)
		for clause in visibleClauses
	}

	return SearchResult(
		type=entityType,
		id=str(record.get("id")),
		name=str(record.get("name") or ""),
		description=record.get("description"),
		metadata=metadata
	)
