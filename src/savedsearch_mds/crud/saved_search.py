from savedsearch_mds.core.logging import crudLogger
from savedsearch_mds.crud.server_request import SearchServerRequest
from savedsearch_mds.crud.server_response import SearchServerResponse
from savedsearch_mds.crud.executor import SearchExecutor
from savedsearch_mds.crud.visibility import visibleTo, canModify
from savedsearch_mds.models.errors import (
	SavedSearchNotFound,
	MalformedFilterDocument,
	UserNotAuthorized
)
from savedsearch_mds.models.search import SavedSearch, SavedSearchCreate, SavedSearchUpdate
from savedsearch_mds.models.user import UserModel
from pymongo.errors import PyMongoError
from typing import Optional
import datetime


class SavedSearchRequest(SearchServerRequest):

	async def getModifiableSearch(
		self,
		searchId: str,
		requestingUser: UserModel,
		action: str
	) -> SavedSearch:
		""" Load a saved search the requesting user may change
		"""
		foundSearch = await self.store.getSavedSearchById(searchId)

		if foundSearch is None:
			raise SavedSearchNotFound(
				message=f"saved search {searchId} does not exist",
				searchId=searchId
			)

		if not canModify(foundSearch, requestingUser):
			raise UserNotAuthorized(
				message=f"user not authorized to {action} saved search",
				searchId=searchId,
				userId=requestingUser.id,
				action=action
			)

		return foundSearch


	async def listSavedSearches(
		self,
		requestingUser: UserModel,
		userId: Optional[str] = None
	) -> SearchServerResponse:
		""" List the saved searches visible to the requesting user, optionally only those created by userId
		"""
		try:
			allSearches = await self.store.getSavedSearches(userId)
		except PyMongoError as e:
			crudLogger.error(f"listing saved searches failed\terror: {str(e)}")
			return SearchServerResponse(
				success=False,
				statusCode=500,
				error={"error": "failed to fetch saved searches"}
			)

		return SearchServerResponse(
			success=True,
			statusCode=200,
			model=visibleTo(allSearches, requestingUser)
		)


	async def getSavedSearch(self, searchId: str) -> SearchServerResponse:
		foundSearch = await self.store.getSavedSearchById(searchId)

		if foundSearch is None:
			return SearchServerResponse(
				success=False,
				statusCode=404,
				error={"error": "saved search not found"}
			)

		return SearchServerResponse(
			success=True,
			statusCode=200,
			model=foundSearch
		)


	async def createSavedSearch(
		self,
		requestingUser: UserModel,
		searchDraft: SavedSearchCreate
	) -> SearchServerResponse:
		""" Persist a new saved search owned by the requesting user
		"""

		# the creator always comes from the authenticated principal
		draft = {
			**searchDraft.model_dump(mode="json"),
			"createdBy": requestingUser.id
		}

		try:
			createdSearch = await self.store.createSavedSearch(draft)
		except PyMongoError as e:
			crudLogger.error(f"creating saved search failed\terror: {str(e)}")
			return SearchServerResponse(
				success=False,
				statusCode=500,
				error={"error": "failed to create saved search"}
			)

		return SearchServerResponse(
			success=True,
			statusCode=201,
			model=createdSearch
		)


	async def updateSavedSearch(
		self,
		searchId: str,
		requestingUser: UserModel,
		searchUpdate: SavedSearchUpdate
	) -> SearchServerResponse:
		try:
			foundSearch = await self.getModifiableSearch(searchId, requestingUser, "update")
		except SavedSearchNotFound as e:
			return SearchServerResponse(
				success=False,
				statusCode=404,
				error={"error": e.message}
			)
		except UserNotAuthorized as e:
			return SearchServerResponse(
				success=False,
				statusCode=403,
				error={"error": e.message}
			)

		changes = searchUpdate.changes()
		if not changes:
			return SearchServerResponse(
				success=True,
				statusCode=200,
				model=foundSearch
			)

		updatedSearch = await self.store.updateSavedSearch(searchId, changes)

		if updatedSearch is None:
			return SearchServerResponse(
				success=False,
				statusCode=404,
				error={"error": "saved search not found"}
			)

		return SearchServerResponse(
			success=True,
			statusCode=200,
			model=updatedSearch
		)


	async def deleteSavedSearch(
		self,
		searchId: str,
		requestingUser: UserModel
	) -> SearchServerResponse:
		try:
			await self.getModifiableSearch(searchId, requestingUser, "delete")
		except SavedSearchNotFound as e:
			return SearchServerResponse(
				success=False,
				statusCode=404,
				error={"error": e.message}
			)
		except UserNotAuthorized as e:
			return SearchServerResponse(
				success=False,
				statusCode=403,
				error={"error": e.message}
			)

		await self.store.deleteSavedSearch(searchId)

		return SearchServerResponse(
			success=True,
			statusCode=200,
			jsonResponse={"id": searchId, "deleted": True}
		)


	async def executeSavedSearch(
		self,
		searchId: str,
		requestingUser: UserModel,
		now: Optional[datetime.datetime] = None
	) -> SearchServerResponse:
		""" Run the search executor and translate its failures into responses
		"""
		executor = SearchExecutor(self.store)

		try:
			results = await executor.execute(searchId, requestingUser.id, now=now)
		except SavedSearchNotFound as e:
			return SearchServerResponse(
				success=False,
				statusCode=404,
				error={"error": e.message}
			)
		except MalformedFilterDocument as e:
			crudLogger.error(f"{e.message}\tdetail: {e.detail}")
			return SearchServerResponse(
				success=False,
				statusCode=500,
				error={"error": "saved search filters could not be parsed"}
			)
		except PyMongoError as e:
			crudLogger.error(f"search execution failed\tsearch: {searchId}\terror: {str(e)}")
			return SearchServerResponse(
				success=False,
				statusCode=500,
				error={"error": "search execution failed"}
			)

		return SearchServerResponse(
			success=True,
			statusCode=200,
			model=results
		)
