from savedsearch_mds.core.config import SearchServerConfig
from savedsearch_mds.core.logging import crudLogger
from savedsearch_mds.models.search import SavedSearch
from savedsearch_mds.models.user import UserModel
from pymongo import ReturnDocument
from typing import Any, Dict, List, Optional, Protocol
import datetime
import uuid


class SearchStore(Protocol):
	""" Read interface of the record store consumed by the search engine, plus saved search CRUD
	"""

	async def getSavedSearchById(self, searchId: str) -> Optional[SavedSearch]: ...

	async def getSavedSearches(self, principalId: Optional[str] = None) -> List[SavedSearch]: ...

	async def createSavedSearch(self, draft: Dict[str, Any]) -> SavedSearch: ...

	async def updateSavedSearch(self, searchId: str, partial: Dict[str, Any]) -> Optional[SavedSearch]: ...

	async def deleteSavedSearch(self, searchId: str) -> None: ...

	async def getProjects(self) -> List[Dict[str, Any]]: ...

	async def getUser(self, userId: str) -> Optional[UserModel]: ...


class MongoSearchStore():
	""" SearchStore backed by the async pymongo collections in the server config
	"""

	def __init__(self, config: SearchServerConfig):
		self.config = config

	async def getSavedSearchById(self, searchId: str) -> Optional[SavedSearch]:
		foundSearch = await self.config.savedSearchCollection.find_one(
			{"id": searchId},
			projection={"_id": False}
		)

		if foundSearch is None:
			return None

		return SavedSearch.model_validate(foundSearch)

	async def getSavedSearches(self, principalId: Optional[str] = None) -> List[SavedSearch]:
		query = {}
		if principalId:
			query["createdBy"] = principalId

		cursor = self.config.savedSearchCollection.find(
			query,
			projection={"_id": False}
		).sort("createdAt", -1)

		foundSearches = await cursor.to_list(length=None)
		return [SavedSearch.model_validate(search) for search in foundSearches]

	async def createSavedSearch(self, draft: Dict[str, Any]) -> SavedSearch:
		now = datetime.datetime.now(datetime.timezone.utc)

		savedSearch = SavedSearch.model_validate({
			**draft,
			"id": str(uuid.uuid4()),
			"createdAt": now,
			"updatedAt": now
		})

		searchDocument = savedSearch.model_dump()
		searchDocument["visibility"] = savedSearch.visibility.value

		await self.config.savedSearchCollection.insert_one(searchDocument)

		crudLogger.info(f"created saved search\tid: {savedSearch.id}\tcreatedBy: {savedSearch.createdBy}")
		return savedSearch

	async def updateSavedSearch(self, searchId: str, partial: Dict[str, Any]) -> Optional[SavedSearch]:
		updateResult = await self.config.savedSearchCollection.find_one_and_update(
			{"id": searchId},
			{
				"$set": {
					**partial,
					"updatedAt": datetime.datetime.now(datetime.timezone.utc)
				}
			},
			projection={"_id": False},
			return_document=ReturnDocument.AFTER
		)

		if updateResult is None:
			return None

		crudLogger.info(f"updated saved search\tid: {searchId}\tfields: {sorted(partial.keys())}")
		return SavedSearch.model_validate(updateResult)

	async def deleteSavedSearch(self, searchId: str) -> None:
		await self.config.savedSearchCollection.delete_one({"id": searchId})
		crudLogger.info(f"deleted saved search\tid: {searchId}")

	async def getProjects(self) -> List[Dict[str, Any]]:
		cursor = self.config.projectCollection.find({}, projection={"_id": False})
		return await cursor.to_list(length=None)

	async def getUser(self, userId: str) -> Optional[UserModel]:
		foundUser = await self.config.userCollection.find_one(
			{"id": userId},
			projection={"_id": False, "password": False}
		)

		if foundUser is None:
			return None

		return UserModel.model_validate(foundUser)
