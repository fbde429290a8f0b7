from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from typing import Annotated, Optional

from savedsearch_mds.crud.saved_search import SavedSearchRequest
from savedsearch_mds.crud.server_response import SearchServerResponse
from savedsearch_mds.deps import getCurrentUser, getSavedSearchRequest
from savedsearch_mds.models.search import SavedSearchCreate, SavedSearchUpdate
from savedsearch_mds.models.user import UserModel


savedSearchRouter = APIRouter(prefix="/saved-searches", tags=['saved-search'])


def modelResponse(response: SearchServerResponse) -> JSONResponse:
	if not response.success:
		return JSONResponse(
			status_code=response.statusCode,
			content=response.error
		)

	return JSONResponse(
		status_code=response.statusCode,
		content=response.model.model_dump(mode="json")
	)


@savedSearchRouter.get("")
async def listSavedSearches(
	currentUser: Annotated[UserModel, Depends(getCurrentUser)],
	searchRequest: Annotated[SavedSearchRequest, Depends(getSavedSearchRequest)],
	userId: Annotated[Optional[str], Query(description="only searches created by this user")] = None
):
	response = await searchRequest.listSavedSearches(currentUser, userId=userId)

	if not response.success:
		return JSONResponse(
			status_code=response.statusCode,
			content=response.error
		)

	return JSONResponse(
		status_code=response.statusCode,
		content=[search.model_dump(mode="json") for search in response.model]
	)


@savedSearchRouter.get("/{searchId}")
async def getSavedSearch(
	searchId: str,
	currentUser: Annotated[UserModel, Depends(getCurrentUser)],
	searchRequest: Annotated[SavedSearchRequest, Depends(getSavedSearchRequest)]
):
	response = await searchRequest.getSavedSearch(searchId)
	return modelResponse(response)


@savedSearchRouter.post("")
async def createSavedSearch(
	searchDraft: SavedSearchCreate,
	currentUser: Annotated[UserModel, Depends(getCurrentUser)],
	searchRequest: Annotated[SavedSearchRequest, Depends(getSavedSearchRequest)]
):
	response = await searchRequest.createSavedSearch(currentUser, searchDraft)
	return modelResponse(response)


@savedSearchRouter.put("/{searchId}")
async def updateSavedSearch(
	searchId: str,
	searchUpdate: SavedSearchUpdate,
	currentUser: Annotated[UserModel, Depends(getCurrentUser)],
	searchRequest: Annotated[SavedSearchRequest, Depends(getSavedSearchRequest)]
):
	response = await searchRequest.updateSavedSearch(searchId, currentUser, searchUpdate)
	return modelResponse(response)


@savedSearchRouter.delete("/{searchId}")
async def deleteSavedSearch(
	searchId: str,
	currentUser: Annotated[UserModel, Depends(getCurrentUser)],
	searchRequest: Annotated[SavedSearchRequest, Depends(getSavedSearchRequest)]
):
	response = await searchRequest.deleteSavedSearch(searchId, currentUser)

	if not response.success:
		return JSONResponse(
			status_code=response.statusCode,
			content=response.error
		)

	return JSONResponse(
		status_code=response.statusCode,
		content=response.jsonResponse
	)
