from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from typing import Annotated

from savedsearch_mds.crud.saved_search import SavedSearchRequest
from savedsearch_mds.deps import getSavedSearchRequest, requirePermission
from savedsearch_mds.models.user import UserModel, PermissionEnum


searchRouter = APIRouter(prefix="/search", tags=['search'])


@searchRouter.get("/execute/{searchId}", summary="Run a saved search")
async def executeSavedSearch(
	searchId: str,
	currentUser: Annotated[UserModel, Depends(requirePermission(PermissionEnum.VIEW_REPORTS))],
	searchRequest: Annotated[SavedSearchRequest, Depends(getSavedSearchRequest)]
):
	response = await searchRequest.executeSavedSearch(searchId, currentUser)

	if not response.success:
		return JSONResponse(
			status_code=response.statusCode,
			content=response.error
		)

	return JSONResponse(
		status_code=response.statusCode,
		content=[result.model_dump(mode="json") for result in response.model]
	)
