from typing import Annotated
from fastapi import Depends, HTTPException
from fastapi.security import OAuth2PasswordBearer
from savedsearch_mds.core.config import appConfig
from savedsearch_mds.crud.store import MongoSearchStore, SearchStore
from savedsearch_mds.crud.saved_search import SavedSearchRequest
from savedsearch_mds.models.user import UserModel, PermissionEnum, hasPermission

import jwt


OAuthScheme = OAuth2PasswordBearer(tokenUrl="token")

searchStore = MongoSearchStore(appConfig)


def getSearchStore() -> SearchStore:
	return searchStore


def getSavedSearchRequest(
	store: Annotated[SearchStore, Depends(getSearchStore)]
) -> SavedSearchRequest:
	return SavedSearchRequest(store)


async def getCurrentUser(
	token: Annotated[str, Depends(OAuthScheme)],
	store: Annotated[SearchStore, Depends(getSearchStore)]
) -> UserModel:
	""" Resolve the acting principal from the bearer token, the token subject is the user id
	"""
	try:
		tokenMetadata = jwt.decode(
			jwt=token,
			key=appConfig.jwtSecret,
			algorithms=["HS256"]
		)
	except jwt.PyJWTError as e:
		raise HTTPException(
			status_code=401,
			detail=f"Authorization Error Decoding Token\terror: {str(e)}"
		)

	userId = tokenMetadata.get("sub")
	foundUser = await store.getUser(userId) if userId else None

	if foundUser is None:
		raise HTTPException(
			status_code=401,
			detail="Authorization Error: user not found"
		)

	if not foundUser.isActive:
		raise HTTPException(
			status_code=403,
			detail="Account is inactive"
		)

	return foundUser


def requirePermission(permission: PermissionEnum):
	""" Dependency factory gating a route on a role permission
	"""

	def checkPermission(
		currentUser: Annotated[UserModel, Depends(getCurrentUser)]
	) -> UserModel:
		if not hasPermission(currentUser, permission):
			raise HTTPException(
				status_code=403,
				detail=f"Insufficient permissions, required permission: {permission.value}"
			)
		return currentUser

	return checkPermission
