from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from urllib.parse import quote_plus
from typing import Optional, List
from pymongo import AsyncMongoClient
import pathlib


# .env is searched relative to the source tree
envPath = pathlib.Path(__file__).parents[3] / ".env"


class Settings(BaseSettings):
	model_config = SettingsConfigDict(
			env_file=str(envPath),
			env_prefix="SAVEDSEARCH_",
			env_ignore_empty=True,
			extra="ignore"
		)

	MONGO_ACCESS_KEY: Optional[str] = Field(default=None)
	MONGO_SECRET_KEY: Optional[str] = Field(default=None)
	MONGO_HOST: str = Field(default="localhost")
	MONGO_PORT: str = Field(default="27017")
	MONGO_DATABASE: str = Field(default="savedsearch")
	MONGO_AUTH_DATABASE: Optional[str] = Field(default=None)
	MONGO_SAVED_SEARCH_COLLECTION: str = Field(default="savedSearches")
	MONGO_PROJECT_COLLECTION: str = Field(default="projects")
	MONGO_USER_COLLECTION: str = Field(default="users")

	JWT_SECRET: str = Field(default="change-me")
	LOG_FILE: str = Field(default="savedsearch.log")
	CORS_ORIGINS: List[str] = Field(default=["http://localhost:5173"])

	LOGFIRE_ENV: Optional[str] = Field(default=None)
	LOGFIRE_TOKEN: Optional[str] = Field(default=None)


class SearchServerConfig():
	def __init__(
			self,
			savedSearchCollection,
			projectCollection,
			userCollection,
			jwtSecret: str
	):
		self.savedSearchCollection = savedSearchCollection
		self.projectCollection = projectCollection
		self.userCollection = userCollection
		self.jwtSecret = jwtSecret

	def __str__(self):
		collections = [
			self.savedSearchCollection,
			self.projectCollection,
			self.userCollection
		]
		collectionStr = "\n".join([f"\t{collection.name}" for collection in collections])
		return f"Backend Configuration Object:\nCollections:\n{collectionStr}"


def buildConnectionString(settings: Settings) -> str:
	hostPort = f"{settings.MONGO_HOST}:{settings.MONGO_PORT}"

	if settings.MONGO_ACCESS_KEY and settings.MONGO_SECRET_KEY:
		credentials = f"{quote_plus(settings.MONGO_ACCESS_KEY)}:{quote_plus(settings.MONGO_SECRET_KEY)}"
		connectionString = f"mongodb://{credentials}@{hostPort}/{settings.MONGO_DATABASE}?retryWrites=true"
		if settings.MONGO_AUTH_DATABASE:
			connectionString += f"&authSource={settings.MONGO_AUTH_DATABASE}"
		return connectionString

	return f"mongodb://{hostPort}"


settings = Settings()

# the async client connects lazily on first operation
mongoClient = AsyncMongoClient(buildConnectionString(settings), connect=False)
mongoDB = mongoClient[settings.MONGO_DATABASE]

appConfig = SearchServerConfig(
	savedSearchCollection=mongoDB[settings.MONGO_SAVED_SEARCH_COLLECTION],
	projectCollection=mongoDB[settings.MONGO_PROJECT_COLLECTION],
	userCollection=mongoDB[settings.MONGO_USER_COLLECTION],
	jwtSecret=settings.JWT_SECRET
)
