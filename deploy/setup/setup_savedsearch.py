import csv
from dotenv import dotenv_values
from os import environ
import pymongo
from pydantic import BaseModel, Field, ValidationError
from typing import Optional, List, Literal, Dict, Any

# --- Pydantic Models (subset relevant to this script) ---
class UserSeedModel(BaseModel):
    id: str
    username: str
    role: Literal['admin', 'user', 'viewer'] = Field(default='user')
    isActive: bool = Field(default=True)


# --- Configuration ---
try:
    configValues = {
        **dotenv_values(dotenv_path=environ.get("SETUP_ENV_PATH", "./setup.env")),
        **environ
    }
except Exception as e:
    print(f"WARNING: Error loading .env file: {e}. Using environment variables only.")
    configValues = { **environ }

def get_config(key: str, default: Any = None) -> Any:
    value = configValues.get(key)
    return value if value is not None else default


# --- MongoDB Connection ---
def connectMongo() -> Optional[pymongo.database.Database]:
    print("INFO: Attempting to connect to MongoDB...")
    mongo_host = get_config('SAVEDSEARCH_MONGO_HOST', 'localhost')
    mongo_port = get_config('SAVEDSEARCH_MONGO_PORT', '27017')
    mongo_db_name = get_config('SAVEDSEARCH_MONGO_DATABASE', 'savedsearch')
    mongo_user = get_config('SAVEDSEARCH_MONGO_ACCESS_KEY')
    mongo_pass = get_config('SAVEDSEARCH_MONGO_SECRET_KEY')

    mongo_uri = f"mongodb://{mongo_host}:{mongo_port}/"
    if mongo_user and mongo_pass:
        mongo_uri = f"mongodb://{mongo_user}:{mongo_pass}@{mongo_host}:{mongo_port}/"

    try:
        mongoClient = pymongo.MongoClient(mongo_uri, serverSelectionTimeoutMS=5000)
        mongoClient.admin.command('ping') # Verify connection
        print(f"INFO: Successfully connected to MongoDB at {mongo_host}:{mongo_port}")
        return mongoClient[mongo_db_name]
    except pymongo.errors.PyMongoError as e:
        print(f"ERROR: Failed to connect to MongoDB. Error: {e}")
        return None


# --- CSV Data Loading ---
def load_csv_data(filepath: str, expected_headers: List[str]) -> List[Dict[str, str]]:
    data_list: List[Dict[str, str]] = []
    print(f"INFO: Loading CSV data from {filepath}...")
    try:
        with open(filepath, mode='r', encoding='utf-8-sig') as csvfile:
            reader = csv.DictReader(csvfile)
            reader.fieldnames = [name.strip() for name in reader.fieldnames or []]

            if not reader.fieldnames or not all(header in reader.fieldnames for header in expected_headers):
                print(f"ERROR: CSV file {filepath} headers mismatch. Expected: {expected_headers}, Got: {reader.fieldnames}")
                return []

            for row in reader:
                data_list.append({k.strip(): str(v).strip() if v is not None else "" for k, v in row.items()})
        print(f"INFO: Successfully loaded {len(data_list)} rows from {filepath}")
        return data_list
    except FileNotFoundError:
        print(f"ERROR: CSV file not found: {filepath}")
    except (OSError, csv.Error) as e:
        print(f"ERROR: Error reading CSV file {filepath}. Error: {e}")
    return []


# --- Indexes ---
def setupIndexes(db: pymongo.database.Database):
    print("INFO: Ensuring indexes...")
    saved_search_collection = db[get_config('SAVEDSEARCH_MONGO_SAVED_SEARCH_COLLECTION', 'savedSearches')]
    project_collection = db[get_config('SAVEDSEARCH_MONGO_PROJECT_COLLECTION', 'projects')]
    user_collection = db[get_config('SAVEDSEARCH_MONGO_USER_COLLECTION', 'users')]

    saved_search_collection.create_index("id", unique=True)
    saved_search_collection.create_index("createdBy")
    project_collection.create_index("id", unique=True)
    user_collection.create_index("id", unique=True)
    user_collection.create_index("username", unique=True)
    print("INFO: Indexes ensured.")


# --- Visibility Backfill ---
def backfillVisibility(db: pymongo.database.Database):
    """ Saved searches stored before visibility existed become public
    """
    saved_search_collection = db[get_config('SAVEDSEARCH_MONGO_SAVED_SEARCH_COLLECTION', 'savedSearches')]
    update_result = saved_search_collection.update_many(
        {"$or": [{"visibility": {"$exists": False}}, {"visibility": None}, {"visibility": ""}]},
        {"$set": {"visibility": "public"}}
    )
    print(f"INFO: Visibility backfill set {update_result.modified_count} saved searches to public")


# --- MongoDB User Setup ---
def setupMongoUsers(db: pymongo.database.Database):
    print("INFO: Starting MongoDB user setup...")
    user_collection = db[get_config('SAVEDSEARCH_MONGO_USER_COLLECTION', 'users')]

    user_csv_path = get_config('USER_DATA_CSV_PATH', '/data/user_data.csv')
    users_data = load_csv_data(user_csv_path, ['id', 'username', 'role'])

    users_created, users_updated, users_failed = 0, 0, 0
    for user_record in users_data:
        try:
            user_instance = UserSeedModel.model_validate(user_record)
        except ValidationError as e:
            print(f"ERROR: Failed to process user {user_record.get('username', 'N/A')}. Error: {e}")
            users_failed += 1
            continue

        update_result = user_collection.update_one(
            {"id": user_instance.id},
            {"$set": user_instance.model_dump()},
            upsert=True
        )
        if update_result.upserted_id: users_created += 1
        elif update_result.modified_count > 0: users_updated += 1

    print(f"INFO: MongoDB user setup completed. Created: {users_created}, Updated: {users_updated}, Failed: {users_failed}")


# --- Main Execution ---
if __name__ == "__main__":
    print("INFO: Starting saved search setup script...")
    db = connectMongo()

    if db is None:
        print("ERROR: Setup aborted, MongoDB is unreachable.")
    else:
        setupIndexes(db)
        backfillVisibility(db)
        setupMongoUsers(db)
        print("INFO: Saved search setup finished.")
