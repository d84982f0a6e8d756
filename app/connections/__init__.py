from app.connections.mongo import mongo_lifespan, init_mongo, close_mongo
from app.connections.redis import redis_lifespan, get_redis
