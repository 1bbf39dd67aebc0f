from app.connections.mongo import init_mongo, close_mongo, mongo_lifespan
