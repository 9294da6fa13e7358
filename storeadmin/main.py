import logging

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from storeadmin.api import admin, auth, orders, products, users
from storeadmin.core.config import APP_NAME, CORS_ORIGINS, DATABASE_NAME, LOG_LEVEL, MONGO_URI
from storeadmin.db.mongo import DocumentStore, get_store

logger = logging.getLogger(__name__)

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

app = FastAPI(title=APP_NAME)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(products.router, prefix="/api/products", tags=["products"])
app.include_router(orders.router, prefix="/api/orders", tags=["orders"])
app.include_router(users.router, prefix="/api/users", tags=["users"])
app.include_router(admin.router, prefix="/api/admin", tags=["admin"])


@app.get("/")
def root():
    return {"status": "ok", "app": APP_NAME}


@app.get("/test")
def test_database(store: DocumentStore = Depends(get_store)):
    response = {
        "backend": "Running",
        "database": "Not Available",
        "database_url": "Set" if MONGO_URI else "Not Set",
        "database_name": DATABASE_NAME,
        "connection_status": "Not Connected",
        "collections": [],
    }
    try:
        response["collections"] = store.collection_names()[:10]
        response["database"] = "Connected & Working"
        response["connection_status"] = "Connected"
    except Exception as e:
        logger.error("Database probe failed: %s", e)
        response["database"] = f"Error: {str(e)[:80]}"
    return response


if __name__ == "__main__":
    import os
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", 8000)))
