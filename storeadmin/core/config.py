import os
from dotenv import load_dotenv

load_dotenv()

APP_NAME = os.getenv("APP_NAME", "SportSync Store Admin")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

# Document store
MONGO_URI = os.getenv("MONGO_URI", "mongodb://localhost:27017")
DATABASE_NAME = os.getenv("DATABASE_NAME", "storeadmin")

# Auth
SECRET_KEY = os.getenv("SECRET_KEY", "changeme")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))

# Image upload service (owns POST /upload and PUT /update/{product_id})
UPLOAD_API_URL = os.getenv("UPLOAD_API_URL", "http://localhost:5000")
UPLOAD_TIMEOUT = float(os.getenv("UPLOAD_TIMEOUT", "60"))

PRODUCT_CATEGORIES = [
    "Footwear",
    "Apparel",
    "Accessories",
    "Equipment",
    "Electronics",
    "Training & Recovery",
    "Outdoor & Adventure",
    "Nutrition & Supplements",
]
