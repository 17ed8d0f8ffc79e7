import os
import sys
import logging

# Ensure this directory is in the path when run as a script
current_dir = os.path.dirname(os.path.abspath(__file__))
if current_dir not in sys.path:
    sys.path.append(current_dir)

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from database import init_db
from routes.auth_routes import router as auth_router
from routes.account_routes import router as account_router
from routes.transaction_routes import router as transaction_router
from routes.budget_routes import router as budget_router
from routes.insights_routes import router as insights_router

logger = logging.getLogger(__name__)

# Initialize db configuration
try:
    init_db()
except Exception as e:
    logger.error(f"Database init skipped or failed: {e}")

app = FastAPI(title="Personal Finance Ledger")


@app.get("/api/v1/health-check")
async def health():
    return {"status": "ok", "message": "Backend is alive!"}


app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router)
app.include_router(account_router)
app.include_router(transaction_router)
app.include_router(budget_router)
app.include_router(insights_router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
