from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from dotenv import load_dotenv

load_dotenv()
from fastapi.middleware.cors import CORSMiddleware
from database import Base, engine
from datetime import datetime
from exceptions import LedgerError
import models  # noqa: F401  registers every table on Base.metadata
import routers.chart_of_accounts as chart_of_accounts
import routers.journal_entry as journal_entry
import routers.expenses as expenses
import routers.incomes as incomes
import routers.money_transfers as money_transfers
import os
import logging
from fastapi.openapi.utils import get_openapi


LOG_DIR = os.getenv("LOG_DIR", "logs")
LOG_TO_FILE = os.getenv("LOG_TO_FILE", "true").lower() == "true"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

if LOG_TO_FILE:
    os.makedirs(LOG_DIR, exist_ok=True) # Create 'logs' directory if it doesn't exist

    # Create a unique log file name based on current date/time
    current_time_str = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
    LOG_FILE = os.path.join(LOG_DIR, f"app_{current_time_str}.log")

    # Configure the root logger
    logging.basicConfig(
        level=logging.INFO,
        format=LOG_FORMAT,
        filename=LOG_FILE, # Log to a file
        filemode='a' # Append to the file if it exists
    )
else:
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)

# Also output logs to the console when writing to a file
if LOG_TO_FILE:
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logging.getLogger().addHandler(console_handler) # Add to the root logger

logger = logging.getLogger(__name__)
logger.info("Application starting up...")
# --- End Logging Configuration ---


# Create database tables
Base.metadata.create_all(bind=engine)


app = FastAPI()


allowed_origins_str = os.getenv(
    "CORS_ALLOWED_ORIGINS",
    "http://localhost:5173,http://127.0.0.1:5173"
)

# Split the string into a list, stripping any whitespace
allowed_origins = [origin.strip() for origin in allowed_origins_str.split(',')]

# Enable CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(LedgerError)
async def ledger_error_handler(request: Request, exc: LedgerError):
    if exc.retryable:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": exc.code, "retryable": exc.retryable},
    )


def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema
    openapi_schema = get_openapi(
        title="Ledger API",
        version="1.0.0",
        description="Tenant-scoped chart of accounts, postings and statements",
        routes=app.routes,
    )
    openapi_schema.setdefault("components", {})["securitySchemes"] = {
        "BearerAuth": {
            "type": "http",
            "scheme": "bearer",
            "bearerFormat": "JWT",
        }
    }
    # Authentication happens upstream; documented here for API clients
    openapi_schema["security"] = [{"BearerAuth": []}]
    app.openapi_schema = openapi_schema
    return app.openapi_schema

app.openapi = custom_openapi


app.include_router(chart_of_accounts.router)
app.include_router(journal_entry.router)
app.include_router(expenses.router)
app.include_router(incomes.router)
app.include_router(money_transfers.router)

@app.get("/")
async def test_route():
    return {"message": "Welcome to the Ledger API!"}
