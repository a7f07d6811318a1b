from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from eventhub.core.config import get_storage_backend
from eventhub.core.errors import register_exception_handlers
from eventhub.core.logging_config import setup_logging
from eventhub.routes import events

setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    if get_storage_backend() == "sql":
        from eventhub.database.db import init_db

        init_db()
    yield


app = FastAPI(
    title="EventHub API",
    version="1.0.0",
    description="Create, search and join community events",
    lifespan=lifespan,
)

# Configure CORS
origins = [
    "*"
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include the routers
app.include_router(events.router)


@app.get("/")
def read_root():
    return {"message": "EventHub API", "status": "running"}
