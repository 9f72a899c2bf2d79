from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from weldbid.businesses_router import router as businesses_router
from weldbid.config import Config
from weldbid.jobs_router import router as jobs_router
from weldbid.logging_config import configure_logging
from weldbid.users_router import router as users_router

configure_logging(Config.LOG_LEVEL)

app = FastAPI(title="weldbid")
app.include_router(jobs_router)
app.include_router(businesses_router)
app.include_router(users_router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=Config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
def health():
    return {"status": "ok"}

# python -m uvicorn weldbid.main:app --reload
