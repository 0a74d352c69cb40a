import logging
import os

from fastapi import FastAPI

from api.routers import actions, ops, reminders

# Logging configuration
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s [%(levelname)s] %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="reminder-ai")
app.include_router(reminders.router)
app.include_router(actions.router)
app.include_router(ops.router)


@app.on_event("startup")
async def startup() -> None:
    logger.info(
        f"reminder-ai started (provider={os.getenv('LLM_PROVIDER', 'jan')}, "
        f"store={os.getenv('REMINDER_STORE', 'apple')})"
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=os.getenv("HOST", "127.0.0.1"), port=int(os.getenv("PORT", "8000")))
