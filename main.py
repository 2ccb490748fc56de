from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging

from config import get_settings
from core.container import build_container
from api import state, websocket

settings = get_settings()
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: 建立共享物件並啟動排程器
    container = build_container(settings)
    app.state.container = container
    if settings.scheduler_enabled:
        container.scheduler.start()
    yield
    # Shutdown: 停止排程器（進行中的回合直接放棄，重啟後重新排程）
    await container.scheduler.stop()
    await container.broadcaster.close()


app = FastAPI(
    title="Digit Draw API",
    description="Weighted 0-9 digit draw with minute-aligned preview/reveal and public audit hash",
    version="1.0.0",
    lifespan=lifespan
)

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure this properly in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(state.router)
app.include_router(websocket.router)


@app.get("/")
def root():
    return {"message": "Digit Draw API", "status": "ok"}


@app.get("/health")
def health():
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.host, port=settings.port)
