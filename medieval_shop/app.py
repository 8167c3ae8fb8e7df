import os
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from medieval_shop import storage
from medieval_shop.llm import LLM, llm_from_env
from medieval_shop.pipeline import Notifier
from medieval_shop.routes import router
from medieval_shop.sms import SmsSender, sms_from_env

load_dotenv(Path(__file__).parent.parent / ".env")

DEFAULT_DATA_DIR = Path(__file__).parent.parent / "data"


def create_app(
    data_dir: Path | None = None,
    llm: LLM | None = None,
    sms: SmsSender | None = None,
) -> FastAPI:
    resolved = data_dir or Path(os.getenv("DATA_DIR", str(DEFAULT_DATA_DIR)))
    storage.init_storage(resolved)

    app = FastAPI(title="Medieval Shop")
    # The kiosk page is served from a different origin during development.
    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])
    app.state.llm = llm or llm_from_env()
    app.state.notifier = Notifier(sms or sms_from_env())
    app.include_router(router, prefix="/api")

    @app.get("/")
    async def root():
        return {"message": "Medieval Shop server is running!"}

    return app
