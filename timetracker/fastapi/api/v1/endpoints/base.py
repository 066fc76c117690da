from fastapi import APIRouter

from timetracker.fastapi.core.init_settings import global_settings

router = APIRouter()


@router.get("/", summary="Service Info")
async def read_root():
    return {"message": f"Welcome to the {global_settings.APP_NAME} API", "version": global_settings.APP_VERSION}


@router.get("/health", summary="Health Check")
async def health():
    return {"status": "ok"}
