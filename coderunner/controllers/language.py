from fastapi import APIRouter

from coderunner.dependencies import AppSettings

router = APIRouter()


@router.get("/getSupportedLanguage")
def get_supported_language(settings: AppSettings) -> str:
    return settings.language.supported_language
